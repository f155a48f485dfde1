"""
Property service for the property and inventory setup flow.
"""

from typing import Optional
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from property_manager.models.property import PropertyInformation
from property_manager.models.user import User
from property_manager.repositories.property import PropertyRepository
from property_manager.schemas.property import PropertySetupData
from property_manager.utils.exceptions import FileUploadError
from property_manager.utils.file_utils import FileStorage
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """Creates property information records with their logo and inventory."""

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.storage = storage or FileStorage()

    async def setup_property(
        self,
        data: PropertySetupData,
        logo: Optional[UploadFile],
        current_user: Optional[User] = None
    ) -> PropertyInformation:
        """
        Store the logo and persist the property with its embedded inventory.

        Inventory entries without a ``userId`` are attributed to the current user.

        Raises:
            FileUploadError: If no logo file was attached
        """
        if logo is None or not logo.filename:
            raise FileUploadError("Logo file is required")

        inventory = []
        for item in data.inventory:
            if item.user_id is None and current_user is not None:
                item.user_id = str(current_user.id)
            inventory.append(item.to_document())

        logo_path = await self.storage.save_upload(logo)

        property_data = data.model_dump(exclude={"inventory"})
        property_data["logo"] = logo_path

        try:
            return await self.property_repo.create_property(property_data, inventory)
        except Exception:
            # Record was not written; drop the orphaned logo
            self.storage.delete_file(logo_path)
            raise
