"""
Property repository for property information documents and their embedded inventory.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from property_manager.repositories.base import BaseRepository
from property_manager.models.property import PropertyInformation
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[PropertyInformation]):
    """Repository for property information records."""

    def __init__(self, db: AsyncSession):
        super().__init__(PropertyInformation, db)

    async def create_property(
        self,
        property_data: Dict[str, Any],
        inventory: List[Dict[str, Any]]
    ) -> PropertyInformation:
        """
        Persist a property together with its embedded inventory entries.

        Args:
            property_data: Column values for the property
            inventory: JSON-serializable inventory entries

        Returns:
            Created property instance
        """
        created = await self.create({**property_data, "inventory": inventory})
        logger.info(
            f"Created property {created.property_name!r} (ID: {created.id}) "
            f"with {len(inventory)} inventory entries"
        )
        return created
