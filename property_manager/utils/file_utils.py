"""
File upload utilities for storing property logos on local disk.
"""

import time
from pathlib import Path
from typing import Optional
import aiofiles
import logging
from fastapi import UploadFile

from property_manager.config import get_settings
from property_manager.utils.exceptions import FileUploadError

logger = logging.getLogger(__name__)


class FileStorage:
    """Writes uploaded files into the upload directory under collision-resistant names."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir or get_settings().upload_dir)

    def generate_filename(self, original_filename: str) -> str:
        """
        Build the stored filename ``<epochMillis>_<originalName>``.

        Only the base name of the client-supplied filename is kept so an
        upload can never escape the upload directory.
        """
        name = Path(original_filename.replace("\\", "/")).name
        if not name:
            raise FileUploadError("Filename is required")
        return f"{int(time.time() * 1000)}_{name}"

    async def save_upload(self, file: UploadFile) -> str:
        """
        Save an uploaded file to disk.

        Args:
            file: UploadFile object

        Returns:
            Path of the stored file, as persisted on the record

        Raises:
            FileUploadError: If the file has no name
        """
        if not file.filename:
            raise FileUploadError("Filename is required")

        self.base_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.base_dir / self.generate_filename(file.filename)

        await file.seek(0)
        content = await file.read()

        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except Exception:
            # Clean up partial file if it exists
            if file_path.exists():
                file_path.unlink()
            raise

        logger.info(f"Stored upload {file.filename!r} as {file_path} ({len(content)} bytes)")
        return file_path.as_posix()

    def delete_file(self, stored_path: str) -> bool:
        """
        Delete a stored file.

        Returns:
            True if file was deleted, False otherwise
        """
        file_path = Path(stored_path)
        if file_path.exists():
            file_path.unlink()
            return True
        return False
