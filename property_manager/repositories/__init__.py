"""
Repository layer for data access operations.
"""

from property_manager.repositories.base import BaseRepository
from property_manager.repositories.property import PropertyRepository
from property_manager.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "UserRepository"
]
