"""
Database models for the Property Manager API.
Includes the User and PropertyInformation models.
"""

from property_manager.models.user import User
from property_manager.models.property import PropertyInformation

__all__ = [
    "User",
    "PropertyInformation",
]
