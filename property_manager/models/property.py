"""
Property information model with embedded inventory entries.
Inventory entries have no table of their own; they live inside their property as a JSON list.
"""

from sqlalchemy import String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column
from property_manager.database import Base
from typing import Any, Dict, List, Optional


class PropertyInformation(Base):
    """
    Property set up by a user, together with its inventory of spaces.
    Created once per setup request; never updated or deleted.
    """

    __tablename__ = "propertyinformations"

    property_type: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Kind of property (hotel, hostel, apartment...)"
    )

    property_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="Display name of the property"
    )

    phone_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    email_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    pin_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    logo: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Filesystem path of the uploaded logo"
    )

    # Embedded inventory documents
    inventory: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Inventory entries embedded in this property"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<PropertyInformation(id={self.id}, name={self.property_name})>"

    def to_dict(self) -> dict:
        """Convert property to dictionary using the API field names."""
        return {
            "id": str(self.id),
            "propertyType": self.property_type,
            "propertyName": self.property_name,
            "phoneNumber": self.phone_number,
            "emailAddress": self.email_address,
            "address": self.address,
            "state": self.state,
            "city": self.city,
            "pinCode": self.pin_code,
            "logo": self.logo,
            "inventory": list(self.inventory or []),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
