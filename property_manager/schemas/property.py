"""
Pydantic schemas for property setup and embedded inventory entries.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, Dict, List, Optional
from datetime import datetime
import json

from property_manager.database import utcnow
from property_manager.utils.exceptions import BadRequestError


class InventoryItem(BaseModel):
    """
    One space of a property's inventory.

    ``createdAt`` defaults to the moment the entry is parsed, so every entry
    gets its own timestamp.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    property_space_name: Optional[str] = Field(None, alias="propertySpaceName")
    property_inventory_type: Optional[str] = Field(None, alias="propertyInventoryType")
    other_property_type: Optional[str] = Field(None, alias="otherPropertyType")
    capacity: Optional[str] = None
    amenities: Optional[str] = None
    availability_status: Optional[str] = Field(None, alias="availabilityStatus")
    notes: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready representation stored inside the property row."""
        return self.model_dump(mode="json", by_alias=True)


class PropertySetupData(BaseModel):
    """Text fields of the property setup form."""

    property_type: Optional[str] = None
    property_name: Optional[str] = None
    phone_number: Optional[str] = None
    email_address: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    pin_code: Optional[str] = None
    inventory: List[InventoryItem] = Field(default_factory=list)


def parse_inventory(raw: Optional[str]) -> List[InventoryItem]:
    """
    Parse the ``inventory`` form field.

    The field carries a JSON array of inventory entries; a single JSON object
    is accepted as a one-entry inventory and an empty field as no inventory.

    Raises:
        BadRequestError: If the field is not valid inventory JSON
    """
    if raw is None or not raw.strip():
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise BadRequestError("Inventory must be a JSON array of inventory entries")

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise BadRequestError("Inventory must be a JSON array of inventory entries")

    try:
        return [InventoryItem.model_validate(entry) for entry in data]
    except ValidationError as e:
        raise BadRequestError(f"Invalid inventory entry: {e.errors()[0]['msg']}")
