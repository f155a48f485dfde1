"""
Property setup API endpoint.
Every route on this router requires a valid bearer access token.
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from property_manager.models.user import User
from property_manager.schemas.auth import MessageResponse
from property_manager.schemas.property import PropertySetupData, parse_inventory
from property_manager.services.property import PropertyService
from property_manager.utils.dependencies import get_current_user, get_property_service


router = APIRouter(tags=["Properties"], dependencies=[Depends(get_current_user)])


@router.post(
    "/property-setup",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Set up a property",
    description="Multipart form with property details, a JSON inventory array and a logo file"
)
async def property_setup(
    propertyType: Optional[str] = Form(None),
    propertyName: Optional[str] = Form(None),
    phoneNumber: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    pinCode: Optional[str] = Form(None),
    inventory: Optional[str] = Form(None, description="JSON array of inventory entries"),
    logo: Optional[UploadFile] = File(None, description="Property logo image"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    """
    Save property information with its inventory and logo.

    Raises:
        FileUploadError: 400 if no logo is attached
        BadRequestError: 400 if the inventory field is not valid JSON
    """
    data = PropertySetupData(
        property_type=propertyType,
        property_name=propertyName,
        phone_number=phoneNumber,
        email_address=email,
        address=address,
        state=state,
        city=city,
        pin_code=pinCode,
        inventory=parse_inventory(inventory)
    )

    await property_service.setup_property(data, logo, current_user)
    return MessageResponse(message="Property information saved successfully")
