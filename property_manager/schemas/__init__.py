"""
Pydantic schemas for request/response validation.
"""

# Account schemas
from .auth import (
    SignupRequest,
    SigninRequest,
    SigninResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserResponse,
    MessageResponse
)

# Property schemas
from .property import (
    InventoryItem,
    PropertySetupData,
    parse_inventory
)

__all__ = [
    # Accounts
    "SignupRequest",
    "SigninRequest",
    "SigninResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "MessageResponse",

    # Properties
    "InventoryItem",
    "PropertySetupData",
    "parse_inventory"
]
