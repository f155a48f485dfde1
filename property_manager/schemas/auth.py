"""
Pydantic schemas for account requests and responses.
Handles signup, signin and password reset payloads using the client's camelCase field names.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema accepting both camelCase aliases and field names."""

    model_config = ConfigDict(populate_by_name=True)


class SignupRequest(CamelModel):
    """Signup request schema."""

    full_name: str = Field(
        "",
        alias="fullName",
        description="User's full name",
        examples=["Jane Doe"]
    )
    email: str = Field(
        ...,
        min_length=1,
        description="User's email address",
        examples=["jane@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        description="User's password"
    )
    confirm_password: str = Field(
        ...,
        alias="confirmPassword",
        description="Must equal password"
    )
    receive_emails: bool = Field(
        False,
        alias="receiveEmails",
        description="Whether the user wants to receive emails"
    )


class SigninRequest(CamelModel):
    """Signin request schema."""

    email: str = Field(..., min_length=1, examples=["jane@example.com"])
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(CamelModel):
    """Password reset link request."""

    email: str = Field(..., min_length=1, examples=["jane@example.com"])


class ResetPasswordRequest(CamelModel):
    """Password reset completion using the token from the reset link."""

    token: str = Field(..., min_length=1, description="Reset token from the emailed link")
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., alias="confirmPassword")


class UserResponse(CamelModel):
    """User response schema (excluding the password hash)."""

    id: str = Field(..., description="User's unique identifier")
    full_name: str = Field(..., alias="fullName")
    email: str
    receive_emails: bool = Field(..., alias="receiveEmails")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class SigninResponse(BaseModel):
    """Signin response carrying the signed access token."""

    token: str = Field(..., description="JWT access token, sent back as a Bearer token")
    user: UserResponse


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
