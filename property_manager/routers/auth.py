"""
Account API endpoints for signup, signin and password reset.
"""

from fastapi import APIRouter, Depends, status
from property_manager.services.auth import AuthService
from property_manager.schemas.auth import (
    SignupRequest,
    SigninRequest,
    SigninResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserResponse,
    MessageResponse
)
from property_manager.utils.dependencies import get_auth_service


router = APIRouter(tags=["Authentication"])


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description="Create an account; the email must not be registered yet"
)
async def signup(
    signup_data: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """
    Register a new user.

    Raises:
        UserAlreadyExistsError: 409 if the email is taken
        PasswordMismatchError: 400 if confirmPassword differs
    """
    await auth_service.signup(
        full_name=signup_data.full_name,
        email=signup_data.email,
        password=signup_data.password,
        confirm_password=signup_data.confirm_password,
        receive_emails=signup_data.receive_emails
    )
    return MessageResponse(message="User created successfully")


@router.post(
    "/signin",
    response_model=SigninResponse,
    status_code=status.HTTP_201_CREATED,
    summary="User login",
    description="Authenticate with email and password, returns a JWT and the user"
)
async def signin(
    signin_data: SigninRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> SigninResponse:
    """
    Authenticate user and return a signed token.

    Raises:
        InvalidCredentialsError: 401 if the user is unknown or the password is wrong
    """
    user, token = await auth_service.signin(
        email=signin_data.email,
        password=signin_data.password
    )
    return SigninResponse(token=token, user=UserResponse.model_validate(user.to_dict()))


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Request a password reset link",
    description="Email a time-limited password reset link to a registered user"
)
async def forgot_password(
    request_data: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """
    Send the reset email.

    Raises:
        UserNotFoundError: 404 if no account uses the email
        MailDeliveryError: 500 if the mail provider fails
    """
    await auth_service.forgot_password(request_data.email)
    return MessageResponse(message="Password reset link sent to your email")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Reset password",
    description="Set a new password using the token from the reset link"
)
async def reset_password(
    request_data: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """Complete the password reset flow."""
    await auth_service.reset_password(
        token=request_data.token,
        password=request_data.password,
        confirm_password=request_data.confirm_password
    )
    return MessageResponse(message="Password has been reset successfully")
