"""API router for registration, login, email verification and password reset.

Handlers that hash or check passwords are plain ``def`` functions so FastAPI
runs them in its worker thread pool instead of on the event loop.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from ....application.services.auth_service import AuthService
from ....core.dependencies import get_auth_service
from ....domain.models import User
from ..dependencies import get_current_user
from ..schemas.auth import (
    EmailRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from ..schemas.user_schemas import UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])

_INVALID_TOKEN = "Invalid or expired token"


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    user, verification_token = auth_service.register(
        email=request.email,
        name=request.name,
        password=request.password,
    )
    if verification_token:
        message = "Registration successful. Please check your email to verify your account."
    else:
        message = "Registration successful."
    return RegisterResponse(
        id=user.id,
        email=user.email.value,
        name=user.name,
        role=str(user.role),
        created_at=user.created_at,
        requires_email_verification=not user.is_email_verified,
        message=message,
    )


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    user, access_token = auth_service.login(request.email, request.password)
    return LoginResponse(access_token=access_token, user=UserResponse.from_user(user))


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(
    request: VerifyEmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    if not auth_service.verify_email(request.token):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_TOKEN)
    return MessageResponse(message="Email verified successfully")


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(
    request: EmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    # Same answer whether or not the email exists.
    auth_service.resend_verification(request.email)
    return MessageResponse(message="If the account exists and is unverified, a verification email has been sent.")


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    request: EmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    auth_service.request_password_reset(request.email)
    return MessageResponse(message="If the account exists, a password reset email has been sent.")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    request: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    if not auth_service.reset_password(request.token, request.new_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_TOKEN)
    return MessageResponse(message="Password has been reset")


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_user(user)
