"""FundRaiser Donation Backend - Donor account API routes."""

from fastapi import APIRouter, Response, status

from src.api.auth import TOKEN_COOKIE
from src.api.deps import AppSettings, CurrentUser, UserServiceDep
from src.core.config import Settings
from src.schemas.user import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)

router = APIRouter(prefix="/user", tags=["Users"])


def _cookie_options(settings: Settings) -> dict:
    return {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": "none" if settings.cookie_secure else "lax",
        "path": "/",
    }


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, service: UserServiceDep) -> RegisterResponse:
    """Create a donor account."""
    user = await service.register(data)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    response: Response,
    service: UserServiceDep,
    settings: AppSettings,
) -> LoginResponse:
    """Log in and set the session cookie."""
    user, token = await service.login(data.email, data.password)
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.jwt_expire_days * 24 * 60 * 60,
        **_cookie_options(settings),
    )
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(user: CurrentUser, response: Response, settings: AppSettings) -> MessageResponse:
    response.delete_cookie(TOKEN_COOKIE, **_cookie_options(settings))
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser) -> UserResponse:
    """Get the current donor, including the donated total."""
    return UserResponse.model_validate(user)


@router.post("/password/otp", response_model=MessageResponse)
async def request_password_otp(user: CurrentUser, service: UserServiceDep) -> MessageResponse:
    """Email a one-time password for a password update."""
    await service.request_password_otp(user)
    return MessageResponse(message="OTP sent to your email. Please check your inbox.")


@router.patch("/password", response_model=MessageResponse)
async def update_password(
    data: PasswordUpdateRequest,
    user: CurrentUser,
    service: UserServiceDep,
) -> MessageResponse:
    await service.update_password(user, data.otp, data.new_password)
    return MessageResponse(message="Password updated successfully!")
