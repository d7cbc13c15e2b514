from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from zerah.config import Config
from zerah.core.modules.session.models import SESSION_COOKIE_NAME, AuthToken
from zerah.core.modules.user.models import UserView
from zerah.web.deps import AppDep, SessionCookieDep
from zerah.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class SendOtpRequest(BaseModel):
    """Login code request."""

    email: str = Field(..., description="Email address to send the code to")


class VerifyOtpRequest(BaseModel):
    """Login code submission."""

    email: str = Field(..., description="Email address the code was sent to")
    code: str = Field(..., description="Six-digit code received by email")


class UpdateUserRequest(BaseModel):
    """Profile update."""

    name: str | None = Field(None, description="Display name; blank or null clears it")
    email: str = Field(..., description="New email address")


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human-readable status message")


class VerifyOtpResponse(BaseModel):
    """Successful login."""

    message: str = Field(..., description="Human-readable status message")
    user: UserView = Field(..., description="Authenticated user")


def set_session_cookie(response: Response, token: AuthToken, config: Config) -> None:
    # Secure and strict outside debug; plain http dev setups need lax
    secure = not config.debug
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="strict" if secure else "lax",
        secure=secure,
        max_age=config.session_ttl_days * 24 * 60 * 60,
        path="/",
    )


@router.post(
    "/auth/send-otp",
    summary="Request a login code",
    description="Generate a one-time login code and send it to the given email address.",
    operation_id="sendOtp",
    responses={
        200: {"description": "Code sent"},
        400: {"model": ErrorResponse, "description": "Invalid email address"},
        500: {"model": ErrorResponse, "description": "Email delivery failed"},
    },
)
async def send_otp(request: SendOtpRequest, app: AppDep) -> MessageResponse:
    await app.request_otp(request.email)
    return MessageResponse(message="Login code sent")


@router.post(
    "/auth/verify-otp",
    summary="Verify a login code",
    description="Exchange a valid login code for a session cookie. The user is created on first login.",
    operation_id="verifyOtp",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Malformed email or code"},
        401: {"model": ErrorResponse, "description": "Invalid or expired code"},
    },
)
async def verify_otp(request: VerifyOtpRequest, app: AppDep, response: Response) -> VerifyOtpResponse:
    token, user = await app.verify_otp(request.email, request.code)
    set_session_cookie(response, token, app.config)
    return VerifyOtpResponse(message="Authenticated", user=user)


@router.post(
    "/auth/logout",
    summary="End all sessions",
    description="Revoke every session of the current user and clear the session cookie.",
    operation_id="logout",
    status_code=204,
    responses={204: {"description": "Successfully logged out"}},
)
async def logout(app: AppDep, session_cookie: SessionCookieDep, response: Response) -> None:
    await app.logout(session_cookie)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


@router.get(
    "/auth/user",
    summary="Get current user",
    description="Get the user behind the session cookie.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_user(app: AppDep, session_cookie: SessionCookieDep) -> UserView:
    return await app.get_current_user(session_cookie)


@router.put(
    "/auth/user",
    summary="Update current user",
    description="Change the display name and email of the user behind the session cookie.",
    operation_id="updateCurrentUser",
    responses={
        200: {"description": "Updated user"},
        400: {"model": ErrorResponse, "description": "Invalid email or email already in use"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def update_user(request: UpdateUserRequest, app: AppDep, session_cookie: SessionCookieDep) -> UserView:
    return await app.update_current_user(session_cookie, request.name, request.email)
