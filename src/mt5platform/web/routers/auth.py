from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from mt5platform.core.modules.user.models import UserView
from mt5platform.web.deps import AppDep, AuthTokenDep, PrincipalDep
from mt5platform.web.openapi import ErrorResponse, MessageResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str | None = Field(None, description="Username for authentication")
    password: str | None = Field(None, description="Password for authentication")


class RegisterRequest(BaseModel):
    """Self-service registration request."""

    username: str | None = Field(None, description="Desired username")
    email: str | None = Field(None, description="Email address")
    password: str | None = Field(None, description="Password")
    first_name: str | None = Field(None, alias="firstName", description="First name")
    last_name: str | None = Field(None, alias="lastName", description="Last name")

    model_config = ConfigDict(populate_by_name=True)


class SessionResponse(BaseModel):
    """Authenticated user and the session id to send as a bearer token."""

    user: UserView = Field(..., description="Authenticated user")
    session_id: str = Field(..., description="Session id for the Authorization header")
    message: str = Field(..., description="Human-readable result")


class VerifyResponse(BaseModel):
    user: UserView = Field(..., description="Current user record")


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with username and password to receive a session id valid for 24 hours.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Missing username or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials or disabled account"},
    },
)
async def login(login_data: LoginRequest, app: AppDep) -> SessionResponse:
    user, session_id = await app.login(login_data.username, login_data.password)
    return SessionResponse(user=user, session_id=session_id, message="Login successful")


@router.post(
    "/auth/register",
    summary="Register",
    description="Create a trader account and open a session for it.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Successfully registered"},
        400: {"model": ErrorResponse, "description": "Missing fields, or username/email already exists"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep) -> SessionResponse:
    user, session_id = await app.register(
        register_data.username,
        register_data.email,
        register_data.first_name,
        register_data.last_name,
        register_data.password,
    )
    return SessionResponse(user=user, session_id=session_id, message="Registration successful")


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current session.",
    operation_id="logout",
    responses={
        200: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep) -> MessageResponse:
    await app.logout(auth_token)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/auth/verify",
    summary="Verify session",
    description="Return the current user's record if the session is valid.",
    operation_id="verifySession",
    responses={
        200: {"description": "Session is valid"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User no longer exists"},
    },
)
async def verify(app: AppDep, principal: PrincipalDep) -> VerifyResponse:
    return VerifyResponse(user=await app.get_current_user(principal))
