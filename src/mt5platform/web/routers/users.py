from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from mt5platform.core.modules.user.models import UserUpdate, UserView
from mt5platform.web.deps import AppDep, UserAdminDep
from mt5platform.web.openapi import ErrorResponse, MessageResponse

router = APIRouter(tags=["users"])

ADMIN_RESPONSES: dict[int | str, dict[str, object]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Admin access required"},
}


class CreateUserRequest(BaseModel):
    """Request to create a new user."""

    username: str | None = Field(None, description="Username for the new user")
    email: str | None = Field(None, description="Email address")
    first_name: str | None = Field(None, alias="firstName", description="First name")
    last_name: str | None = Field(None, alias="lastName", description="Last name")
    role: str | None = Field(None, description="One of admin, manager, trader, viewer")
    password: str | None = Field(None, description="Password for the new user")

    model_config = ConfigDict(populate_by_name=True)


class UpdateUserRequest(BaseModel):
    """Partial user update. Omitted fields are left unchanged."""

    username: str | None = None
    email: str | None = None
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    role: str | None = None
    status: str | None = None
    password: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    user: UserView
    message: str


@router.get(
    "/users",
    summary="List all users",
    description="Get all users in the system.",
    operation_id="listUsers",
    responses={200: {"description": "List of all users"}, **ADMIN_RESPONSES},
)
async def list_users(app: AppDep, _: UserAdminDep) -> list[UserView]:
    return await app.get_all_users()


@router.post(
    "/users",
    summary="Create new user",
    description="Create a user with an explicit role.",
    operation_id="createUser",
    status_code=201,
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request or duplicate username/email"},
        **ADMIN_RESPONSES,
    },
)
async def create_user(create_data: CreateUserRequest, app: AppDep, _: UserAdminDep) -> UserResponse:
    user = await app.create_user(
        create_data.username,
        create_data.email,
        create_data.first_name,
        create_data.last_name,
        create_data.password,
        create_data.role,
    )
    return UserResponse(user=user, message="User created successfully")


@router.put(
    "/users/{user_id}",
    summary="Update user",
    description="Update user fields. Admins cannot deactivate their own account.",
    operation_id="updateUser",
    responses={
        200: {"description": "User updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        404: {"model": ErrorResponse, "description": "User not found"},
        **ADMIN_RESPONSES,
    },
)
async def update_user(user_id: UUID, update_data: UpdateUserRequest, app: AppDep, principal: UserAdminDep) -> UserResponse:
    user = await app.update_user(principal, user_id, UserUpdate.model_validate(update_data.model_dump()))
    return UserResponse(user=user, message="User updated successfully")


@router.delete(
    "/users/{user_id}",
    summary="Delete user",
    description="Delete a user account. Admins cannot delete their own account.",
    operation_id="deleteUser",
    responses={
        200: {"description": "User deleted successfully"},
        400: {"model": ErrorResponse, "description": "Cannot delete own account"},
        404: {"model": ErrorResponse, "description": "User not found"},
        **ADMIN_RESPONSES,
    },
)
async def delete_user(user_id: UUID, app: AppDep, principal: UserAdminDep) -> MessageResponse:
    await app.delete_user(principal, user_id)
    return MessageResponse(message="User deleted successfully")
