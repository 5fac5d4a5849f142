from fastapi import APIRouter, Depends

from ....application.services.user_service import UserService
from ....core.dependencies import get_user_service
from ....domain.models import User
from ..dependencies import get_current_user
from ..schemas.user_schemas import (
    ChangePasswordRequest,
    UpdateProfileRequest,
    UserListItemResponse,
    UserListResponse,
    UserResponse,
)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserListResponse)
def list_users(
    _: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserListResponse:
    output = user_service.list_users()
    return UserListResponse(
        users=[UserListItemResponse.from_item(item) for item in output.users],
        total=output.total,
    )


@router.patch("/me", response_model=UserResponse)
def update_profile(
    payload: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.from_user(user_service.update_name(user.id, payload.name))


@router.post("/me/password", response_model=UserResponse)
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    updated = user_service.change_password(user.id, payload.current_password, payload.new_password)
    return UserResponse.from_user(updated)


@router.delete("/me/google", response_model=UserResponse)
def unlink_google(
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.from_user(user_service.unlink_google_account(user.id))
