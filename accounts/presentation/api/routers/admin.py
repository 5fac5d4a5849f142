from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ....application.services.backoffice_service import BackofficeService
from ....core.dependencies import get_backoffice_service
from ....domain.models import User
from ..dependencies import require_admin_user, require_superadmin_user
from ..schemas.admin import AdminUserListResponse, AdminUserResponse, ChangeRoleRequest

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=AdminUserListResponse)
def list_users(
    _: User = Depends(require_admin_user),
    backoffice: BackofficeService = Depends(get_backoffice_service),
) -> AdminUserListResponse:
    output = backoffice.list_users()
    return AdminUserListResponse(
        users=[AdminUserResponse.from_view(view) for view in output.users],
        total=output.total,
    )


@router.get("/users/{user_id}", response_model=AdminUserResponse)
def get_user(
    user_id: UUID,
    _: User = Depends(require_admin_user),
    backoffice: BackofficeService = Depends(get_backoffice_service),
) -> AdminUserResponse:
    return AdminUserResponse.from_view(backoffice.get_user(user_id))


@router.post("/users/{user_id}/activate", response_model=AdminUserResponse)
def activate_user(
    user_id: UUID,
    admin: User = Depends(require_admin_user),
    backoffice: BackofficeService = Depends(get_backoffice_service),
) -> AdminUserResponse:
    return AdminUserResponse.from_view(backoffice.activate(admin, user_id))


@router.post("/users/{user_id}/deactivate", response_model=AdminUserResponse)
def deactivate_user(
    user_id: UUID,
    admin: User = Depends(require_admin_user),
    backoffice: BackofficeService = Depends(get_backoffice_service),
) -> AdminUserResponse:
    return AdminUserResponse.from_view(backoffice.deactivate(admin, user_id))


@router.post("/users/{user_id}/verify-email", response_model=AdminUserResponse)
def verify_user_email(
    user_id: UUID,
    admin: User = Depends(require_admin_user),
    backoffice: BackofficeService = Depends(get_backoffice_service),
) -> AdminUserResponse:
    return AdminUserResponse.from_view(backoffice.mark_email_verified(admin, user_id))


@router.put("/users/{user_id}/role", response_model=AdminUserResponse)
def change_role(
    user_id: UUID,
    payload: ChangeRoleRequest,
    admin: User = Depends(require_superadmin_user),
    backoffice: BackofficeService = Depends(get_backoffice_service),
) -> AdminUserResponse:
    return AdminUserResponse.from_view(backoffice.change_role(admin, user_id, payload.role))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UUID,
    admin: User = Depends(require_admin_user),
    backoffice: BackofficeService = Depends(get_backoffice_service),
) -> Response:
    backoffice.delete_user(admin, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
