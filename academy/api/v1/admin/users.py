import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService
from academy.schemas.admin.user import ResetPassword, SuspendUser, UpdateBalance
from academy.schemas.auth.user import CreateStaffAccount
from academy.services.admin.users import UserService

router = APIRouter(tags=["Admin Users"])


@router.get("/admin/users")
async def get_users(
    role: str | None = Query(None, description="USER, PARENT, TEACHER, ADMIN or SUPERVISOR"),
    search: str | None = Query(None, description="Search by name, email or phone"),
    sort_by: str = Query("created_at", description="created_at, full_name, balance, points or last_login_at"),
    order: str = Query("desc", description="asc or desc"),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await user_service.get_users_async(role, search, sort_by, order, page, size)


@router.get("/admin/users/export")
async def export_users(
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await user_service.export_users_async()


@router.patch("/admin/users/{user_id}/balance")
async def update_balance(
    user_id: uuid.UUID,
    schema: UpdateBalance = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    admin = await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await user_service.update_balance_async(user_id, schema, admin)


@router.patch("/admin/users/{user_id}/suspend")
async def suspend_user(
    user_id: uuid.UUID,
    schema: SuspendUser = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    admin = await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await user_service.suspend_user_async(user_id, schema, admin)


@router.patch("/admin/users/{user_id}/password")
async def reset_password(
    user_id: uuid.UUID,
    schema: ResetPassword = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    admin = await authorization.require_role(["ADMIN"])
    return await user_service.reset_password_async(user_id, schema, admin)


@router.post("/teacher/create-account", status_code=status.HTTP_201_CREATED)
async def create_staff_account(
    schema: CreateStaffAccount = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    await authorization.require_role(["ADMIN"])
    return await user_service.create_staff_account_async(schema)
