from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.admin.promocode import CreatePromoCode
from academy.services.admin.promocodes import AdminPromoCodeService

router = APIRouter(prefix="/admin/promocodes", tags=["Admin Promo Codes"])


@router.get("")
async def list_students_with_promocodes(
    authorization: AuthorizationService = Depends(AuthorizationService),
    promo_service: AdminPromoCodeService = Depends(AdminPromoCodeService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR", "TEACHER"])
    return await promo_service.list_students_async()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_promocode(
    schema: CreatePromoCode = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    promo_service: AdminPromoCodeService = Depends(AdminPromoCodeService),
):
    staff = await authorization.require_role(["ADMIN", "SUPERVISOR", "TEACHER"])
    return await promo_service.create_promocode_async(schema, staff)
