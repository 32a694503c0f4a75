from fastapi import APIRouter, Depends, status

from academy.core.deps import AuthorizationService
from academy.services.user.balance import BalanceService
from academy.services.user.promocode import PromoCodeService

router = APIRouter(tags=["User Balance"])


@router.get("/balance")
async def get_balance(
    authorization: AuthorizationService = Depends(AuthorizationService),
    balance_service: BalanceService = Depends(BalanceService),
):
    user = await authorization.get_current_user()
    return await balance_service.get_balance_async(user)


@router.get("/user/points")
async def get_points(
    authorization: AuthorizationService = Depends(AuthorizationService),
    balance_service: BalanceService = Depends(BalanceService),
):
    user = await authorization.get_current_user()
    return await balance_service.get_points_async(user)


@router.get("/user/promocode")
async def get_my_promocode(
    authorization: AuthorizationService = Depends(AuthorizationService),
    promo_service: PromoCodeService = Depends(PromoCodeService),
):
    user = await authorization.require_role(["USER"])
    return await promo_service.get_my_promocode_async(user)


@router.post("/user/promocode", status_code=status.HTTP_201_CREATED)
async def request_promocode(
    authorization: AuthorizationService = Depends(AuthorizationService),
    promo_service: PromoCodeService = Depends(PromoCodeService),
):
    user = await authorization.require_role(["USER"])
    return await promo_service.request_promocode_async(user)
