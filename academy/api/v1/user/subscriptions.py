from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.shares.subscription import CreateSubscription
from academy.services.user.subscriptions import SubscriptionService

router = APIRouter(tags=["User Subscriptions"])


@router.get("/subscription-plans")
async def list_plans(
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionService = Depends(SubscriptionService),
):
    await authorization.get_current_user()
    return await subscription_service.list_plans_async()


@router.get("/subscriptions")
async def list_subscriptions(
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionService = Depends(SubscriptionService),
):
    user = await authorization.get_current_user()
    return await subscription_service.list_subscriptions_async(user)


@router.post("/subscriptions", status_code=status.HTTP_201_CREATED)
async def create_subscription(
    schema: CreateSubscription = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionService = Depends(SubscriptionService),
):
    user = await authorization.require_role(["USER"])
    return await subscription_service.create_subscription_async(schema, user)
