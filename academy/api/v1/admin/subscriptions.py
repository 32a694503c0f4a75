import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService
from academy.schemas.shares.subscription import CreatePlan, ReviewRequest, UpdatePlan
from academy.services.admin.subscriptions import AdminSubscriptionService

router = APIRouter(prefix="/admin", tags=["Admin Subscriptions"])


@router.get("/subscription-plans")
async def list_plans(
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: AdminSubscriptionService = Depends(AdminSubscriptionService),
):
    await authorization.require_role(["ADMIN"])
    return await subscription_service.list_plans_async()


@router.post("/subscription-plans", status_code=status.HTTP_201_CREATED)
async def create_plan(
    schema: CreatePlan = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: AdminSubscriptionService = Depends(AdminSubscriptionService),
):
    await authorization.require_role(["ADMIN"])
    return await subscription_service.create_plan_async(schema)


@router.patch("/subscription-plans/{plan_id}")
async def update_plan(
    plan_id: uuid.UUID,
    schema: UpdatePlan = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: AdminSubscriptionService = Depends(AdminSubscriptionService),
):
    await authorization.require_role(["ADMIN"])
    return await subscription_service.update_plan_async(plan_id, schema)


@router.delete("/subscription-plans/{plan_id}")
async def delete_plan(
    plan_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: AdminSubscriptionService = Depends(AdminSubscriptionService),
):
    await authorization.require_role(["ADMIN"])
    return await subscription_service.delete_plan_async(plan_id)


@router.get("/subscription-requests")
async def list_requests(
    status: str | None = Query(None, description="PENDING, APPROVED or DENIED"),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: AdminSubscriptionService = Depends(AdminSubscriptionService),
):
    await authorization.require_role(["ADMIN"])
    return await subscription_service.list_requests_async(status)


@router.patch("/subscription-requests/{request_id}")
async def review_request(
    request_id: uuid.UUID,
    schema: ReviewRequest = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: AdminSubscriptionService = Depends(AdminSubscriptionService),
):
    admin = await authorization.require_role(["ADMIN"])
    return await subscription_service.review_request_async(request_id, schema, admin)


@router.post("/subscriptions/grant-access")
async def grant_access(
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: AdminSubscriptionService = Depends(AdminSubscriptionService),
):
    await authorization.require_role(["ADMIN"])
    return await subscription_service.grant_access_async()
