from datetime import datetime

from fastapi import APIRouter, Depends, Query

from academy.core.deps import AuthorizationService
from academy.services.user.dashboard import StudentDashboardService

router = APIRouter(tags=["Student Dashboard"])


@router.get("/dashboard/student")
async def get_student_dashboard(
    authorization: AuthorizationService = Depends(AuthorizationService),
    dashboard_service: StudentDashboardService = Depends(StudentDashboardService),
):
    user = await authorization.require_role(["USER"])
    return await dashboard_service.get_dashboard_async(user)


@router.get("/dashboard/messages")
async def get_student_messages(
    authorization: AuthorizationService = Depends(AuthorizationService),
    dashboard_service: StudentDashboardService = Depends(StudentDashboardService),
):
    user = await authorization.require_role(["USER"])
    return await dashboard_service.get_messages_async(user)


@router.get("/student/new-content")
async def get_new_content(
    since: datetime | None = Query(None, description="ISO timestamp, defaults to 7 days ago"),
    authorization: AuthorizationService = Depends(AuthorizationService),
    dashboard_service: StudentDashboardService = Depends(StudentDashboardService),
):
    user = await authorization.require_role(["USER"])
    return await dashboard_service.get_new_content_async(user, since)
