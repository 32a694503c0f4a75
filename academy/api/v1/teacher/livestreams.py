import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService
from academy.schemas.teacher.livestream import CreateLiveStream, UpdateLiveStream
from academy.services.teacher.livestreams import TeacherLiveStreamService

router = APIRouter(tags=["Teacher Live Streams"])

MANAGERS = ["TEACHER", "ADMIN", "SUPERVISOR"]


@router.post("/teacher/livestreams", status_code=status.HTTP_201_CREATED)
async def create_livestream(
    schema: CreateLiveStream = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN"])
    return await livestream_service.create_livestream_async(schema, teacher)


@router.get("/teacher/livestreams")
async def list_livestreams(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await livestream_service.list_livestreams_async(teacher, course_id)


@router.get("/admin/livestreams")
async def admin_list_livestreams(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    admin = await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await livestream_service.list_livestreams_async(admin, course_id)


@router.patch("/teacher/livestreams/{livestream_id}")
async def update_livestream(
    livestream_id: uuid.UUID,
    schema: UpdateLiveStream = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await livestream_service.update_livestream_async(livestream_id, schema, teacher)


@router.delete("/teacher/livestreams/{livestream_id}")
async def delete_livestream(
    livestream_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await livestream_service.delete_livestream_async(livestream_id, teacher)


@router.patch("/teacher/livestreams/{livestream_id}/publish")
async def toggle_livestream_publish(
    livestream_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await livestream_service.toggle_publish_async(livestream_id, teacher)
