import uuid

from fastapi import APIRouter, Body, Depends, Query, Response, status

from academy.core.deps import AuthorizationService
from academy.schemas.shares.timetable import CreateTimetable, UpdateTimetable
from academy.services.shares.timetables import TimetableService

router = APIRouter(tags=["Timetables"])


@router.get("/timetables")
async def list_timetables(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    user = await authorization.get_current_user()
    return await timetable_service.list_timetables_async(user, course_id)


@router.get("/timetables/{timetable_id}")
async def get_timetable(
    timetable_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    user = await authorization.get_current_user()
    return await timetable_service.get_timetable_async(timetable_id, user)


@router.get("/timetables/course/{course_id}")
async def get_course_timetable(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    user = await authorization.get_current_user()
    return await timetable_service.get_course_timetable_async(course_id, user)


@router.post("/timetables", status_code=status.HTTP_201_CREATED)
async def create_timetable(
    schema: CreateTimetable = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    await authorization.require_role(["ADMIN"])
    return await timetable_service.create_timetable_async(schema)


@router.patch("/timetables/{timetable_id}")
async def update_timetable(
    timetable_id: uuid.UUID,
    schema: UpdateTimetable = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    await authorization.require_role(["ADMIN"])
    return await timetable_service.update_timetable_async(timetable_id, schema)


@router.delete(
    "/timetables/{timetable_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_timetable(
    timetable_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    await authorization.require_role(["ADMIN"])
    await timetable_service.delete_timetable_async(timetable_id)
