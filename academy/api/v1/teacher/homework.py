import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.teacher.homework import CorrectHomework, CreateActivity
from academy.services.teacher.homework import TeacherHomeworkService

router = APIRouter(prefix="/teacher", tags=["Teacher Homework"])

MANAGERS = ["TEACHER", "ADMIN", "SUPERVISOR"]


@router.get("/homework/{chapter_id}")
async def list_homework(
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: TeacherHomeworkService = Depends(TeacherHomeworkService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await homework_service.list_homework_async(chapter_id, teacher)


@router.patch("/homework/{chapter_id}")
async def correct_homework(
    chapter_id: uuid.UUID,
    schema: CorrectHomework = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: TeacherHomeworkService = Depends(TeacherHomeworkService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await homework_service.correct_homework_async(chapter_id, schema, teacher)


@router.post("/chapters/{chapter_id}/activities", status_code=status.HTTP_201_CREATED)
async def create_activity(
    chapter_id: uuid.UUID,
    schema: CreateActivity = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: TeacherHomeworkService = Depends(TeacherHomeworkService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await homework_service.create_activity_async(chapter_id, schema, teacher)


@router.get("/chapters/{chapter_id}/activities")
async def list_activities(
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: TeacherHomeworkService = Depends(TeacherHomeworkService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await homework_service.list_activities_async(chapter_id, teacher)


@router.get("/activities/{activity_id}/submissions")
async def list_activity_submissions(
    activity_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: TeacherHomeworkService = Depends(TeacherHomeworkService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await homework_service.list_activity_submissions_async(activity_id, teacher)


@router.get("/students/{student_id}/homework")
async def student_homework(
    student_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: TeacherHomeworkService = Depends(TeacherHomeworkService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await homework_service.student_homework_async(student_id, teacher)


@router.get("/students/{student_id}/activities")
async def student_activities(
    student_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: TeacherHomeworkService = Depends(TeacherHomeworkService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await homework_service.student_activities_async(student_id, teacher)
