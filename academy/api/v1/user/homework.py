import uuid

from fastapi import APIRouter, Body, Depends

from academy.core.deps import AuthorizationService
from academy.schemas.user.homework import SubmitImage
from academy.services.user.homework import HomeworkService

router = APIRouter(prefix="/courses/{course_id}/chapters/{chapter_id}", tags=["User Homework"])


@router.post("/homework")
async def submit_homework(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    schema: SubmitImage = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: HomeworkService = Depends(HomeworkService),
):
    user = await authorization.require_role(["USER"])
    return await homework_service.submit_homework_async(course_id, chapter_id, schema, user)


@router.get("/homework")
async def get_homework(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: HomeworkService = Depends(HomeworkService),
):
    user = await authorization.get_current_user()
    return await homework_service.get_homework_async(course_id, chapter_id, user)


@router.get("/activities")
async def list_activities(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: HomeworkService = Depends(HomeworkService),
):
    user = await authorization.get_current_user()
    return await homework_service.list_activities_async(course_id, chapter_id, user)


@router.post("/activities/{activity_id}/submission")
async def submit_activity(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    activity_id: uuid.UUID,
    schema: SubmitImage = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: HomeworkService = Depends(HomeworkService),
):
    user = await authorization.require_role(["USER"])
    return await homework_service.submit_activity_async(
        course_id, chapter_id, activity_id, schema, user
    )


@router.get("/activities/{activity_id}/submission")
async def get_activity_submission(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    activity_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    homework_service: HomeworkService = Depends(HomeworkService),
):
    user = await authorization.get_current_user()
    return await homework_service.get_activity_submission_async(
        course_id, chapter_id, activity_id, user
    )
