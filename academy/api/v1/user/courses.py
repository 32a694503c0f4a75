import uuid

from fastapi import APIRouter, Body, Depends, Query

from academy.core.deps import AuthorizationService
from academy.schemas.user.courses import PurchaseCourse
from academy.services.user.courses import CourseService

router = APIRouter(prefix="/courses", tags=["User Courses"])


@router.get("")
async def list_courses(
    curriculum: str | None = Query(None),
    grade: str | None = Query(None),
    level: str | None = Query(None),
    search: str | None = Query(None, description="Search in course titles"),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.list_courses_async(user, curriculum, grade, level, search)


@router.get("/{course_id}")
async def get_course(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.get_course_detail_async(course_id, user)


@router.get("/{course_id}/access")
async def get_course_access(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.get_course_access_async(course_id, user)


@router.get("/{course_id}/content")
async def get_course_content(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.get_course_content_async(course_id, user)


@router.get("/{course_id}/progress")
async def get_course_progress(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.get_course_progress_async(course_id, user)


@router.post("/{course_id}/purchase")
async def purchase_course(
    course_id: uuid.UUID,
    schema: PurchaseCourse = Body(default=PurchaseCourse()),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.require_role(["USER"])
    return await course_service.purchase_course_async(course_id, user, schema)
