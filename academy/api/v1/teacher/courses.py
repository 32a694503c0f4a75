import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.teacher.courses import CreateCourse, UpdateCourse
from academy.services.teacher.courses import TeacherCourseService

router = APIRouter(tags=["Teacher Courses"])


@router.post("/teacher/courses", status_code=status.HTTP_201_CREATED)
async def create_course(
    schema: CreateCourse = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN"])
    return await course_service.create_course_async(schema, teacher)


@router.get("/teacher/courses")
async def list_own_courses(
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN", "SUPERVISOR"])
    return await course_service.list_own_courses_async(teacher)


@router.patch("/courses/{course_id}")
async def update_course(
    course_id: uuid.UUID,
    schema: UpdateCourse = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN"])
    return await course_service.update_course_async(course_id, schema, teacher)


@router.patch("/courses/{course_id}/publish")
async def publish_course(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN", "SUPERVISOR"])
    return await course_service.publish_course_async(course_id, teacher)


@router.patch("/courses/{course_id}/unpublish")
async def unpublish_course(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN", "SUPERVISOR"])
    return await course_service.unpublish_course_async(course_id, teacher)


@router.delete("/courses/{course_id}")
async def delete_course(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN"])
    return await course_service.delete_course_async(course_id, teacher)
