import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.teacher.courses import CreateAttachment
from academy.services.teacher.courses import TeacherCourseService

router = APIRouter(prefix="/admin/courses", tags=["Admin Courses"])


@router.post("/{course_id}/attachments", status_code=status.HTTP_201_CREATED)
async def add_attachment(
    course_id: uuid.UUID,
    schema: CreateAttachment = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await course_service.add_attachment_async(course_id, schema)


@router.delete("/{course_id}/attachments/{attachment_id}")
async def delete_attachment(
    course_id: uuid.UUID,
    attachment_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await course_service.delete_attachment_async(course_id, attachment_id)
