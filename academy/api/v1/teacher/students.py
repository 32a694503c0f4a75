import uuid

from fastapi import APIRouter, Depends, Query

from academy.core.deps import AuthorizationService
from academy.services.teacher.students import TeacherStudentService

router = APIRouter(prefix="/teacher/users", tags=["Teacher Students"])


@router.get("")
async def list_students(
    search: str | None = Query(None, description="Search by name or phone"),
    authorization: AuthorizationService = Depends(AuthorizationService),
    student_service: TeacherStudentService = Depends(TeacherStudentService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN", "SUPERVISOR"])
    return await student_service.list_students_async(teacher, search)


@router.get("/{student_id}/progress")
async def get_student_progress(
    student_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    student_service: TeacherStudentService = Depends(TeacherStudentService),
):
    teacher = await authorization.require_role(["TEACHER", "ADMIN", "SUPERVISOR"])
    return await student_service.get_student_progress_async(teacher, student_id)
