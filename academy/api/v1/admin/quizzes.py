import uuid

from fastapi import APIRouter, Depends, Query

from academy.core.deps import AuthorizationService
from academy.services.teacher.quizzes import TeacherQuizService

router = APIRouter(prefix="/admin", tags=["Admin Quizzes"])


@router.get("/quizzes")
async def admin_list_quizzes(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await quiz_service.admin_list_quizzes_async(course_id)


@router.get("/quiz-results")
async def admin_list_results(
    course_id: uuid.UUID | None = Query(None),
    quiz_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await quiz_service.admin_list_results_async(course_id, quiz_id)
