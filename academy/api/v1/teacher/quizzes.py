import uuid

from fastapi import APIRouter, Body, Depends, Query, Response, status

from academy.core.deps import AuthorizationService
from academy.schemas.teacher.quiz import CreateQuiz, UpdateQuiz
from academy.services.teacher.quizzes import TeacherQuizService

router = APIRouter(tags=["Teacher Quizzes"])

MANAGERS = ["TEACHER", "ADMIN", "SUPERVISOR"]


@router.post("/teacher/quizzes", status_code=status.HTTP_201_CREATED)
async def create_quiz(
    schema: CreateQuiz = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await quiz_service.create_quiz_async(schema, teacher)


@router.get("/teacher/quizzes")
async def list_quizzes(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await quiz_service.list_quizzes_async(teacher, course_id)


@router.patch("/teacher/quizzes/{quiz_id}/publish")
async def toggle_quiz_publish(
    quiz_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await quiz_service.toggle_publish_async(quiz_id, teacher)


@router.patch("/courses/{course_id}/quizzes/{quiz_id}")
async def update_quiz(
    course_id: uuid.UUID,
    quiz_id: uuid.UUID,
    schema: UpdateQuiz = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await quiz_service.update_quiz_async(course_id, quiz_id, schema, teacher)


@router.delete(
    "/courses/{course_id}/quizzes/{quiz_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_quiz(
    course_id: uuid.UUID,
    quiz_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    teacher = await authorization.require_role(MANAGERS)
    await quiz_service.delete_quiz_async(course_id, quiz_id, teacher)
