import uuid

from fastapi import APIRouter, Depends, Response, status

from academy.core.deps import AuthorizationService
from academy.services.user.learning import LearningService

router = APIRouter(prefix="/courses/{course_id}/chapters", tags=["User Learning"])


@router.get("/{chapter_id}")
async def get_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.get_chapter_async(course_id, chapter_id, user)


@router.put("/{chapter_id}/progress")
async def complete_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.complete_chapter_async(course_id, chapter_id, user)


@router.delete(
    "/{chapter_id}/progress",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_progress(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    await learning_service.delete_progress_async(course_id, chapter_id, user)
