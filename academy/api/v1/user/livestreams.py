import uuid

from fastapi import APIRouter, Depends

from academy.core.deps import AuthorizationService
from academy.services.user.livestreams import LiveStreamService

router = APIRouter(prefix="/courses/{course_id}/livestreams", tags=["User Live Streams"])


@router.get("/{livestream_id}")
async def get_livestream(
    course_id: uuid.UUID,
    livestream_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: LiveStreamService = Depends(LiveStreamService),
):
    user = await authorization.get_current_user()
    return await livestream_service.get_livestream_async(course_id, livestream_id, user)


@router.post("/{livestream_id}/attend")
async def attend_livestream(
    course_id: uuid.UUID,
    livestream_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    livestream_service: LiveStreamService = Depends(LiveStreamService),
):
    user = await authorization.get_current_user()
    return await livestream_service.attend_livestream_async(course_id, livestream_id, user)
