import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.teacher.chapter import CreateChapter, ReorderChaptersSchema, UpdateChapter
from academy.services.teacher.chapters import ChapterService

router = APIRouter(prefix="/courses/{course_id}/chapters", tags=["Teacher Chapters"])

MANAGERS = ["TEACHER", "ADMIN", "SUPERVISOR"]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_chapter(
    course_id: uuid.UUID,
    schema: CreateChapter = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: ChapterService = Depends(ChapterService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await chapter_service.create_chapter_async(course_id, schema, teacher)


@router.get("")
async def list_chapters(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: ChapterService = Depends(ChapterService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await chapter_service.list_chapters_async(course_id, teacher)


@router.put("/reorder")
async def reorder_chapters(
    course_id: uuid.UUID,
    schema: ReorderChaptersSchema = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: ChapterService = Depends(ChapterService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await chapter_service.reorder_chapters_async(course_id, schema, teacher)


@router.patch("/{chapter_id}")
async def update_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    schema: UpdateChapter = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: ChapterService = Depends(ChapterService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await chapter_service.update_chapter_async(course_id, chapter_id, schema, teacher)


@router.delete("/{chapter_id}")
async def delete_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: ChapterService = Depends(ChapterService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await chapter_service.delete_chapter_async(course_id, chapter_id, teacher)


@router.patch("/{chapter_id}/publish")
async def publish_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: ChapterService = Depends(ChapterService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await chapter_service.set_published_async(course_id, chapter_id, teacher, True)


@router.patch("/{chapter_id}/unpublish")
async def unpublish_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: ChapterService = Depends(ChapterService),
):
    teacher = await authorization.require_role(MANAGERS)
    return await chapter_service.set_published_async(course_id, chapter_id, teacher, False)
