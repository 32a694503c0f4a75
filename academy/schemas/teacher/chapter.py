import uuid
from typing import Annotated, List

from pydantic import BaseModel, Field


class CreateChapter(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=255)]
    description: str | None = None
    video_url: str | None = None
    is_free: bool = False


class UpdateChapter(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=255)] | None = None
    description: str | None = None
    video_url: str | None = None
    is_free: bool | None = None


class ChapterPosition(BaseModel):
    id: uuid.UUID
    position: Annotated[int, Field(ge=0)]


class ReorderChaptersSchema(BaseModel):
    chapters: List[ChapterPosition]
