import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field


class CreateLiveStream(BaseModel):
    course_id: uuid.UUID
    title: Annotated[str, Field(min_length=1, max_length=255)]
    description: str | None = None
    meeting_url: Annotated[str, Field(min_length=1)]
    meeting_id: str | None = None
    meeting_password: str | None = None
    scheduled_at: datetime
    duration: int = 60


class UpdateLiveStream(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=255)] | None = None
    description: str | None = None
    meeting_url: str | None = None
    meeting_id: str | None = None
    meeting_password: str | None = None
    scheduled_at: datetime | None = None
    duration: int | None = None
