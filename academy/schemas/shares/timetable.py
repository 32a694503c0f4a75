import uuid
from typing import Annotated

from pydantic import BaseModel, Field


class CreateTimetable(BaseModel):
    course_id: uuid.UUID
    day_of_week: Annotated[int, Field(ge=0, le=6)]
    start_time: str
    end_time: str
    title: Annotated[str, Field(min_length=1, max_length=255)]
    description: str | None = None


class UpdateTimetable(BaseModel):
    course_id: uuid.UUID | None = None
    day_of_week: Annotated[int, Field(ge=0, le=6)] | None = None
    start_time: str | None = None
    end_time: str | None = None
    title: Annotated[str, Field(min_length=1, max_length=255)] | None = None
    description: str | None = None
