from typing import Annotated

from pydantic import BaseModel, Field


class CreateMessage(BaseModel):
    message: Annotated[str, Field(min_length=1)]
    target_curriculum: str | None = None
    target_level: str | None = None
    target_language: str | None = None
    target_grade: str | None = None
