import uuid
from typing import Annotated, List, Literal

from pydantic import BaseModel, Field


class QuestionIn(BaseModel):
    text: Annotated[str, Field(min_length=1)]
    type: Literal["MULTIPLE_CHOICE", "TRUE_FALSE", "SHORT_ANSWER"] = "MULTIPLE_CHOICE"
    options: List[str] | None = None
    correct_answer: Annotated[str, Field(min_length=1)]
    points: Annotated[int, Field(ge=1)] = 1
    image_url: str | None = None


class CreateQuiz(BaseModel):
    course_id: uuid.UUID
    title: Annotated[str, Field(min_length=1, max_length=255)]
    description: str | None = None
    max_attempts: Annotated[int, Field(ge=1)] = 1
    timer: Annotated[int, Field(ge=1)] | None = None
    questions: List[QuestionIn] = []


class UpdateQuiz(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=255)] | None = None
    description: str | None = None
    max_attempts: Annotated[int, Field(ge=1)] | None = None
    timer: Annotated[int, Field(ge=1)] | None = None
    questions: List[QuestionIn] | None = None
