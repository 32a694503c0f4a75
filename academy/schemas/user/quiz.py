import uuid
from typing import List

from pydantic import BaseModel


class AnswerIn(BaseModel):
    question_id: uuid.UUID
    answer: str | None = None


class SubmitQuiz(BaseModel):
    answers: List[AnswerIn] = []
