import uuid

from pydantic import BaseModel


class CreateActivity(BaseModel):
    title: str | None = None
    description: str | None = None
    is_required: bool = True


class CorrectHomework(BaseModel):
    homework_id: uuid.UUID | None = None
    corrected_image_url: str | None = None
