import uuid

from pydantic import BaseModel


class CreateCertificate(BaseModel):
    student_id: uuid.UUID | None = None
    image_url: str | None = None
    title: str | None = None
    description: str | None = None
