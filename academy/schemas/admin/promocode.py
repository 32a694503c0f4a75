import uuid

from pydantic import BaseModel


class CreatePromoCode(BaseModel):
    student_id: uuid.UUID
    discount_percentage: int
