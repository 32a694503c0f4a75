import uuid
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class CreateSubscription(BaseModel):
    plan_id: uuid.UUID
    transaction_image: Annotated[str, Field(min_length=1)]


class CreatePlan(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=255)]
    description: str | None = None
    price: Annotated[Decimal, Field(ge=0)] = Decimal("0")
    duration: Annotated[int, Field(ge=1)]
    curriculum: str | None = None
    grade: str | None = None
    level: str | None = None
    language: str | None = None
    is_active: bool = True


class UpdatePlan(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=255)] | None = None
    description: str | None = None
    price: Annotated[Decimal, Field(ge=0)] | None = None
    duration: Annotated[int, Field(ge=1)] | None = None
    curriculum: str | None = None
    grade: str | None = None
    level: str | None = None
    language: str | None = None
    is_active: bool | None = None


class ReviewRequest(BaseModel):
    action: Literal["approve", "deny"]
