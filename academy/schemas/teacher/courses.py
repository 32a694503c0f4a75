from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field


class CreateCourse(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=255)]
    description: str | None = None
    image_url: str | None = None
    price: Annotated[Decimal, Field(ge=0)] = Decimal("0")
    is_free: bool = False
    target_curriculum: str | None = None
    target_grade: str | None = None
    target_level: str | None = None
    target_language: str | None = None


class UpdateCourse(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=255)] | None = None
    description: str | None = None
    image_url: str | None = None
    price: Annotated[Decimal, Field(ge=0)] | None = None
    is_free: bool | None = None
    target_curriculum: str | None = None
    target_grade: str | None = None
    target_level: str | None = None
    target_language: str | None = None


class CreateAttachment(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=255)]
    url: Annotated[str, Field(min_length=1)]
