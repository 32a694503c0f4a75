from typing import Annotated

from pydantic import BaseModel, Field


class UpdateBalance(BaseModel):
    new_balance: float
    description: str | None = None


class SuspendUser(BaseModel):
    is_suspended: bool


class ResetPassword(BaseModel):
    new_password: Annotated[str, Field(min_length=6, max_length=72)]
