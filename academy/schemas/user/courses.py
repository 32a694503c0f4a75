from pydantic import BaseModel


class PurchaseCourse(BaseModel):
    promo_code: str | None = None
