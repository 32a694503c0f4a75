from pydantic import BaseModel


class SubmitImage(BaseModel):
    image_url: str | None = None
