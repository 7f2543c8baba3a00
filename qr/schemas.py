from pydantic import BaseModel, Field


class ParseQRSchema(BaseModel):
    data: str = Field(min_length=1, max_length=2048)
