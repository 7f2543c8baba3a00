from pydantic import BaseModel


class ToggleApiSchema(BaseModel):
    enabled: bool
