from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime

from task_comments.schemas.base import as_utc


class TaskRead(BaseModel):
    id: str = Field(serialization_alias="_id")
    title: str
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
