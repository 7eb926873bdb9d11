from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional
from datetime import datetime

from task_comments.schemas.base import as_utc


class CommentText(BaseModel):
    """Request body for creating or updating a comment"""
    text: Optional[str] = None

    @field_validator("text", mode="before")
    @classmethod
    def scalar_text_as_str(cls, value: Any) -> Any:
        # Numbers and booleans are kept as their JSON spelling; falsy ones count as missing
        if isinstance(value, bool):
            return "true" if value else None
        if isinstance(value, (int, float)):
            return str(value) if value else None
        return value


class CommentRead(BaseModel):
    id: str = Field(serialization_alias="_id")
    task_id: str = Field(serialization_alias="taskId")
    text: str
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
