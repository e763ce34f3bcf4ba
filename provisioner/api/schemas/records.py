from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecordItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    email: str | None = None
    password: str | None = None
    division_id: str | None = Field(None, serialization_alias="divisionId")
    manager: str | None = None
    extra: dict[str, Any] | None = None
    created_at: datetime


class UploadResponse(BaseModel):
    message: str
    rows: int


class MessageResponse(BaseModel):
    message: str


class DeleteAllResponse(BaseModel):
    message: str
    deleted_count: int
