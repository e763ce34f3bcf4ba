from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)
    division_id: str | None = Field(None, alias="divisionId", max_length=64)
    manager: str | None = Field(None, max_length=255)

    model_config = ConfigDict(populate_by_name=True)
