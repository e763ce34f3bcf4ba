from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class FailureItem(BaseModel):
    email: str | None = None
    error_detail: Any = None


class ProvisioningResponse(BaseModel):
    message: str
    success_count: int
    failure_count: int
    failures: list[FailureItem]
