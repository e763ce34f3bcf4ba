from __future__ import annotations

import asyncio
from typing import Any

from provisioner.infrastructure.repositories.records import RecordRepository
from provisioner.libs.genesys_client import GenesysAPIError, TokenGrant
from sqlalchemy.ext.asyncio import AsyncSession


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGenesysClient:
    """In-memory stand-in for GenesysClient recording every call."""

    def __init__(
        self,
        *,
        rejections: dict[str, tuple[int, Any]] | None = None,
        errors: dict[str, list[Exception]] | None = None,
        delays: dict[str, float] | None = None,
        default_delay: float = 0.01,
        token_error: Exception | None = None,
        token_delay: float = 0.0,
        expires_in: int = 3600,
    ) -> None:
        self.rejections = rejections or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.default_delay = default_delay
        self.token_error = token_error
        self.token_delay = token_delay
        self.expires_in = expires_in
        self.token_calls = 0
        self.create_calls: list[tuple[str, dict[str, Any]]] = []
        self.completed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def request_token(self) -> TokenGrant:
        self.token_calls += 1
        if self.token_delay:
            await asyncio.sleep(self.token_delay)
        if self.token_error is not None:
            raise self.token_error
        return TokenGrant(access_token=f"token-{self.token_calls}", expires_in=self.expires_in)

    async def create_user(self, token: str, payload: dict[str, Any]) -> dict[str, Any]:
        email = payload["email"]
        self.create_calls.append((token, payload))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(email, self.default_delay))
            queued = self.errors.get(email)
            if queued:
                raise queued.pop(0)
            if email in self.rejections:
                status_code, body = self.rejections[email]
                raise GenesysAPIError(
                    f"Genesys error {status_code}", status_code=status_code, body=body
                )
            return {"id": f"user-{email}", "email": email}
        finally:
            self.in_flight -= 1
            self.completed.append(email)


async def seed_records(session: AsyncSession, emails: list[str]) -> None:
    """Insert one imported record per email."""
    await RecordRepository(session).add_many(
        {
            "name": email.split("@")[0].upper(),
            "email": email,
            "password": "Secret#123",
            "division_id": "div-1",
            "manager": "manager@x.com",
        }
        for email in emails
    )
