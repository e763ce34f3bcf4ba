from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Credential:
    """Bearer token issued by the identity platform and its absolute expiry."""

    token: str
    expires_at: float

    def is_usable(self, now: float, skew_seconds: float) -> bool:
        """Return *True* while the token stays valid beyond the refresh skew."""
        return now + skew_seconds < self.expires_at


@dataclass(frozen=True, slots=True)
class SourceRecord:
    """One imported row to be provisioned as a platform user."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    division_id: str | None = None
    manager: str | None = None


@dataclass(frozen=True, slots=True)
class ProvisionSuccess:
    email: str | None
    user_id: str | None = None


@dataclass(frozen=True, slots=True)
class ProvisionFailure:
    """A record the platform did not create, with the reason it gave."""

    email: str | None
    error_detail: Any
    status_code: int | None = None


ProvisionOutcome = ProvisionSuccess | ProvisionFailure


@dataclass(frozen=True, slots=True)
class BatchReport:
    """Aggregated outcome of one provisioning run."""

    success_count: int
    failure_count: int
    failures: tuple[ProvisionFailure, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def summary(self) -> str:
        return f"{self.success_count} succeeded, {self.failure_count} failed"

    @classmethod
    def from_outcomes(cls, outcomes: list[ProvisionOutcome]) -> BatchReport:
        """Reduce per-record outcomes, keeping failures in input order."""
        failures = tuple(outcome for outcome in outcomes if isinstance(outcome, ProvisionFailure))
        return cls(
            success_count=len(outcomes) - len(failures),
            failure_count=len(failures),
            failures=failures,
        )
