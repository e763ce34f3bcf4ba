"""Exception types raised by the provisioning core.

Only lightweight, data-carrying exceptions live here so that the HTTP layer
can translate them into responses.
"""

from __future__ import annotations

from typing import Any


class ProvisioningError(Exception):
    """Base exception for provisioning errors."""


class AuthenticationFailure(ProvisioningError):
    """Raised when the token exchange with the identity platform fails."""


class EmptyInputFailure(ProvisioningError):
    """Raised when a batch is started with no records to provision."""


class RecordCreationFailure(ProvisioningError):
    """Raised when the platform did not create one record's user."""

    def __init__(
        self,
        message: str,
        *,
        email: str | None,
        error_detail: Any,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.email = email
        self.error_detail = error_detail
        self.status_code = status_code
