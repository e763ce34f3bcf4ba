"""
Genesys Cloud API client.

Async HTTP client for the two platform calls the provisioner needs:
the OAuth client-credentials token exchange and user creation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import structlog
from provisioner.core.config import get_settings

logger = structlog.get_logger()


class GenesysClientError(Exception):
    """Base exception for Genesys client errors."""


class GenesysConnectError(GenesysClientError):
    """Raised when the request never reached the platform (refused, connect timeout)."""


class GenesysTimeoutError(GenesysClientError):
    """Raised when the platform did not answer in time."""


class GenesysAPIError(GenesysClientError):
    """Raised for non-success responses from Genesys."""

    def __init__(self, message: str, status_code: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass(slots=True)
class TokenGrant:
    """Parsed client-credentials token response."""

    access_token: str
    expires_in: int


class GenesysClientProtocol(Protocol):
    """Protocol for the Genesys client (allows mocking)."""

    async def request_token(self) -> TokenGrant:
        """Exchange client credentials for a bearer token."""
        ...

    async def create_user(self, token: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Create one user with the given bearer token."""
        ...


class GenesysClient:
    """Async Genesys Cloud client sharing one connection pool across calls."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        region: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.client_id = client_id or settings.genesys_client_id
        self.client_secret = client_secret or settings.genesys_client_secret
        region = region or settings.genesys_api_region
        self.auth_url = f"https://login.{region}/oauth/token"
        self.api_url = f"https://api.{region}"
        self.timeout = (
            timeout_seconds if timeout_seconds is not None else settings.genesys_timeout_seconds
        )
        self._http = httpx.AsyncClient(timeout=self.timeout, transport=transport)

        if not self.client_id or not self.client_secret:
            logger.warning(
                "genesys_credentials_missing",
                msg="GENESYS_CLIENT_ID / GENESYS_CLIENT_SECRET not configured",
            )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request_token(self) -> TokenGrant:
        """Run the client-credentials grant against the login endpoint."""
        if not self.client_id or not self.client_secret:
            raise GenesysClientError("Genesys client credentials not configured")

        response = await self._send(
            "POST",
            self.auth_url,
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
        )
        if response.status_code != 200:
            raise GenesysAPIError(
                f"Genesys token error {response.status_code}",
                status_code=response.status_code,
                body=_decode_body(response),
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GenesysAPIError(
                "Genesys token response was not valid JSON",
                status_code=response.status_code,
            ) from exc

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise GenesysAPIError(
                "Genesys token response missing access_token",
                status_code=response.status_code,
            )
        try:
            expires_in = int(data["expires_in"])
        except (KeyError, TypeError, ValueError) as exc:
            raise GenesysAPIError(
                "Genesys token response missing expires_in",
                status_code=response.status_code,
            ) from exc

        return TokenGrant(access_token=access_token, expires_in=expires_in)

    async def create_user(self, token: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST /api/v2/users with a bearer token; returns the created user."""
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        response = await self._send(
            "POST",
            f"{self.api_url}/api/v2/users",
            headers=headers,
            json=payload,
        )
        if not response.is_success:
            raise GenesysAPIError(
                f"Genesys error {response.status_code}",
                status_code=response.status_code,
                body=_decode_body(response),
            )

        created = _decode_body(response)
        return created if isinstance(created, dict) else {}

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, url, **kwargs)
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            raise GenesysConnectError(f"Connection failed: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise GenesysTimeoutError(f"Request timed out after {self.timeout}s") from exc
        except httpx.RequestError as exc:
            raise GenesysClientError(f"Request failed: {exc}") from exc


def _decode_body(response: httpx.Response) -> Any:
    """Return the JSON body when there is one, the raw text otherwise."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
