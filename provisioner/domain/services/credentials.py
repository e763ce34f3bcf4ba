"""
Process-wide cache for the Genesys bearer credential.

The cached credential is reused until it gets within ``skew_seconds`` of its
expiry. Misses are single-flight: concurrent callers wait on one lock and
re-check the cache before fetching, so a burst of misses costs one token call.
"""

from __future__ import annotations

import asyncio

import structlog
from provisioner.core.clock import Clock, default_clock
from provisioner.domain.errors import AuthenticationFailure
from provisioner.domain.models import Credential
from provisioner.libs.genesys_client import GenesysClientError, GenesysClientProtocol

logger = structlog.get_logger()

DEFAULT_REFRESH_SKEW_SECONDS = 300


class CredentialCache:
    """Owns the single shared credential; exposes ``acquire`` and ``invalidate``."""

    def __init__(
        self,
        client: GenesysClientProtocol,
        *,
        skew_seconds: float = DEFAULT_REFRESH_SKEW_SECONDS,
        clock: Clock = default_clock,
    ) -> None:
        self.client = client
        self.skew_seconds = skew_seconds
        self.clock = clock
        self._credential: Credential | None = None
        self._lock = asyncio.Lock()

    @property
    def credential(self) -> Credential | None:
        return self._credential

    async def acquire(self) -> str:
        """Return a usable bearer token, fetching a new one on miss or near-expiry."""
        cached = self._usable()
        if cached is not None:
            logger.debug("genesys_token_cached", expires_at=cached.expires_at)
            return cached.token

        async with self._lock:
            # Another caller may have refreshed while we waited.
            cached = self._usable()
            if cached is not None:
                return cached.token
            return await self._fetch()

    def invalidate(self, token: str | None = None) -> None:
        """Drop the cached credential so the next ``acquire`` fetches.

        With ``token``, only drop it if it is still the cached one; a credential
        refreshed since then is kept.
        """
        if token is not None and (self._credential is None or self._credential.token != token):
            return
        self._credential = None
        logger.info("genesys_token_invalidated")

    def _usable(self) -> Credential | None:
        credential = self._credential
        if credential is not None and credential.is_usable(self.clock(), self.skew_seconds):
            return credential
        return None

    async def _fetch(self) -> str:
        logger.info("genesys_token_requested")
        try:
            grant = await self.client.request_token()
        except GenesysClientError as exc:
            await logger.awarning(
                "genesys_token_failed",
                error=str(exc),
                status_code=getattr(exc, "status_code", None),
            )
            raise AuthenticationFailure("Failed to authenticate with Genesys Cloud") from exc

        self._credential = Credential(
            token=grant.access_token,
            expires_at=self.clock() + grant.expires_in,
        )
        logger.info("genesys_token_fetched", expires_in=grant.expires_in)
        return grant.access_token
