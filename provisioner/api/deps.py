from __future__ import annotations

from collections.abc import AsyncIterator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from provisioner.core.config import get_settings
from provisioner.domain.services.credentials import CredentialCache
from provisioner.domain.services.provisioning import BatchProvisioner
from provisioner.infrastructure.db.session import get_session
from provisioner.libs.genesys_client import GenesysClient


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


@lru_cache
def get_genesys_client() -> GenesysClient:
    """Process-wide Genesys client; closed by the application lifespan."""
    return GenesysClient()


@lru_cache
def get_credential_cache() -> CredentialCache:
    """Process-wide credential cache; empty again after a restart."""
    settings = get_settings()
    return CredentialCache(
        get_genesys_client(),
        skew_seconds=settings.token_refresh_skew_seconds,
    )


def get_batch_provisioner(
    credentials: CredentialCache = Depends(get_credential_cache),  # noqa: B008
) -> BatchProvisioner:
    settings = get_settings()
    return BatchProvisioner(
        credentials.client,
        credentials,
        max_concurrency=settings.provision_max_concurrency,
        connect_retries=settings.provision_connect_retries,
        batch_timeout_seconds=settings.provision_batch_timeout_seconds,
    )
