"""Shared library helpers."""

from provisioner.libs.genesys_client import (
    GenesysAPIError,
    GenesysClient,
    GenesysClientError,
    GenesysClientProtocol,
    TokenGrant,
)

__all__ = [
    "GenesysAPIError",
    "GenesysClient",
    "GenesysClientError",
    "GenesysClientProtocol",
    "TokenGrant",
]
