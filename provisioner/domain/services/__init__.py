"""Domain services."""

from provisioner.domain.services.credentials import CredentialCache
from provisioner.domain.services.provisioning import BatchProvisioner, build_user_payload

__all__ = [
    "BatchProvisioner",
    "CredentialCache",
    "build_user_payload",
]
