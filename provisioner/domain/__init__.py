from provisioner.domain.models import (
    BatchReport,
    Credential,
    ProvisionFailure,
    ProvisionOutcome,
    ProvisionSuccess,
    SourceRecord,
)

__all__ = [
    "BatchReport",
    "Credential",
    "ProvisionFailure",
    "ProvisionOutcome",
    "ProvisionSuccess",
    "SourceRecord",
]
