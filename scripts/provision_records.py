"""
Run one Genesys provisioning batch from the command line.

Reads every imported record from the configured database, provisions them and
prints the summary plus any per-record failures.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to Python path so the provisioner package imports from any cwd
sys.path.insert(0, str(Path(__file__).parent.parent))

from provisioner.core.config import get_settings
from provisioner.core.logging import setup_logging
from provisioner.domain.errors import AuthenticationFailure, EmptyInputFailure
from provisioner.domain.services.credentials import CredentialCache
from provisioner.domain.services.provisioning import BatchProvisioner
from provisioner.infrastructure.db.session import dispose_engine, get_session_factory
from provisioner.infrastructure.repositories.records import RecordRepository
from provisioner.libs.genesys_client import GenesysClient


async def run() -> int:
    settings = get_settings()
    async with get_session_factory()() as session:
        records = await RecordRepository(session).load_source_records()

    client = GenesysClient()
    provisioner = BatchProvisioner(
        client,
        CredentialCache(client, skew_seconds=settings.token_refresh_skew_seconds),
        max_concurrency=settings.provision_max_concurrency,
        connect_retries=settings.provision_connect_retries,
        batch_timeout_seconds=settings.provision_batch_timeout_seconds,
    )
    try:
        report = await provisioner.provision_all(records)
    except EmptyInputFailure:
        print("No records to provision.")
        return 1
    except AuthenticationFailure as exc:
        print(f"Authentication failed: {exc}")
        return 2
    finally:
        await client.aclose()
        await dispose_engine()

    print(report.summary)
    for failure in report.failures:
        print(f"  {failure.email}: {json.dumps(failure.error_detail, default=str)}")
    return 0


def main() -> None:
    setup_logging()
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
