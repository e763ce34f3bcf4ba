"""
Bulk provisioning of Genesys Cloud users from imported records.

One run authenticates once, dispatches one create-user call per record
concurrently (bounded by a semaphore), waits for every call to settle and
reduces the outcomes into a ``BatchReport``. A failed record never aborts its
siblings; only empty input and a failed token exchange fail the whole run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import structlog
from provisioner.domain.errors import EmptyInputFailure, RecordCreationFailure
from provisioner.domain.models import (
    BatchReport,
    ProvisionFailure,
    ProvisionOutcome,
    ProvisionSuccess,
    SourceRecord,
)
from provisioner.domain.services.credentials import CredentialCache
from provisioner.libs.genesys_client import (
    GenesysAPIError,
    GenesysClientError,
    GenesysClientProtocol,
    GenesysConnectError,
)

logger = structlog.get_logger()

BATCH_TIMEOUT_DETAIL = "batch timeout exceeded"


def build_user_payload(record: SourceRecord) -> dict[str, Any]:
    """Map a source record to the Genesys create-user body, field for field."""
    return {
        "name": record.name,
        "email": record.email,
        "password": record.password,
        "divisionId": record.division_id,
        "manager": record.manager,
    }


class BatchProvisioner:
    """Creates one platform user per record and reports aggregate outcomes."""

    def __init__(
        self,
        client: GenesysClientProtocol,
        credentials: CredentialCache,
        *,
        max_concurrency: int = 10,
        connect_retries: int = 0,
        retry_backoff_seconds: float = 1.0,
        batch_timeout_seconds: float | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.client = client
        self.credentials = credentials
        self.max_concurrency = max_concurrency
        self.connect_retries = connect_retries
        self.retry_backoff_seconds = retry_backoff_seconds
        self.batch_timeout_seconds = batch_timeout_seconds

    async def provision_all(self, records: Sequence[SourceRecord]) -> BatchReport:
        """
        Provision every record and return the batch report.

        Raises:
            EmptyInputFailure: ``records`` is empty; no network call is made.
            AuthenticationFailure: the token exchange failed; no user is created.
        """
        if not records:
            raise EmptyInputFailure("No records available to provision")

        logger.info("provision_batch_started", record_count=len(records))
        token = await self.credentials.acquire()

        # Indexed by input position so the report order never depends on completion order.
        outcomes: list[ProvisionOutcome | None] = [None] * len(records)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(index: int, record: SourceRecord) -> None:
            async with semaphore:
                outcomes[index] = await self._provision_one(token, record)

        tasks = [asyncio.create_task(run(index, record)) for index, record in enumerate(records)]
        _, pending = await asyncio.wait(tasks, timeout=self.batch_timeout_seconds)

        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            await logger.awarning(
                "provision_batch_timeout",
                pending=len(pending),
                timeout_seconds=self.batch_timeout_seconds,
            )

        for task in tasks:
            error = None if task.cancelled() else task.exception()
            if error is not None:
                raise error

        settled: list[ProvisionOutcome] = [
            outcome
            if outcome is not None
            else ProvisionFailure(email=record.email, error_detail=BATCH_TIMEOUT_DETAIL)
            for record, outcome in zip(records, outcomes, strict=True)
        ]
        report = BatchReport.from_outcomes(settled)

        if any(failure.status_code == 401 for failure in report.failures):
            # The platform rejected our token; make the next run re-authenticate.
            self.credentials.invalidate(token)

        logger.info(
            "provision_batch_finished",
            success_count=report.success_count,
            failure_count=report.failure_count,
        )
        return report

    async def _provision_one(self, token: str, record: SourceRecord) -> ProvisionOutcome:
        try:
            created = await self._create(token, record)
        except RecordCreationFailure as exc:
            await logger.awarning(
                "provision_record_failed",
                email=exc.email,
                status_code=exc.status_code,
                error=str(exc),
            )
            return ProvisionFailure(
                email=exc.email,
                error_detail=exc.error_detail,
                status_code=exc.status_code,
            )
        except Exception as exc:
            logger.exception("provision_record_crashed", email=record.email)
            return ProvisionFailure(email=record.email, error_detail=str(exc))

        logger.debug("provision_record_created", email=record.email)
        return ProvisionSuccess(email=record.email, user_id=created.get("id"))

    async def _create(self, token: str, record: SourceRecord) -> dict[str, Any]:
        """Issue the create-user call, retrying only requests that never left."""
        payload = build_user_payload(record)
        last_error: GenesysConnectError | None = None

        for attempt in range(self.connect_retries + 1):
            try:
                return await self.client.create_user(token, payload)
            except GenesysConnectError as exc:
                last_error = exc
                if attempt < self.connect_retries:
                    await logger.awarning(
                        "provision_record_connect_retry",
                        email=record.email,
                        attempt=attempt + 1,
                        max_retries=self.connect_retries,
                    )
                    await asyncio.sleep(self.retry_backoff_seconds * 2**attempt)
            except GenesysAPIError as exc:
                raise RecordCreationFailure(
                    str(exc),
                    email=record.email,
                    error_detail=exc.body if exc.body is not None else str(exc),
                    status_code=exc.status_code,
                ) from exc
            except GenesysClientError as exc:
                raise RecordCreationFailure(
                    str(exc), email=record.email, error_detail=str(exc)
                ) from exc

        raise RecordCreationFailure(
            str(last_error), email=record.email, error_detail=str(last_error)
        ) from last_error
