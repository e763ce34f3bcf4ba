"""Bulk provisioning of imported records into Genesys Cloud."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from provisioner.api.deps import get_batch_provisioner, get_db_session
from provisioner.api.schemas.provisioning import FailureItem, ProvisioningResponse
from provisioner.domain.errors import AuthenticationFailure, EmptyInputFailure
from provisioner.domain.services.provisioning import BatchProvisioner
from provisioner.infrastructure.repositories.records import RecordRepository

router = APIRouter(prefix="/api/genesys", tags=["Provisioning"])
logger = structlog.get_logger()


@router.post(
    "/upload-contacts",
    response_model=ProvisioningResponse,
    summary="Provision imported records",
    description="Create one Genesys Cloud user per imported record and report per-record failures.",
)
async def provision_contacts(
    session: AsyncSession = Depends(get_db_session),
    provisioner: BatchProvisioner = Depends(get_batch_provisioner),
) -> ProvisioningResponse:
    records = await RecordRepository(session).load_source_records()

    try:
        report = await provisioner.provision_all(records)
    except EmptyInputFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No records found in the database to provision",
        ) from exc
    except AuthenticationFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to authenticate with Genesys Cloud",
        ) from exc

    logger.info("provisioning_completed", summary=report.summary)
    return ProvisioningResponse(
        message=(
            f"Processing finished: {report.success_count} users created in Genesys, "
            f"{report.failure_count} failures."
        ),
        success_count=report.success_count,
        failure_count=report.failure_count,
        failures=[
            FailureItem(email=failure.email, error_detail=failure.error_detail)
            for failure in report.failures
        ],
    )
