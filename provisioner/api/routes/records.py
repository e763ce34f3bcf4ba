"""Spreadsheet upload and imported-record management."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from provisioner.api.deps import get_db_session
from provisioner.api.schemas.records import (
    DeleteAllResponse,
    MessageResponse,
    RecordItem,
    UploadResponse,
)
from provisioner.infrastructure.repositories.records import RecordRepository
from provisioner.libs.spreadsheet import SpreadsheetError, read_rows, to_record_fields

router = APIRouter(prefix="/api", tags=["Records"])
logger = structlog.get_logger()


@router.post("/upload", response_model=UploadResponse)
async def upload_spreadsheet(
    file: UploadFile | None = File(None),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),
) -> UploadResponse:
    """Parse an .xlsx/.csv upload and store its rows as imported records."""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content = await file.read()
    try:
        rows = read_rows(file.filename or "", content)
    except SpreadsheetError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if not rows:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The spreadsheet is empty or malformed",
        )

    records = await RecordRepository(session).add_many(to_record_fields(row) for row in rows)
    logger.info("records_uploaded", filename=file.filename, rows=len(records))
    return UploadResponse(message="File processed and data saved", rows=len(records))


@router.get("/data", response_model=list[RecordItem])
async def list_records(session: AsyncSession = Depends(get_db_session)) -> list[RecordItem]:
    """Return every imported record."""
    rows = await RecordRepository(session).list_all()
    return [RecordItem.model_validate(row) for row in rows]


@router.delete("/data/all", response_model=DeleteAllResponse)
async def delete_all_records(session: AsyncSession = Depends(get_db_session)) -> DeleteAllResponse:
    """Clear the imported-records table."""
    deleted = await RecordRepository(session).delete_all()
    logger.info("records_cleared", deleted_count=deleted)
    return DeleteAllResponse(message="Imported records cleared", deleted_count=deleted)


@router.delete("/data/{record_id}", response_model=MessageResponse)
async def delete_record(
    record_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if not await RecordRepository(session).delete(record_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Record '{record_id}' not found",
        )
    logger.info("record_deleted", record_id=record_id)
    return MessageResponse(message="Record deleted")
