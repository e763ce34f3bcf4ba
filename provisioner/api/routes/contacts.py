from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from provisioner.api.deps import get_db_session
from provisioner.api.schemas.contacts import ContactCreate
from provisioner.api.schemas.records import MessageResponse, RecordItem
from provisioner.infrastructure.repositories.records import ContactRepository

router = APIRouter(prefix="/api/contacts", tags=["Contacts"])
logger = structlog.get_logger()


@router.get("", response_model=list[RecordItem])
async def list_contacts(session: AsyncSession = Depends(get_db_session)) -> list[RecordItem]:
    rows = await ContactRepository(session).list_all()
    return [RecordItem.model_validate(row) for row in rows]


@router.post("", response_model=RecordItem, status_code=status.HTTP_201_CREATED)
async def create_contact(
    payload: ContactCreate,
    session: AsyncSession = Depends(get_db_session),
) -> RecordItem:
    """Create a contact; name, email and password are required."""
    contact = await ContactRepository(session).create(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        division_id=payload.division_id,
        manager=payload.manager,
    )
    logger.info("contact_created", contact_id=contact.id, email=contact.email)
    return RecordItem.model_validate(contact)


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if not await ContactRepository(session).delete(contact_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Contact '{contact_id}' not found",
        )
    logger.info("contact_deleted", contact_id=contact_id)
    return MessageResponse(message="Contact deleted")
