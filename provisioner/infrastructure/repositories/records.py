"""Repositories over the imported-records and contacts tables."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from provisioner.domain.models import SourceRecord
from provisioner.infrastructure.db.models import Contact, ImportedRecord

logger = structlog.get_logger()

_Row = TypeVar("_Row", ImportedRecord, Contact)


class _PersonRepository(Generic[_Row]):
    model: type[_Row]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[_Row]:
        stmt = select(self.model).order_by(self.model.id)
        return list((await self.session.execute(stmt)).scalars().all())

    async def delete(self, row_id: int) -> bool:
        """Delete one row; returns *False* when it does not exist."""
        row = await self.session.get(self.model, row_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.commit()
        return True


class RecordRepository(_PersonRepository[ImportedRecord]):
    """Rows imported from spreadsheets, the input of a provisioning run."""

    model = ImportedRecord

    async def add_many(self, rows: Iterable[Mapping[str, Any]]) -> list[ImportedRecord]:
        records = [ImportedRecord(**row) for row in rows]
        self.session.add_all(records)
        await self.session.commit()
        logger.info("records_inserted", count=len(records))
        return records

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(ImportedRecord))
        await self.session.commit()
        return result.rowcount or 0

    async def load_source_records(self) -> list[SourceRecord]:
        """Read the whole collection into immutable provisioning inputs."""
        return [
            SourceRecord(
                name=row.name,
                email=row.email,
                password=row.password,
                division_id=row.division_id,
                manager=row.manager,
            )
            for row in await self.list_all()
        ]


class ContactRepository(_PersonRepository[Contact]):
    model = Contact

    async def create(
        self,
        *,
        name: str,
        email: str,
        password: str,
        division_id: str | None = None,
        manager: str | None = None,
    ) -> Contact:
        contact = Contact(
            name=name,
            email=email,
            password=password,
            division_id=division_id,
            manager=manager,
        )
        self.session.add(contact)
        await self.session.commit()
        await self.session.refresh(contact)
        return contact
