from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class _PersonColumns:
    """Columns shared by imported rows and contacts.

    Passwords are stored verbatim: the Genesys integration forwards them as-is.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    division_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    manager: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Spreadsheet columns we do not recognise are kept rather than dropped.
    extra: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ImportedRecord(_PersonColumns, Base):
    """Row imported from an uploaded spreadsheet, pending provisioning."""

    __tablename__ = "imported_records"

    def __repr__(self) -> str:
        return f"<ImportedRecord(id={self.id}, email={self.email})>"


class Contact(_PersonColumns, Base):
    """Manually maintained contact base."""

    __tablename__ = "contacts"

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, email={self.email})>"
