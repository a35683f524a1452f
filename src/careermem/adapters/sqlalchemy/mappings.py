"""SQLAlchemy table metadata for stored memory profiles and resume documents.

Both aggregates are stored as their JSON payloads. Loading re-sanitizes the
payload, so rows written by older versions are healed on read.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Index,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "pk": "pk_%(table_name)s",
    }
)

memory_profile_table = Table(
    "memory_profiles",
    metadata,
    Column("user_id", String, primary_key=True),
    Column("payload", JSON, nullable=False),
    Column("last_updated", UTCDateTime, nullable=False),
)

resume_document_table = Table(
    "resume_documents",
    metadata,
    Column("user_id", String, primary_key=True),
    Column("id", String, primary_key=True),
    Column("payload", JSON, nullable=False),
    Column("last_modified", UTCDateTime, nullable=False),
    Index("ix_resume_documents_user_modified", "user_id", "last_modified"),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine, checkfirst=True)
