"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from careermem.adapters.sqlalchemy.mappings import memory_profile_table, resume_document_table
from careermem.domain.errors import ConcurrentUpdateError
from careermem.domain.sanitize import sanitize_document, sanitize_profile

if TYPE_CHECKING:
    from datetime import datetime

    from sqlalchemy.orm import Session

    from careermem.domain.model import MemoryProfile, ResumeDocument

log = getLogger(__name__)


class SqlAlchemyProfileRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> MemoryProfile | None:
        stmt = select(
            memory_profile_table.c.payload, memory_profile_table.c.last_updated
        ).where(memory_profile_table.c.user_id == user_id)
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        profile = sanitize_profile(row.payload, now=row.last_updated)
        # the column is the compare-and-swap token, whatever the payload claims
        return replace(profile, last_updated=row.last_updated)

    def save(
        self,
        user_id: str,
        profile: MemoryProfile,
        *,
        expected_last_updated: datetime | None,
    ) -> None:
        values = {"payload": profile.as_payload(), "last_updated": profile.last_updated}
        if expected_last_updated is None:
            self._insert(user_id, values)
            return
        stmt = (
            update(memory_profile_table)
            .where(memory_profile_table.c.user_id == user_id)
            .where(memory_profile_table.c.last_updated == expected_last_updated)
            .values(**values)
        )
        if self.session.execute(stmt).rowcount != 1:
            log.warning("Rejected stale write to memory profile of user %s", user_id)
            raise ConcurrentUpdateError(user_id)

    def _insert(self, user_id: str, values: dict[str, object]) -> None:
        stmt = insert(memory_profile_table).values(user_id=user_id, **values)
        # the unit of work rolls back when this propagates
        try:
            self.session.execute(stmt)
        except IntegrityError as exc:
            log.warning("Memory profile of user %s was created concurrently", user_id)
            raise ConcurrentUpdateError(user_id) from exc


class SqlAlchemyResumeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: str) -> list[ResumeDocument]:
        stmt = (
            select(resume_document_table.c.payload)
            .where(resume_document_table.c.user_id == user_id)
            .order_by(resume_document_table.c.last_modified.desc())
        )
        return [sanitize_document(payload) for payload in self.session.scalars(stmt)]

    def get(self, user_id: str, document_id: str) -> ResumeDocument | None:
        stmt = select(resume_document_table.c.payload).where(
            resume_document_table.c.user_id == user_id,
            resume_document_table.c.id == document_id,
        )
        payload = self.session.scalars(stmt).one_or_none()
        return sanitize_document(payload) if payload is not None else None

    def save(self, user_id: str, document: ResumeDocument) -> None:
        values = {"payload": document.as_payload(), "last_modified": document.last_modified}
        stmt = (
            update(resume_document_table)
            .where(resume_document_table.c.user_id == user_id)
            .where(resume_document_table.c.id == document.id)
            .values(**values)
        )
        if self.session.execute(stmt).rowcount == 0:
            self.session.execute(
                insert(resume_document_table).values(user_id=user_id, id=document.id, **values)
            )

    def delete(self, user_id: str, document_id: str) -> bool:
        stmt = delete(resume_document_table).where(
            resume_document_table.c.user_id == user_id,
            resume_document_table.c.id == document_id,
        )
        return self.session.execute(stmt).rowcount > 0
