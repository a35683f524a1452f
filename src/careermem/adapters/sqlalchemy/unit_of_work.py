"""Transactions over the career memory tables.

The engine is process-wide: call :func:`startup` once, then open a
:class:`SqlAlchemyMemoryUnitOfWork` per operation.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from careermem.adapters.sqlalchemy.mappings import create_all_tables
from careermem.adapters.sqlalchemy.repositories import (
    SqlAlchemyProfileRepository,
    SqlAlchemyResumeRepository,
)
from careermem.config import get_storage_config
from careermem.domain.ports import MemoryRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The storage engine is missing, already bound, or used outside a ``with`` block."""


class _Storage:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    @classmethod
    def bind(cls, engine: Engine | None) -> None:
        if cls.engine is not None and cls.engine is not engine:
            cls.engine.dispose()
        cls.engine = engine
        cls.sessions = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    @classmethod
    def open_session(cls) -> Session:
        if cls.sessions is None:
            raise StartupError(
                "Career memory storage is not started; "
                "call careermem.adapters.sqlalchemy.startup() first"
            )
        return cls.sessions()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the storage engine and create any missing tables.

    Without ``engine`` or ``database_uri`` the configured database is used.
    Rebinding a started adapter requires ``force=True``.
    """

    if _Storage.engine is not None and not force:
        raise StartupError("Career memory storage is already started; pass force=True to rebind")
    engine = engine or create_engine(database_uri or get_storage_config().database_uri)
    create_all_tables(engine)
    _Storage.bind(engine)
    log.debug("Career memory storage bound to %s", engine.url)


def is_started() -> bool:
    return _Storage.engine is not None


def shutdown() -> None:
    _Storage.bind(None)


class SqlAlchemyMemoryUnitOfWork:
    """One session for the duration of a ``with`` block.

    Nothing is persisted unless :meth:`commit` is called; leaving the block
    with an exception rolls back.
    """

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("Start career memory storage before opening a unit of work")
        self._session: Session | None = None
        self._repositories: MemoryRepositories | None = None

    def __enter__(self) -> SqlAlchemyMemoryUnitOfWork:
        if self._session is not None:
            raise StartupError("This unit of work is already open")
        self._session = _Storage.open_session()
        self._repositories = MemoryRepositories(
            profiles=SqlAlchemyProfileRepository(self._session),
            resumes=SqlAlchemyResumeRepository(self._session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        self._session = None
        self._repositories = None
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with block")
        return self._session

    @property
    def repositories(self) -> MemoryRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work used outside its with block")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from careermem.domain.ports import MemoryUnitOfWork

    _conforms: MemoryUnitOfWork = SqlAlchemyMemoryUnitOfWork()
