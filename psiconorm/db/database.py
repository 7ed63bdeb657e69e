from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url, URL
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool

from psiconorm.core.config import settings
from psiconorm.core.logging import get_logger
from psiconorm.core.metrics import inc_counter, metrics_registry

logger = get_logger("psiconorm.db.database", component="db")


class Base(DeclarativeBase):
    pass


@dataclass(frozen=True, slots=True)
class DatabaseGateway:
    """Encapsulates engine and session factory lifecycle."""

    engine: Engine
    session_factory: sessionmaker[Session]

    @contextmanager
    def session(self) -> Iterator[Session]:
        started = perf_counter()
        inc_counter("db.session.opens")
        session: Session = self.session_factory()
        try:
            yield session
        finally:
            metrics_registry.record("db.session.duration", (perf_counter() - started) * 1000.0)
            session.close()

    @contextmanager
    def transactional(self) -> Iterator[Session]:
        session: Session = self.session_factory()
        started = perf_counter()
        inc_counter("db.transaction.opens")
        try:
            yield session
            session.commit()
            inc_counter("db.transaction.commits")
        except SQLAlchemyError as e:
            session.rollback()
            inc_counter("db.transaction.rollbacks")
            logger.error("transaction_rollback", extra={"structured_data": {"error": str(e)}})
            raise
        finally:
            metrics_registry.record("db.transaction.duration", (perf_counter() - started) * 1000.0)
            session.close()


def build_engine(database_url: str | None = None) -> Engine:
    url_string = database_url or settings.database_url
    url: URL = make_url(url_string)
    kwargs: dict[str, object] = {
        "echo": False,
        "future": True,
    }

    if url.get_backend_name() == "sqlite":
        connect_args: dict[str, object] = {"check_same_thread": False}
        database = url.database or ""
        if database.startswith("file:"):
            connect_args["uri"] = True
        kwargs["connect_args"] = connect_args

        if database in ("", ":memory:", "file::memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = QueuePool
            kwargs["pool_size"] = settings.db_pool_size
            kwargs["max_overflow"] = settings.db_max_overflow
            kwargs["pool_timeout"] = settings.db_pool_timeout
    else:
        kwargs.update(
            {
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
                "pool_timeout": settings.db_pool_timeout,
                "pool_recycle": settings.db_pool_recycle,
                "pool_pre_ping": settings.db_pool_pre_ping,
            }
        )

    return create_engine(url_string, **kwargs)


engine: Engine = build_engine()
SessionLocal: sessionmaker[Session] = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
database_gateway = DatabaseGateway(engine=engine, session_factory=SessionLocal)


def get_db():
    with database_gateway.session() as session:
        yield session


@contextmanager
def transactional_session() -> Iterator[Session]:
    """Context manager that manages commit/rollback for explicit transactions."""

    with database_gateway.transactional() as session:
        yield session


__all__ = [
    "Base",
    "DatabaseGateway",
    "build_engine",
    "database_gateway",
    "engine",
    "SessionLocal",
    "get_db",
    "transactional_session",
]
