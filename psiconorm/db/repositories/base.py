from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generic, Iterator, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from psiconorm.core.errors import NormativeStoreUnavailableError
from psiconorm.core.logging import get_logger

TSession = TypeVar("TSession", bound=Session)

logger = get_logger("psiconorm.db.repositories", component="repository")


@dataclass
class Repository(Generic[TSession]):
    """Lightweight base repository exposing a SQLAlchemy session."""

    db: TSession

    @property
    def session(self) -> TSession:
        """Expose the underlying SQLAlchemy session for advanced use cases."""
        return self.db

    @contextmanager
    def read_guard(self, operation: str, **context: object) -> Iterator[None]:
        """Translate driver failures on read paths into a store-unavailable error."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.warning(
                "store_read_failed",
                extra={"structured_data": {"operation": operation, "error": str(exc), **context}},
            )
            raise NormativeStoreUnavailableError(detail={"operation": operation, **context}) from exc
