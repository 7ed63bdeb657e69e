from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Mapping, MutableMapping
from uuid import uuid4

_CORRELATION_ID: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_CONFIGURED_ATTR = "_psiconorm_configured"


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``structured_data`` keys are merged in."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        correlation_id = _CORRELATION_ID.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id
        structured = getattr(record, "structured_data", None)
        if isinstance(structured, Mapping):
            payload.update(structured)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredAdapter(logging.LoggerAdapter):
    """Adds the adapter's default fields (e.g. ``component``) to every record."""

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra") if isinstance(kwargs.get("extra"), dict) else {}
        structured: Dict[str, Any] = dict(self.extra or {})
        supplied = extra.get("structured_data")
        if isinstance(supplied, Mapping):
            structured.update(supplied)
        kwargs["extra"] = {**extra, "structured_data": structured}
        return msg, kwargs


def configure_logging(*, environment: str = "dev") -> None:
    """Install the JSON handler on the root logger once.

    ``dev`` and ``test`` log at DEBUG; every other environment at INFO.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_ATTR, False):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if environment in ("dev", "test") else logging.INFO)
    setattr(root, _CONFIGURED_ATTR, True)


def get_logger(name: str, **defaults: Any) -> StructuredAdapter:
    return StructuredAdapter(logging.getLogger(name), defaults)


def current_correlation_id() -> str | None:
    return _CORRELATION_ID.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id (generated when missing) for the enclosed block."""
    cid = correlation_id or str(uuid4())
    token = _CORRELATION_ID.set(cid)
    try:
        yield cid
    finally:
        _CORRELATION_ID.reset(token)


__all__ = [
    "JsonFormatter",
    "StructuredAdapter",
    "configure_logging",
    "correlation_context",
    "current_correlation_id",
    "get_logger",
]
