from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from psiconorm.core.errors import DomainError
from psiconorm.core.logging import current_correlation_id, get_logger

logger = get_logger("psiconorm.routers.exceptions", component="api")


def register_exception_handlers(app: FastAPI) -> None:
    """Register shared HTTP translators for domain-layer exceptions."""

    @app.exception_handler(DomainError)
    async def _handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        if isinstance(exc.detail, dict):
            detail_payload: dict[str, Any] = {"message": exc.message, "fields": {**exc.detail}}
        elif exc.detail is not None:
            detail_payload = {"message": exc.message, "extra": exc.detail}
        else:
            detail_payload = {"message": exc.message}
        payload: dict[str, Any] = {
            "error": exc.error_code,
            "detail": detail_payload,
        }
        correlation_id = current_correlation_id()
        if correlation_id:
            payload["correlation_id"] = correlation_id
        status_code = getattr(exc, "status_code", 400)
        logger.info(
            "domain_error",
            extra={"structured_data": {"path": request.url.path, "error": exc.error_code, "status": status_code}},
        )
        return JSONResponse(status_code=status_code, content=payload)
