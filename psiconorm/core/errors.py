from __future__ import annotations

"""Domain-specific exception hierarchy for the normative scoring engine."""

from typing import Any

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "InstrumentNotFoundError",
    "NormativeTableNotFoundError",
    "NormativeStoreUnavailableError",
    "ConfigurationError",
]


class DomainError(Exception):
    """Base class for recoverable domain-level errors."""

    status_code: int = 400
    error_code: str = "domain_error"
    default_message: str = "Erro de domínio"

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        final_message = message or self.default_message
        super().__init__(final_message)
        self.message = final_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DomainError, ValueError):
    """Raised when raw test inputs fail validation.

    ``detail`` carries a mapping of field path to message so callers can point
    at the offending input.
    """

    error_code = "validation_error"
    default_message = "Dados de entrada inválidos"
    status_code = 400


class NotFoundError(DomainError):
    """Base class for missing domain resources."""

    error_code = "not_found"
    status_code = 404
    default_message = "Recurso não encontrado"


class InstrumentNotFoundError(NotFoundError):
    """Raised when an instrument tag is not registered."""

    error_code = "instrument_not_found"
    default_message = "Instrumento não encontrado"


class NormativeTableNotFoundError(NotFoundError):
    """Raised when an explicitly requested normative table does not exist."""

    error_code = "normative_table_not_found"
    default_message = "Tabela normativa não encontrada"


class NormativeStoreUnavailableError(DomainError):
    """Raised by store implementations when a read cannot be served."""

    error_code = "normative_store_unavailable"
    status_code = 503
    default_message = "Base normativa indisponível"


class ConfigurationError(DomainError):
    """Raised when server-side configuration is invalid or incomplete."""

    error_code = "configuration_error"
    status_code = 500
    default_message = "Configuração do sistema inválida"
