from __future__ import annotations


class SentinelStr(str):
    """String-like sentinel that retains identity semantics."""

    __slots__ = ()

    def __new__(cls, label: str):
        return super().__new__(cls, label)

    def __repr__(self) -> str:  # pragma: no cover - repr logic trivial
        return f"<Sentinel:{super().__str__()}>"


NO_NORMATIVE_TABLE = SentinelStr("Tabela normativa não disponível")
OUT_OF_NORMATIVE_RANGE = SentinelStr("Fora da faixa normativa")
NORMATIVE_LOOKUP_FAILED = SentinelStr("Erro ao buscar tabela normativa")
INVALID_RESULT = SentinelStr("Resultado inválido")
NOT_APPLICABLE = SentinelStr("Não se aplica")

CLASSIFICATION_SENTINELS = frozenset(
    {
        NO_NORMATIVE_TABLE,
        OUT_OF_NORMATIVE_RANGE,
        NORMATIVE_LOOKUP_FAILED,
        INVALID_RESULT,
        NOT_APPLICABLE,
    }
)


def is_sentinel(value: object) -> bool:
    """Return True when ``value`` is one of the classification sentinels."""

    return isinstance(value, str) and value in CLASSIFICATION_SENTINELS


__all__ = [
    "SentinelStr",
    "NO_NORMATIVE_TABLE",
    "OUT_OF_NORMATIVE_RANGE",
    "NORMATIVE_LOOKUP_FAILED",
    "INVALID_RESULT",
    "NOT_APPLICABLE",
    "CLASSIFICATION_SENTINELS",
    "is_sentinel",
]
