"""Centralized constants for raw score calculation and normative lookup.

All constants are immutable (Final) to prevent accidental modification.
"""

from __future__ import annotations

from typing import Final, Tuple

__all__ = [
    "OPEN_UPPER_BOUND",
    "TOTAL_SAMPLE",
    "GENERIC_TABLE_LABELS",
    "MATRIX_REASONING_ITEMS",
    "VERBAL_REASONING_ITEMS",
    "GENERAL_REASONING_ITEMS",
    "PALOGRAPHIC_INTERVAL_COUNT",
    "EMOTIVITY_INDICATORS",
    "EMOTIVITY_MAX",
    "CLASSIFICATION_LADDER",
    "PRODUCTIVITY_BANDS",
    "OSCILLATION_BANDS",
    "STROKE_SIZE_BANDS",
    "STROKE_DISTANCE_BANDS",
]

# =============================================================================
# Normative rows
# =============================================================================

OPEN_UPPER_BOUND: Final[int] = 999
"""Upper bound stored on the last band of a table meaning "and above"."""

TOTAL_SAMPLE: Final[str] = "Amostra Total"
"""Row criterion value used for the undifferentiated normative sample."""

GENERIC_TABLE_LABELS: Final[Tuple[str, ...]] = ("Geral", "População Brasileira", "Amostra Total")
"""Criterion values that identify a generic table when no flag is stored."""

CLASSIFICATION_LADDER: Final[Tuple[str, ...]] = (
    "Muito inferior",
    "Inferior",
    "Médio inferior",
    "Médio",
    "Médio superior",
    "Superior",
    "Muito superior",
)
"""Qualitative classification labels from lowest to highest."""

# =============================================================================
# Reasoning instruments
# =============================================================================

MATRIX_REASONING_ITEMS: Final[int] = 25
"""Number of items in the BETA-III matrix reasoning subtest."""

VERBAL_REASONING_ITEMS: Final[int] = 40
"""Number of items in the R-1 form."""

GENERAL_REASONING_ITEMS: Final[int] = 28
"""Number of items in the MIG form."""

# =============================================================================
# Palographic
# =============================================================================

PALOGRAPHIC_INTERVAL_COUNT: Final[int] = 5
"""The palographic sheet is timed in five one-minute intervals."""

EMOTIVITY_INDICATORS: Final[Tuple[str, ...]] = (
    "inclinacao",
    "pressao",
    "tamanho",
    "distancia_palos",
    "generalizadas",
    "distancia_linhas",
    "alinhamento",
    "ganchos",
)
"""Irregularity indicators counted by the emotivity index."""

EMOTIVITY_MAX: Final[int] = len(EMOTIVITY_INDICATORS)

# Band ladders, highest band first. Each entry is (label, rank); rank is the
# value stored in the percentile column of graphomotor rows.
PRODUCTIVITY_BANDS: Final[Tuple[Tuple[str, int], ...]] = (
    ("Muito Alta", 5),
    ("Alta", 4),
    ("Média", 3),
    ("Baixa", 2),
    ("Muito Baixa", 1),
)

OSCILLATION_BANDS: Final[Tuple[Tuple[str, int], ...]] = (
    ("Muito Alto", 5),
    ("Alto", 4),
    ("Médio", 3),
    ("Baixo", 2),
    ("Muito Baixo", 1),
)

STROKE_SIZE_BANDS: Final[Tuple[Tuple[str, int], ...]] = (
    ("Muito Grande", 5),
    ("Grande", 4),
    ("Médio", 3),
    ("Pequeno", 2),
    ("Muito Pequeno", 1),
)

STROKE_DISTANCE_BANDS: Final[Tuple[Tuple[str, int], ...]] = (
    ("Muito Ampla", 5),
    ("Ampla", 4),
    ("Normal", 3),
    ("Estreita", 2),
    ("Muito Estreita", 1),
)
