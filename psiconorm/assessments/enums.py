"""Enums for instrument tags, criterion dimensions and subscale tags.

The string values are the tags persisted in ``normative_tables`` and
``normative_rows``; changing one means migrating stored data.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "InstrumentType",
    "CriterionDimension",
    "AttentionSubscale",
    "AttentionRoute",
    "PalographicMetric",
    "EvaluationContext",
]


class InstrumentType(str, Enum):
    """Instrument tags understood by the scoring engine."""

    ATTENTION_CONCENTRATION = "ac"
    """Concentrated attention test (AC)."""

    ATTENTION_BATTERY = "bpa2"
    """Psychological attention battery (BPA-2) with a general composite."""

    ROUTE_ATTENTION = "rotas"
    """Route attention test (Rotas A/D/C), no general composite."""

    RECOGNITION_MEMORY = "memore"
    """Recognition memory test (MEMORE)."""

    MATRIX_REASONING = "beta_iii"
    """Non-verbal matrix reasoning (BETA-III)."""

    VISUAL_MEMORY = "mvt"
    """Visual memory for traffic (MVT)."""

    VERBAL_REASONING = "r1"
    """Non-verbal intelligence form R-1."""

    GENERAL_REASONING = "mig"
    """General intelligence measure (MIG)."""

    PALOGRAPHIC = "palografico"
    """Graphomotor palographic test."""


class CriterionDimension(str, Enum):
    """Demographic axis a normative table is stratified by."""

    REGION = "region"
    EDUCATION = "education"
    AGE = "age"
    SEX = "sex"
    CONTEXT = "context"


class AttentionSubscale(str, Enum):
    """Subscales of the attention battery."""

    ALTERNATING = "alternada"
    CONCENTRATED = "concentrada"
    DIVIDED = "dividida"
    GENERAL = "geral"


class AttentionRoute(str, Enum):
    """Routes of the route attention test."""

    ALTERNATING = "A"
    DIVIDED = "D"
    CONCENTRATED = "C"


class PalographicMetric(str, Enum):
    """Derived graphomotor metrics, also used as row subscale tags."""

    PRODUCTIVITY = "produtividade"
    OSCILLATION = "nor"
    STROKE_SIZE = "tamanho"
    STROKE_DISTANCE = "distancia"
    IMPULSIVITY = "impulsividade"
    EMOTIVITY = "emotividade"


class EvaluationContext(str, Enum):
    """Purpose of the evaluation, drives the graphomotor summary wording."""

    TRAFFIC = "transito"
    OCCUPATIONAL = "rh"
    CLINICAL = "clinico"
