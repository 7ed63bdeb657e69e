from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from psiconorm.assessments.enums import EvaluationContext, InstrumentType


@dataclass(frozen=True, slots=True)
class SubscaleResult:
    """Normative outcome for one subscale, route or graphomotor metric."""

    subscale: str
    raw_score: Optional[int | float]
    percentile: Optional[int]
    classification: str
    table_id: Optional[int] = None
    provenance: str = "none"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "subscale": self.subscale,
            "raw_score": self.raw_score,
            "percentile": self.percentile,
            "classification": str(self.classification),
            "table_id": self.table_id,
            "provenance": self.provenance,
        }


@dataclass(frozen=True, slots=True)
class MetricInterpretation:
    value: Optional[int | float]
    classification: str
    text: str

    def as_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "classification": str(self.classification), "text": self.text}


@dataclass(frozen=True, slots=True)
class PalographicInterpretation:
    """Qualitative reading of the graphomotor metrics."""

    context: EvaluationContext
    metrics: Mapping[str, MetricInterpretation]
    graphic_environment: str
    summary: str
    qualitative: Mapping[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "context": self.context.value,
            "metrics": {name: item.as_dict() for name, item in self.metrics.items()},
            "graphic_environment": self.graphic_environment,
            "summary": self.summary,
            "qualitative": dict(self.qualitative),
        }


@dataclass(frozen=True, slots=True)
class ScoreResult:
    """Outcome of scoring one instrument administration.

    ``percentile`` and ``classification`` describe the headline scale: the
    single scale of simple instruments, the general composite of the
    attention battery, productivity for the palographic test. Route
    attention has no headline percentile.
    """

    instrument: InstrumentType
    raw_scores: Mapping[str, Optional[int | float]]
    percentile: Optional[int]
    classification: str
    resolved_table_id: Optional[int]
    subscales: Mapping[str, SubscaleResult] = field(default_factory=dict)
    display_percentage: Optional[float] = None
    interpretation: Optional[PalographicInterpretation] = None
    warnings: Tuple[str, ...] = ()
    suggestions: Tuple[int, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "instrument": self.instrument.value,
            "raw_scores": dict(self.raw_scores),
            "percentile": self.percentile,
            "classification": str(self.classification),
            "resolved_table_id": self.resolved_table_id,
            "subscales": {tag: item.as_dict() for tag, item in self.subscales.items()},
            "display_percentage": self.display_percentage,
            "interpretation": self.interpretation.as_dict() if self.interpretation else None,
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
        }


__all__ = [
    "MetricInterpretation",
    "PalographicInterpretation",
    "ScoreResult",
    "SubscaleResult",
]
