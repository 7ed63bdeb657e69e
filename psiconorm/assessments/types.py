from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AttentionBatteryScores:
    """Raw subscale scores of the attention battery.

    ``general`` is always the sum of the three subscales; it is computed by
    :func:`psiconorm.assessments.calculations.attention_battery_scores` and
    never taken from caller input.
    """

    alternating: int
    concentrated: int
    divided: int
    general: int

    def as_dict(self) -> dict[str, int]:
        return {
            "alternada": self.alternating,
            "concentrada": self.concentrated,
            "dividida": self.divided,
            "geral": self.general,
        }


@dataclass(frozen=True, slots=True)
class StrokeSizeSummary:
    """Stroke height aggregates in millimetres."""

    larger_mean: float
    smaller_mean: float
    mean: float
    max_stroke: float
    min_stroke: float


@dataclass(frozen=True, slots=True)
class PalographicMetrics:
    """The six derived graphomotor metrics.

    Metrics that could not be derived from the supplied inputs are ``None``.
    """

    productivity: int
    oscillation: float | None
    stroke_size: float | None
    stroke_distance: float | None
    impulsivity: float | None
    emotivity: int | None

    def as_dict(self) -> dict[str, int | float | None]:
        return {
            "produtividade": self.productivity,
            "nor": self.oscillation,
            "tamanho": self.stroke_size,
            "distancia": self.stroke_distance,
            "impulsividade": self.impulsivity,
            "emotividade": self.emotivity,
        }
