"""Pure raw score calculations detached from I/O concerns.

Every function here is deterministic and side-effect free. Inputs are
expected to be validated already (see :mod:`psiconorm.assessments.validators`);
the graphomotor helpers still guard their own preconditions because they
are also called directly by tooling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence, Tuple

from psiconorm.assessments.constants import (
    EMOTIVITY_INDICATORS,
    EMOTIVITY_MAX,
    PALOGRAPHIC_INTERVAL_COUNT,
)
from psiconorm.core.errors import ValidationError
from psiconorm.core.numeric import clamp, safe_div, safe_round
from psiconorm.assessments.types import AttentionBatteryScores, PalographicMetrics, StrokeSizeSummary

if TYPE_CHECKING:  # pragma: no cover - typing only
    from psiconorm.assessments.validators import PalographicInput

__all__ = [
    "error_adjusted_score",
    "attention_battery_scores",
    "recognition_memory_score",
    "percent_of_maximum",
    "productivity",
    "oscillation_index",
    "stroke_size_summary",
    "mean_stroke_distance",
    "impulsivity_index",
    "emotivity_index",
    "inclination_label",
    "margin_label",
    "organization_label",
    "derive_palographic_metrics",
]


def error_adjusted_score(correct: int, errors: int = 0, omissions: int = 0) -> int:
    """Subtractive attention score: ``correct - (errors + omissions)``.

    Used by the concentration test, each attention battery subscale, each
    route of the route attention test and the visual memory test. The
    result may be negative; callers decide how to report that.

    Example:
        >>> error_adjusted_score(120, 5, 3)
        112
    """
    return int(correct) - (int(errors) + int(omissions))


def attention_battery_scores(alternating: int, concentrated: int, divided: int) -> AttentionBatteryScores:
    """Bundle the three battery subscales and derive the general score.

    The general score is the plain sum of the subscale raws; it is never
    accepted from the caller.
    """
    return AttentionBatteryScores(
        alternating=int(alternating),
        concentrated=int(concentrated),
        divided=int(divided),
        general=int(alternating) + int(concentrated) + int(divided),
    )


def recognition_memory_score(
    true_positives: int,
    true_negatives: int,
    false_negatives: int,
    false_positives: int,
) -> int:
    """Recognition memory efficiency: hits and correct rejections minus misses and false alarms."""
    return int(true_positives) + int(true_negatives) - int(false_negatives) - int(false_positives)


def percent_of_maximum(correct: int, item_count: int) -> float:
    """Share of items answered correctly, as a percentage with two decimals."""
    return safe_round(safe_div(float(correct) * 100.0, float(item_count)), 2)


# ---------------------------------------------------------------------------
# Graphomotor (palographic) metrics
# ---------------------------------------------------------------------------


def _check_intervals(intervals: Sequence[int | float]) -> None:
    if len(intervals) != PALOGRAPHIC_INTERVAL_COUNT:
        raise ValidationError(
            detail={"intervals": f"são necessários exatamente {PALOGRAPHIC_INTERVAL_COUNT} intervalos"}
        )
    for index, value in enumerate(intervals):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value or value < 0:
            raise ValidationError(detail={f"intervals.{index}": "valor deve ser numérico e não negativo"})


def productivity(intervals: Sequence[int | float]) -> int:
    """Total strokes across the five timed intervals."""
    _check_intervals(intervals)
    return int(sum(intervals))


def oscillation_index(intervals: Sequence[int | float]) -> float:
    """Rhythm oscillation (NOR).

    Sum of absolute differences between consecutive intervals, times 100,
    over total productivity; one decimal, half-up. Zero productivity yields 0.

    Example:
        >>> oscillation_index([120, 130, 125, 125, 100])
        6.7
    """
    _check_intervals(intervals)
    total = sum(intervals)
    if total == 0:
        return 0.0
    deltas = sum(abs(intervals[index] - intervals[index - 1]) for index in range(1, len(intervals)))
    return safe_round(deltas * 100.0 / total, 1)


def stroke_size_summary(larger: Sequence[float], smaller: Sequence[float]) -> StrokeSizeSummary:
    """Aggregate measured stroke heights (mm) of the largest and smallest strokes."""
    if not larger or not smaller:
        raise ValidationError(detail={"strokes": "medidas dos maiores e menores palos são obrigatórias"})
    for label, values in (("larger_strokes", larger), ("smaller_strokes", smaller)):
        if any(value < 0 for value in values):
            raise ValidationError(detail={label: "medidas não podem ser negativas"})
    larger_mean = sum(larger) / len(larger)
    smaller_mean = sum(smaller) / len(smaller)
    return StrokeSizeSummary(
        larger_mean=safe_round(larger_mean, 1),
        smaller_mean=safe_round(smaller_mean, 1),
        mean=safe_round((larger_mean + smaller_mean) / 2.0, 1),
        max_stroke=float(max(larger)),
        min_stroke=float(min(smaller)),
    )


def mean_stroke_distance(total_distance: float, total_strokes: int) -> float:
    """Mean inter-stroke distance in mm, two decimals."""
    if total_distance < 0:
        raise ValidationError(detail={"total_distance": "distância não pode ser negativa"})
    if total_strokes <= 0:
        raise ValidationError(detail={"total_strokes": "total de palos deve ser maior que zero"})
    return safe_round(total_distance / total_strokes, 2)


def impulsivity_index(max_stroke: float, min_stroke: float) -> float:
    """Spread between the tallest and shortest stroke, one decimal."""
    if max_stroke < 0 or min_stroke < 0:
        raise ValidationError(detail={"strokes": "medidas não podem ser negativas"})
    return safe_round(max_stroke - min_stroke, 1)


def emotivity_index(flags: Mapping[str, bool]) -> int:
    """Count irregularity indicators flagged true; unknown keys are ignored."""
    hits = sum(1 for indicator in EMOTIVITY_INDICATORS if flags.get(indicator) is True)
    return clamp(hits, 0, EMOTIVITY_MAX)


def inclination_label(degrees: float) -> str:
    if degrees > 70:
        return "Direita"
    if degrees < 30:
        return "Esquerda"
    return "Vertical"


def margin_label(millimetres: float) -> str:
    if millimetres > 20:
        return "Ampla"
    if millimetres < 10:
        return "Estreita"
    return "Normal"


def organization_label(percentage: float) -> str:
    if percentage > 80:
        return "Ordenada"
    if percentage < 40:
        return "Desorganizada"
    return "Normal"


def derive_palographic_metrics(sheet: "PalographicInput") -> Tuple[PalographicMetrics, StrokeSizeSummary | None]:
    """Compute the six graphomotor metrics from a validated sheet.

    Values supplied directly on the sheet take precedence over values that
    would be derived from intervals or stroke measurements.
    """
    summary: StrokeSizeSummary | None = None
    if sheet.larger_strokes is not None and sheet.smaller_strokes is not None:
        summary = stroke_size_summary(sheet.larger_strokes, sheet.smaller_strokes)

    if sheet.productivity is not None:
        total = int(sheet.productivity)
    else:
        total = productivity(sheet.intervals or [])

    if sheet.oscillation is not None:
        nor: float | None = float(sheet.oscillation)
    elif sheet.intervals is not None:
        nor = oscillation_index(sheet.intervals)
    else:
        nor = None

    if sheet.stroke_size is not None:
        size: float | None = float(sheet.stroke_size)
    else:
        size = summary.mean if summary is not None else None

    if sheet.stroke_distance is not None:
        distance: float | None = float(sheet.stroke_distance)
    elif sheet.total_distance is not None:
        distance = mean_stroke_distance(sheet.total_distance, total)
    else:
        distance = None

    max_stroke = sheet.max_stroke if sheet.max_stroke is not None else (summary.max_stroke if summary else None)
    min_stroke = sheet.min_stroke if sheet.min_stroke is not None else (summary.min_stroke if summary else None)
    if sheet.impulsivity is not None:
        impulsivity: float | None = float(sheet.impulsivity)
    elif max_stroke is not None and min_stroke is not None:
        impulsivity = impulsivity_index(max_stroke, min_stroke)
    else:
        impulsivity = None

    if sheet.emotivity is not None:
        emotivity: int | None = int(sheet.emotivity)
    elif sheet.emotivity_flags is not None:
        emotivity = emotivity_index(sheet.emotivity_flags)
    else:
        emotivity = None

    metrics = PalographicMetrics(
        productivity=total,
        oscillation=nor,
        stroke_size=size,
        stroke_distance=distance,
        impulsivity=impulsivity,
        emotivity=emotivity,
    )
    return metrics, summary
