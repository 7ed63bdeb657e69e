"""Compose per-scale lookups into :class:`ScoreResult` objects.

The assembler owns the rules that relate scales to each other: the
attention battery's general score is the sum of its subscales and is
classified on its own table, route attention has no composite, and the
palographic headline is productivity.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from psiconorm.assessments.enums import AttentionSubscale, InstrumentType, PalographicMetric
from psiconorm.assessments.types import AttentionBatteryScores, PalographicMetrics
from psiconorm.core.sentinels import NOT_APPLICABLE
from psiconorm.engine.norms.value_objects import TableResolution
from psiconorm.engine.results import PalographicInterpretation, ScoreResult, SubscaleResult
from psiconorm.i18n.pt_messages import WarningMessages

__all__ = [
    "general_score_warnings",
    "assemble_single",
    "assemble_attention_battery",
    "assemble_route_attention",
    "assemble_palographic",
]


def _table_id(resolution: Optional[TableResolution]) -> Optional[int]:
    return resolution.table_id if resolution is not None else None


def _suggestions(resolution: Optional[TableResolution]) -> tuple[int, ...]:
    return resolution.candidates if resolution is not None else ()


def general_score_warnings(scores: AttentionBatteryScores, supplied_general: Optional[int]) -> List[str]:
    """Warn when a caller-supplied general score disagrees with the subscale sum."""
    if supplied_general is None or int(supplied_general) == scores.general:
        return []
    return [WarningMessages.GENERAL_SCORE_RECOMPUTED.format(supplied=supplied_general, computed=scores.general)]


def assemble_single(
    instrument: InstrumentType,
    result: SubscaleResult,
    resolution: Optional[TableResolution],
    warnings: Sequence[str],
    *,
    display_percentage: Optional[float] = None,
) -> ScoreResult:
    return ScoreResult(
        instrument=instrument,
        raw_scores={result.subscale: result.raw_score},
        percentile=result.percentile,
        classification=result.classification,
        resolved_table_id=result.table_id if result.table_id is not None else _table_id(resolution),
        display_percentage=display_percentage,
        warnings=tuple(warnings),
        suggestions=_suggestions(resolution),
    )


def assemble_attention_battery(
    scores: AttentionBatteryScores,
    results: Mapping[str, SubscaleResult],
    resolution: Optional[TableResolution],
    warnings: Sequence[str],
) -> ScoreResult:
    general = results[AttentionSubscale.GENERAL.value]
    return ScoreResult(
        instrument=InstrumentType.ATTENTION_BATTERY,
        raw_scores=scores.as_dict(),
        percentile=general.percentile,
        classification=general.classification,
        resolved_table_id=_table_id(resolution),
        subscales=dict(results),
        warnings=tuple(warnings),
        suggestions=_suggestions(resolution),
    )


def assemble_route_attention(
    raws: Mapping[str, int],
    results: Mapping[str, SubscaleResult],
    resolution: Optional[TableResolution],
    warnings: Sequence[str],
) -> ScoreResult:
    # No composite exists; only a shared "no table"/"lookup failed" state is surfaced.
    classifications = {item.classification for item in results.values()}
    if resolution is None and len(classifications) == 1:
        headline = classifications.pop()
    else:
        headline = NOT_APPLICABLE
    return ScoreResult(
        instrument=InstrumentType.ROUTE_ATTENTION,
        raw_scores=dict(raws),
        percentile=None,
        classification=headline,
        resolved_table_id=_table_id(resolution),
        subscales=dict(results),
        warnings=tuple(warnings),
        suggestions=_suggestions(resolution),
    )


def assemble_palographic(
    metrics: PalographicMetrics,
    results: Mapping[str, SubscaleResult],
    interpretation: PalographicInterpretation,
    resolution: Optional[TableResolution],
    warnings: Sequence[str],
) -> ScoreResult:
    headline = results[PalographicMetric.PRODUCTIVITY.value]
    return ScoreResult(
        instrument=InstrumentType.PALOGRAPHIC,
        raw_scores=metrics.as_dict(),
        percentile=None,
        classification=headline.classification,
        resolved_table_id=_table_id(resolution),
        subscales=dict(results),
        interpretation=interpretation,
        warnings=tuple(warnings),
        suggestions=_suggestions(resolution),
    )
