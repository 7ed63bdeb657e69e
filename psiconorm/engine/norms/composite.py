from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from psiconorm.assessments.constants import TOTAL_SAMPLE
from psiconorm.core.metrics import count_calls
from psiconorm.db.repositories.normative import NormativeRowRecord
from psiconorm.engine.norms.criteria import criterion_matches, fold
from psiconorm.engine.norms.provider import RowMatchStrategy

_TOTAL_SAMPLE_KEY = fold(TOTAL_SAMPLE)


def pick_row(candidates: Iterable[NormativeRowRecord]) -> Optional[NormativeRowRecord]:
    """Tie-break among containing rows: highest percentile, then lowest row id."""
    best: Optional[NormativeRowRecord] = None
    for row in candidates:
        if best is None or (row.percentile, -row.row_id) > (best.percentile, -best.row_id):
            best = row
    return best


def _is_total_sample(row: NormativeRowRecord) -> bool:
    return row.criterion_value is None or fold(row.criterion_value) == _TOTAL_SAMPLE_KEY


class ExactCriterionStrategy:
    """Rows stratified by one of the requested criterion values.

    Values are tried in order; the first one with a containing row wins, so
    an age that matches no stratum does not hide the education stratum.
    """

    name = "exact"

    @count_calls("norms.strategy.exact.calls")
    def match(
        self,
        rows: Sequence[NormativeRowRecord],
        raw: int | float,
        criterion_values: Sequence[str | int],
    ) -> Optional[NormativeRowRecord]:
        for requested in criterion_values:
            if isinstance(requested, str) and fold(requested) == _TOTAL_SAMPLE_KEY:
                continue
            found = pick_row(
                row
                for row in rows
                if criterion_matches(row.criterion_value, requested) and row.contains(raw)
            )
            if found is not None:
                return found
        return None


class TotalSampleStrategy:
    """Rows of the total normative sample, or rows with no stratification."""

    name = "total_sample"

    @count_calls("norms.strategy.total_sample.calls")
    def match(
        self,
        rows: Sequence[NormativeRowRecord],
        raw: int | float,
        criterion_values: Sequence[str | int],
    ) -> Optional[NormativeRowRecord]:
        return pick_row(row for row in rows if _is_total_sample(row) and row.contains(raw))


class AnyRowStrategy:
    """Last resort: any band of the table containing the score."""

    name = "any_row"

    @count_calls("norms.strategy.any_row.calls")
    def match(
        self,
        rows: Sequence[NormativeRowRecord],
        raw: int | float,
        criterion_values: Sequence[str | int],
    ) -> Optional[NormativeRowRecord]:
        return pick_row(row for row in rows if row.contains(raw))


class CompositeRowMatcher:
    """Chain of responsibility over row match strategies.

    The first strategy returning a row wins; the default order is exact
    criterion, total sample, then any row.
    """

    strategies: List[RowMatchStrategy]

    def __init__(self, strategies: Sequence[RowMatchStrategy] | None = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()

    def match(
        self,
        rows: Sequence[NormativeRowRecord],
        raw: int | float,
        criterion_values: Sequence[str | int] = (),
    ) -> Tuple[Optional[NormativeRowRecord], str]:
        for strategy in self.strategies:
            row = strategy.match(rows, raw, criterion_values)
            if row is not None:
                return row, strategy.name
        return None, "none"


def default_strategies() -> List[RowMatchStrategy]:
    return [ExactCriterionStrategy(), TotalSampleStrategy(), AnyRowStrategy()]


__all__ = [
    "AnyRowStrategy",
    "CompositeRowMatcher",
    "ExactCriterionStrategy",
    "TotalSampleStrategy",
    "default_strategies",
    "pick_row",
]
