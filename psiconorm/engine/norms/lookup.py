from __future__ import annotations

from typing import Optional, Sequence

from psiconorm.core.errors import NormativeStoreUnavailableError
from psiconorm.core.logging import get_logger
from psiconorm.core.metrics import count_calls, measure_time
from psiconorm.core.sentinels import (
    NO_NORMATIVE_TABLE,
    NORMATIVE_LOOKUP_FAILED,
    OUT_OF_NORMATIVE_RANGE,
)
from psiconorm.db.repositories.protocols import NormativeStore
from psiconorm.engine.norms.composite import CompositeRowMatcher
from psiconorm.engine.norms.value_objects import LookupResult

logger = get_logger("psiconorm.engine.norms.lookup", component="norms")


class PercentileLookup:
    """Map a raw score to (percentile, classification) within one table.

    Never raises for data problems: an empty table/subscale reports
    "no normative table", a score outside every band reports "out of
    range" and a failed row read reports a lookup error sentinel.
    """

    def __init__(self, store: NormativeStore, matcher: CompositeRowMatcher | None = None):
        self.store = store
        self.matcher = matcher or CompositeRowMatcher()

    @count_calls("norms.lookup.calls")
    @measure_time("norms.lookup")
    def lookup(
        self,
        table_id: int,
        subscale: Optional[str],
        criterion_values: Sequence[str | int],
        raw: int | float,
    ) -> LookupResult:
        try:
            rows = self.store.list_rows(table_id, subscale)
        except NormativeStoreUnavailableError as exc:
            logger.warning(
                "norm_rows_unavailable",
                extra={"structured_data": {"table_id": table_id, "subscale": subscale, "error": exc.message}},
            )
            return LookupResult(None, NORMATIVE_LOOKUP_FAILED, provenance="error")
        if not rows:
            return LookupResult(None, NO_NORMATIVE_TABLE, provenance="empty")
        row, provenance = self.matcher.match(rows, raw, criterion_values)
        if row is None:
            logger.debug(
                "norm_score_out_of_range",
                extra={"structured_data": {"table_id": table_id, "subscale": subscale, "raw": raw}},
            )
            return LookupResult(None, OUT_OF_NORMATIVE_RANGE, provenance=provenance)
        return LookupResult(row.percentile, row.classification, row.row_id, provenance)


__all__ = ["PercentileLookup"]
