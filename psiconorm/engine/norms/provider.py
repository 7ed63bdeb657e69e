from __future__ import annotations

from typing import Optional, Protocol, Sequence

from psiconorm.db.repositories.normative import NormativeRowRecord


class RowMatchStrategy(Protocol):
    """Protocol for one step of the row matching chain.

    A strategy receives every row of a table/subscale, the raw score and the
    requested row criterion values in preference order, and returns the
    single row it selects or ``None`` to defer to the next strategy.

    Strategy names double as provenance labels on the lookup result:
    - "exact" (row criterion equals one of the requested values)
    - "total_sample" (row belongs to the undifferentiated sample)
    - "any_row" (any band containing the score)
    """

    name: str

    def match(
        self,
        rows: Sequence[NormativeRowRecord],
        raw: int | float,
        criterion_values: Sequence[str | int],
    ) -> Optional[NormativeRowRecord]:
        ...
