from __future__ import annotations

from typing import List, Protocol

from psiconorm.assessments.enums import InstrumentType
from psiconorm.db.repositories.normative import (
    CriterionFilter,
    NormativeRowRecord,
    NormativeTableRecord,
)


class NormativeStore(Protocol):
    """Read-only access to normative tables consumed by the scoring engine.

    Implementations raise ``NormativeStoreUnavailableError`` when a read
    cannot be served; they never return partial data.
    """

    def list_active_tables(
        self,
        instrument: InstrumentType | str,
        criterion_filter: CriterionFilter | None = None,
    ) -> List[NormativeTableRecord]:
        ...

    def list_rows(self, table_id: int, subscale: str | None = None) -> List[NormativeRowRecord]:
        ...
