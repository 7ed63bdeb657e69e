from __future__ import annotations

from dataclasses import dataclass, field, replace
from itertools import count
from typing import Dict, Iterator, List

from psiconorm.assessments.enums import InstrumentType
from psiconorm.db.repositories.normative import (
    CriterionFilter,
    NormativeRowRecord,
    NormativeTableRecord,
)


@dataclass
class InMemoryNormativeStore:
    """Dictionary-backed store used by tests and offline tooling.

    Ids are assigned in insertion order so "ascending id" semantics match
    the SQL repository.
    """

    tables: Dict[int, NormativeTableRecord] = field(default_factory=dict)
    rows: Dict[int, List[NormativeRowRecord]] = field(default_factory=dict)
    _table_ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)
    _row_ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)

    def add_table(
        self,
        name: str,
        instrument: InstrumentType | str,
        *,
        version: str = "1.0",
        criterion: str | None = None,
        criterion_value: str | None = None,
        subscale: str | None = None,
        is_generic: bool = False,
        description: str | None = None,
        active: bool = True,
    ) -> NormativeTableRecord:
        table_id = next(self._table_ids)
        record = NormativeTableRecord(
            table_id=table_id,
            name=name,
            instrument=instrument.value if isinstance(instrument, InstrumentType) else str(instrument),
            version=version,
            criterion=criterion,
            criterion_value=criterion_value,
            subscale=subscale,
            is_generic=is_generic,
            description=description,
            active=active,
        )
        self.tables[table_id] = record
        self.rows.setdefault(table_id, [])
        return record

    def add_row(
        self,
        table_id: int,
        lower_bound: float,
        upper_bound: float | None,
        percentile: int,
        classification: str,
        *,
        subscale: str | None = None,
        criterion_value: str | None = None,
    ) -> NormativeRowRecord:
        if table_id not in self.tables:
            raise KeyError(f"unknown table id {table_id}")
        record = NormativeRowRecord(
            row_id=next(self._row_ids),
            table_id=table_id,
            subscale=subscale,
            lower_bound=float(lower_bound),
            upper_bound=float(upper_bound) if upper_bound is not None else None,
            percentile=int(percentile),
            classification=classification,
            criterion_value=criterion_value,
        )
        self.rows[table_id].append(record)
        return record

    def deactivate(self, table_id: int) -> None:
        self.tables[table_id] = replace(self.tables[table_id], active=False)

    def list_active_tables(
        self,
        instrument: InstrumentType | str,
        criterion_filter: CriterionFilter | None = None,
    ) -> List[NormativeTableRecord]:
        tag = instrument.value if isinstance(instrument, InstrumentType) else str(instrument)
        selected = [
            table
            for table in self.tables.values()
            if table.instrument == tag and table.active
            and (criterion_filter is None or criterion_filter.matches(table))
        ]
        return sorted(selected, key=lambda table: table.table_id)

    def list_rows(self, table_id: int, subscale: str | None = None) -> List[NormativeRowRecord]:
        rows = self.rows.get(table_id, [])
        if subscale is not None:
            rows = [row for row in rows if row.subscale == subscale]
        return sorted(rows, key=lambda row: row.row_id)


__all__ = ["InMemoryNormativeStore"]
