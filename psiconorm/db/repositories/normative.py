from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from psiconorm.assessments.constants import OPEN_UPPER_BOUND
from psiconorm.assessments.enums import InstrumentType
from psiconorm.db.repositories.base import Repository
from psiconorm.models import NormativeRow, NormativeTable


@dataclass(frozen=True, slots=True)
class NormativeTableRecord:
    """Read-only view of a normative table's metadata."""

    table_id: int
    name: str
    instrument: str
    version: str
    criterion: str | None
    criterion_value: str | None
    subscale: str | None
    is_generic: bool
    description: str | None
    active: bool = True

    def as_dict(self) -> dict[str, object]:
        return {
            "id": self.table_id,
            "name": self.name,
            "instrument": self.instrument,
            "version": self.version,
            "criterion": self.criterion,
            "criterion_value": self.criterion_value,
            "subscale": self.subscale,
            "is_generic": self.is_generic,
            "description": self.description,
            "active": self.active,
        }


@dataclass(frozen=True, slots=True)
class NormativeRowRecord:
    """One percentile band of a normative table."""

    row_id: int
    table_id: int
    subscale: str | None
    lower_bound: float
    upper_bound: float | None
    percentile: int
    classification: str
    criterion_value: str | None = None

    @property
    def is_open(self) -> bool:
        return self.upper_bound is None or self.upper_bound == OPEN_UPPER_BOUND

    def contains(self, raw: int | float) -> bool:
        """Inclusive containment; an open row covers every score above its lower bound."""
        if raw < self.lower_bound:
            return False
        return self.is_open or raw <= self.upper_bound


@dataclass(frozen=True, slots=True)
class CriterionFilter:
    """Optional narrowing of ``list_active_tables``.

    ``generic_only`` selects tables flagged generic; otherwise ``dimension``
    and ``value`` restrict to tables declared for that criterion.
    """

    dimension: str | None = None
    value: str | None = None
    generic_only: bool = False

    @classmethod
    def generic(cls) -> "CriterionFilter":
        return cls(generic_only=True)

    def matches(self, table: NormativeTableRecord) -> bool:
        if self.generic_only:
            return table.is_generic
        if self.dimension is not None and table.criterion != self.dimension:
            return False
        if self.value is not None and table.criterion_value != self.value:
            return False
        return True


def _table_record(entity: NormativeTable) -> NormativeTableRecord:
    return NormativeTableRecord(
        table_id=int(entity.id),
        name=str(entity.name),
        instrument=str(entity.instrument),
        version=str(entity.version),
        criterion=entity.criterion,
        criterion_value=entity.criterion_value,
        subscale=entity.subscale,
        is_generic=bool(entity.is_generic),
        description=entity.description,
        active=bool(entity.active),
    )


def _row_record(entity: NormativeRow) -> NormativeRowRecord:
    return NormativeRowRecord(
        row_id=int(entity.id),
        table_id=int(entity.table_id),
        subscale=entity.subscale,
        lower_bound=float(entity.lower_bound),
        upper_bound=float(entity.upper_bound) if entity.upper_bound is not None else None,
        percentile=int(entity.percentile),
        classification=str(entity.classification),
        criterion_value=entity.criterion_value,
    )


def _instrument_tag(instrument: InstrumentType | str) -> str:
    return instrument.value if isinstance(instrument, InstrumentType) else str(instrument)


@dataclass
class NormativeTableRepository(Repository[Session]):
    """Repository for normative tables and their percentile rows."""

    def list_active_tables(
        self,
        instrument: InstrumentType | str,
        criterion_filter: CriterionFilter | None = None,
    ) -> List[NormativeTableRecord]:
        """Return active tables of ``instrument`` ordered by ascending id."""
        stmt = (
            select(NormativeTable)
            .where(NormativeTable.instrument == _instrument_tag(instrument))
            .where(NormativeTable.active.is_(True))
        )
        if criterion_filter is not None:
            if criterion_filter.generic_only:
                stmt = stmt.where(NormativeTable.is_generic.is_(True))
            else:
                if criterion_filter.dimension is not None:
                    stmt = stmt.where(NormativeTable.criterion == criterion_filter.dimension)
                if criterion_filter.value is not None:
                    stmt = stmt.where(NormativeTable.criterion_value == criterion_filter.value)
        stmt = stmt.order_by(NormativeTable.id.asc())
        with self.read_guard("list_active_tables", instrument=_instrument_tag(instrument)):
            entities = self.db.execute(stmt).scalars().all()
        return [_table_record(entity) for entity in entities]

    def list_rows(self, table_id: int, subscale: str | None = None) -> List[NormativeRowRecord]:
        """Return rows of a table, optionally narrowed to one subscale tag."""
        stmt = select(NormativeRow).where(NormativeRow.table_id == table_id)
        if subscale is not None:
            stmt = stmt.where(NormativeRow.subscale == subscale)
        stmt = stmt.order_by(NormativeRow.id.asc())
        with self.read_guard("list_rows", table_id=table_id, subscale=subscale):
            entities = self.db.execute(stmt).scalars().all()
        return [_row_record(entity) for entity in entities]

    def get_table(self, table_id: int) -> NormativeTableRecord | None:
        with self.read_guard("get_table", table_id=table_id):
            entity = self.db.get(NormativeTable, table_id)
        return _table_record(entity) if entity is not None else None

    def find_by_name(self, name: str) -> NormativeTable | None:
        stmt = select(NormativeTable).where(NormativeTable.name == name).limit(1)
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert_table(
        self,
        *,
        name: str,
        instrument: InstrumentType | str,
        version: str = "1.0",
        criterion: str | None = None,
        criterion_value: str | None = None,
        subscale: str | None = None,
        is_generic: bool = False,
        description: str | None = None,
        active: bool = True,
    ) -> Tuple[NormativeTable, bool]:
        """Insert or update a table keyed by its unique name."""
        existing = self.find_by_name(name)
        values = {
            "instrument": _instrument_tag(instrument),
            "version": version,
            "criterion": criterion,
            "criterion_value": criterion_value,
            "subscale": subscale,
            "is_generic": is_generic,
            "description": description,
            "active": active,
        }
        if existing:
            for attr, value in values.items():
                setattr(existing, attr, value)
            return existing, False
        entity = NormativeTable(name=name, **values)
        self.db.add(entity)
        self.db.flush()
        return entity, True

    def upsert_row(
        self,
        table_id: int,
        *,
        subscale: str | None,
        criterion_value: str | None,
        percentile: int,
        lower_bound: float,
        upper_bound: float | None,
        classification: str,
    ) -> Tuple[NormativeRow, bool]:
        stmt = (
            select(NormativeRow)
            .where(NormativeRow.table_id == table_id)
            .where(_nullable_eq(NormativeRow.subscale, subscale))
            .where(_nullable_eq(NormativeRow.criterion_value, criterion_value))
            .where(NormativeRow.percentile == percentile)
            .limit(1)
        )
        existing = self.db.execute(stmt).scalar_one_or_none()
        if existing:
            existing.lower_bound = lower_bound
            existing.upper_bound = upper_bound
            existing.classification = classification
            return existing, False
        entity = NormativeRow(
            table_id=table_id,
            subscale=subscale,
            criterion_value=criterion_value,
            percentile=percentile,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
            classification=classification,
        )
        self.db.add(entity)
        self.db.flush()
        return entity, True

    def prune_rows(self, table_id: int, keep_ids: Iterable[int], subscales: Sequence[str | None]) -> int:
        """Delete rows of the given subscales that are not in ``keep_ids``."""
        keep = list(keep_ids)
        if not subscales:
            return 0
        clauses = [_nullable_eq(NormativeRow.subscale, tag) for tag in dict.fromkeys(subscales)]
        stmt = delete(NormativeRow).where(NormativeRow.table_id == table_id).where(or_(*clauses))
        if keep:
            stmt = stmt.where(NormativeRow.id.not_in(keep))
        result = self.db.execute(stmt)
        return int(result.rowcount or 0)


def _nullable_eq(column, value):
    return column.is_(None) if value is None else column == value


__all__ = [
    "CriterionFilter",
    "NormativeRowRecord",
    "NormativeTableRecord",
    "NormativeTableRepository",
]
