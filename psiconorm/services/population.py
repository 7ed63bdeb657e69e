"""Idempotent population of normative tables.

Publishers print norms as ordered lists of (percentile, classification,
minimum points). :func:`build_band_rows` turns such a list into contiguous
closed ranges and :func:`populate_table` writes a table and its rows so that
re-running the same import leaves the store unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from psiconorm.assessments.constants import OPEN_UPPER_BOUND
from psiconorm.assessments.enums import InstrumentType
from psiconorm.core.errors import ValidationError
from psiconorm.core.logging import get_logger
from psiconorm.db.repositories.normative import NormativeTableRepository
from psiconorm.engine.norms.criteria import fold

logger = get_logger("psiconorm.services.population", component="population")

__all__ = [
    "BandPoint",
    "BandRow",
    "RowGroup",
    "TableSpec",
    "PopulationReport",
    "build_band_rows",
    "build_threshold_rows",
    "populate_table",
]


@dataclass(frozen=True, slots=True)
class BandPoint:
    percentile: int
    classification: str
    min_points: float


@dataclass(frozen=True, slots=True)
class BandRow:
    lower_bound: float
    upper_bound: Optional[float]
    percentile: int
    classification: str


@dataclass(frozen=True, slots=True)
class RowGroup:
    """Rows sharing one subscale tag and one row criterion value."""

    rows: Tuple[BandRow, ...]
    subscale: Optional[str] = None
    criterion_value: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TableSpec:
    name: str
    instrument: InstrumentType | str
    version: str = "1.0"
    criterion: Optional[str] = None
    criterion_value: Optional[str] = None
    subscale: Optional[str] = None
    is_generic: bool = False
    description: Optional[str] = None
    active: bool = True
    groups: Tuple[RowGroup, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class PopulationReport:
    table_id: int
    table_created: bool
    rows_created: int = 0
    rows_updated: int = 0
    rows_pruned: int = 0

    def as_dict(self) -> dict[str, int | bool]:
        return {
            "table_id": self.table_id,
            "table_created": self.table_created,
            "rows_created": self.rows_created,
            "rows_updated": self.rows_updated,
            "rows_pruned": self.rows_pruned,
        }


def _as_point(item: BandPoint | Sequence) -> BandPoint:
    if isinstance(item, BandPoint):
        return item
    percentile, classification, min_points = item
    return BandPoint(int(percentile), str(classification), float(min_points))


def build_band_rows(points: Iterable[BandPoint | Sequence]) -> List[BandRow]:
    """Convert minimum-points entries into contiguous band rows.

    Each row spans ``[min_points, next.min_points - 1]``; the highest row is
    open-ended (``999``). When two consecutive entries share the same
    minimum the lower one would span an empty range and is dropped, so the
    higher percentile owns that raw score.

    >>> [(r.lower_bound, r.upper_bound, r.percentile) for r in build_band_rows([(5, "Inferior", 0), (50, "Médio", 10)])]
    [(0.0, 9.0, 5), (10.0, 999, 50)]
    """
    ordered = sorted((_as_point(item) for item in points), key=lambda p: (p.min_points, p.percentile))
    rows: List[BandRow] = []
    for index, point in enumerate(ordered):
        if index + 1 < len(ordered):
            upper: float = ordered[index + 1].min_points - 1
            if upper < point.min_points:
                continue
        else:
            upper = OPEN_UPPER_BOUND
        rows.append(BandRow(point.min_points, upper, point.percentile, point.classification))
    return rows


def build_threshold_rows(
    thresholds: Mapping[str, Sequence[Optional[float]]],
    ladder: Sequence[Tuple[str, int]],
) -> List[BandRow]:
    """Build graphomotor band rows from ``{label: [lower, upper]}`` thresholds.

    Labels are matched against ``ladder`` ignoring case and accents; the
    ladder rank is stored in the percentile column. A missing or null upper
    bound is stored as open.
    """
    ranks = {fold(label): (label, rank) for label, rank in ladder}
    rows: List[BandRow] = []
    for key, bounds in thresholds.items():
        entry = ranks.get(fold(key))
        if entry is None:
            raise ValidationError(
                f"Faixa desconhecida: {key}",
                detail={"label": key, "allowed": [label for label, _ in ladder]},
            )
        if not bounds:
            raise ValidationError(f"Faixa sem limites: {key}", detail={"label": key})
        lower = bounds[0]
        upper = bounds[1] if len(bounds) > 1 else None
        if lower is None:
            raise ValidationError(f"Faixa sem limite inferior: {key}", detail={"label": key})
        if upper is not None and upper < lower:
            raise ValidationError(
                f"Faixa com limites invertidos: {key}",
                detail={"label": key, "lower": lower, "upper": upper},
            )
        label, rank = entry
        rows.append(BandRow(float(lower), OPEN_UPPER_BOUND if upper is None else float(upper), rank, label))
    rows.sort(key=lambda row: row.lower_bound)
    return rows


def populate_table(repo: NormativeTableRepository, spec: TableSpec) -> PopulationReport:
    """Upsert ``spec`` and its rows, then prune rows the spec no longer lists.

    The caller owns the transaction.
    """
    table, created = repo.upsert_table(
        name=spec.name,
        instrument=spec.instrument,
        version=spec.version,
        criterion=spec.criterion,
        criterion_value=spec.criterion_value,
        subscale=spec.subscale,
        is_generic=spec.is_generic,
        description=spec.description,
        active=spec.active,
    )
    report = PopulationReport(table_id=table.id, table_created=created)
    kept = []
    for group in spec.groups:
        for row in group.rows:
            entity, row_created = repo.upsert_row(
                table.id,
                subscale=group.subscale,
                criterion_value=group.criterion_value,
                percentile=row.percentile,
                lower_bound=row.lower_bound,
                upper_bound=row.upper_bound,
                classification=row.classification,
            )
            kept.append(entity)
            if row_created:
                report.rows_created += 1
            else:
                report.rows_updated += 1
    repo.db.flush()
    report.rows_pruned = repo.prune_rows(
        table.id,
        [entity.id for entity in kept],
        [group.subscale for group in spec.groups],
    )
    logger.info("normative_table_populated", extra={"structured_data": {"name": spec.name, **report.as_dict()}})
    return report
