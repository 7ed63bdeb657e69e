import csv
import sys
from collections import OrderedDict

from psiconorm.assessments.constants import GENERIC_TABLE_LABELS
from psiconorm.core.errors import DomainError
from psiconorm.db.database import Base, engine, transactional_session
from psiconorm.db.repositories import NormativeTableRepository
from psiconorm.engine.registry import get_profile
from psiconorm.services.population import BandPoint, RowGroup, TableSpec, build_band_rows, populate_table

"""
CLI usage:
python -m scripts.import_norms <instrument> <table_name> <csv_path> [criterion] [criterion_value] [version]
CSV columns: subscale,criterion_value,percentile,classification,min_points
Rows sharing subscale and criterion_value form one band ladder; empty cells mean "none".
"""

EXPECTED_HEADER = ["subscale", "criterion_value", "percentile", "classification", "min_points"]


def _blank_to_none(value):
    value = (value or "").strip()
    return value or None


def read_groups(lines):
    reader = csv.DictReader(lines)
    if reader.fieldnames is None or [name.strip() for name in reader.fieldnames] != EXPECTED_HEADER:
        raise ValueError("CSV header must be: " + ",".join(EXPECTED_HEADER))
    grouped = OrderedDict()
    for line_no, row in enumerate(reader, start=2):
        key = (_blank_to_none(row["subscale"]), _blank_to_none(row["criterion_value"]))
        try:
            point = BandPoint(
                percentile=int(row["percentile"]),
                classification=row["classification"].strip(),
                min_points=float(row["min_points"]),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"line {line_no}: {exc}") from exc
        grouped.setdefault(key, []).append(point)
    return tuple(
        RowGroup(rows=tuple(build_band_rows(points)), subscale=subscale, criterion_value=criterion_value)
        for (subscale, criterion_value), points in grouped.items()
    )


def main():
    if len(sys.argv) not in (4, 5, 6, 7):
        print(
            "Usage: python -m scripts.import_norms <instrument> <table_name> <csv_path> "
            "[criterion] [criterion_value] [version]"
        )
        sys.exit(1)
    instrument, table_name, path = sys.argv[1], sys.argv[2].strip(), sys.argv[3]
    criterion = sys.argv[4].strip() if len(sys.argv) > 4 else None
    criterion_value = sys.argv[5].strip() if len(sys.argv) > 5 else None
    version = sys.argv[6].strip() if len(sys.argv) > 6 else "1.0"
    try:
        profile = get_profile(instrument)
    except DomainError as exc:
        print(exc.message)
        sys.exit(1)
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    try:
        groups = read_groups(content.splitlines())
    except ValueError as exc:
        print(str(exc))
        sys.exit(2)
    spec = TableSpec(
        name=table_name,
        instrument=profile.instrument,
        version=version or "1.0",
        criterion=criterion or None,
        criterion_value=criterion_value or None,
        is_generic=not criterion or criterion_value in GENERIC_TABLE_LABELS,
        groups=groups,
    )
    Base.metadata.create_all(bind=engine)
    with transactional_session() as db:
        report = populate_table(NormativeTableRepository(db), spec)
    print(
        f"Imported table={table_name} id={report.table_id} created={report.rows_created} "
        f"updated={report.rows_updated} pruned={report.rows_pruned}"
    )


if __name__ == "__main__":
    main()
