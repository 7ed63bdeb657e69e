from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from psiconorm.core.errors import NormativeTableNotFoundError
from psiconorm.db.database import get_db
from psiconorm.db.repositories import NormativeTableRepository
from psiconorm.engine.registry import get_profile
from psiconorm.schemas.score import NormativeRowRead, TableDetail, TableSummary

router = APIRouter(prefix="/tables", tags=["tables"])


@router.get("/{instrument}", response_model=List[TableSummary])
def list_tables(instrument: str, db: Session = Depends(get_db)) -> List[TableSummary]:
    """Active normative tables of an instrument, ascending by id."""
    profile = get_profile(instrument)
    repo = NormativeTableRepository(db)
    return [TableSummary(**asdict(record)) for record in repo.list_active_tables(profile.instrument)]


@router.get("/{instrument}/{table_id}", response_model=TableDetail)
def get_table(instrument: str, table_id: int, db: Session = Depends(get_db)) -> TableDetail:
    profile = get_profile(instrument)
    repo = NormativeTableRepository(db)
    record = repo.get_table(table_id)
    if record is None or record.instrument != profile.instrument.value:
        raise NormativeTableNotFoundError(detail={"instrument": profile.instrument.value, "table_id": table_id})
    rows = [NormativeRowRead(**asdict(row)) for row in repo.list_rows(table_id)]
    return TableDetail(**asdict(record), rows=rows)
