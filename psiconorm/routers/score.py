from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from psiconorm.db.database import get_db
from psiconorm.engine.norms.factory import build_scoring_engine
from psiconorm.schemas.score import ScoreRequest, ScoreResponse
from psiconorm.services.scoring import ScoringEngine

router = APIRouter(prefix="/score", tags=["score"])


def get_scoring_engine(db: Session = Depends(get_db)) -> ScoringEngine:
    return build_scoring_engine(db)


@router.post("/{instrument}", response_model=ScoreResponse)
def score_instrument(
    instrument: str,
    payload: ScoreRequest,
    engine: ScoringEngine = Depends(get_scoring_engine),
) -> ScoreResponse:
    criteria = payload.criteria.as_criteria_mapping() if payload.criteria is not None else None
    result = engine.score(instrument, payload.raw_inputs, criteria, payload.table_id)
    return ScoreResponse.model_validate(result.as_dict())
