from __future__ import annotations

from sqlalchemy.orm import Session

from psiconorm.core.config import settings
from psiconorm.core.logging import get_logger
from psiconorm.db.repositories import NormativeStore, NormativeTableRepository
from psiconorm.engine.norms.composite import CompositeRowMatcher
from psiconorm.engine.norms.lookup import PercentileLookup
from psiconorm.engine.norms.resolver import NormativeTableResolver
from psiconorm.services.scoring import ScoringEngine

logger = get_logger("psiconorm.engine.norms", component="engine")


def build_engine_for_store(store: NormativeStore, *, fallback_enabled: bool | None = None) -> ScoringEngine:
    """Wire resolver, lookup and default row matcher around ``store``."""
    enabled = settings.store_fallback_enabled if fallback_enabled is None else fallback_enabled
    engine = ScoringEngine(
        store,
        resolver=NormativeTableResolver(store, fallback_enabled=enabled),
        lookup=PercentileLookup(store, CompositeRowMatcher()),
    )
    logger.debug(
        "scoring_engine_built",
        extra={"structured_data": {"store": type(store).__name__, "fallback_enabled": enabled}},
    )
    return engine


def build_scoring_engine(db: Session) -> ScoringEngine:
    """Scoring engine reading norms through the SQLAlchemy repository."""
    return build_engine_for_store(NormativeTableRepository(db))


__all__ = ["build_engine_for_store", "build_scoring_engine"]
