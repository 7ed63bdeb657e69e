from psiconorm.db.repositories.memory import InMemoryNormativeStore
from psiconorm.db.repositories.normative import (
    CriterionFilter,
    NormativeRowRecord,
    NormativeTableRecord,
    NormativeTableRepository,
)
from psiconorm.db.repositories.protocols import NormativeStore

__all__ = [
    "CriterionFilter",
    "InMemoryNormativeStore",
    "NormativeRowRecord",
    "NormativeStore",
    "NormativeTableRecord",
    "NormativeTableRepository",
]
