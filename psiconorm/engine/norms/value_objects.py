from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from psiconorm.assessments.constants import TOTAL_SAMPLE
from psiconorm.assessments.enums import CriterionDimension, EvaluationContext
from psiconorm.core.errors import ValidationError
from psiconorm.db.repositories.normative import NormativeTableRecord
from psiconorm.engine.norms.criteria import (
    fold,
    normalize_education,
    normalize_region,
    normalize_sex,
)

_CRITERIA_KEYS = {
    "region": ("region", "regiao"),
    "education": ("education", "escolaridade"),
    "age": ("age", "idade", "faixa_etaria"),
    "sex": ("sex", "sexo"),
    "context": ("context", "contexto", "tipo_cnh", "tipo_avaliacao"),
    "criterion_value": ("criterion_value", "valor_criterio"),
    "evaluation_context": ("evaluation_context", "contexto_avaliacao"),
}


def _pick(payload: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def _coerce_age(value: Any) -> Optional[int | str]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(detail={"criteria.age": "idade inválida"})
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(detail={"criteria.age": "idade não pode ser negativa"})
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return text or None


@dataclass(frozen=True, slots=True)
class ScoringCriteria:
    """Normalised demographic criteria for one evaluation.

    ``age`` is either a numeric age or a bracket label. ``context`` is the
    stratification value for context-specific tables (e.g. "Trânsito" or a
    licence category); ``evaluation_context`` selects report wording.
    """

    region: Optional[str] = None
    education: Optional[str] = None
    age: Optional[int | str] = None
    sex: Optional[str] = None
    context: Optional[str] = None
    criterion_value: Optional[str] = None
    evaluation_context: Optional[EvaluationContext] = None

    @classmethod
    def coerce(cls, value: "ScoringCriteria | Mapping[str, Any] | None") -> "ScoringCriteria":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError(detail={"criteria": "critérios devem ser um objeto"})
        raw_context = _pick(value, _CRITERIA_KEYS["evaluation_context"])
        evaluation_context: Optional[EvaluationContext] = None
        if raw_context is not None:
            try:
                evaluation_context = EvaluationContext(fold(str(raw_context)))
            except ValueError as exc:
                raise ValidationError(
                    detail={"criteria.evaluation_context": "use transito, rh ou clinico"}
                ) from exc
        context = _pick(value, _CRITERIA_KEYS["context"])
        criterion_value = _pick(value, _CRITERIA_KEYS["criterion_value"])
        return cls(
            region=normalize_region(_pick(value, _CRITERIA_KEYS["region"])),
            education=normalize_education(_pick(value, _CRITERIA_KEYS["education"])),
            age=_coerce_age(_pick(value, _CRITERIA_KEYS["age"])),
            sex=normalize_sex(_pick(value, _CRITERIA_KEYS["sex"])),
            context=str(context).strip() if context is not None else None,
            criterion_value=str(criterion_value).strip() if criterion_value is not None else None,
            evaluation_context=evaluation_context,
        )

    def value_for(self, dimension: CriterionDimension | str) -> Optional[str | int]:
        key = dimension.value if isinstance(dimension, CriterionDimension) else str(dimension)
        return {
            CriterionDimension.REGION.value: self.region,
            CriterionDimension.EDUCATION.value: self.education,
            CriterionDimension.AGE.value: self.age,
            CriterionDimension.SEX.value: self.sex,
            CriterionDimension.CONTEXT.value: self.context,
        }.get(key)

    def row_criterion_values(self) -> Tuple[str | int, ...]:
        """Criterion values tried, in order, against row strata inside a table.

        Explicit value first, then age, education, region, sex and context.
        An explicit total-sample label means "no preference".
        """
        total = fold(TOTAL_SAMPLE)
        if self.criterion_value is not None and fold(self.criterion_value) == total:
            return ()
        candidates = (self.criterion_value, self.age, self.education, self.region, self.sex, self.context)
        return tuple(
            candidate
            for candidate in candidates
            if candidate is not None and not (isinstance(candidate, str) and fold(candidate) == total)
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "region": self.region,
            "education": self.education,
            "age": self.age,
            "sex": self.sex,
            "context": self.context,
            "criterion_value": self.criterion_value,
            "evaluation_context": self.evaluation_context.value if self.evaluation_context else None,
        }


@dataclass(frozen=True, slots=True)
class TableResolution:
    """Outcome of table resolution for one instrument.

    ``companions`` maps subscale tag to table for instruments whose
    subscales live in separate tables; it is empty otherwise.
    """

    table: NormativeTableRecord
    reason: str
    companions: Mapping[str, NormativeTableRecord] = field(default_factory=lambda: MappingProxyType({}))
    candidates: Tuple[int, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def table_id(self) -> int:
        return self.table.table_id

    def table_for(self, subscale: Optional[str]) -> Optional[NormativeTableRecord]:
        if self.companions:
            return self.companions.get(subscale) if subscale is not None else None
        if self.table.subscale is None or self.table.subscale == subscale:
            return self.table
        return None


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Value object wrapping percentile lookup results."""

    percentile: Optional[int]
    classification: str
    row_id: Optional[int] = None
    provenance: str = "none"

    @property
    def matched(self) -> bool:
        return self.row_id is not None

    def as_tuple(self) -> tuple[Optional[int], str]:
        return self.percentile, self.classification
