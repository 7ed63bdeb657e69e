"""Declared instrument profiles.

Each profile states which demographic axes the instrument's tables are
stratified by (most specific first), which subscale tags its rows carry and
whether a composite score exists. Resolution reads these declarations
instead of inferring anything from table names.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from psiconorm.assessments.constants import (
    GENERAL_REASONING_ITEMS,
    MATRIX_REASONING_ITEMS,
    VERBAL_REASONING_ITEMS,
)
from psiconorm.assessments.enums import (
    AttentionRoute,
    AttentionSubscale,
    CriterionDimension,
    InstrumentType,
    PalographicMetric,
)
from psiconorm.core.errors import InstrumentNotFoundError
from psiconorm.i18n.pt_messages import ValidationMessages

__all__ = ["InstrumentProfile", "INSTRUMENT_PROFILES", "get_profile"]

_DEFAULT_AXES: Tuple[CriterionDimension, ...] = (
    CriterionDimension.REGION,
    CriterionDimension.EDUCATION,
    CriterionDimension.AGE,
    CriterionDimension.SEX,
    CriterionDimension.CONTEXT,
)


@dataclass(frozen=True, slots=True)
class InstrumentProfile:
    instrument: InstrumentType
    label: str
    criterion_axes: Tuple[CriterionDimension, ...] = _DEFAULT_AXES
    subscales: Tuple[str, ...] = ()
    companion_tables: bool = False
    has_composite: bool = False
    item_count: int | None = None
    graded_bands: bool = False

    @property
    def is_multi_scale(self) -> bool:
        return bool(self.subscales)


INSTRUMENT_PROFILES: Mapping[InstrumentType, InstrumentProfile] = MappingProxyType(
    {
        InstrumentType.ATTENTION_CONCENTRATION: InstrumentProfile(
            instrument=InstrumentType.ATTENTION_CONCENTRATION,
            label="AC - Atenção Concentrada",
        ),
        InstrumentType.ATTENTION_BATTERY: InstrumentProfile(
            instrument=InstrumentType.ATTENTION_BATTERY,
            label="BPA-2 - Bateria Psicológica para Avaliação da Atenção",
            criterion_axes=(
                CriterionDimension.REGION,
                CriterionDimension.EDUCATION,
                CriterionDimension.AGE,
                CriterionDimension.CONTEXT,
            ),
            subscales=tuple(subscale.value for subscale in AttentionSubscale),
            companion_tables=True,
            has_composite=True,
        ),
        InstrumentType.ROUTE_ATTENTION: InstrumentProfile(
            instrument=InstrumentType.ROUTE_ATTENTION,
            label="Rotas de Atenção",
            subscales=tuple(route.value for route in AttentionRoute),
        ),
        InstrumentType.RECOGNITION_MEMORY: InstrumentProfile(
            instrument=InstrumentType.RECOGNITION_MEMORY,
            label="MEMORE - Memória de Reconhecimento",
        ),
        InstrumentType.MATRIX_REASONING: InstrumentProfile(
            instrument=InstrumentType.MATRIX_REASONING,
            label="BETA-III - Raciocínio Matricial",
            item_count=MATRIX_REASONING_ITEMS,
        ),
        InstrumentType.VISUAL_MEMORY: InstrumentProfile(
            instrument=InstrumentType.VISUAL_MEMORY,
            label="MVT - Memória Visual para o Trânsito",
            criterion_axes=(
                CriterionDimension.CONTEXT,
                CriterionDimension.REGION,
                CriterionDimension.EDUCATION,
                CriterionDimension.AGE,
            ),
        ),
        InstrumentType.VERBAL_REASONING: InstrumentProfile(
            instrument=InstrumentType.VERBAL_REASONING,
            label="R-1 - Teste Não Verbal de Inteligência",
            criterion_axes=(
                CriterionDimension.EDUCATION,
                CriterionDimension.REGION,
                CriterionDimension.AGE,
            ),
            item_count=VERBAL_REASONING_ITEMS,
        ),
        InstrumentType.GENERAL_REASONING: InstrumentProfile(
            instrument=InstrumentType.GENERAL_REASONING,
            label="MIG - Avaliação Psicológica da Inteligência",
            criterion_axes=(
                CriterionDimension.CONTEXT,
                CriterionDimension.EDUCATION,
                CriterionDimension.REGION,
                CriterionDimension.AGE,
            ),
            item_count=GENERAL_REASONING_ITEMS,
        ),
        InstrumentType.PALOGRAPHIC: InstrumentProfile(
            instrument=InstrumentType.PALOGRAPHIC,
            label="Palográfico",
            criterion_axes=(
                CriterionDimension.REGION,
                CriterionDimension.SEX,
                CriterionDimension.EDUCATION,
                CriterionDimension.AGE,
            ),
            subscales=tuple(metric.value for metric in PalographicMetric),
            graded_bands=True,
        ),
    }
)


def get_profile(instrument: InstrumentType | str) -> InstrumentProfile:
    try:
        key = instrument if isinstance(instrument, InstrumentType) else InstrumentType(str(instrument))
    except ValueError as exc:
        raise InstrumentNotFoundError(
            ValidationMessages.UNKNOWN_INSTRUMENT.format(instrument=instrument),
            detail={"instrument": str(instrument)},
        ) from exc
    return INSTRUMENT_PROFILES[key]
