"""Validation of raw test inputs.

Each instrument has a pydantic model describing its answer sheet. Field
names are English; the Portuguese keys used on paper forms and by the
legacy front-end are accepted as aliases. Pydantic failures are converted
into the domain :class:`~psiconorm.core.errors.ValidationError` with a
``{"field.path": "message"}`` detail so nothing reaches the lookup stage
with malformed data.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    ValidationError as PydanticValidationError,
    model_validator,
)

from psiconorm.assessments.constants import (
    EMOTIVITY_MAX,
    GENERAL_REASONING_ITEMS,
    MATRIX_REASONING_ITEMS,
    PALOGRAPHIC_INTERVAL_COUNT,
    VERBAL_REASONING_ITEMS,
)
from psiconorm.assessments.enums import InstrumentType
from psiconorm.core.errors import InstrumentNotFoundError, ValidationError
from psiconorm.i18n.pt_messages import ValidationMessages

__all__ = [
    "ErrorCountInput",
    "AttentionBatteryInput",
    "RouteAttentionInput",
    "RecognitionMemoryInput",
    "MatrixReasoningInput",
    "VerbalReasoningInput",
    "GeneralReasoningInput",
    "QualitativeObservations",
    "PalographicInput",
    "INPUT_MODELS",
    "parse_raw_inputs",
]


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class _InputModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ErrorCountInput(_InputModel):
    """Correct answers, errors and omissions of a cancellation-style sheet."""

    correct: NonNegativeInt = Field(validation_alias=_alias("correct", "acertos"))
    errors: NonNegativeInt = Field(default=0, validation_alias=_alias("errors", "erros"))
    omissions: NonNegativeInt = Field(
        default=0, validation_alias=_alias("omissions", "omissoes", "omissao")
    )


class AttentionBatteryInput(_InputModel):
    alternating: ErrorCountInput = Field(validation_alias=_alias("alternating", "alternada", "AA"))
    concentrated: ErrorCountInput = Field(validation_alias=_alias("concentrated", "concentrada", "AC"))
    divided: ErrorCountInput = Field(validation_alias=_alias("divided", "dividida", "AD"))
    general: Optional[int] = Field(default=None, validation_alias=_alias("general", "geral", "AG"))


class RouteAttentionInput(_InputModel):
    route_a: Optional[ErrorCountInput] = Field(default=None, validation_alias=_alias("route_a", "A", "rota_a"))
    route_d: Optional[ErrorCountInput] = Field(default=None, validation_alias=_alias("route_d", "D", "rota_d"))
    route_c: Optional[ErrorCountInput] = Field(default=None, validation_alias=_alias("route_c", "C", "rota_c"))

    @model_validator(mode="after")
    def _at_least_one_route(self) -> "RouteAttentionInput":
        if self.route_a is None and self.route_d is None and self.route_c is None:
            raise ValueError("informe ao menos uma rota (A, D ou C)")
        return self


class RecognitionMemoryInput(_InputModel):
    true_positives: NonNegativeInt = Field(validation_alias=_alias("true_positives", "vp"))
    true_negatives: NonNegativeInt = Field(validation_alias=_alias("true_negatives", "vn"))
    false_negatives: NonNegativeInt = Field(validation_alias=_alias("false_negatives", "fn"))
    false_positives: NonNegativeInt = Field(validation_alias=_alias("false_positives", "fp"))


class MatrixReasoningInput(_InputModel):
    correct: int = Field(ge=0, le=MATRIX_REASONING_ITEMS, validation_alias=_alias("correct", "acertos"))


class VerbalReasoningInput(_InputModel):
    correct: int = Field(ge=0, le=VERBAL_REASONING_ITEMS, validation_alias=_alias("correct", "acertos"))


class GeneralReasoningInput(_InputModel):
    correct: int = Field(ge=0, le=GENERAL_REASONING_ITEMS, validation_alias=_alias("correct", "acertos"))


class QualitativeObservations(_InputModel):
    """Examiner observations that feed the graphic environment verdict."""

    inclination: Optional[NonNegativeFloat] = Field(default=None, validation_alias=_alias("inclination", "inclinacao"))
    margin: Optional[NonNegativeFloat] = Field(default=None, validation_alias=_alias("margin", "margem"))
    organization: Optional[Union[NonNegativeFloat, str]] = Field(
        default=None, validation_alias=_alias("organization", "organizacao")
    )
    graphic_environment: Optional[str] = Field(
        default=None, validation_alias=_alias("graphic_environment", "ambiente_grafico")
    )


class PalographicInput(_InputModel):
    """Palographic sheet; directly supplied metrics win over derived ones."""

    intervals: Optional[List[NonNegativeInt]] = Field(
        default=None,
        min_length=PALOGRAPHIC_INTERVAL_COUNT,
        max_length=PALOGRAPHIC_INTERVAL_COUNT,
        validation_alias=_alias("intervals", "tempos"),
    )
    productivity: Optional[NonNegativeInt] = Field(default=None, validation_alias=_alias("productivity", "produtividade"))
    oscillation: Optional[NonNegativeFloat] = Field(default=None, validation_alias=_alias("oscillation", "nor"))
    larger_strokes: Optional[List[NonNegativeFloat]] = Field(
        default=None, min_length=1, validation_alias=_alias("larger_strokes", "palos_maiores")
    )
    smaller_strokes: Optional[List[NonNegativeFloat]] = Field(
        default=None, min_length=1, validation_alias=_alias("smaller_strokes", "palos_menores")
    )
    stroke_size: Optional[NonNegativeFloat] = Field(default=None, validation_alias=_alias("stroke_size", "tamanho_medio"))
    total_distance: Optional[NonNegativeFloat] = Field(
        default=None, validation_alias=_alias("total_distance", "distancia_total")
    )
    stroke_distance: Optional[NonNegativeFloat] = Field(
        default=None, validation_alias=_alias("stroke_distance", "distancia_media")
    )
    max_stroke: Optional[NonNegativeFloat] = Field(default=None, validation_alias=_alias("max_stroke", "palo_maior"))
    min_stroke: Optional[NonNegativeFloat] = Field(default=None, validation_alias=_alias("min_stroke", "palo_menor"))
    impulsivity: Optional[NonNegativeFloat] = Field(default=None, validation_alias=_alias("impulsivity", "impulsividade"))
    emotivity_flags: Optional[Dict[str, bool]] = Field(
        default=None, validation_alias=_alias("emotivity_flags", "irregularidades")
    )
    emotivity: Optional[int] = Field(
        default=None, ge=0, le=EMOTIVITY_MAX, validation_alias=_alias("emotivity", "emotividade")
    )
    qualitative: Optional[QualitativeObservations] = Field(
        default=None, validation_alias=_alias("qualitative", "qualitativas")
    )

    @model_validator(mode="after")
    def _requires_productivity(self) -> "PalographicInput":
        if self.intervals is None and self.productivity is None:
            raise ValueError("informe os tempos dos intervalos ou a produtividade")
        if (self.larger_strokes is None) != (self.smaller_strokes is None):
            raise ValueError("medidas dos maiores e menores palos devem ser informadas juntas")
        total = self.productivity if self.productivity is not None else sum(self.intervals or ())
        if self.total_distance is not None and self.stroke_distance is None and total == 0:
            raise ValueError("distância total exige produtividade maior que zero")
        return self


INPUT_MODELS: Mapping[InstrumentType, Type[_InputModel]] = {
    InstrumentType.ATTENTION_CONCENTRATION: ErrorCountInput,
    InstrumentType.ATTENTION_BATTERY: AttentionBatteryInput,
    InstrumentType.ROUTE_ATTENTION: RouteAttentionInput,
    InstrumentType.RECOGNITION_MEMORY: RecognitionMemoryInput,
    InstrumentType.MATRIX_REASONING: MatrixReasoningInput,
    InstrumentType.VISUAL_MEMORY: ErrorCountInput,
    InstrumentType.VERBAL_REASONING: VerbalReasoningInput,
    InstrumentType.GENERAL_REASONING: GeneralReasoningInput,
    InstrumentType.PALOGRAPHIC: PalographicInput,
}


def _field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        errors.setdefault(location, str(error.get("msg", "valor inválido")))
    return errors


def parse_raw_inputs(instrument: InstrumentType, raw_inputs: Mapping[str, Any] | BaseModel) -> _InputModel:
    """Validate ``raw_inputs`` against the instrument's answer sheet model.

    Raises:
        InstrumentNotFoundError: the instrument has no registered input model.
        ValidationError: the payload is malformed; ``detail`` maps field
            paths to messages.
    """
    model = INPUT_MODELS.get(instrument)
    if model is None:
        raise InstrumentNotFoundError(detail={"instrument": str(instrument)})
    if isinstance(raw_inputs, model):
        return raw_inputs
    if isinstance(raw_inputs, BaseModel):
        raw_inputs = raw_inputs.model_dump()
    if not isinstance(raw_inputs, Mapping):
        raise ValidationError(detail={"__root__": "entradas devem ser um objeto"})
    try:
        return model.model_validate(dict(raw_inputs))
    except PydanticValidationError as exc:
        raise ValidationError(ValidationMessages.INVALID_INPUT, detail=_field_errors(exc)) from exc
