from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from psiconorm.assessments import calculations
from psiconorm.assessments.enums import (
    AttentionRoute,
    AttentionSubscale,
    EvaluationContext,
    InstrumentType,
    PalographicMetric,
)
from psiconorm.assessments.validators import (
    AttentionBatteryInput,
    ErrorCountInput,
    GeneralReasoningInput,
    MatrixReasoningInput,
    PalographicInput,
    RecognitionMemoryInput,
    RouteAttentionInput,
    VerbalReasoningInput,
    parse_raw_inputs,
)
from psiconorm.core.config import settings
from psiconorm.core.errors import NormativeStoreUnavailableError
from psiconorm.core.logging import get_logger
from psiconorm.core.metrics import count_calls, measure_time
from psiconorm.core.sentinels import (
    INVALID_RESULT,
    NO_NORMATIVE_TABLE,
    NORMATIVE_LOOKUP_FAILED,
)
from psiconorm.db.repositories.protocols import NormativeStore
from psiconorm.engine import assembler
from psiconorm.engine.norms.criteria import criteria_warnings
from psiconorm.engine.norms.lookup import PercentileLookup
from psiconorm.engine.norms.resolver import NormativeTableResolver
from psiconorm.engine.norms.value_objects import ScoringCriteria, TableResolution
from psiconorm.engine.registry import InstrumentProfile, get_profile
from psiconorm.engine.results import ScoreResult, SubscaleResult
from psiconorm.i18n.pt_messages import ClassificationMessages, WarningMessages
from psiconorm.services.interpretation import build_palographic_interpretation

logger = get_logger("psiconorm.services.scoring", component="scoring")

_ROUTE_FIELDS: Tuple[Tuple[AttentionRoute, str], ...] = (
    (AttentionRoute.ALTERNATING, "route_a"),
    (AttentionRoute.DIVIDED, "route_d"),
    (AttentionRoute.CONCENTRATED, "route_c"),
)

_PRIMARY_SCALE = "pb"
_CORRECT_SCALE = "acertos"


class _Normative:
    """Resolution state shared by every scale of one scoring call."""

    __slots__ = ("resolution", "unavailable", "criterion_values", "graded")

    def __init__(
        self,
        resolution: Optional[TableResolution],
        unavailable: bool,
        criterion_values: Tuple[str | int, ...],
        graded: bool,
    ) -> None:
        self.resolution = resolution
        self.unavailable = unavailable
        self.criterion_values = criterion_values
        self.graded = graded


class ScoringEngine:
    """Score raw test inputs against normative tables held by ``store``.

    The engine is stateless; one instance may serve concurrent requests as
    long as the injected store tolerates concurrent reads.
    """

    def __init__(
        self,
        store: NormativeStore,
        *,
        resolver: NormativeTableResolver | None = None,
        lookup: PercentileLookup | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver or NormativeTableResolver(store)
        self.lookup = lookup or PercentileLookup(store)
        self._handlers: Dict[InstrumentType, Callable[..., ScoreResult]] = {
            InstrumentType.ATTENTION_CONCENTRATION: self._score_error_adjusted,
            InstrumentType.ATTENTION_BATTERY: self._score_attention_battery,
            InstrumentType.ROUTE_ATTENTION: self._score_route_attention,
            InstrumentType.RECOGNITION_MEMORY: self._score_recognition_memory,
            InstrumentType.MATRIX_REASONING: self._score_correct_count,
            InstrumentType.VISUAL_MEMORY: self._score_error_adjusted,
            InstrumentType.VERBAL_REASONING: self._score_correct_count,
            InstrumentType.GENERAL_REASONING: self._score_correct_count,
            InstrumentType.PALOGRAPHIC: self._score_palographic,
        }

    @count_calls("scoring.score.calls")
    @measure_time("scoring.score")
    def score(
        self,
        instrument: InstrumentType | str,
        raw_inputs: Mapping[str, Any],
        criteria: ScoringCriteria | Mapping[str, Any] | None = None,
        explicit_table_id: int | None = None,
    ) -> ScoreResult:
        """Compute raw scores, resolve norms and classify.

        Raises:
            InstrumentNotFoundError: unknown instrument tag.
            ValidationError: malformed raw inputs or criteria; raised before
                any store access.
        """
        profile = get_profile(instrument)
        sheet = parse_raw_inputs(profile.instrument, raw_inputs)
        normalized = ScoringCriteria.coerce(criteria)
        warnings: List[str] = criteria_warnings(
            age=normalized.age,
            education=normalized.education,
            context=normalized.context,
        )
        normative = self._resolve(profile, normalized, explicit_table_id, warnings)
        result = self._handlers[profile.instrument](profile, sheet, normalized, normative, warnings)
        logger.info(
            "score_computed",
            extra={
                "structured_data": {
                    "instrument": profile.instrument.value,
                    "table_id": result.resolved_table_id,
                    "classification": str(result.classification),
                    "warnings": len(result.warnings),
                }
            },
        )
        return result

    # ------------------------------------------------------------------
    # Resolution and per-scale lookup
    # ------------------------------------------------------------------

    def _resolve(
        self,
        profile: InstrumentProfile,
        criteria: ScoringCriteria,
        explicit_table_id: Optional[int],
        warnings: List[str],
    ) -> _Normative:
        criterion_values = criteria.row_criterion_values()
        try:
            resolution = self.resolver.resolve(profile.instrument, criteria, explicit_table_id)
        except NormativeStoreUnavailableError as exc:
            logger.error(
                "normative_store_unavailable",
                extra={"structured_data": {"instrument": profile.instrument.value, "error": exc.message}},
            )
            warnings.append(WarningMessages.STORE_UNAVAILABLE)
            return _Normative(None, True, criterion_values, profile.graded_bands)
        if resolution is None:
            warnings.append(WarningMessages.NO_ACTIVE_TABLE)
        else:
            warnings.extend(resolution.warnings)
        return _Normative(resolution, False, criterion_values, profile.graded_bands)

    def _classify(
        self,
        tag: str,
        raw: Optional[int | float],
        normative: _Normative,
        warnings: List[str],
        *,
        subscale: Optional[str] = None,
    ) -> SubscaleResult:
        if raw is None:
            warnings.append(WarningMessages.METRIC_NOT_DERIVED.format(metric=tag))
            return SubscaleResult(tag, None, None, ClassificationMessages.NOT_CLASSIFIED)
        if raw < 0:
            warnings.append(WarningMessages.NEGATIVE_RAW_SCORE.format(scale=tag))
            return SubscaleResult(tag, raw, None, INVALID_RESULT, provenance="invalid")
        if normative.unavailable:
            return SubscaleResult(tag, raw, None, NORMATIVE_LOOKUP_FAILED, provenance="error")
        resolution = normative.resolution
        if resolution is None:
            return SubscaleResult(tag, raw, None, NO_NORMATIVE_TABLE)
        table = resolution.table_for(subscale)
        if table is None:
            warnings.append(WarningMessages.SUBSCALE_TABLE_MISSING.format(subscale=tag))
            return SubscaleResult(tag, raw, None, NO_NORMATIVE_TABLE)
        # A table dedicated to this subscale serves all of its rows.
        row_subscale = None if table.subscale is not None and table.subscale == subscale else subscale
        found = self.lookup.lookup(table.table_id, row_subscale, normative.criterion_values, raw)
        if normative.graded:
            classification = (
                ClassificationMessages.NOT_CLASSIFIED if found.classification == NO_NORMATIVE_TABLE else found.classification
            )
            return SubscaleResult(tag, raw, None, classification, table.table_id, found.provenance)
        return SubscaleResult(tag, raw, found.percentile, found.classification, table.table_id, found.provenance)

    # ------------------------------------------------------------------
    # Instrument handlers
    # ------------------------------------------------------------------

    def _score_error_adjusted(
        self,
        profile: InstrumentProfile,
        sheet: ErrorCountInput,
        criteria: ScoringCriteria,
        normative: _Normative,
        warnings: List[str],
    ) -> ScoreResult:
        raw = calculations.error_adjusted_score(sheet.correct, sheet.errors, sheet.omissions)
        result = self._classify(_PRIMARY_SCALE, raw, normative, warnings)
        return assembler.assemble_single(profile.instrument, result, normative.resolution, warnings)

    def _score_recognition_memory(
        self,
        profile: InstrumentProfile,
        sheet: RecognitionMemoryInput,
        criteria: ScoringCriteria,
        normative: _Normative,
        warnings: List[str],
    ) -> ScoreResult:
        raw = calculations.recognition_memory_score(
            sheet.true_positives,
            sheet.true_negatives,
            sheet.false_negatives,
            sheet.false_positives,
        )
        result = self._classify(_PRIMARY_SCALE, raw, normative, warnings)
        return assembler.assemble_single(profile.instrument, result, normative.resolution, warnings)

    def _score_correct_count(
        self,
        profile: InstrumentProfile,
        sheet: MatrixReasoningInput | VerbalReasoningInput | GeneralReasoningInput,
        criteria: ScoringCriteria,
        normative: _Normative,
        warnings: List[str],
    ) -> ScoreResult:
        result = self._classify(_CORRECT_SCALE, sheet.correct, normative, warnings)
        display = (
            calculations.percent_of_maximum(sheet.correct, profile.item_count)
            if profile.item_count
            else None
        )
        return assembler.assemble_single(
            profile.instrument, result, normative.resolution, warnings, display_percentage=display
        )

    def _score_attention_battery(
        self,
        profile: InstrumentProfile,
        sheet: AttentionBatteryInput,
        criteria: ScoringCriteria,
        normative: _Normative,
        warnings: List[str],
    ) -> ScoreResult:
        scores = calculations.attention_battery_scores(
            calculations.error_adjusted_score(
                sheet.alternating.correct, sheet.alternating.errors, sheet.alternating.omissions
            ),
            calculations.error_adjusted_score(
                sheet.concentrated.correct, sheet.concentrated.errors, sheet.concentrated.omissions
            ),
            calculations.error_adjusted_score(
                sheet.divided.correct, sheet.divided.errors, sheet.divided.omissions
            ),
        )
        warnings.extend(assembler.general_score_warnings(scores, sheet.general))
        raws = scores.as_dict()
        results = {
            subscale.value: self._classify(
                subscale.value, raws[subscale.value], normative, warnings, subscale=subscale.value
            )
            for subscale in AttentionSubscale
        }
        return assembler.assemble_attention_battery(scores, results, normative.resolution, warnings)

    def _score_route_attention(
        self,
        profile: InstrumentProfile,
        sheet: RouteAttentionInput,
        criteria: ScoringCriteria,
        normative: _Normative,
        warnings: List[str],
    ) -> ScoreResult:
        raws: Dict[str, int] = {}
        for route, attribute in _ROUTE_FIELDS:
            counts: Optional[ErrorCountInput] = getattr(sheet, attribute)
            if counts is not None:
                raws[route.value] = calculations.error_adjusted_score(
                    counts.correct, counts.errors, counts.omissions
                )
        results = {
            tag: self._classify(tag, raw, normative, warnings, subscale=tag) for tag, raw in raws.items()
        }
        return assembler.assemble_route_attention(raws, results, normative.resolution, warnings)

    def _score_palographic(
        self,
        profile: InstrumentProfile,
        sheet: PalographicInput,
        criteria: ScoringCriteria,
        normative: _Normative,
        warnings: List[str],
    ) -> ScoreResult:
        metrics, _summary = calculations.derive_palographic_metrics(sheet)
        values = metrics.as_dict()
        results = {
            metric.value: self._classify(metric.value, values[metric.value], normative, warnings, subscale=metric.value)
            for metric in PalographicMetric
        }
        context = criteria.evaluation_context or EvaluationContext(settings.default_evaluation_context)
        interpretation = build_palographic_interpretation(metrics, results, sheet.qualitative, context)
        return assembler.assemble_palographic(metrics, results, interpretation, normative.resolution, warnings)


__all__ = ["ScoringEngine"]
