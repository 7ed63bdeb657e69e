"""Qualitative interpretation of palographic metrics.

Thresholds follow the test manual's reading guide; the wording lives in
:mod:`psiconorm.i18n.pt_interpretation`.
"""

from __future__ import annotations

from typing import Mapping, Optional

from psiconorm.assessments.calculations import inclination_label, margin_label, organization_label
from psiconorm.assessments.enums import EvaluationContext, PalographicMetric
from psiconorm.assessments.types import PalographicMetrics
from psiconorm.engine.results import MetricInterpretation, PalographicInterpretation, SubscaleResult
from psiconorm.i18n.pt_interpretation import (
    ContextSummaryTexts,
    DistanceTexts,
    EmotivityTexts,
    ImpulsivityTexts,
    ProductivityTexts,
    RhythmTexts,
    SizeTexts,
)
from psiconorm.i18n.pt_messages import ClassificationMessages

__all__ = [
    "productivity_text",
    "rhythm_text",
    "size_text",
    "distance_text",
    "impulsivity_text",
    "emotivity_text",
    "qualitative_labels",
    "graphic_environment",
    "context_summary",
    "build_palographic_interpretation",
]


def productivity_text(value: int) -> str:
    if value >= 900:
        return ProductivityTexts.EXCEPTIONAL
    if value >= 750:
        return ProductivityTexts.ABOVE_AVERAGE
    if value >= 600:
        return ProductivityTexts.AVERAGE
    if value >= 450:
        return ProductivityTexts.BELOW_AVERAGE
    return ProductivityTexts.DEFICIENT


def rhythm_text(nor: Optional[float], productivity: int) -> str:
    if nor is None:
        return RhythmTexts.NORMAL
    if productivity > 750 and nor < 5:
        return RhythmTexts.BALANCED
    if productivity > 750 and 8 < nor < 10:
        return RhythmTexts.SLIGHT_INSTABILITY
    if nor > 15:
        return RhythmTexts.IRREGULAR
    if nor < 2:
        return RhythmTexts.RIGID
    return RhythmTexts.NORMAL


def size_text(value: Optional[float]) -> str:
    if not value:
        return SizeTexts.MISSING
    if value > 11.9:
        return SizeTexts.VERY_LARGE
    if value >= 10.5:
        return SizeTexts.LARGE
    if value >= 8:
        return SizeTexts.NORMAL
    if value >= 6:
        return SizeTexts.SMALL
    return SizeTexts.VERY_SMALL


def distance_text(value: Optional[float]) -> str:
    if not value:
        return DistanceTexts.MISSING
    if value >= 4.0:
        return DistanceTexts.VERY_WIDE
    if value >= 3.0:
        return DistanceTexts.WIDE
    if value >= 2.2:
        return DistanceTexts.NORMAL
    if value >= 1.5:
        return DistanceTexts.NARROW
    return DistanceTexts.VERY_NARROW


def impulsivity_text(value: Optional[float]) -> str:
    if not value:
        return ImpulsivityTexts.MISSING
    if value > 6:
        return ImpulsivityTexts.HIGH
    if value > 3:
        return ImpulsivityTexts.MODERATE
    return ImpulsivityTexts.LOW


def emotivity_text(index: Optional[int]) -> str:
    index = index or 0
    if index >= 7:
        return EmotivityTexts.VERY_HIGH
    if index >= 5:
        return EmotivityTexts.HIGH
    if index >= 3:
        return EmotivityTexts.MODERATE
    if index >= 1:
        return EmotivityTexts.MILD
    return EmotivityTexts.CONTROLLED


def qualitative_labels(observations: Optional[object]) -> dict[str, str]:
    """Translate examiner measurements into labels (inclination, margin, organization)."""
    labels: dict[str, str] = {}
    if observations is None:
        return labels
    inclination = getattr(observations, "inclination", None)
    margin = getattr(observations, "margin", None)
    organization = getattr(observations, "organization", None)
    environment = getattr(observations, "graphic_environment", None)
    if inclination is not None:
        labels["inclinacao"] = inclination_label(float(inclination))
    if margin is not None:
        labels["margem"] = margin_label(float(margin))
    if isinstance(organization, str):
        labels["organizacao"] = organization.strip().capitalize()
    elif organization is not None:
        labels["organizacao"] = organization_label(float(organization))
    if environment:
        labels["ambiente_grafico"] = str(environment).strip().capitalize()
    return labels


def graphic_environment(nor: Optional[float], labels: Mapping[str, str]) -> str:
    """Positive/negative verdict from rhythm stability and examiner observations."""
    positive = 0
    negative = 0
    if nor:
        if nor < 10:
            positive += 1
        else:
            negative += 1
    organization = labels.get("organizacao")
    if organization == "Ordenada":
        positive += 1
    elif organization == "Desorganizada":
        negative += 1
    observed = labels.get("ambiente_grafico")
    if observed == "Positivo":
        positive += 1
    elif observed == "Negativo":
        negative += 1
    return "Positivo" if positive > negative else "Negativo"


def context_summary(metrics: PalographicMetrics, context: EvaluationContext) -> str:
    productive = metrics.productivity > 750
    stable = bool(metrics.oscillation) and metrics.oscillation < 10
    if context is EvaluationContext.OCCUPATIONAL:
        return ContextSummaryTexts.OCCUPATIONAL.format(
            productivity=ContextSummaryTexts.OCCUPATIONAL_HIGH if productive else ContextSummaryTexts.OCCUPATIONAL_MODERATE,
            stability=ContextSummaryTexts.OCCUPATIONAL_STABLE if stable else ContextSummaryTexts.OCCUPATIONAL_UNSTABLE,
        )
    if context is EvaluationContext.CLINICAL:
        unstable = metrics.emotivity is not None and metrics.emotivity > 5
        return ContextSummaryTexts.CLINICAL.format(
            balance=ContextSummaryTexts.CLINICAL_UNSTABLE if unstable else ContextSummaryTexts.CLINICAL_BALANCED,
        )
    return ContextSummaryTexts.TRAFFIC.format(
        productivity=ContextSummaryTexts.TRAFFIC_HIGH_PRODUCTIVITY if productive else ContextSummaryTexts.TRAFFIC_LOW_PRODUCTIVITY,
        rhythm=ContextSummaryTexts.TRAFFIC_STABLE if stable else ContextSummaryTexts.TRAFFIC_UNSTABLE,
        verdict=ContextSummaryTexts.TRAFFIC_FIT if productive and stable else ContextSummaryTexts.TRAFFIC_REVIEW,
    )


def build_palographic_interpretation(
    metrics: PalographicMetrics,
    classified: Mapping[str, SubscaleResult],
    observations: Optional[object],
    context: EvaluationContext,
) -> PalographicInterpretation:
    def _classification(metric: PalographicMetric) -> str:
        result = classified.get(metric.value)
        return result.classification if result is not None else ClassificationMessages.NOT_CLASSIFIED

    texts = {
        PalographicMetric.PRODUCTIVITY: productivity_text(metrics.productivity),
        PalographicMetric.OSCILLATION: rhythm_text(metrics.oscillation, metrics.productivity),
        PalographicMetric.STROKE_SIZE: size_text(metrics.stroke_size),
        PalographicMetric.STROKE_DISTANCE: distance_text(metrics.stroke_distance),
        PalographicMetric.IMPULSIVITY: impulsivity_text(metrics.impulsivity),
        PalographicMetric.EMOTIVITY: emotivity_text(metrics.emotivity),
    }
    values = metrics.as_dict()
    labels = qualitative_labels(observations)
    return PalographicInterpretation(
        context=context,
        metrics={
            metric.value: MetricInterpretation(
                value=values[metric.value],
                classification=_classification(metric),
                text=text,
            )
            for metric, text in texts.items()
        },
        graphic_environment=graphic_environment(metrics.oscillation, labels),
        summary=context_summary(metrics, context),
        qualitative=labels,
    )
