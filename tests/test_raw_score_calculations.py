import pytest

from psiconorm.assessments import calculations
from psiconorm.assessments.validators import PalographicInput
from psiconorm.core.errors import ValidationError
from psiconorm.core.numeric import safe_round


@pytest.mark.parametrize(
    "correct,errors,omissions,expected",
    [
        (80, 5, 3, 72),
        (120, 0, 0, 120),
        (0, 0, 0, 0),
        (10, 7, 9, -6),
    ],
)
def test_error_adjusted_score_is_subtractive_even_when_negative(correct, errors, omissions, expected):
    assert calculations.error_adjusted_score(correct, errors, omissions) == expected


def test_attention_battery_general_is_sum_of_subscales():
    scores = calculations.attention_battery_scores(70, 75, 65)
    assert scores.general == 210
    assert scores.as_dict() == {"alternada": 70, "concentrada": 75, "dividida": 65, "geral": 210}


def test_attention_battery_general_sum_holds_with_negative_subscale():
    scores = calculations.attention_battery_scores(-4, 30, 12)
    assert scores.general == scores.alternating + scores.concentrated + scores.divided == 38


def test_recognition_memory_score():
    assert calculations.recognition_memory_score(20, 18, 2, 3) == 33


def test_percent_of_maximum_two_decimals():
    assert calculations.percent_of_maximum(17, 25) == 68.0
    assert calculations.percent_of_maximum(1, 3) == 33.33


def test_productivity_sums_intervals():
    assert calculations.productivity([120, 130, 125, 125, 100]) == 600


def test_oscillation_index_rounds_to_one_decimal():
    # deltas 10 + 5 + 0 + 25 = 40; 40 * 100 / 600 = 6.666...
    assert calculations.oscillation_index([120, 130, 125, 125, 100]) == 6.7


def test_oscillation_index_zero_productivity():
    assert calculations.oscillation_index([0, 0, 0, 0, 0]) == 0.0


def test_interval_count_is_enforced():
    with pytest.raises(ValidationError) as excinfo:
        calculations.productivity([100, 100, 100])
    assert "intervals" in excinfo.value.detail


def test_negative_interval_rejected():
    with pytest.raises(ValidationError) as excinfo:
        calculations.oscillation_index([100, -1, 100, 100, 100])
    assert "intervals.1" in excinfo.value.detail


def test_stroke_size_summary():
    summary = calculations.stroke_size_summary([10.0, 12.0], [6.0, 8.0])
    assert summary.larger_mean == 11.0
    assert summary.smaller_mean == 7.0
    assert summary.mean == 9.0
    assert summary.max_stroke == 12.0
    assert summary.min_stroke == 6.0


def test_mean_stroke_distance_requires_strokes():
    assert calculations.mean_stroke_distance(1500, 600) == 2.5
    with pytest.raises(ValidationError):
        calculations.mean_stroke_distance(100, 0)


def test_impulsivity_index():
    assert calculations.impulsivity_index(12.4, 6.1) == 6.3


def test_emotivity_counts_true_flags_and_ignores_unknown_keys():
    flags = {"inclinacao": True, "pressao": True, "ganchos": True, "tamanho": False, "desconhecido": True}
    assert calculations.emotivity_index(flags) == 3


def test_emotivity_is_capped_at_indicator_count():
    flags = {name: True for name in (
        "inclinacao", "pressao", "tamanho", "distancia_palos",
        "generalizadas", "distancia_linhas", "alinhamento", "ganchos",
    )}
    assert calculations.emotivity_index(flags) == 8


def test_qualitative_labels():
    assert calculations.inclination_label(80) == "Direita"
    assert calculations.inclination_label(20) == "Esquerda"
    assert calculations.inclination_label(45) == "Vertical"
    assert calculations.margin_label(25) == "Ampla"
    assert calculations.margin_label(5) == "Estreita"
    assert calculations.organization_label(90) == "Ordenada"
    assert calculations.organization_label(30) == "Desorganizada"


def test_derive_palographic_metrics_from_sheet():
    sheet = PalographicInput.model_validate(
        {
            "tempos": [120, 130, 125, 125, 100],
            "palos_maiores": [10.0, 12.0],
            "palos_menores": [6.0, 8.0],
            "distancia_total": 1500,
            "irregularidades": {"pressao": True},
        }
    )
    metrics, summary = calculations.derive_palographic_metrics(sheet)
    assert metrics.productivity == 600
    assert metrics.oscillation == 6.7
    assert metrics.stroke_size == 9.0
    assert metrics.stroke_distance == 2.5
    assert metrics.impulsivity == 6.0
    assert metrics.emotivity == 1
    assert summary is not None


def test_direct_palographic_values_take_precedence():
    sheet = PalographicInput.model_validate(
        {"tempos": [120, 130, 125, 125, 100], "produtividade": 820, "nor": 4.2, "emotividade": 2}
    )
    metrics, summary = calculations.derive_palographic_metrics(sheet)
    assert metrics.productivity == 820
    assert metrics.oscillation == 4.2
    assert metrics.emotivity == 2
    assert metrics.stroke_size is None
    assert metrics.impulsivity is None
    assert summary is None


@pytest.mark.parametrize("value,decimals,expected", [(2.25, 1, 2.3), (-2.25, 1, -2.3), (6.666, 1, 6.7), (0.125, 2, 0.13)])
def test_safe_round_rounds_half_away_from_zero(value, decimals, expected):
    assert safe_round(value, decimals) == expected
