import pytest

from psiconorm.assessments.enums import InstrumentType
from psiconorm.assessments.validators import (
    AttentionBatteryInput,
    ErrorCountInput,
    RouteAttentionInput,
    parse_raw_inputs,
)
from psiconorm.core.errors import InstrumentNotFoundError, ValidationError


def test_portuguese_keys_are_accepted():
    sheet = parse_raw_inputs(InstrumentType.ATTENTION_CONCENTRATION, {"acertos": 80, "erros": 5, "omissoes": 3})
    assert isinstance(sheet, ErrorCountInput)
    assert (sheet.correct, sheet.errors, sheet.omissions) == (80, 5, 3)


def test_errors_and_omissions_default_to_zero():
    sheet = parse_raw_inputs(InstrumentType.VISUAL_MEMORY, {"correct": 30})
    assert sheet.errors == 0
    assert sheet.omissions == 0


def test_missing_required_field_reports_path():
    with pytest.raises(ValidationError) as excinfo:
        parse_raw_inputs(InstrumentType.ATTENTION_CONCENTRATION, {"erros": 2})
    assert excinfo.value.status_code == 400
    assert any(key.startswith("acertos") or key.startswith("correct") for key in excinfo.value.detail)


def test_negative_counts_rejected():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.RECOGNITION_MEMORY, {"vp": 10, "vn": 10, "fn": -1, "fp": 0})


def test_non_numeric_value_rejected():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.ATTENTION_CONCENTRATION, {"acertos": "muitos"})


def test_correct_count_cannot_exceed_items():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.MATRIX_REASONING, {"acertos": 26})


def test_attention_battery_nested_subscales():
    sheet = parse_raw_inputs(
        InstrumentType.ATTENTION_BATTERY,
        {
            "alternada": {"acertos": 70},
            "concentrada": {"acertos": 80, "erros": 5},
            "dividida": {"acertos": 65},
            "geral": 999,
        },
    )
    assert isinstance(sheet, AttentionBatteryInput)
    assert sheet.concentrated.errors == 5
    assert sheet.general == 999


def test_attention_battery_nested_error_path():
    with pytest.raises(ValidationError) as excinfo:
        parse_raw_inputs(
            InstrumentType.ATTENTION_BATTERY,
            {"alternada": {"acertos": 70}, "concentrada": {"acertos": -1}, "dividida": {"acertos": 65}},
        )
    assert any("concentrada" in key or "concentrated" in key for key in excinfo.value.detail)


def test_route_attention_requires_one_route():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.ROUTE_ATTENTION, {})
    sheet = parse_raw_inputs(InstrumentType.ROUTE_ATTENTION, {"A": {"acertos": 40}})
    assert isinstance(sheet, RouteAttentionInput)
    assert sheet.route_d is None


def test_palographic_interval_length_enforced():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.PALOGRAPHIC, {"tempos": [100, 100, 100, 100]})


def test_palographic_requires_intervals_or_productivity():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.PALOGRAPHIC, {"nor": 5.0})


def test_palographic_stroke_lists_go_together():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.PALOGRAPHIC, {"produtividade": 700, "palos_maiores": [10.0]})


def test_palographic_total_distance_needs_productivity():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.PALOGRAPHIC, {"produtividade": 0, "distancia_total": 12.5})
    sheet = parse_raw_inputs(
        InstrumentType.PALOGRAPHIC, {"produtividade": 0, "distancia_total": 12.5, "distancia_media": 2.5}
    )
    assert sheet.stroke_distance == 2.5


def test_non_mapping_payload_rejected():
    with pytest.raises(ValidationError):
        parse_raw_inputs(InstrumentType.ATTENTION_CONCENTRATION, [80, 5, 3])


def test_unknown_instrument():
    with pytest.raises(InstrumentNotFoundError):
        parse_raw_inputs("bogus", {})
