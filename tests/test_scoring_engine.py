import pytest

from psiconorm.assessments.constants import PRODUCTIVITY_BANDS
from psiconorm.assessments.enums import InstrumentType
from psiconorm.core.errors import InstrumentNotFoundError, ValidationError
from psiconorm.core.sentinels import (
    INVALID_RESULT,
    NO_NORMATIVE_TABLE,
    NORMATIVE_LOOKUP_FAILED,
    NOT_APPLICABLE,
    OUT_OF_NORMATIVE_RANGE,
)
from psiconorm.engine.norms.factory import build_engine_for_store
from psiconorm.i18n.pt_messages import ClassificationMessages, WarningMessages
from psiconorm.services.population import build_threshold_rows


def test_scenario_a_concentrated_attention(store, scoring_engine):
    table = store.add_table("AC Geral", "ac", is_generic=True)
    store.add_row(table.table_id, 60, 69, 30, "Médio inferior")
    store.add_row(table.table_id, 70, 79, 50, "Médio")
    store.add_row(table.table_id, 80, 999, 80, "Superior")

    result = scoring_engine.score("ac", {"acertos": 80, "erros": 5, "omissoes": 3})

    assert result.raw_scores == {"pb": 72}
    assert result.percentile == 50
    assert result.classification == "Médio"
    assert result.resolved_table_id == table.table_id
    assert result.warnings == ()


def test_scenario_b_general_attention_recomputed(store, scoring_engine):
    table = store.add_table("BPA-2 Geral", "bpa2", is_generic=True)
    for subscale in ("alternada", "concentrada", "dividida"):
        store.add_row(table.table_id, 0, 999, 50, "Médio", subscale=subscale)
    store.add_row(table.table_id, 0, 209, 40, "Médio", subscale="geral")
    store.add_row(table.table_id, 210, 999, 90, "Superior", subscale="geral")

    result = scoring_engine.score(
        "bpa2",
        {
            "alternada": {"acertos": 70},
            "concentrada": {"acertos": 75},
            "dividida": {"acertos": 65},
            "geral": 12,
        },
    )

    assert result.raw_scores["geral"] == 210
    assert result.subscales["geral"].raw_score == 210
    assert result.percentile == 90
    assert result.classification == "Superior"
    assert WarningMessages.GENERAL_SCORE_RECOMPUTED.format(supplied=12, computed=210) in result.warnings


def test_attention_battery_with_companion_tables(store, scoring_engine):
    ids = {}
    for subscale, percentile in (("alternada", 20), ("concentrada", 40), ("dividida", 60), ("geral", 80)):
        table = store.add_table(
            f"BPA-2 {subscale} Sul", "bpa2", criterion="region", criterion_value="Sul", subscale=subscale
        )
        store.add_row(table.table_id, 0, 999, percentile, "Médio")
        ids[subscale] = table.table_id

    result = scoring_engine.score(
        "bpa2",
        {"AA": {"acertos": 10}, "AC": {"acertos": 10}, "AD": {"acertos": 10}},
        {"regiao": "Sul"},
    )

    assert {tag: item.percentile for tag, item in result.subscales.items()} == {
        "alternada": 20,
        "concentrada": 40,
        "dividida": 60,
        "geral": 80,
    }
    assert {tag: item.table_id for tag, item in result.subscales.items()} == ids
    assert result.percentile == 80


def test_attention_battery_missing_companion_reports_no_table(store, scoring_engine):
    table = store.add_table("BPA-2 alternada", "bpa2", criterion="region", criterion_value="Sul", subscale="alternada")
    store.add_row(table.table_id, 0, 999, 50, "Médio")

    result = scoring_engine.score(
        "bpa2",
        {"AA": {"acertos": 10}, "AC": {"acertos": 10}, "AD": {"acertos": 10}},
        {"regiao": "Sul"},
    )

    assert result.subscales["alternada"].percentile == 50
    assert result.subscales["geral"].classification == NO_NORMATIVE_TABLE
    assert result.classification == NO_NORMATIVE_TABLE
    assert WarningMessages.COMPANIONS_NOT_FOUND in result.warnings


def test_scenario_c_route_attention_without_tables(scoring_engine):
    result = scoring_engine.score(
        "rotas",
        {
            "A": {"acertos": 40, "erros": 2},
            "D": {"acertos": 35, "omissoes": 5},
            "C": {"acertos": 50},
        },
    )

    assert result.raw_scores == {"A": 38, "D": 30, "C": 50}
    for route in ("A", "D", "C"):
        assert result.subscales[route].percentile is None
        assert result.subscales[route].classification == NO_NORMATIVE_TABLE
    assert "geral" not in result.raw_scores
    assert result.percentile is None
    assert result.resolved_table_id is None
    assert WarningMessages.NO_ACTIVE_TABLE in result.warnings


def test_route_attention_has_no_composite_even_with_table(store, scoring_engine):
    table = store.add_table("Rotas Geral", "rotas", is_generic=True)
    for route, percentile in (("A", 30), ("D", 60), ("C", 90)):
        store.add_row(table.table_id, 0, 999, percentile, "Médio", subscale=route)

    result = scoring_engine.score("rotas", {"A": {"acertos": 40}, "D": {"acertos": 35}, "C": {"acertos": 50}})

    assert [result.subscales[route].percentile for route in ("A", "D", "C")] == [30, 60, 90]
    assert result.percentile is None
    assert result.classification == NOT_APPLICABLE


def test_scenario_d_palographic_productivity_band(store, scoring_engine):
    table = store.add_table("Palográfico Geral", "palografico", is_generic=True)
    for row in build_threshold_rows({"alta": [750, 899], "media": [600, 749]}, PRODUCTIVITY_BANDS):
        store.add_row(
            table.table_id, row.lower_bound, row.upper_bound, row.percentile, row.classification,
            subscale="produtividade",
        )

    result = scoring_engine.score("palografico", {"produtividade": 820, "nor": 6.0})

    assert result.classification == "Alta"
    assert result.percentile is None
    assert result.subscales["produtividade"].classification == "Alta"
    assert result.subscales["produtividade"].percentile is None
    assert result.subscales["nor"].classification == ClassificationMessages.NOT_CLASSIFIED
    assert result.interpretation is not None
    assert result.interpretation.metrics["produtividade"].classification == "Alta"


def test_palographic_interpretation_uses_requested_context(scoring_engine):
    result = scoring_engine.score(
        "palografico",
        {"tempos": [160, 165, 170, 168, 167], "qualitativas": {"organizacao": 90}},
        {"contexto_avaliacao": "clinico"},
    )
    assert result.raw_scores["produtividade"] == 830
    assert result.interpretation.context.value == "clinico"
    assert result.interpretation.graphic_environment == "Positivo"
    assert result.interpretation.qualitative["organizacao"] == "Ordenada"
    assert WarningMessages.METRIC_NOT_DERIVED.format(metric="tamanho") in result.warnings


def test_negative_raw_is_invalid_but_not_fatal(store, scoring_engine):
    table = store.add_table("AC Geral", "ac", is_generic=True)
    store.add_row(table.table_id, 0, 999, 50, "Médio")

    result = scoring_engine.score("ac", {"acertos": 10, "erros": 8, "omissoes": 9})

    assert result.raw_scores == {"pb": -7}
    assert result.percentile is None
    assert result.classification == INVALID_RESULT
    assert WarningMessages.NEGATIVE_RAW_SCORE.format(scale="pb") in result.warnings


def test_score_outside_published_ranges(store, scoring_engine):
    table = store.add_table("MEMORE", "memore", is_generic=True)
    store.add_row(table.table_id, 20, 40, 50, "Médio")

    result = scoring_engine.score("memore", {"vp": 5, "vn": 5, "fn": 1, "fp": 1})

    assert result.raw_scores == {"pb": 8}
    assert result.percentile is None
    assert result.classification == OUT_OF_NORMATIVE_RANGE


@pytest.mark.parametrize(
    "instrument,correct,expected",
    [("beta_iii", 20, 80.0), ("r1", 30, 75.0), ("mig", 14, 50.0)],
)
def test_display_percentage_for_reasoning_instruments(store, scoring_engine, instrument, correct, expected):
    table = store.add_table(f"{instrument} Geral", instrument, is_generic=True)
    store.add_row(table.table_id, 0, 999, 50, "Médio")

    result = scoring_engine.score(instrument, {"acertos": correct})

    assert result.display_percentage == expected
    assert result.raw_scores == {"acertos": correct}
    assert result.percentile == 50


def test_row_criterion_from_age(store, scoring_engine):
    table = store.add_table("MVT Trânsito", "mvt", criterion="context", criterion_value="Trânsito")
    store.add_row(table.table_id, 0, 999, 30, "Médio inferior", criterion_value="18-29")
    store.add_row(table.table_id, 0, 999, 70, "Médio superior", criterion_value="30-39")

    result = scoring_engine.score("mvt", {"acertos": 20}, {"contexto": "transito", "idade": 34})

    assert result.resolved_table_id == table.table_id
    assert result.percentile == 70
    assert result.subscales == {}


def test_education_strata_used_when_age_is_also_given(store, scoring_engine):
    table = store.add_table("AC Escolaridade", "ac", criterion="education", is_generic=True)
    store.add_row(table.table_id, 60, 79, 70, "Médio superior", criterion_value="Ensino Fundamental")
    store.add_row(table.table_id, 60, 79, 30, "Médio inferior", criterion_value="Ensino Superior")

    result = scoring_engine.score("ac", {"acertos": 72}, {"escolaridade": "Ensino Superior", "idade": 30})

    assert result.resolved_table_id == table.table_id
    assert (result.percentile, result.classification) == (30, "Médio inferior")


def test_validation_happens_before_any_store_access(failing_store_factory):
    store = failing_store_factory()
    engine = build_engine_for_store(store)
    with pytest.raises(ValidationError):
        engine.score("ac", {"acertos": -1})
    assert store.calls == []


def test_palographic_distance_with_zero_productivity_rejected_before_store_access(failing_store_factory):
    store = failing_store_factory()
    engine = build_engine_for_store(store)
    with pytest.raises(ValidationError):
        engine.score("palografico", {"tempos": [0, 0, 0, 0, 0], "distancia_total": 10})
    assert store.calls == []


def test_unknown_instrument_rejected(scoring_engine):
    with pytest.raises(InstrumentNotFoundError):
        scoring_engine.score("wisc", {})


def test_invalid_criteria_rejected(scoring_engine):
    with pytest.raises(ValidationError):
        scoring_engine.score("ac", {"acertos": 10}, {"contexto_avaliacao": "escolar"})


def test_store_unavailable_degrades_result(failing_store_factory):
    store = failing_store_factory(fail_listing=True, fail_generic=True)
    engine = build_engine_for_store(store, fallback_enabled=True)

    result = engine.score(InstrumentType.ATTENTION_CONCENTRATION, {"acertos": 50})

    assert result.raw_scores == {"pb": 50}
    assert result.percentile is None
    assert result.classification == NORMATIVE_LOOKUP_FAILED
    assert WarningMessages.STORE_UNAVAILABLE in result.warnings


def test_store_fallback_result_carries_warning(failing_store_factory):
    store = failing_store_factory(fail_listing=True, fail_generic=False)
    table = store.inner.add_table("AC Geral", "ac", is_generic=True)
    store.inner.add_row(table.table_id, 0, 999, 50, "Médio")
    engine = build_engine_for_store(store, fallback_enabled=True)

    result = engine.score("ac", {"acertos": 50})

    assert result.percentile == 50
    assert WarningMessages.STORE_FALLBACK_USED in result.warnings


def test_criteria_warnings_are_attached(store, scoring_engine):
    result = scoring_engine.score("ac", {"acertos": 50}, {"idade": 17, "contexto": "Trânsito"})
    assert WarningMessages.TRAFFIC_UNDERAGE.format(min_age=18) in result.warnings
    assert result.classification == NO_NORMATIVE_TABLE


def test_result_serializes(store, scoring_engine):
    table = store.add_table("AC Geral", "ac", is_generic=True)
    store.add_row(table.table_id, 0, 999, 50, "Médio")
    payload = scoring_engine.score("ac", {"acertos": 50}).as_dict()
    assert payload["instrument"] == "ac"
    assert payload["classification"] == "Médio"
    assert payload["suggestions"] == [table.table_id]
    assert payload["interpretation"] is None
