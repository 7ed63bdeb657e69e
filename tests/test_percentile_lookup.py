from psiconorm.core.sentinels import (
    NO_NORMATIVE_TABLE,
    NORMATIVE_LOOKUP_FAILED,
    OUT_OF_NORMATIVE_RANGE,
    is_sentinel,
)
from psiconorm.engine.norms.composite import (
    AnyRowStrategy,
    CompositeRowMatcher,
    TotalSampleStrategy,
    pick_row,
)
from psiconorm.engine.norms.lookup import PercentileLookup


def _table_with_age_strata(store):
    table = store.add_table("AC Idade", "ac", criterion="age")
    store.add_row(table.table_id, 0, 59, 25, "Médio inferior", criterion_value="18-29")
    store.add_row(table.table_id, 60, 999, 75, "Médio superior", criterion_value="18-29")
    store.add_row(table.table_id, 0, 49, 30, "Médio inferior", criterion_value="Amostra Total")
    store.add_row(table.table_id, 50, 999, 70, "Médio superior", criterion_value="Amostra Total")
    store.add_row(table.table_id, 0, 200, 10, "Inferior", criterion_value="60-69")
    return table


def test_exact_criterion_row_wins(store):
    table = _table_with_age_strata(store)
    result = PercentileLookup(store).lookup(table.table_id, None, ("18-29",), 55)
    assert (result.percentile, result.classification, result.provenance) == (25, "Médio inferior", "exact")


def test_numeric_age_matches_bracket(store):
    table = _table_with_age_strata(store)
    result = PercentileLookup(store).lookup(table.table_id, None, (22,), 65)
    assert result.percentile == 75
    assert result.provenance == "exact"


def test_total_sample_fallback(store):
    table = _table_with_age_strata(store)
    result = PercentileLookup(store).lookup(table.table_id, None, ("40-49",), 55)
    assert (result.percentile, result.provenance) == (70, "total_sample")


def test_education_stratum_used_when_age_matches_no_row(store):
    table = store.add_table("AC Escolaridade", "ac", criterion="education")
    store.add_row(table.table_id, 60, 79, 70, "Médio superior", criterion_value="Ensino Fundamental")
    store.add_row(table.table_id, 60, 79, 30, "Médio inferior", criterion_value="Ensino Superior")
    result = PercentileLookup(store).lookup(table.table_id, None, (30, "Ensino Superior"), 72)
    assert (result.percentile, result.classification, result.provenance) == (30, "Médio inferior", "exact")


def test_bracket_label_matches_equivalent_row_label(store):
    table = store.add_table("AC Faixas", "ac", criterion="age")
    store.add_row(table.table_id, 0, 999, 40, "Médio", criterion_value="16 a 23 anos")
    store.add_row(table.table_id, 0, 999, 90, "Superior", criterion_value="24-35 anos")
    result = PercentileLookup(store).lookup(table.table_id, None, ("16-23",), 10)
    assert (result.percentile, result.provenance) == (40, "exact")


def test_any_row_fallback_takes_highest_percentile(store):
    table = store.add_table("AC Escolaridade", "ac", criterion="education")
    store.add_row(table.table_id, 0, 100, 40, "Médio", criterion_value="Ensino Médio")
    store.add_row(table.table_id, 0, 100, 60, "Médio", criterion_value="Ensino Superior")
    result = PercentileLookup(store).lookup(table.table_id, None, ("Ensino Fundamental",), 50)
    assert (result.percentile, result.provenance) == (60, "any_row")


def test_overlapping_rows_tie_break_on_highest_percentile(store):
    table = store.add_table("Sobreposta", "ac")
    store.add_row(table.table_id, 70, 79, 50, "Médio")
    store.add_row(table.table_id, 75, 85, 60, "Médio superior")
    lookup = PercentileLookup(store)
    assert lookup.lookup(table.table_id, None, (), 76).percentile == 60
    assert lookup.lookup(table.table_id, None, (), 72).percentile == 50


def test_equal_percentiles_tie_break_on_lowest_row_id(store):
    table = store.add_table("Empate", "ac")
    first = store.add_row(table.table_id, 0, 10, 50, "Médio")
    store.add_row(table.table_id, 5, 15, 50, "Médio")
    result = PercentileLookup(store).lookup(table.table_id, None, (), 7)
    assert result.row_id == first.row_id


def test_open_upper_bound_matches_any_higher_score(store):
    table = store.add_table("Aberta", "ac")
    store.add_row(table.table_id, 0, 89, 50, "Médio")
    store.add_row(table.table_id, 90, 999, 99, "Muito superior")
    store.add_row(table.table_id, 0, None, 1, "Muito inferior", subscale="extra")
    lookup = PercentileLookup(store)
    assert lookup.lookup(table.table_id, None, (), 5000).percentile == 99
    assert lookup.lookup(table.table_id, "extra", (), 12345).percentile == 1


def test_score_below_every_band_is_out_of_range(store):
    table = store.add_table("Faixa", "ac")
    store.add_row(table.table_id, 10, 20, 50, "Médio")
    result = PercentileLookup(store).lookup(table.table_id, None, (), 3)
    assert result.percentile is None
    assert result.classification == OUT_OF_NORMATIVE_RANGE
    assert is_sentinel(result.classification)
    assert not result.matched


def test_empty_table_reports_no_normative_table(store):
    table = store.add_table("Vazia", "ac")
    result = PercentileLookup(store).lookup(table.table_id, None, (), 10)
    assert result.classification == NO_NORMATIVE_TABLE


def test_subscale_filter(store):
    table = store.add_table("BPA", "bpa2")
    store.add_row(table.table_id, 0, 999, 40, "Médio", subscale="alternada")
    store.add_row(table.table_id, 0, 999, 80, "Superior", subscale="concentrada")
    lookup = PercentileLookup(store)
    assert lookup.lookup(table.table_id, "alternada", (), 50).percentile == 40
    assert lookup.lookup(table.table_id, "dividida", (), 50).classification == NO_NORMATIVE_TABLE


def test_row_read_failure_degrades(failing_store_factory):
    store = failing_store_factory(fail_listing=False, fail_generic=False, fail_rows=True)
    table = store.inner.add_table("AC", "ac")
    store.inner.add_row(table.table_id, 0, 999, 50, "Médio")
    result = PercentileLookup(store).lookup(table.table_id, None, (), 10)
    assert result.classification == NORMATIVE_LOOKUP_FAILED
    assert result.provenance == "error"


def test_custom_strategy_chain(store):
    table = store.add_table("Custom", "ac")
    store.add_row(table.table_id, 0, 999, 20, "Inferior", criterion_value="Sul")
    store.add_row(table.table_id, 0, 999, 90, "Superior")
    rows = store.list_rows(table.table_id)
    matcher = CompositeRowMatcher([TotalSampleStrategy(), AnyRowStrategy()])
    row, provenance = matcher.match(rows, 10, ("Sul",))
    assert (row.percentile, provenance) == (90, "total_sample")


def test_pick_row_empty():
    assert pick_row([]) is None
