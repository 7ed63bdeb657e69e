from psiconorm.db.database import transactional_session
from psiconorm.db.repositories import NormativeTableRepository
from psiconorm.services.population import RowGroup, TableSpec, build_band_rows, populate_table


def _seed_ac_table():
    with transactional_session() as db:
        report = populate_table(
            NormativeTableRepository(db),
            TableSpec(
                name="AC Geral",
                instrument="ac",
                is_generic=True,
                groups=(RowGroup(rows=tuple(build_band_rows([(30, "Médio inferior", 0), (50, "Médio", 70), (80, "Superior", 80)]))),),
            ),
        )
    return report.table_id


def test_score_endpoint_returns_percentile(client):
    table_id = _seed_ac_table()
    response = client.post("/score/ac", json={"dados": {"acertos": 80, "erros": 5, "omissoes": 3}})
    assert response.status_code == 200
    body = response.json()
    assert body["raw_scores"] == {"pb": 72}
    assert body["percentile"] == 50
    assert body["classification"] == "Médio"
    assert body["resolved_table_id"] == table_id
    assert response.headers["X-Correlation-ID"]


def test_score_endpoint_accepts_english_keys_and_explicit_table(client):
    table_id = _seed_ac_table()
    response = client.post(
        "/score/ac",
        json={"raw_inputs": {"correct": 90}, "criteria": {"region": "Sul"}, "table_id": table_id},
    )
    assert response.status_code == 200
    assert response.json()["percentile"] == 80


def test_score_endpoint_without_tables_degrades(client):
    response = client.post("/score/rotas", json={"dados": {"A": {"acertos": 10}}})
    assert response.status_code == 200
    body = response.json()
    assert body["percentile"] is None
    assert body["subscales"]["A"]["classification"] == "Tabela normativa não disponível"


def test_validation_error_payload(client):
    response = client.post(
        "/score/ac",
        json={"dados": {"acertos": -1}},
        headers={"X-Correlation-ID": "req-123"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert body["detail"]["message"] == "Dados de entrada inválidos"
    assert body["detail"]["fields"]
    assert body["correlation_id"] == "req-123"


def test_unknown_instrument_is_404(client):
    response = client.post("/score/wisc", json={"dados": {}})
    assert response.status_code == 404
    assert response.json()["error"] == "instrument_not_found"


def test_list_and_get_tables(client):
    table_id = _seed_ac_table()
    listing = client.get("/tables/ac")
    assert listing.status_code == 200
    assert [item["table_id"] for item in listing.json()] == [table_id]

    detail = client.get(f"/tables/ac/{table_id}")
    assert detail.status_code == 200
    payload = detail.json()
    assert payload["name"] == "AC Geral"
    assert [row["percentile"] for row in payload["rows"]] == [30, 50, 80]

    missing = client.get("/tables/bpa2/{}".format(table_id))
    assert missing.status_code == 404
    assert missing.json()["error"] == "normative_table_not_found"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"]["status"] == "connected"
    assert body["database"]["engine"] == "sqlite"
