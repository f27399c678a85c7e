import pytest

from financing_calc_web.app import app as flask_app


@pytest.fixture()
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as test_client:
        yield test_client


REFERENCE_FORM = {
    "sale_price": "588200",
    "bonus": "30000",
    "financing_percentage": "80",
    "construction_months": "30",
    "incc_rate": "0.5",
    "interest_rate": "9.5",
    "is_immediate_fees_free": "1",
}


def test_index_renders_defaults(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert 'value="588200"' in body
    assert "checked" in body
    assert 'id="summary"' not in body


def test_index_post_renders_comparison(client):
    resp = client.post("/", data=REFERENCE_FORM)
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "Immediate financing is cheaper" in body
    assert "R$ 20.846,00" in body
    assert "70.00%" in body


def test_index_post_blank_fields_count_as_zero(client):
    form = dict(REFERENCE_FORM, bonus="", incc_rate="abc")
    resp = client.post("/", data=form)
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert 'id="error"' not in body
    assert 'id="summary"' in body


def test_index_post_shows_validation_error(client):
    form = dict(REFERENCE_FORM, construction_months="")
    resp = client.post("/", data=form)
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "construction_months must be at least 1" in body
    assert 'id="summary"' not in body


def test_api_calculate(client):
    payload = {
        "sale_price": 588200,
        "bonus": 30000,
        "financing_percentage": 80,
        "construction_months": 30,
        "incc_rate": 0.5,
        "interest_rate": 9.5,
    }
    resp = client.post("/api/calculate", json=payload)
    assert resp.status_code == 200
    data = resp.get_json()
    keys = data["result"]["key_delivery_financing"]
    assert keys["financing_percentage"] == 70.0
    assert keys["financed_amount"] == pytest.approx(411740)
    assert keys["registry_fee"] == 3200.0
    assert data["result"]["down_payment"] == pytest.approx(111640)
    assert data["comparison"]["winner"] == "immediate"


def test_api_rejects_malformed_and_invalid(client):
    resp = client.post("/api/calculate", json={"sale_price": "a lot"})
    assert resp.status_code == 400

    resp = client.post("/api/calculate", json={"construction_months": 0})
    assert resp.status_code == 422
    assert "construction_months must be at least 1" in resp.get_json()["error"]

    resp = client.post("/api/calculate", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_index_post_keeps_user_values_on_validation_error(client):
    form = dict(REFERENCE_FORM, sale_price="100000", bonus="200000")
    resp = client.post("/", data=form)
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "bonus must not exceed sale_price" in body
    assert 'value="100000"' in body
    assert 'value="200000"' in body
    assert 'value="588200"' not in body


def test_index_post_blank_months_is_echoed_as_zero(client):
    resp = client.post("/", data=dict(REFERENCE_FORM, construction_months=""))
    body = resp.get_data(as_text=True)
    assert 'name="construction_months" value="0"' in body
    assert 'name="construction_months" value="30"' not in body


def test_index_reads_decimal_comma(client):
    comma = client.post("/", data=dict(REFERENCE_FORM, incc_rate="0,5")).get_data(as_text=True)
    dot = client.post("/", data=REFERENCE_FORM).get_data(as_text=True)
    assert 'name="incc_rate" value="0.5"' in comma
    assert comma == dot


def test_index_uses_number_inputs(client):
    body = client.get("/").get_data(as_text=True)
    assert 'type="number" step="any" id="incc_rate"' in body


def test_index_post_handles_very_large_totals(client):
    resp = client.post("/", data=dict(REFERENCE_FORM, construction_months="120", incc_rate="60"))
    assert resp.status_code == 200
    assert 'id="summary"' in resp.get_data(as_text=True)


@pytest.mark.parametrize(
    "overrides",
    [
        {"is_immediate_fees_free": "false"},
        {"is_immediate_fees_free": 0},
        {"construction_months": 2.7},
        {"sale_price": True},
    ],
)
def test_api_rejects_loosely_typed_values(client, overrides):
    resp = client.post("/api/calculate", json=overrides)
    assert resp.status_code == 400


def test_api_accepts_boolean_flag_and_whole_float_months(client):
    resp = client.post(
        "/api/calculate",
        json={"is_immediate_fees_free": False, "construction_months": 30.0},
    )
    assert resp.status_code == 200
