import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from app.core import pipeline
from app.core.models import Indicators
from app.core.sample_payloads import PRESETS, SAMPLE_REQUEST
from app.main import app

client = TestClient(app)


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_presets():
    assert set(client.get("/presets").json()) == {"default", "downturn", "expansion"}


def test_simulate_sample_request():
    resp = client.post("/simulate", json=dict(SAMPLE_REQUEST, trials=3000))
    assert resp.status_code == 200
    body = resp.json()
    assert body["risk_band"] == "high"
    assert body["trials"] == 3000
    assert set(body["average_indicators"]) == set(PRESETS["downturn"])


def test_simulate_accepts_camel_case_indicators():
    camel = {
        "yieldCurveSpread": 2.0,
        "unemploymentRate": 3.5,
        "inflationRate": 2.0,
        "gdpPerCapitaGrowth": 3.0,
        "pointCLI": 103.0,
        "ismNewOrders": 58.0,
        "ismSupplierDeliveries": 50.0,
        "leadingIndexChange": 1.0,
    }
    resp = client.post("/simulate", json={"indicators": camel, "trials": 2000, "seed": 1})
    assert resp.status_code == 200
    assert resp.json()["recession_probability"] < 0.3


def test_simulate_same_seed_same_body():
    payload = {"indicators": PRESETS["default"], "trials": 1000, "seed": 5}
    assert client.post("/simulate", json=payload).json() == client.post("/simulate", json=payload).json()


@pytest.mark.parametrize("trials", [0, -5])
def test_simulate_rejects_bad_trials(trials):
    resp = client.post("/simulate", json={"indicators": PRESETS["default"], "trials": trials})
    assert resp.status_code == 422


def test_simulate_rejects_partial_indicators():
    partial = dict(PRESETS["default"])
    partial.pop("point_cli")
    resp = client.post("/simulate", json={"indicators": partial, "trials": 100})
    assert resp.status_code == 422


def test_indicators_reject_non_finite_values():
    with pytest.raises(ValidationError):
        Indicators(**dict(PRESETS["default"], inflation_rate=float("inf")))


def test_whatif():
    resp = client.post("/whatif", json={"indicators": PRESETS["default"], "trials": 500, "seed": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["scenarios"]) == 5
    assert body["seed"] == 2


def test_context_fallback_without_key(monkeypatch):
    monkeypatch.setattr(pipeline, "is_api_key_configured", lambda: False)
    resp = client.post(
        "/context",
        json={"recession_probability": 0.42, "average_indicators": PRESETS["downturn"]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["source"] == "fallback"
    assert body["notice"] == pipeline.DISABLED_NOTICE


def test_kernel_errors_map_to_status(monkeypatch):
    from recession.errors import NumericAnomalyError

    def anomaly(payload):
        raise NumericAnomalyError("Non-finite logistic score: nan")

    monkeypatch.setattr("app.main.run_simulation_request", anomaly)
    resp = client.post("/simulate", json={"indicators": PRESETS["default"], "trials": 10})
    assert resp.status_code == 500
    assert "Non-finite" in resp.json()["detail"]


def test_overflowing_average_returns_json_detail():
    indicators = dict(PRESETS["default"], point_cli=1e308)
    resp = client.post("/simulate", json={"indicators": indicators, "trials": 4, "seed": 1})
    assert resp.status_code == 500
    assert "point_cli" in resp.json()["detail"]
