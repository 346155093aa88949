"""Tests for the HTTP API layer.

Covers:
  - Context manifest (compact + full)
  - Schema / defaults endpoints
  - /validate, /calculate, /calculate/sensitivity
  - Shared session endpoints
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from roi_calculator.api.context import (
    _extract_params,
    build_context,
    get_default_input,
    get_input_schema,
)
from roi_calculator.api.server import app
from roi_calculator.config import CalculationInput
from roi_calculator.engine.session import CalculatorSession


client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_session():
    app.state.session = CalculatorSession()
    yield


# ═══════════════════════════════════════════════════════════════════════════
# Context manifest tests
# ═══════════════════════════════════════════════════════════════════════════


class TestContext:

    def test_build_context_full(self):
        ctx = build_context("full")
        assert ctx.calculator_name == "ROI Calculator"
        assert len(ctx.parameters) == 6
        assert len(ctx.key_formulas) == 6
        assert "Customer LTV" in ctx.glossary
        assert len(ctx.endpoints) >= 8

    def test_build_context_compact(self):
        ctx = build_context("compact")
        assert ctx.key_formulas == []
        assert ctx.glossary == {}
        assert len(ctx.parameters) == 6

    def test_extract_params_uses_wire_names(self):
        params = {p.name: p for p in _extract_params(CalculationInput)}
        assert set(params) == {
            "currency", "avPurchaseValue", "fulfillmentCost",
            "returnsPerYear", "customerTerms", "referrals",
        }
        assert params["fulfillmentCost"].constraints == {"ge": 1, "le": 99}
        assert params["returnsPerYear"].constraints == {"ge": 0}
        assert params["currency"].default == "EUR"
        assert params["avPurchaseValue"].default is None
        assert params["avPurchaseValue"].placeholder == 1000

    def test_input_schema(self):
        schema = get_input_schema()
        assert "avPurchaseValue" in schema["properties"]
        assert schema["properties"]["fulfillmentCost"]["maximum"] == 99
        assert "currency" not in schema.get("required", [])

    def test_default_input_is_valid(self):
        defaults = get_default_input()
        assert defaults["fulfillmentCost"] == 20
        CalculationInput.model_validate(defaults)


# ═══════════════════════════════════════════════════════════════════════════
# Endpoint tests
# ═══════════════════════════════════════════════════════════════════════════


class TestEndpoints:

    def test_health(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_root(self):
        data = client.get("/").json()
        assert "name" in data
        assert "start_here" in data

    def test_context_default_is_full(self):
        data = client.get("/context").json()
        assert len(data["key_formulas"]) == 6

    def test_context_compact(self):
        data = client.get("/context?detail_level=compact").json()
        assert data["key_formulas"] == []

    def test_schema(self):
        resp = client.get("/schema")
        assert resp.status_code == 200
        assert "properties" in resp.json()

    def test_defaults(self):
        data = client.get("/inputs/defaults").json()
        assert data == {
            "currency": "EUR",
            "avPurchaseValue": 1000,
            "fulfillmentCost": 20,
            "returnsPerYear": 8,
            "customerTerms": 5,
            "referrals": 1,
        }

    def test_validate_valid(self, raw_form):
        data = client.post("/validate", json={"inputs": raw_form}).json()
        assert data == {"valid": True, "errors": []}

    def test_validate_invalid(self, raw_form):
        resp = client.post("/validate", json={"inputs": {**raw_form, "fulfillmentCost": "0"}})
        assert resp.status_code == 200
        data = resp.json()
        assert data["valid"] is False
        assert data["errors"][0]["field"] == "fulfillmentCost"
        assert data["errors"][0]["kind"] == "OutOfRange"
        assert data["errors"][0]["bound"] == 1.0

    def test_calculate(self, raw_form):
        resp = client.post("/calculate", json={"inputs": raw_form})
        assert resp.status_code == 200
        data = resp.json()
        assert data["customer_ltv"] == 65600
        assert data["label"] == "$65600"
        assert data["breakdown"]["total_gross_value"] == 41000
        assert data["breakdown"]["currency"] == "EUR"
        assert "DERIVATION" in data["narrative"]

    def test_calculate_invalid_is_422(self, raw_form):
        resp = client.post("/calculate", json={"inputs": {
            **raw_form, "returnsPerYear": "-1", "currency": "JPY",
        }})
        assert resp.status_code == 422
        errors = {e["field"]: e for e in resp.json()["errors"]}
        assert set(errors) == {"returnsPerYear", "currency"}
        assert errors["returnsPerYear"]["kind"] == "OutOfRange"
        assert errors["currency"]["kind"] == "InvalidEnum"

    def test_calculate_does_not_touch_session(self, raw_form):
        client.post("/calculate", json={"inputs": raw_form})
        assert client.get("/session").json()["state"] == "empty"

    def test_sensitivity(self, raw_form):
        resp = client.post("/calculate/sensitivity", json={"inputs": raw_form})
        assert resp.status_code == 200
        data = resp.json()
        assert data["base_ltv"] == 65600
        assert len(data["tornado_bars"]) == 5
        deltas = [bar["delta_ltv"] for bar in data["tornado_bars"]]
        assert deltas == sorted(deltas, reverse=True)
        assert "LTV SENSITIVITY" in data["narrative"]

    def test_sensitivity_custom_sweeps(self, raw_form):
        resp = client.post("/calculate/sensitivity", json={
            "inputs": raw_form,
            "sweep_params": [
                {"name": "Referrals", "field": "referrals", "low_pct": -0.5, "high_pct": 0.5},
            ],
        })
        assert resp.status_code == 200
        bars = resp.json()["tornado_bars"]
        assert len(bars) == 1
        assert bars[0]["param_name"] == "Referrals"
        assert bars[0]["field"] == "referrals"

    def test_sensitivity_unknown_field(self, raw_form):
        resp = client.post("/calculate/sensitivity", json={
            "inputs": raw_form,
            "sweep_params": [{"field": "currency"}],
        })
        assert resp.status_code == 422

    @pytest.mark.parametrize("sweep", [
        {"field": "referrals", "low_pct": "half"},
        {"field": "referrals", "high_pct": None},
        {"field": ["referrals"]},
        {"name": "Referrals"},
    ])
    def test_sensitivity_malformed_sweep_is_422(self, raw_form, sweep):
        resp = client.post("/calculate/sensitivity", json={
            "inputs": raw_form,
            "sweep_params": [sweep],
        })
        assert resp.status_code == 422

    def test_sensitivity_sweep_name_defaults_to_field(self, raw_form):
        resp = client.post("/calculate/sensitivity", json={
            "inputs": raw_form,
            "sweep_params": [{"field": "customerTerms"}],
        })
        assert resp.status_code == 200
        assert resp.json()["tornado_bars"][0]["param_name"] == "customerTerms"

    def test_sensitivity_invalid_input(self, raw_form):
        resp = client.post("/calculate/sensitivity", json={"inputs": {**raw_form, "referrals": "x"}})
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["kind"] == "NotANumber"


# ═══════════════════════════════════════════════════════════════════════════
# Session endpoints
# ═══════════════════════════════════════════════════════════════════════════


class TestSessionEndpoints:

    def test_initial_session(self):
        data = client.get("/session").json()
        assert data["state"] == "empty"
        assert data["customer_ltv"] is None
        assert data["label"] == ""

    def test_submit_valid(self, raw_form):
        data = client.post("/session/submit", json={"inputs": raw_form}).json()
        assert data["accepted"] is True
        assert data["state"] == "computed"
        assert data["label"] == "$65600"
        snap = client.get("/session").json()
        assert snap["customer_ltv"] == 65600
        assert snap["last_input"]["avPurchaseValue"] == 1000

    def test_submit_invalid_keeps_value(self, raw_form):
        client.post("/session/submit", json={"inputs": raw_form})
        resp = client.post("/session/submit", json={"inputs": {**raw_form, "returnsPerYear": "-1"}})
        assert resp.status_code == 200
        data = resp.json()
        assert data["accepted"] is False
        assert data["breakdown"] is None
        assert data["customer_ltv"] == 65600
        assert [e["field"] for e in data["errors"]] == ["returnsPerYear"]
        snap = client.get("/session").json()
        assert snap["state"] == "computed"
        assert snap["rejected_submissions"] == 1
