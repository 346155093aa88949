"""Tests for engine/session.py — the empty → computed state machine."""

from __future__ import annotations

import logging

from roi_calculator.engine.session import CalculatorSession


class TestInitialState:

    def test_starts_empty(self, session: CalculatorSession):
        assert session.state == "empty"
        assert session.customer_ltv is None
        assert session.label == ""
        assert session.last_input is None
        assert session.last_breakdown is None

    def test_snapshot_empty(self, session: CalculatorSession):
        snap = session.snapshot()
        assert snap.state == "empty"
        assert snap.customer_ltv is None
        assert snap.accepted_submissions == 0
        assert snap.rejected_submissions == 0


class TestSubmit:

    def test_valid_submit_computes(self, session: CalculatorSession, raw_form):
        result = session.submit(raw_form)
        assert result.accepted
        assert result.errors == []
        assert result.state == "computed"
        assert result.customer_ltv == 65_600
        assert result.label == "$65600"
        assert result.breakdown.total_gross_value == 41_000
        assert session.state == "computed"
        assert session.last_input.av_purchase_value == 1000

    def test_invalid_submit_from_empty_stays_empty(self, session: CalculatorSession, raw_form):
        result = session.submit({**raw_form, "returnsPerYear": "-1"})
        assert not result.accepted
        assert result.state == "empty"
        assert result.customer_ltv is None
        assert result.breakdown is None
        assert result.label == ""
        assert [e.field for e in result.errors] == ["returnsPerYear"]
        assert session.state == "empty"

    def test_invalid_submit_keeps_previous_value(self, session: CalculatorSession, raw_form):
        session.submit(raw_form)
        result = session.submit({**raw_form, "returnsPerYear": "-1"})
        assert not result.accepted
        assert result.errors[0].kind == "OutOfRange"
        assert result.state == "computed"
        assert result.customer_ltv == 65_600
        assert session.customer_ltv == 65_600
        assert session.last_input.returns_per_year == 8

    def test_rejected_errors_keyed_by_field(self, session: CalculatorSession, raw_form):
        result = session.submit({**raw_form, "fulfillmentCost": "100", "referrals": ""})
        by_field = result.errors_by_field()
        assert set(by_field) == {"fulfillmentCost", "referrals"}
        assert by_field["fulfillmentCost"].bound == 99
        assert by_field["referrals"].kind == "NotANumber"
        assert session.submit(raw_form).errors_by_field() == {}

    def test_valid_submit_replaces_value(self, session: CalculatorSession, raw_form):
        session.submit(raw_form)
        result = session.submit({**raw_form, "referrals": "0"})
        assert result.accepted
        # 41000 × 0.8
        assert session.customer_ltv == 32_800
        assert session.label == "$32800"

    def test_resubmit_is_idempotent(self, session: CalculatorSession, raw_form):
        first = session.submit(raw_form).customer_ltv
        second = session.submit(raw_form).customer_ltv
        third = session.submit(dict(raw_form)).customer_ltv
        assert first == second == third

    def test_never_returns_to_empty(self, session: CalculatorSession, raw_form):
        session.submit(raw_form)
        for bad in ({}, {"currency": "JPY"}, {**raw_form, "fulfillmentCost": "100"}):
            session.submit(bad)
            assert session.state == "computed"

    def test_counts(self, session: CalculatorSession, raw_form):
        session.submit(raw_form)
        session.submit({})
        session.submit({})
        snap = session.snapshot()
        assert snap.accepted_submissions == 1
        assert snap.rejected_submissions == 2
        assert snap.label == "$65600"
        assert snap.last_input.currency == "EUR"

    def test_rejection_is_logged(self, session: CalculatorSession, raw_form, caplog):
        with caplog.at_level(logging.INFO, logger="roi_calculator.engine.session"):
            session.submit({**raw_form, "returnsPerYear": "-1"})
        assert "returnsPerYear:OutOfRange" in caplog.text

    def test_sessions_are_independent(self, raw_form):
        a = CalculatorSession()
        b = CalculatorSession()
        a.submit(raw_form)
        assert a.state == "computed"
        assert b.state == "empty"
