"""Shared test fixtures — the placeholder scenario from the form."""

from __future__ import annotations

import pytest

from roi_calculator.config import CalculationInput
from roi_calculator.engine.session import CalculatorSession


@pytest.fixture
def raw_form() -> dict[str, object]:
    """Form values as a browser sends them: all text."""
    return {
        "currency": "EUR",
        "avPurchaseValue": "1000",
        "fulfillmentCost": "20",
        "returnsPerYear": "8",
        "customerTerms": "5",
        "referrals": "1",
    }


@pytest.fixture
def base_input() -> CalculationInput:
    return CalculationInput(
        currency="EUR",
        av_purchase_value=1000,
        fulfillment_cost=20,
        returns_per_year=8,
        customer_terms=5,
        referrals=1,
    )


@pytest.fixture
def minimum_input() -> CalculationInput:
    """Every field at its lowest accepted value."""
    return CalculationInput(
        av_purchase_value=1,
        fulfillment_cost=1,
        returns_per_year=0,
        customer_terms=1,
        referrals=0,
    )


@pytest.fixture
def session() -> CalculatorSession:
    return CalculatorSession()
