"""Sensitivity / tornado analysis on the customer LTV.

One-at-a-time sweeps: move one input, hold the rest, measure the LTV swing.
Swept values are clamped into the field's declared bounds so every point is
a valid input.

Default sweep set: every numeric field ± 10%.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from roi_calculator.config.calculation import (
    CalculationInput,
    attribute_name,
    field_bounds,
    wire_name,
)
from roi_calculator.engine.ltv import compute_customer_ltv


@dataclass(frozen=True)
class TornadoBar:
    """One bar in the tornado chart."""

    param_name: str
    """Human-readable parameter name."""

    input_field: str
    """Wire name of the swept field (e.g. 'fulfillmentCost')."""

    base_value: float
    low_value: float
    high_value: float

    ltv_at_low: float
    ltv_at_high: float

    delta_ltv: float
    """abs(ltv_at_high − ltv_at_low) — total swing width."""


@dataclass
class SensitivityResult:
    """Complete sensitivity analysis output."""

    base_ltv: float
    bars: list[TornadoBar] = field(default_factory=list)
    """Sorted by delta_ltv, largest first."""


DEFAULT_SWEEPS: list[tuple[str, str, float, float]] = [
    ("Average purchase value", "avPurchaseValue", -0.10, 0.10),
    ("Fulfillment cost", "fulfillmentCost", -0.10, 0.10),
    ("Returns per year", "returnsPerYear", -0.10, 0.10),
    ("Customer terms", "customerTerms", -0.10, 0.10),
    ("Referrals per customer", "referrals", -0.10, 0.10),
]


def _clamp(name: str, value: float) -> float:
    lower, upper = field_bounds(name)
    if lower is not None:
        value = max(value, lower)
    if upper is not None:
        value = min(value, upper)
    return value


def _with_value(inputs: CalculationInput, name: str, value: float) -> CalculationInput:
    """Copy of ``inputs`` with one field replaced, re-validated."""
    data = inputs.model_dump()
    data[attribute_name(name)] = value
    return CalculationInput.model_validate(data)


def run_sensitivity(
    inputs: CalculationInput,
    sweeps: list[tuple[str, str, float, float]] | None = None,
) -> SensitivityResult:
    """Run a tornado sweep around ``inputs``.

    Parameters
    ----------
    inputs : CalculationInput
        Base (validated) input.
    sweeps : list[tuple[name, field, low_pct, high_pct]] | None
        Fields may be wire or attribute names.  None = use DEFAULT_SWEEPS.

    Returns
    -------
    SensitivityResult
        Tornado bars sorted by LTV impact.
    """
    if sweeps is None:
        sweeps = DEFAULT_SWEEPS

    base_ltv = compute_customer_ltv(inputs)
    bars: list[TornadoBar] = []

    for name, field_name, low_pct, high_pct in sweeps:
        attr = attribute_name(field_name)
        base_val = float(getattr(inputs, attr))

        low_val = _clamp(field_name, base_val * (1 + low_pct))
        high_val = _clamp(field_name, base_val * (1 + high_pct))

        ltv_low = compute_customer_ltv(_with_value(inputs, field_name, low_val))
        ltv_high = compute_customer_ltv(_with_value(inputs, field_name, high_val))

        bars.append(TornadoBar(
            param_name=name,
            input_field=wire_name(field_name),
            base_value=base_val,
            low_value=low_val,
            high_value=high_val,
            ltv_at_low=ltv_low,
            ltv_at_high=ltv_high,
            delta_ltv=abs(ltv_high - ltv_low),
        ))

    bars.sort(key=lambda b: b.delta_ltv, reverse=True)

    return SensitivityResult(base_ltv=base_ltv, bars=bars)


def sweep_field(
    inputs: CalculationInput,
    field_name: str,
    num: int = 25,
    upper: float | None = None,
) -> list[tuple[float, float]]:
    """LTV across the valid range of one field, other fields held fixed.

    The range starts at the field's lower bound and ends at ``upper``, the
    declared upper bound, or twice the current value (whichever applies
    first).  Returns ``[(value, ltv), ...]`` with ``num`` evenly spaced points.
    """
    if num < 2:
        raise ValueError("num must be at least 2")
    lower, declared_upper = field_bounds(field_name)
    lower = 0.0 if lower is None else float(lower)
    if upper is None:
        if declared_upper is not None:
            upper = float(declared_upper)
        else:
            upper = max(2 * float(getattr(inputs, attribute_name(field_name))), lower + 1)
    upper = _clamp(field_name, upper)
    if upper <= lower:
        raise ValueError(f"empty sweep range for {field_name}: [{lower}, {upper}]")

    points: list[tuple[float, float]] = []
    for value in np.linspace(lower, upper, num):
        v = float(value)
        points.append((v, compute_customer_ltv(_with_value(inputs, field_name, v))))
    return points
