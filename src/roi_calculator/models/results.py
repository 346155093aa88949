"""Result types — the contract between validator, calculator, session and API.

Everything here is a plain pydantic model so that the API can return it
with ``model_dump()`` and the dashboard can tabulate it directly.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from roi_calculator.config.calculation import CalculationInput, Currency

ErrorKind = Literal["NotANumber", "OutOfRange", "InvalidEnum"]

CalculatorState = Literal["empty", "computed"]


# ═══════════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════════

class FieldError(BaseModel):
    """One rejected form field."""

    field: str
    """Wire name of the offending field (e.g. ``returnsPerYear``)."""

    kind: ErrorKind

    bound: float | None = None
    """The violated bound for ``OutOfRange``; ``None`` otherwise."""

    message: str = ""
    """Text shown next to the field."""

    input: Any = None
    """The raw value that was rejected."""


class ValidationOutcome(BaseModel):
    """Either a validated input or every field-level violation."""

    value: CalculationInput | None = None
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_by_field(self) -> dict[str, FieldError]:
        return {e.field: e for e in self.errors}


# ═══════════════════════════════════════════════════════════════════════════
# Calculation
# ═══════════════════════════════════════════════════════════════════════════

class LTVBreakdown(BaseModel):
    """Every intermediate value of the lifetime-value derivation."""

    currency: Currency
    """Carried for display; not used in the arithmetic."""

    fulfillment_cost_multiplier: float
    """1 − fulfillment_cost / 100.  Share of revenue kept after fulfillment."""

    total_customer_returns: float
    """returns_per_year × customer_terms.  Repeat purchases over the lifetime."""

    total_gross_value: float
    """First purchase plus every repeat purchase."""

    av_referral_revenue_per_customer: float
    """total_gross_value × referrals.  Each referral is worth one customer."""

    total_gross_value_with_referrals: float

    total_net_value_with_referrals: float
    """Gross value with referrals after fulfillment cost.  This is the LTV."""

    @property
    def customer_ltv(self) -> float:
        return self.total_net_value_with_referrals


# ═══════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════

class SubmissionResult(BaseModel):
    """Outcome of one ``submit`` on a calculator session."""

    accepted: bool
    errors: list[FieldError] = Field(default_factory=list)
    breakdown: LTVBreakdown | None = None
    """This submission's derivation; ``None`` when rejected."""

    state: CalculatorState
    """Session state after the submission."""

    customer_ltv: float | None = None
    """Current LTV after the submission (the prior one if rejected)."""

    label: str = ""

    def errors_by_field(self) -> dict[str, FieldError]:
        return {e.field: e for e in self.errors}


class SessionSnapshot(BaseModel):
    """Read-only view of a calculator session."""

    state: CalculatorState
    customer_ltv: float | None = None
    label: str = ""
    last_input: CalculationInput | None = None
    accepted_submissions: int = 0
    rejected_submissions: int = 0
