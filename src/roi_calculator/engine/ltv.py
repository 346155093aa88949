"""Customer lifetime value — pure arithmetic over a validated input.

No rounding anywhere: the raw float result is the output.
"""

from __future__ import annotations

from roi_calculator.config.calculation import CalculationInput
from roi_calculator.models.results import LTVBreakdown


def compute_ltv_breakdown(inputs: CalculationInput) -> LTVBreakdown:
    """Run the full derivation and keep every intermediate step."""

    # ── Fulfillment ────────────────────────────────────────────────────
    # fulfillment_cost is a percentage; 20 → keep 80% of revenue.
    fulfillment_cost_multiplier = 1 - inputs.fulfillment_cost / 100

    # ── Repeat purchases ───────────────────────────────────────────────
    total_customer_returns = inputs.returns_per_year * inputs.customer_terms

    # First purchase plus every return.
    total_gross_value = (
        inputs.av_purchase_value + inputs.av_purchase_value * total_customer_returns
    )

    # ── Referrals ──────────────────────────────────────────────────────
    # A referred customer is worth the same gross value as the referrer.
    av_referral_revenue_per_customer = total_gross_value * inputs.referrals
    total_gross_value_with_referrals = total_gross_value + av_referral_revenue_per_customer

    # ── Net ────────────────────────────────────────────────────────────
    total_net_value_with_referrals = (
        total_gross_value_with_referrals * fulfillment_cost_multiplier
    )

    return LTVBreakdown(
        currency=inputs.currency,
        fulfillment_cost_multiplier=fulfillment_cost_multiplier,
        total_customer_returns=total_customer_returns,
        total_gross_value=total_gross_value,
        av_referral_revenue_per_customer=av_referral_revenue_per_customer,
        total_gross_value_with_referrals=total_gross_value_with_referrals,
        total_net_value_with_referrals=total_net_value_with_referrals,
    )


def compute_customer_ltv(inputs: CalculationInput) -> float:
    """Customer LTV for one validated input."""
    return compute_ltv_breakdown(inputs).customer_ltv
