"""Narrative generator — plain-English walk through one LTV calculation.

Converts an ``LTVBreakdown`` into a sectioned text block that explains
where the number comes from.
"""

from __future__ import annotations

from roi_calculator.engine.display import format_ltv_label, format_number
from roi_calculator.engine.sensitivity import SensitivityResult
from roi_calculator.models.results import LTVBreakdown


def _rule(title: str) -> list[str]:
    return ["=" * 60, title, "=" * 60]


def generate_narrative(breakdown: LTVBreakdown) -> str:
    """Generate a plain-English narrative for one calculation.

    Returns a structured text block covering:
      1. Headline LTV
      2. Step-by-step derivation
      3. Notes on the display currency
    """
    b = breakdown
    kept_pct = b.fulfillment_cost_multiplier * 100

    sections: list[str] = []

    # ── 1. Headline ──
    sections.extend(_rule("CUSTOMER LIFETIME VALUE"))
    sections.append(
        f"Customer LTV: {format_ltv_label(b.customer_ltv)}\n"
        f"Selected currency: {b.currency}"
    )

    # ── 2. Derivation ──
    sections.append("")
    sections.extend(_rule("DERIVATION"))
    sections.append(
        f"Purchases over the customer lifetime: 1 + {format_number(b.total_customer_returns)} returns\n"
        f"Gross value per customer:             {format_number(b.total_gross_value)}\n"
        f"Referral revenue per customer:        {format_number(b.av_referral_revenue_per_customer)}\n"
        f"Gross value with referrals:           {format_number(b.total_gross_value_with_referrals)}\n"
        f"Kept after fulfillment:               {kept_pct:.4g}%\n"
        f"Net value with referrals:             {format_number(b.total_net_value_with_referrals)}"
    )

    # ── 3. Notes ──
    sections.append("")
    sections.extend(_rule("NOTES"))
    if b.av_referral_revenue_per_customer > b.total_gross_value:
        sections.append(
            "Referrals contribute more than the customer's own purchases; "
            "the result is highly sensitive to the referral assumption."
        )
    elif b.av_referral_revenue_per_customer == 0:
        sections.append("No referral revenue is assumed.")
    sections.append(
        f"The label always shows '$'; the {b.currency} selection is not "
        "applied to the figure or its formatting."
    )

    return "\n".join(sections)


def generate_sensitivity_narrative(result: SensitivityResult) -> str:
    """Short ranking of which input moves the LTV most."""
    lines = _rule("LTV SENSITIVITY")
    lines.append(f"Base LTV: {format_ltv_label(result.base_ltv)}")
    for bar in result.bars:
        lines.append(
            f"  {bar.param_name:28s}  {format_number(bar.ltv_at_low):>14s} → "
            f"{format_number(bar.ltv_at_high):>14s}  (swing {bar.delta_ltv:,.2f})"
        )
    if result.bars:
        lines.append(f"\nLargest driver: {result.bars[0].param_name}")
    return "\n".join(lines)
