"""ROI Calculator — Streamlit page.

Layout: form on the left (currency + five numeric fields + Submit), result
heading on the right.  Below the fold: derivation table, waterfall of the
derivation, and an LTV curve for one chosen input.

Run with:
    streamlit run src/roi_calculator/dashboard/app.py
"""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from roi_calculator.config.calculation import CURRENCIES, NUMERIC_FIELDS, PLACEHOLDER_INPUT
from roi_calculator.engine.display import format_ltv_heading, format_number
from roi_calculator.engine.sensitivity import sweep_field
from roi_calculator.engine.session import CalculatorSession
from roi_calculator.models.results import LTVBreakdown, SubmissionResult

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(page_title="ROI Calculator", page_icon="💰", layout="wide")

st.markdown("""
<style>
.ltv-panel {
    background: #2e1065;
    color: #fff;
    border-radius: 10px;
    min-height: 320px;
    display: flex;
    align-items: center;
    justify-content: center;
}
.ltv-panel h1 { font-size: 2.25rem; font-weight: 700; color: #fff; }
</style>
""", unsafe_allow_html=True)

_LABELS = {
    "avPurchaseValue": "Average Purchase Value",
    "fulfillmentCost": "Fulfillment Cost (%)",
    "returnsPerYear": "Customer Returns Per Year",
    "customerTerms": "Customer Terms In Years",
    "referrals": "Referrals Per Customer",
}

# One browser tab = one session.
if "calculator" not in st.session_state:
    st.session_state["calculator"] = CalculatorSession()
session: CalculatorSession = st.session_state["calculator"]


def _waterfall(b: LTVBreakdown) -> go.Figure:
    fulfillment = b.total_gross_value_with_referrals - b.total_net_value_with_referrals
    fig = go.Figure(go.Waterfall(
        orientation="v",
        measure=["absolute", "relative", "total", "relative", "total"],
        x=["Gross value", "Referral revenue", "Gross w/ referrals", "Fulfillment cost", "Customer LTV"],
        y=[b.total_gross_value, b.av_referral_revenue_per_customer, 0, -fulfillment, 0],
        connector={"line": {"color": "rgba(255,255,255,0.25)"}},
        decreasing={"marker": {"color": "#e17055"}},
        increasing={"marker": {"color": "#00b894"}},
        totals={"marker": {"color": "#6c5ce7"}},
    ))
    fig.update_layout(
        title="From purchases to lifetime value",
        height=380,
        margin=dict(l=20, r=20, t=50, b=20),
        showlegend=False,
    )
    return fig


# ---------------------------------------------------------------------------
# Form + result
# ---------------------------------------------------------------------------
form_col, result_col = st.columns(2)

with form_col:
    with st.form("calculator"):
        currency = st.selectbox("Currency", CURRENCIES, index=CURRENCIES.index("EUR"))
        raw: dict[str, object] = {"currency": currency}
        slots = {"currency": st.empty()}
        for name in NUMERIC_FIELDS:
            raw[name] = st.text_input(
                _LABELS[name],
                placeholder=str(PLACEHOLDER_INPUT[name]),
                key=f"field_{name}",
            )
            slots[name] = st.empty()
        submitted = st.form_submit_button("Submit")

    if submitted:
        st.session_state["last_result"] = session.submit(raw)

    # Errors stay next to their field until the next submit.
    last_result: SubmissionResult | None = st.session_state.get("last_result")
    if last_result is not None:
        for name, err in last_result.errors_by_field().items():
            if name in slots:
                slots[name].error(err.message)

with result_col:
    st.markdown(
        f'<div class="ltv-panel"><h1>{format_ltv_heading(session.customer_ltv)}</h1></div>',
        unsafe_allow_html=True,
    )

# ---------------------------------------------------------------------------
# Derivation details (only once something has been computed)
# ---------------------------------------------------------------------------
breakdown = session.last_breakdown
if breakdown is not None:
    st.divider()
    st.subheader("How the number is built")

    rows = [
        ("Fulfillment cost multiplier", breakdown.fulfillment_cost_multiplier),
        ("Total customer returns", breakdown.total_customer_returns),
        ("Total gross value", breakdown.total_gross_value),
        ("Referral revenue per customer", breakdown.av_referral_revenue_per_customer),
        ("Gross value with referrals", breakdown.total_gross_value_with_referrals),
        ("Net value with referrals (LTV)", breakdown.total_net_value_with_referrals),
    ]
    table = pd.DataFrame(
        [{"Step": step, "Value": format_number(value)} for step, value in rows]
    )

    c1, c2 = st.columns([2, 3])
    c1.dataframe(table, use_container_width=True, hide_index=True)
    c2.plotly_chart(_waterfall(breakdown), use_container_width=True)

    with st.expander("LTV curve for one input", expanded=False):
        choice = st.selectbox(
            "Input", NUMERIC_FIELDS,
            format_func=lambda n: _LABELS[n],
            index=NUMERIC_FIELDS.index("fulfillmentCost"),
        )
        points = sweep_field(session.last_input, choice, num=40)
        curve = pd.DataFrame(points, columns=["value", "ltv"])
        fig = go.Figure(go.Scatter(x=curve["value"], y=curve["ltv"], mode="lines"))
        fig.update_layout(
            xaxis_title=_LABELS[choice],
            yaxis_title="Customer LTV ($)",
            height=320,
            margin=dict(l=20, r=20, t=20, b=20),
        )
        st.plotly_chart(fig, use_container_width=True)
        st.caption(
            f"Other inputs held at the last submission. "
            f"Selected currency ({breakdown.currency}) is a label only."
        )
