"""Calculation input — the six form fields and their accepted ranges."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Currency = Literal["USD", "EUR", "GBP"]

CURRENCIES: tuple[str, ...] = ("USD", "EUR", "GBP")


class CalculationInput(BaseModel):
    """One submission of the calculator form.

    Wire names are camelCase (``avPurchaseValue``); Python attributes are
    snake_case.  Either spelling is accepted on input.  Numeric fields are
    coerced from text, so ``"1000"`` and ``1000`` validate the same way.
    """

    model_config = ConfigDict(populate_by_name=True)

    currency: Currency = Field(
        default="EUR",
        description="Display currency. Collected for the label only; "
                    "it does not enter the arithmetic.",
    )
    av_purchase_value: float = Field(
        alias="avPurchaseValue",
        ge=1, allow_inf_nan=False,
        description="Average value of one purchase.",
    )
    fulfillment_cost: float = Field(
        alias="fulfillmentCost",
        ge=1, le=99, allow_inf_nan=False,
        description="Share of gross revenue spent on fulfillment, in percent (1–99).",
    )
    returns_per_year: float = Field(
        alias="returnsPerYear",
        ge=0, allow_inf_nan=False,
        description="Repeat purchases per customer per year.",
    )
    customer_terms: float = Field(
        alias="customerTerms",
        ge=1, allow_inf_nan=False,
        description="Years a customer stays active.",
    )
    referrals: float = Field(
        ge=0, allow_inf_nan=False,
        description="New customers referred per existing customer. "
                    "Each referral is assumed to bring the same gross value.",
    )


# Example values shown in the empty form fields.
PLACEHOLDER_INPUT: dict[str, object] = {
    "currency": "EUR",
    "avPurchaseValue": 1000,
    "fulfillmentCost": 20,
    "returnsPerYear": 8,
    "customerTerms": 5,
    "referrals": 1,
}

NUMERIC_FIELDS: tuple[str, ...] = (
    "avPurchaseValue",
    "fulfillmentCost",
    "returnsPerYear",
    "customerTerms",
    "referrals",
)


def wire_name(field_name: str) -> str:
    """Map a Python attribute name or wire name to the wire name."""
    field_info = CalculationInput.model_fields.get(field_name)
    if field_info is not None and field_info.alias:
        return field_info.alias
    return field_name


def attribute_name(name: str) -> str:
    """Map a wire name or Python attribute name to the Python attribute."""
    if name in CalculationInput.model_fields:
        return name
    for attr, field_info in CalculationInput.model_fields.items():
        if field_info.alias == name:
            return attr
    raise KeyError(name)


def field_bounds(name: str) -> tuple[float | None, float | None]:
    """Return the ``(ge, le)`` bounds declared on a numeric field."""
    field_info = CalculationInput.model_fields[attribute_name(name)]
    lower = upper = None
    for meta in field_info.metadata:
        if getattr(meta, "ge", None) is not None:
            lower = meta.ge
        if getattr(meta, "le", None) is not None:
            upper = meta.le
    return lower, upper
