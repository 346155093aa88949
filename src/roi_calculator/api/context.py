"""Context manifest generator — makes the calculator self-describing.

Produces structured context at two detail levels:
  - ``compact``: parameter schema + descriptions
  - ``full``:    adds the formula walk-through and glossary

A client reads ``GET /context`` once and knows which fields to send,
their bounds, and how the result is derived.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from roi_calculator.config.calculation import PLACEHOLDER_INPUT, CalculationInput


# ═══════════════════════════════════════════════════════════════════════════
# Public response models
# ═══════════════════════════════════════════════════════════════════════════

class ParameterInfo(BaseModel):
    """One form field, machine-readable."""
    name: str
    type: str
    default: Any = None
    placeholder: Any = None
    description: str
    constraints: dict[str, Any] = Field(default_factory=dict)


class EndpointInfo(BaseModel):
    """Description of one API endpoint."""
    method: str
    path: str
    description: str
    request_body: str = ""
    response: str = ""


class CalculatorContext(BaseModel):
    """Full self-describing context."""
    calculator_name: str
    version: str
    description: str
    parameters: list[ParameterInfo]
    key_formulas: list[dict[str, str]]
    glossary: dict[str, str]
    endpoints: list[EndpointInfo]


# ═══════════════════════════════════════════════════════════════════════════
# Schema extraction from Pydantic models
# ═══════════════════════════════════════════════════════════════════════════

def _extract_params(model_cls: type[BaseModel]) -> list[ParameterInfo]:
    """Extract parameter info from a Pydantic model class, keyed by wire name."""
    params: list[ParameterInfo] = []
    for name, field_info in model_cls.model_fields.items():
        wire = field_info.alias or name
        constraints: dict[str, Any] = {}
        for attr in ("ge", "gt", "le", "lt"):
            meta_val = _get_field_metadata(field_info, attr)
            if meta_val is not None:
                constraints[attr] = meta_val

        default_val = None if field_info.is_required() else field_info.default

        type_str = str(field_info.annotation) if field_info.annotation else "Any"
        type_str = type_str.replace("typing.", "").replace("<class '", "").replace("'>", "")

        params.append(ParameterInfo(
            name=wire,
            type=type_str,
            default=default_val,
            placeholder=PLACEHOLDER_INPUT.get(wire),
            description=field_info.description or "",
            constraints=constraints,
        ))
    return params


def _get_field_metadata(field_info: Any, attr: str) -> Any:
    """Extract constraint metadata from Pydantic field info."""
    if hasattr(field_info, "metadata"):
        for m in field_info.metadata:
            if hasattr(m, attr):
                return getattr(m, attr)
    return None


# ═══════════════════════════════════════════════════════════════════════════
# Context builders
# ═══════════════════════════════════════════════════════════════════════════

_KEY_FORMULAS = [
    {
        "name": "Fulfillment cost multiplier",
        "formula": "1 - fulfillmentCost / 100",
        "meaning": "Share of revenue kept after fulfillment (0.01–0.99 for valid input)",
    },
    {
        "name": "Total customer returns",
        "formula": "returnsPerYear × customerTerms",
        "meaning": "Repeat purchases over the customer lifetime",
    },
    {
        "name": "Total gross value",
        "formula": "avPurchaseValue + avPurchaseValue × totalCustomerReturns",
        "meaning": "First purchase plus every repeat purchase",
    },
    {
        "name": "Referral revenue per customer",
        "formula": "totalGrossValue × referrals",
        "meaning": "Each referred customer is assumed to bring the same gross value",
    },
    {
        "name": "Total gross value with referrals",
        "formula": "totalGrossValue + avReferralRevenuePerCustomer",
        "meaning": "Lifetime gross value including referred customers",
    },
    {
        "name": "Customer LTV",
        "formula": "totalGrossValueWithReferrals × fulfillmentCostMultiplier",
        "meaning": "Net lifetime value. Not rounded. Displayed as '$' + value for every currency.",
    },
]

_GLOSSARY = {
    "Customer LTV": "Lifetime net value of a customer after repeat purchases, referrals, and fulfillment cost.",
    "Fulfillment cost": "Percentage of gross revenue consumed by order fulfillment.",
    "Customer terms": "Expected number of years a customer remains active.",
    "Referrals": "Expected new customers generated per existing customer, each generating equivalent gross value.",
}

_ENDPOINTS = [
    EndpointInfo(
        method="GET", path="/context",
        description="This manifest. detail_level='compact' omits formulas and glossary.",
        response="CalculatorContext",
    ),
    EndpointInfo(
        method="GET", path="/schema",
        description="JSON Schema of the calculation input, by wire name.",
        response="JSON Schema object",
    ),
    EndpointInfo(
        method="GET", path="/inputs/defaults",
        description="Placeholder example values for every field.",
        response="Input JSON",
    ),
    EndpointInfo(
        method="POST", path="/validate",
        description="Validate raw form values without calculating.",
        request_body="{'inputs': {...}}",
        response="{'valid': bool, 'errors': [FieldError]}",
    ),
    EndpointInfo(
        method="POST", path="/calculate",
        description="Validate and compute the customer LTV. 422 with field errors when invalid.",
        request_body="{'inputs': {...}}",
        response="LTVBreakdown + customer_ltv + label + narrative",
    ),
    EndpointInfo(
        method="POST", path="/calculate/sensitivity",
        description="One-at-a-time sweeps ranking the inputs by LTV impact.",
        request_body="{'inputs': {...}, 'sweep_params': [...] | null}",
        response="List of TornadoBar sorted by LTV swing",
    ),
    EndpointInfo(
        method="GET", path="/session",
        description="Current state of the shared calculator session.",
        response="SessionSnapshot",
    ),
    EndpointInfo(
        method="POST", path="/session/submit",
        description="Submit the form. Valid input replaces the LTV; invalid input leaves it unchanged.",
        request_body="{'inputs': {...}}",
        response="SubmissionResult",
    ),
]


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def build_context(detail_level: Literal["compact", "full"] = "full") -> CalculatorContext:
    """Build the self-describing context manifest."""
    full = detail_level == "full"
    return CalculatorContext(
        calculator_name="ROI Calculator",
        version="1.0",
        description=(
            "Customer lifetime value calculator. Six inputs (currency, average purchase "
            "value, fulfillment cost %, returns per year, customer terms in years, "
            "referrals per customer) produce one net lifetime value."
        ),
        parameters=_extract_params(CalculationInput),
        key_formulas=_KEY_FORMULAS if full else [],
        glossary=_GLOSSARY if full else {},
        endpoints=_ENDPOINTS,
    )


def get_input_schema() -> dict:
    """Return the JSON Schema for CalculationInput, by wire name."""
    return CalculationInput.model_json_schema(by_alias=True)


def get_default_input() -> dict:
    """Return the placeholder values as a fresh dict."""
    return dict(PLACEHOLDER_INPUT)
