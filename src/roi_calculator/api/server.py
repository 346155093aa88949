"""FastAPI server — HTTP access to the ROI / customer-LTV calculator.

Run with:
    uvicorn roi_calculator.api.server:app --reload --port 8000

Or:
    roi-calculator-api

Endpoints:
    GET  /context                — self-describing manifest (fields + formulas)
    GET  /schema                 — JSON Schema for the calculation input
    GET  /inputs/defaults        — placeholder example values
    POST /validate               — validate raw form values
    POST /calculate              — validate + compute LTV (stateless)
    POST /calculate/sensitivity  — one-at-a-time sweeps → tornado data
    GET  /session                — shared session state
    POST /session/submit         — submit the form to the shared session
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from roi_calculator.api.context import build_context, get_default_input, get_input_schema
from roi_calculator.api.narrative import generate_narrative, generate_sensitivity_narrative
from roi_calculator.config.calculation import NUMERIC_FIELDS, wire_name
from roi_calculator.config.settings import AppSettings, configure_logging
from roi_calculator.engine.display import format_ltv_label
from roi_calculator.engine.ltv import compute_ltv_breakdown
from roi_calculator.engine.sensitivity import run_sensitivity
from roi_calculator.engine.session import CalculatorSession
from roi_calculator.engine.validator import validate_calculation_input
from roi_calculator.models.results import FieldError, SessionSnapshot, SubmissionResult

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="ROI Calculator API",
    version="1.0",
    description=(
        "Customer lifetime value calculator. Send the six form fields, get back "
        "the validated derivation and the customer LTV, or every field error at once. "
        "Start by calling GET /context."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# One open page = one session.
app.state.session = CalculatorSession()


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class CalculateRequest(BaseModel):
    """Raw form values. Strings and numbers are both accepted."""
    inputs: dict[str, Any] = Field(
        default_factory=dict,
        description="Form values by wire name. Example: "
                    "{'currency': 'EUR', 'avPurchaseValue': '1000', 'fulfillmentCost': '20', "
                    "'returnsPerYear': '8', 'customerTerms': '5', 'referrals': '1'}",
    )


class SweepParam(BaseModel):
    """One sweep: move `field` from base × (1 + low_pct) to base × (1 + high_pct)."""
    name: str | None = None
    field: str
    low_pct: float = Field(default=-0.10, allow_inf_nan=False)
    high_pct: float = Field(default=0.10, allow_inf_nan=False)


class SensitivityRequest(BaseModel):
    """Request body for /calculate/sensitivity."""
    inputs: dict[str, Any] = Field(default_factory=dict)
    sweep_params: list[SweepParam] | None = Field(
        default=None,
        description="Optional override of sweep parameters. "
                    "Default sweeps every numeric field ±10%. "
                    "Format: [{'name': 'Referrals', 'field': 'referrals', 'low_pct': -0.5, 'high_pct': 0.5}]",
    )


class ValidateResponse(BaseModel):
    """Response from /validate."""
    valid: bool
    errors: list[FieldError]


class CalculateResponse(BaseModel):
    """Response from /calculate."""
    breakdown: dict[str, Any]
    customer_ltv: float
    label: str
    narrative: str = ""


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _invalid_response(errors: list[FieldError]) -> JSONResponse:
    """422 with the field-keyed error list, matching FastAPI's own error status."""
    logger.info("Rejected input: %s", ", ".join(f"{e.field}:{e.kind}" for e in errors))
    return JSONResponse(
        status_code=422,
        content={"errors": [e.model_dump() for e in errors]},
    )


def _session(request: Request) -> CalculatorSession:
    return request.app.state.session


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and pointer to /context."""
    return {
        "name": "ROI Calculator API",
        "version": "1.0",
        "start_here": "GET /context?detail_level=full",
        "docs": "GET /docs (interactive Swagger UI)",
        "description": "Customer lifetime value from six form inputs.",
    }


@app.get("/context")
def get_context(
    detail_level: Literal["compact", "full"] = Query(
        default="full",
        description="'compact' for fields only, 'full' adds formulas and glossary",
    ),
):
    """Self-describing context manifest."""
    return build_context(detail_level)


@app.get("/schema")
def get_schema():
    """JSON Schema for the calculation input — types, defaults, bounds."""
    return get_input_schema()


@app.get("/inputs/defaults")
def get_defaults():
    """Placeholder example values shown in the empty form."""
    return get_default_input()


@app.post("/validate", response_model=ValidateResponse)
def validate(req: CalculateRequest):
    """Validate raw form values without calculating. Always 200."""
    outcome = validate_calculation_input(req.inputs)
    return ValidateResponse(valid=outcome.ok, errors=outcome.errors)


@app.post("/calculate", response_model=CalculateResponse)
def calculate(req: CalculateRequest):
    """Validate and compute the customer LTV.

    Stateless: does not touch the shared session. Every invalid field is
    reported at once with status 422.

    Example request:
    ```json
    {"inputs": {"currency": "EUR", "avPurchaseValue": 1000, "fulfillmentCost": 20,
                "returnsPerYear": 8, "customerTerms": 5, "referrals": 1}}
    ```
    """
    outcome = validate_calculation_input(req.inputs)
    if not outcome.ok:
        return _invalid_response(outcome.errors)

    breakdown = compute_ltv_breakdown(outcome.value)
    return CalculateResponse(
        breakdown=breakdown.model_dump(),
        customer_ltv=breakdown.customer_ltv,
        label=format_ltv_label(breakdown.customer_ltv),
        narrative=generate_narrative(breakdown),
    )


@app.post("/calculate/sensitivity")
def calculate_sensitivity(req: SensitivityRequest):
    """Rank the numeric inputs by how far they move the LTV."""
    outcome = validate_calculation_input(req.inputs)
    if not outcome.ok:
        return _invalid_response(outcome.errors)

    sweep_config = None
    if req.sweep_params:
        sweep_config = []
        for sp in req.sweep_params:
            if wire_name(sp.field) not in NUMERIC_FIELDS:
                raise HTTPException(
                    status_code=422,
                    detail=f"sweep field must be one of {', '.join(NUMERIC_FIELDS)}; got {sp.field!r}",
                )
            sweep_config.append((sp.name or sp.field, sp.field, sp.low_pct, sp.high_pct))

    result = run_sensitivity(outcome.value, sweep_config)

    return {
        "base_ltv": result.base_ltv,
        "tornado_bars": [
            {
                "param_name": bar.param_name,
                "field": bar.input_field,
                "base_value": bar.base_value,
                "low_value": bar.low_value,
                "high_value": bar.high_value,
                "ltv_at_low": bar.ltv_at_low,
                "ltv_at_high": bar.ltv_at_high,
                "delta_ltv": bar.delta_ltv,
            }
            for bar in result.bars
        ],
        "narrative": generate_sensitivity_narrative(result),
    }


@app.get("/session", response_model=SessionSnapshot)
def get_session(request: Request):
    """Current state of the shared calculator session."""
    return _session(request).snapshot()


@app.post("/session/submit", response_model=SubmissionResult)
def submit_to_session(req: CalculateRequest, request: Request):
    """Submit the form to the shared session.

    Always 200: a rejected submission returns its errors together with the
    unchanged previous result.
    """
    return _session(request).submit(req.inputs)


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn

    settings = AppSettings.from_env()
    configure_logging(settings.log_level)
    logger.info("Starting ROI Calculator API on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "roi_calculator.api.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
