"""Engine — validation, LTV arithmetic, session state and sweeps."""

from roi_calculator.engine.validator import (
    InputValidationError,
    require_valid,
    validate_calculation_input,
)
from roi_calculator.engine.ltv import compute_customer_ltv, compute_ltv_breakdown
from roi_calculator.engine.display import format_ltv_heading, format_ltv_label
from roi_calculator.engine.session import CalculatorSession
from roi_calculator.engine.sensitivity import run_sensitivity, sweep_field

__all__ = [
    "validate_calculation_input",
    "require_valid",
    "InputValidationError",
    "compute_ltv_breakdown",
    "compute_customer_ltv",
    "format_ltv_label",
    "format_ltv_heading",
    "CalculatorSession",
    # Sweeps
    "run_sensitivity",
    "sweep_field",
]
