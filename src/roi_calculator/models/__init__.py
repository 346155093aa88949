"""Result models — validation, calculation and session output contracts."""

from roi_calculator.models.results import (
    CalculatorState,
    ErrorKind,
    FieldError,
    LTVBreakdown,
    SessionSnapshot,
    SubmissionResult,
    ValidationOutcome,
)

__all__ = [
    "CalculatorState",
    "ErrorKind",
    "FieldError",
    "LTVBreakdown",
    "SessionSnapshot",
    "SubmissionResult",
    "ValidationOutcome",
]
