"""Input validator — raw form values → CalculationInput or field errors.

Pydantic does the coercion and range checks; this module only translates
its error list into the calculator's three error kinds:

  - ``NotANumber``   value missing, empty, non-numeric text, NaN or ±inf
  - ``OutOfRange``   coerced value outside the declared bound (bound echoed)
  - ``InvalidEnum``  currency not one of USD / EUR / GBP

All violations are reported together, one per field.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from roi_calculator.config.calculation import CURRENCIES, CalculationInput, wire_name
from roi_calculator.models.results import FieldError, ValidationOutcome

_NOT_A_NUMBER_TYPES = {
    "missing",
    "float_type",
    "float_parsing",
    "finite_number",
}
_OUT_OF_RANGE_TYPES = {
    "greater_than_equal": "ge",
    "less_than_equal": "le",
}
_INVALID_ENUM_TYPES = {"literal_error", "enum"}


class InputValidationError(ValueError):
    """Raised by :func:`require_valid` when any field is rejected."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        fields = ", ".join(e.field for e in errors)
        super().__init__(f"invalid calculation input: {fields}")


def _to_field_error(err: dict[str, Any]) -> FieldError | None:
    """Translate one pydantic error dict; ``None`` for errors we do not own."""
    loc = err.get("loc") or ()
    if not loc:
        return None
    field = wire_name(str(loc[0]))
    err_type = err["type"]
    raw = err.get("input")

    if err_type in _NOT_A_NUMBER_TYPES:
        shown = "" if err_type == "missing" else raw
        return FieldError(
            field=field, kind="NotANumber",
            message="Expected a number",
            input=shown,
        )

    if err_type in _OUT_OF_RANGE_TYPES:
        bound = float(err["ctx"][_OUT_OF_RANGE_TYPES[err_type]])
        if err_type == "greater_than_equal":
            message = f"Number must be greater than or equal to {bound:g}"
        else:
            message = f"Number must be less than or equal to {bound:g}"
        return FieldError(
            field=field, kind="OutOfRange", bound=bound,
            message=message, input=raw,
        )

    if err_type in _INVALID_ENUM_TYPES:
        return FieldError(
            field=field, kind="InvalidEnum",
            message=f"Expected one of {', '.join(CURRENCIES)}",
            input=raw,
        )

    # Anything else on a numeric field means the value could not be read.
    return FieldError(field=field, kind="NotANumber", message=err.get("msg", ""), input=raw)


def validate_calculation_input(raw: Mapping[str, Any]) -> ValidationOutcome:
    """Validate one raw form submission.

    Never raises for bad field values; returns every violation instead.
    """
    try:
        value = CalculationInput.model_validate(dict(raw))
    except ValidationError as exc:
        errors: list[FieldError] = []
        seen: set[str] = set()
        for err in exc.errors():
            field_error = _to_field_error(err)
            if field_error is None or field_error.field in seen:
                continue
            seen.add(field_error.field)
            errors.append(field_error)
        return ValidationOutcome(errors=errors)
    return ValidationOutcome(value=value)


def require_valid(raw: Mapping[str, Any]) -> CalculationInput:
    """Validate and return the input, or raise :class:`InputValidationError`."""
    outcome = validate_calculation_input(raw)
    if not outcome.ok:
        raise InputValidationError(outcome.errors)
    return outcome.value
