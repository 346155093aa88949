"""Configuration models — calculator inputs and runtime settings."""

from roi_calculator.config.calculation import (
    CURRENCIES,
    NUMERIC_FIELDS,
    PLACEHOLDER_INPUT,
    CalculationInput,
    Currency,
)
from roi_calculator.config.settings import AppSettings, configure_logging

__all__ = [
    "CalculationInput",
    "Currency",
    "CURRENCIES",
    "NUMERIC_FIELDS",
    "PLACEHOLDER_INPUT",
    "AppSettings",
    "configure_logging",
]
