"""Calculator session — the form's submit loop as an explicit state machine.

States::

    empty ──valid submit──▶ computed ──valid submit──▶ computed
      │                        │
      └──invalid submit──▶ (unchanged)

``computed`` never returns to ``empty``; a rejected submission keeps the
previous result on screen.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from roi_calculator.config.calculation import CalculationInput
from roi_calculator.engine.display import format_ltv_label
from roi_calculator.engine.ltv import compute_ltv_breakdown
from roi_calculator.engine.validator import validate_calculation_input
from roi_calculator.models.results import (
    CalculatorState,
    LTVBreakdown,
    SessionSnapshot,
    SubmissionResult,
)

logger = logging.getLogger(__name__)


class CalculatorSession:
    """Holds the current form result for one user."""

    def __init__(self) -> None:
        self._last_input: CalculationInput | None = None
        self._last_breakdown: LTVBreakdown | None = None
        self._accepted = 0
        self._rejected = 0

    # --- read side ---------------------------------------------------------

    @property
    def state(self) -> CalculatorState:
        return "computed" if self._last_breakdown is not None else "empty"

    @property
    def customer_ltv(self) -> float | None:
        if self._last_breakdown is None:
            return None
        return self._last_breakdown.customer_ltv

    @property
    def last_input(self) -> CalculationInput | None:
        return self._last_input

    @property
    def last_breakdown(self) -> LTVBreakdown | None:
        return self._last_breakdown

    @property
    def label(self) -> str:
        return format_ltv_label(self.customer_ltv)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            customer_ltv=self.customer_ltv,
            label=self.label,
            last_input=self._last_input,
            accepted_submissions=self._accepted,
            rejected_submissions=self._rejected,
        )

    # --- write side --------------------------------------------------------

    def submit(self, raw: Mapping[str, Any]) -> SubmissionResult:
        """Validate ``raw``; on success recompute and replace the LTV."""
        outcome = validate_calculation_input(raw)
        if not outcome.ok:
            self._rejected += 1
            logger.info(
                "Submission rejected (%s); keeping state=%s",
                ", ".join(f"{e.field}:{e.kind}" for e in outcome.errors),
                self.state,
            )
            return SubmissionResult(
                accepted=False,
                errors=outcome.errors,
                state=self.state,
                customer_ltv=self.customer_ltv,
                label=self.label,
            )

        breakdown = compute_ltv_breakdown(outcome.value)
        previous = self.state
        self._last_input = outcome.value
        self._last_breakdown = breakdown
        self._accepted += 1
        logger.debug("Session %s -> computed, ltv=%r", previous, breakdown.customer_ltv)
        return SubmissionResult(
            accepted=True,
            breakdown=breakdown,
            state=self.state,
            customer_ltv=self.customer_ltv,
            label=self.label,
        )
