"""Result label formatting.

The label is ``"$" + value`` whatever currency was selected.  The number
prints the way a browser prints it.  Integral values drop the decimal
point and small fractions stay plain decimals down to 1e-6.  Anything
smaller uses the shortest round-trip repr with a JavaScript-style exponent.
"""

from __future__ import annotations

import math

LABEL_PREFIX = "$"
HEADING = "Customer LTV: "


def format_number(value: float) -> str:
    if math.isfinite(value) and value == int(value) and abs(value) < 1e21:
        return str(int(value))
    text = repr(float(value))
    mantissa, sep, exponent = text.partition("e")
    if not sep:
        return text
    exp = int(exponent)
    if -7 < exp < -4:
        # browsers print plain decimals down to 1e-6
        sign = "-" if mantissa.startswith("-") else ""
        digits = mantissa.lstrip("-").replace(".", "")
        return f"{sign}0.{'0' * (-exp - 1)}{digits}"
    # 1e-07 → 1e-7, 1e+22 stays as is
    return f"{mantissa}e{'-' if exp < 0 else '+'}{abs(exp)}"


def format_ltv_label(ltv: float | None) -> str:
    """``"$65600"`` for a computed value, ``""`` while unset."""
    if ltv is None:
        return ""
    return LABEL_PREFIX + format_number(ltv)


def format_ltv_heading(ltv: float | None) -> str:
    return HEADING + format_ltv_label(ltv)
