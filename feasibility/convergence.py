"""Numeric coercion, rounding and tolerance-gated writes."""

from __future__ import annotations

import math
from typing import Any

from feasibility.paths import Path, parse_path


WHOLE = "whole"
CENTS = "cents"

TOLERANCE = {WHOLE: 0.5, CENTS: 0.001}


def to_number(value: Any) -> float:
    """Coerce a form value to float; blanks and junk become 0."""
    if value is None or isinstance(value, bool):
        return float(value or 0)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_whole(value: float) -> float:
    # Half-up toward +inf, same as Math.round.
    return float(math.floor(value + 0.5))


def round_cents(value: float) -> float:
    return round(value, 2)


def round_to(value: Any, precision: str) -> float:
    number = to_number(value)
    if precision == WHOLE:
        return round_whole(number)
    if precision == CENTS:
        return round_cents(number)
    raise ValueError(f"Unsupported precision: {precision}")


def needs_write(current: Any, value: Any, precision: str) -> bool:
    return abs(to_number(current) - round_to(value, precision)) > TOLERANCE[precision]


def write_if_changed(store, path: str | Path, value: Any, precision: str = WHOLE) -> bool:
    """Commit the rounded value only when it differs beyond tolerance."""
    parsed = parse_path(path)
    rounded = round_to(value, precision)
    if not needs_write(store.get(parsed), rounded, precision):
        return False
    if precision == WHOLE and rounded.is_integer():
        store.set(parsed, int(rounded))
    else:
        store.set(parsed, rounded)
    return True
