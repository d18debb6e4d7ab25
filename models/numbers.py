"""Tolerante Zahlen-Normalisierung für Eingaben aus der Persistenzschicht."""

import math
from typing import Any, Optional


def as_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Wandelt value in float um; None, NaN, ±inf und Nicht-Zahlen → default.

    bool wird nicht als Zahl akzeptiert (True wäre sonst 1 Punkt).
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def clamp(value: float, low: float, high: float) -> float:
    """Begrenzt value auf [low, high]."""
    return max(low, min(high, value))
