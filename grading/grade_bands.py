"""Notenbänder, Rundung und Abstand zur A+-Grenze."""

import math

from config.defaults import A_PLUS_THRESHOLD, FAILING_GRADE, GRADE_THRESHOLDS


def letter_grade(total: float) -> str:
    """Buchstabennote für eine Gesamtpunktzahl (0–100), erster Treffer gilt."""
    for grade, minimum in GRADE_THRESHOLDS:
        if total >= minimum:
            return grade
    return FAILING_GRADE


def round2(value: float) -> float:
    """Auf 2 Nachkommastellen, halbe Werte aufrunden (x*100 → round → /100)."""
    return math.floor(value * 100 + 0.5) / 100


def needed_for_a_plus(current_total: float) -> float:
    """Fehlende Punkte bis A+, 0 sobald A+ erreicht ist."""
    if current_total >= A_PLUS_THRESHOLD:
        return 0.0
    return max(0.0, A_PLUS_THRESHOLD - current_total)


def grade_rank(grade: str) -> int:
    """Rang einer Note, 0 = F, höher = besser."""
    ordered = [FAILING_GRADE] + [g for g, _ in reversed(GRADE_THRESHOLDS)]
    return ordered.index(grade)
