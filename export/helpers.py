"""Gemeinsame Hilfsfunktionen für den Export."""

from datetime import date

from config.defaults import FAILING_GRADE

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "header":  "4472C4",
    "missing": "F5F5F5",
    "fail":    "FF9999",
    "a_plus":  "B3FFB3",
    "pass":    "FFFFFF",
}


def today_str() -> str:
    """Gibt das heutige Datum als YYYY-MM-DD zurück."""
    return date.today().isoformat()


def grade_color(grade: str) -> str:
    """Hintergrundfarbe einer Notenzelle."""
    if grade == FAILING_GRADE:
        return COLORS["fail"]
    if grade == "A+":
        return COLORS["a_plus"]
    return COLORS["pass"]

