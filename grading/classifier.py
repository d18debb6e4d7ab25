"""Namens-Klassifikation von Bewertungen.

Zwei Regelsätze mit Absicht nebeneinander:

- lose Regeln (`classify`): für die Eindeutigkeits-Prüfung. "ct" irgendwo im
  Namen zählt als Class Test ("Project", "Practical" eingeschlossen).
- strenge Regeln (`scoring_bucket`): für die Notenberechnung. CT nur bei
  Präfix "ct" oder "class test" im Namen.

Beide sind reine Funktionen des Namens und werden nie gecacht.
"""

from typing import Optional

from pydantic import BaseModel

from config.defaults import (
    CATEGORY_KEYWORDS,
    SCORING_CT_PREFIX,
    SCORING_CT_SUBSTRING,
    SCORING_KEYWORDS,
)


class ClassificationFlags(BaseModel):
    """Abgeleitete Kategorie-Flags eines Bewertungsnamens (lose Regeln)."""

    is_ct: bool = False
    is_mid: bool = False
    is_final: bool = False
    is_attendance: bool = False
    is_assignment: bool = False
    is_presentation: bool = False

    def flag(self, category: str) -> bool:
        """Flag per Kategorie-Name ("mid", "final", ...)."""
        return getattr(self, f"is_{category}")

    @property
    def categories(self) -> list[str]:
        """Alle gesetzten Kategorien in fester Reihenfolge."""
        return [c for c in CATEGORY_KEYWORDS if self.flag(c)]

    @property
    def is_lab_item(self) -> bool:
        """Kein Flag gesetzt → generische Bewertung (Lab Eval, Quiz, ...)."""
        return not self.categories


def _contains_any(name: str, keywords: tuple[str, ...]) -> bool:
    return any(k in name for k in keywords)


def classify(name: Optional[str]) -> ClassificationFlags:
    """Klassifiziert einen Namen case-insensitiv per Teilstring-Regeln."""
    lowered = (name or "").lower()
    return ClassificationFlags(**{
        f"is_{category}": _contains_any(lowered, keywords)
        for category, keywords in CATEGORY_KEYWORDS.items()
    })


def is_scoring_ct(name: Optional[str]) -> bool:
    """Strenge CT-Regel: beginnt mit "ct" oder enthält "class test"."""
    lowered = (name or "").lower()
    return lowered.startswith(SCORING_CT_PREFIX) or SCORING_CT_SUBSTRING in lowered


def scoring_bucket(name: Optional[str]) -> Optional[str]:
    """Bucket einer Bewertung in der theory-Formel, None = ignoriert.

    Reihenfolge: CT → Mid → Final → Attendance → Assignment → Presentation,
    der erste Treffer gewinnt.
    """
    if is_scoring_ct(name):
        return "ct"
    lowered = (name or "").lower()
    for bucket, keyword in SCORING_KEYWORDS.items():
        if keyword in lowered:
            return bucket
    return None


def lab_bucket(name: Optional[str]) -> str:
    """Bucket in der lab-Formel: mid, final, attendance oder lab."""
    lowered = (name or "").lower()
    for bucket in ("mid", "final", "attendance"):
        if SCORING_KEYWORDS[bucket] in lowered:
            return bucket
    return "lab"


def loose_only_ct(name: Optional[str]) -> bool:
    """True wenn der Name für die Eindeutigkeit als CT gilt, aber nicht als CT zählt."""
    return classify(name).is_ct and not is_scoring_ct(name)
