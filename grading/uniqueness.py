"""Eindeutigkeits-Regel beim Anlegen von Bewertungen.

Mid, Final, Attendance, Assignment und Presentation dürfen pro Kurs höchstens
einmal vorkommen. CTs und generische Bewertungen (Lab Eval 01, ...) sind
unbegrenzt.

Die Regel greift nur beim Anlegen. Umbenennen wird nicht erneut geprüft.
"""

import logging
from typing import Iterable, Optional

from pydantic import BaseModel

from config.defaults import UNIQUE_CATEGORY_MESSAGES
from grading.classifier import classify
from grading.exceptions import DuplicateAssessmentError

logger = logging.getLogger(__name__)


class UniquenessViolation(BaseModel):
    """Grund, warum eine neue Bewertung abgelehnt wird."""

    category: str          # "mid", "final", ...
    message: str
    conflicting_name: str  # bereits vorhandene Bewertung


def check_unique(new_name: str, existing_names: Iterable[str]) -> Optional[UniquenessViolation]:
    """Prüft new_name gegen die vorhandenen Namen. None = erlaubt."""
    new_flags = classify(new_name)
    existing = [(n, classify(n)) for n in existing_names]

    for category, message in UNIQUE_CATEGORY_MESSAGES.items():
        if not new_flags.flag(category):
            continue
        for name, flags in existing:
            if flags.flag(category):
                logger.debug(f"'{new_name}' rejected: {category} already taken by '{name}'")
                return UniquenessViolation(
                    category=category, message=message, conflicting_name=name,
                )
    return None


def ensure_unique(new_name: str, existing_names: Iterable[str]) -> None:
    """Wie check_unique, wirft aber DuplicateAssessmentError."""
    violation = check_unique(new_name, existing_names)
    if violation is not None:
        raise DuplicateAssessmentError(violation)
