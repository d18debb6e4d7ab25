"""Anwesenheit → Punkte (0–5).

Die Punkte werden als gewöhnliche Mark gegen eine synthetische
"Attendance"-Bewertung gespeichert; der Aggregator behandelt sie wie jede
andere Attendance-Bewertung.
"""

import re
from typing import Any, Iterable, Optional

from config.defaults import ATTENDANCE_MARK_BANDS, ATTENDANCE_MAX_MARKS
from config.schema import AttendanceConfig
from models.assessment import Assessment
from models.numbers import as_number, clamp


def attendance_percentage(attended_classes: Any, total_classes: Any) -> float:
    """attended/total × 100, begrenzt auf [0, 100]; 0 wenn total ≤ 0."""
    total = as_number(total_classes)
    attended = as_number(attended_classes)
    if total <= 0:
        return 0.0
    return clamp(attended / total * 100, 0.0, 100.0)


def attendance_marks(percentage: Any) -> int:
    """≥90 → 5, ≥80 → 4, ≥70 → 3, ≥60 → 2, ≥50 → 1, sonst 0."""
    p = as_number(percentage)
    for minimum, marks in ATTENDANCE_MARK_BANDS:
        if p >= minimum:
            return marks
    return 0


def find_attendance_assessment(
    assessments: Iterable[Assessment], name: str = "Attendance"
) -> Optional[Assessment]:
    """Sucht die Bewertung, deren Name exakt name ist (case-insensitiv)."""
    pattern = re.compile(rf"^{re.escape(name)}$", re.IGNORECASE)
    return next((a for a in assessments if pattern.match(a.name)), None)


def new_attendance_assessment(
    assessment_id: str, course_id: Optional[str], config: Optional[AttendanceConfig] = None
) -> Assessment:
    """Synthetische Attendance-Bewertung (volle Punktzahl 5, ans Listenende)."""
    config = config or AttendanceConfig()
    return Assessment(
        id=assessment_id,
        course_id=course_id,
        name=config.assessment_name,
        full_marks=ATTENDANCE_MAX_MARKS,
        order=config.order,
    )
