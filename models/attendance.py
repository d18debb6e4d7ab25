"""Datenmodell für die Anwesenheits-Zusammenfassung eines Studenten."""

from pydantic import BaseModel, Field


class AttendanceSummary(BaseModel):
    """Eindeutig pro (Kurs, Student). Wird bei jedem Speichern überschrieben."""

    course_id: str
    student_id: str
    total_classes: float = 0
    attended_classes: float = 0
    percentage: float = Field(0, ge=0, le=100)
    marks: int = Field(0, ge=0, le=5)
