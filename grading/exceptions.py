"""Fehlerklassen des Notenrechners."""

from typing import Any, Optional


class GradingError(Exception):
    """Basisklasse aller Fehler des Notenrechners."""


class UnsupportedCourseTypeError(GradingError):
    """Kurstyp außerhalb von theory/lab/hybrid (Konfigurationsfehler)."""

    def __init__(self, course_type: Any, message: Optional[str] = None):
        self.course_type = course_type
        super().__init__(message or f"Unsupported course type: {course_type!r}")


class DuplicateAssessmentError(GradingError):
    """Eine "höchstens eine"-Kategorie wäre doppelt belegt."""

    def __init__(self, violation):
        self.violation = violation
        super().__init__(violation.message)


class InvalidAssessmentError(GradingError):
    """Bewertung ohne Namen oder ohne volle Punktzahl."""


class AssessmentNotFoundError(GradingError):
    """Bewertung mit dieser ID existiert im Kurs nicht."""

    def __init__(self, assessment_id: str):
        self.assessment_id = assessment_id
        super().__init__(f"Assessment not found: {assessment_id}")
