"""Datenmodell für einen Kurs (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class CourseType(str, Enum):
    THEORY = "theory"
    LAB = "lab"
    HYBRID = "hybrid"


class Course(BaseModel):
    """Repräsentiert einen Kurs. Der Kurstyp wählt die Bewertungsformel."""

    id: str
    code: str = ""
    title: str = ""
    section: Optional[str] = None
    semester: Optional[str] = None  # "Fall", "Spring"
    year: Optional[int] = None
    course_type: CourseType = CourseType.THEORY

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v)

    @field_validator("course_type", mode="before")
    @classmethod
    def _default_course_type(cls, v):
        # Fehlend oder ungültig → theory
        if isinstance(v, CourseType):
            return v
        text = str(v or "").strip().lower()
        try:
            return CourseType(text)
        except ValueError:
            return CourseType.THEORY
