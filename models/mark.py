"""Datenmodell für eine erzielte Punktzahl (Pydantic v2)."""

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Mark(BaseModel):
    """Eindeutig pro (Kurs, Student, Bewertung)."""

    course_id: str = Field(
        "", validation_alias=AliasChoices("course_id", "courseId", "course"))
    student_id: str = Field(
        validation_alias=AliasChoices("student_id", "studentId", "student"))
    assessment_id: str = Field(
        validation_alias=AliasChoices("assessment_id", "assessmentId", "assessment"))
    obtained_marks: float = Field(
        validation_alias=AliasChoices("obtained_marks", "obtainedMarks"))

    @field_validator("course_id", "student_id", "assessment_id", mode="before")
    @classmethod
    def _ids_as_str(cls, v):
        return "" if v is None else str(v)

    @property
    def key(self) -> tuple[str, str]:
        """Upsert-Schlüssel innerhalb eines Kurses."""
        return (self.student_id, self.assessment_id)
