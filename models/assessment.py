"""Datenmodell für eine Bewertung (CT1, Mid, Final, Lab Eval 01, ...)."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from models.numbers import as_number


class Assessment(BaseModel):
    """Eine Bewertung eines Kurses.

    Die Kategorie (CT, Mid, ...) wird NICHT gespeichert, sondern bei jeder
    Berechnung aus dem Namen abgeleitet. Umbenennen ändert also den Bucket.
    """

    id: str = Field(validation_alias=AliasChoices("id", "_id", "assessmentId"))
    course_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("course_id", "courseId", "course"))
    name: str
    full_marks: float = Field(
        0.0, validation_alias=AliasChoices("full_marks", "fullMarks"))
    order: int = 0
    created_at: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("created_at", "createdAt"))

    @field_validator("id", "course_id", mode="before")
    @classmethod
    def _ids_as_str(cls, v):
        return None if v is None else str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return str(v or "").strip()

    @field_validator("full_marks", mode="before")
    @classmethod
    def _coerce_full_marks(cls, v):
        # Nicht-numerisch → 0 (= nicht konfiguriert)
        return as_number(v)

    @field_validator("order", mode="before")
    @classmethod
    def _coerce_order(cls, v):
        return int(as_number(v))

    @property
    def is_configured(self) -> bool:
        """True wenn die Bewertung eine positive volle Punktzahl hat."""
        return self.full_marks > 0
