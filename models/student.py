"""Datenmodell für einen eingeschriebenen Studenten (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, field_validator


class Student(BaseModel):
    """Repräsentiert einen Studenten eines Kurses."""

    id: str
    name: str = ""
    roll: Optional[str] = None

    @field_validator("id", "roll", mode="before")
    @classmethod
    def _as_str(cls, v):
        return None if v is None else str(v)

    @property
    def display_name(self) -> str:
        """Name, sonst Matrikel, sonst ID."""
        return self.name or self.roll or self.id
