from pydantic import BaseModel, Field
from typing import Literal


# ─── BEWERTUNGS-RICHTLINIEN ───

class GradingPolicyConfig(BaseModel):
    """Wie der Aufrufer unklare Kurstypen auflöst.

    Die Engine selbst kennt nur theory/lab/hybrid. Alles andere ist ein
    Konfigurationsfehler – hier wird festgelegt, ob er auf "theory"
    zurückfällt oder abgelehnt wird.
    """
    # "default" → unbekannter Kurstyp wird als theory gerechnet
    # "reject"  → UnsupportedCourseTypeError
    unknown_course_type: Literal["default", "reject"] = Field(
        "default",
        description="Unbekannter Kurstyp: auf theory zurückfallen oder ablehnen")
    # Hybrid hat keine eigene Formel: Alias auf theory oder ablehnen
    hybrid_formula: Literal["theory", "reject"] = Field(
        "theory",
        description="Hybrid-Kurse: theory-Formel verwenden oder ablehnen")


# ─── ANWESENHEIT ───

class AttendanceConfig(BaseModel):
    """Synthetische Attendance-Bewertung, in die die 0–5 Punkte geschrieben werden."""
    # Name der Bewertung, die bei Bedarf angelegt wird
    assessment_name: str = Field("Attendance",
        description="Name der synthetischen Attendance-Bewertung")
    # Sortierschlüssel (ans Ende der Liste)
    order: int = Field(999,
        description="Sortierschlüssel der Attendance-Bewertung")


# ─── EXPORT ───

class ExportConfig(BaseModel):
    """Ausgabeverzeichnisse für Berichte und Excel-Export."""
    output_dir: str = Field("output",
        description="Verzeichnis für Exporte")


# ─── GESAMT-CONFIG ───

class GraderConfig(BaseModel):
    """Gesamtkonfiguration des Notenrechners."""
    # Name der Einrichtung (erscheint in Berichten und Exporten)
    institution_name: str = Field("Department of Computer Science",
        description="Name der Einrichtung")
    # Auflösung von Kurstypen
    grading: GradingPolicyConfig = Field(default_factory=GradingPolicyConfig)
    # Synthetische Attendance-Bewertung
    attendance: AttendanceConfig = Field(default_factory=AttendanceConfig)
    # Export-Einstellungen
    export: ExportConfig = Field(default_factory=ExportConfig)
