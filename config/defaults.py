"""Statische Bewertungstabellen und Standard-Konfiguration.

Schlüsselwörter, Gewichte und Notenbänder sind feste Lookup-Tabellen und
werden NICHT in der YAML-Datei gespeichert: eine Änderung hier ändert
rückwirkend jede neu berechnete Note.
"""

from config.schema import (
    AttendanceConfig,
    ExportConfig,
    GraderConfig,
    GradingPolicyConfig,
)


# ─── SCHLÜSSELWÖRTER (Namens-Klassifikation, lose Regeln) ─────────────────────

# Kategorie → Teilstrings, die im kleingeschriebenen Namen vorkommen müssen.
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "ct":           ("ct", "class test", "class-test"),
    "mid":          ("mid",),
    "final":        ("final",),
    "attendance":   ("attendance", "attend", "att."),
    "assignment":   ("assignment", "assign"),
    "presentation": ("presentation", "present.", "presentation/assignment"),
}

# Strenge CT-Regel für die Bewertung: Präfix ODER Teilstring.
SCORING_CT_PREFIX = "ct"
SCORING_CT_SUBSTRING = "class test"

# Teilstrings für die Bucket-Zuordnung im Aggregator (Reihenfolge zählt!)
SCORING_KEYWORDS: dict[str, str] = {
    "mid":          "mid",
    "final":        "final",
    "attendance":   "att",
    "assignment":   "assign",
    "presentation": "pres",
}

# Kategorien mit "höchstens eine pro Kurs" → Fehlermeldung
UNIQUE_CATEGORY_MESSAGES: dict[str, str] = {
    "mid": (
        "Mid already exists for this course. Only one Mid exam is allowed."
    ),
    "final": (
        "Final already exists for this course. Only one Final exam is allowed."
    ),
    "attendance": (
        "Attendance assessment already exists. "
        "Only one Attendance component is allowed."
    ),
    "assignment": (
        "Assignment assessment already exists. "
        "You can have at most one Assignment for this course."
    ),
    "presentation": (
        "Presentation assessment already exists. "
        "You can have at most one Presentation for this course."
    ),
}


# ─── GEWICHTE (Summe je Kurstyp = 100) ───────────────────────────────────────

THEORY_WEIGHTS: dict[str, float] = {
    "ct":                      15,
    "mid":                     30,
    "final":                   40,
    "attendance":               5,
    "assignment_presentation": 10,
}

# Aufteilung wenn Assignment UND Presentation existieren
ASSIGNMENT_SPLIT_WEIGHT = 5

LAB_WEIGHTS: dict[str, float] = {
    "lab":        25,
    "mid":        30,
    "final":      40,
    "attendance":  5,
}


# ─── NOTENBÄNDER ──────────────────────────────────────────────────────────────

# (Note, Mindestpunkte) – von oben nach unten ausgewertet, erster Treffer gilt
GRADE_THRESHOLDS: list[tuple[str, float]] = [
    ("A+", 80),
    ("A",  75),
    ("A-", 70),
    ("B+", 65),
    ("B",  60),
    ("B-", 55),
    ("C",  50),
    ("D",  45),
]
FAILING_GRADE = "F"
A_PLUS_THRESHOLD = 80


# ─── ANWESENHEIT → PUNKTE (inklusive Grenzen, ≥) ─────────────────────────────

ATTENDANCE_MARK_BANDS: list[tuple[float, int]] = [
    (90, 5),
    (80, 4),
    (70, 3),
    (60, 2),
    (50, 1),
]
ATTENDANCE_MAX_MARKS = 5


def default_grader_config() -> GraderConfig:
    """Vollständige Standard-Konfiguration."""
    return GraderConfig(
        institution_name="Department of Computer Science",
        grading=GradingPolicyConfig(),
        attendance=AttendanceConfig(),
        export=ExportConfig(),
    )
