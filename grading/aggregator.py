"""Notenberechnung: Rohpunkte einer Person → gewichtete Gesamtnote.

Jede Komponente führt zwei Akkumulatoren parallel:

- now:  Stand jetzt, nicht bewertete Bewertungen zählen 0
- full: Obergrenze, jede konfigurierte Bewertung (full_marks > 0) zählt 100 %

So ergibt sich in einem Durchlauf sowohl current_total als auch
max_possible (erreichbares Maximum).

Formeln (Gewichte summieren sich je auf 100):

theory:  CT 15 (beste zwei) | Mid 30 | Final 40 | Attendance 5 |
         Assignment/Presentation 10 (5+5 wenn beide existieren)
lab:     Lab-Bewertungen 25 (Durchschnitt) | Mid 30 | Final 40 | Attendance 5
hybrid:  keine eigene Formel – Alias auf theory (oder Ablehnung, je nach Policy)
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel

from config.defaults import (
    ASSIGNMENT_SPLIT_WEIGHT,
    LAB_WEIGHTS,
    THEORY_WEIGHTS,
)
from config.schema import GradingPolicyConfig
from grading.classifier import lab_bucket, scoring_bucket
from grading.exceptions import UnsupportedCourseTypeError
from grading.grade_bands import letter_grade, needed_for_a_plus, round2
from models.assessment import Assessment
from models.course import Course, CourseType
from models.numbers import as_number, clamp

logger = logging.getLogger(__name__)

AssessmentLike = Union[Assessment, Mapping]


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class ComponentScore(BaseModel):
    """Punkte einer Komponente (bereits gewichtet)."""

    name: str       # "ct", "mid", "final", "attendance", "assignment", "presentation", "lab"
    weight: float   # effektives Gewicht in dieser Berechnung
    now: float
    full: float


class APlusInfo(BaseModel):
    needed: float
    max_possible: float


class GradeSummary(BaseModel):
    """Ergebnis der Notenberechnung für eine Person in einem Kurs."""

    course_type: CourseType      # angefragter Kurstyp
    formula: CourseType          # tatsächlich angewandte Formel (theory oder lab)
    current_total: float
    max_possible: float
    grade: str
    a_plus_needed: float
    total_obtained: float        # = current_total (Altfeld)
    a_plus_info: APlusInfo
    components: list[ComponentScore] = []

    def component(self, name: str) -> Optional[ComponentScore]:
        return next((c for c in self.components if c.name == name), None)

    def to_legacy_dict(self) -> dict[str, Any]:
        """camelCase-Form, wie sie Dashboards erwarten."""
        return {
            "currentTotal": self.current_total,
            "maxPossible": self.max_possible,
            "grade": self.grade,
            "totalObtained": self.total_obtained,
            "aPlusNeeded": self.a_plus_needed,
            "aPlusInfo": {
                "needed": self.a_plus_info.needed,
                "maxPossible": self.a_plus_info.max_possible,
            },
        }

    def print_rich(self, title: str = "Grade summary") -> None:
        """Gibt die Zusammenfassung formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        color = "red" if self.grade == "F" else "green"
        formula = self.formula.value
        if self.formula != self.course_type:
            formula = f"{self.course_type.value} → {formula}"
        lines = [
            f"Grade: [bold {color}]{self.grade}[/bold {color}]",
            f"Current total: {self.current_total:.2f} / 100",
            f"Max possible: {self.max_possible:.2f}",
            f"Needed for A+: {self.a_plus_needed:.2f}",
            f"[dim]Formula: {formula}[/dim]",
        ]
        console.print(Panel("\n".join(lines), title=title, border_style="cyan"))

        table = Table(box=box.ROUNDED)
        table.add_column("Component")
        table.add_column("Weight", justify="right")
        table.add_column("Now", justify="right")
        table.add_column("Full", justify="right")
        for c in self.components:
            table.add_row(c.name, f"{c.weight:g}", f"{c.now:.2f}", f"{c.full:.2f}")
        console.print(table)


# ─── Primitive ────────────────────────────────────────────────────────────────

def percentage(obtained_by_id: Mapping, assessment_id: str, full_marks: float) -> float:
    """Anteil obtained/full_marks in [0, 1]; 0 ohne Punkte oder ohne volle Punktzahl."""
    mark = as_number(obtained_by_id.get(assessment_id), default=None)
    if mark is None or full_marks <= 0:
        return 0.0
    return clamp(mark / full_marks, 0.0, 1.0)


def best_two_average(values: Iterable[float]) -> float:
    """0 Werte → 0, ein Wert → dieser, sonst Mittel der beiden größten."""
    ordered = sorted(values, reverse=True)
    if not ordered:
        return 0.0
    if len(ordered) == 1:
        return ordered[0]
    return (ordered[0] + ordered[1]) / 2


def mean(values: Iterable[float]) -> float:
    """Arithmetisches Mittel, 0 bei leerer Liste."""
    values = list(values)
    return sum(values) / len(values) if values else 0.0


# ─── Akkumulatoren ────────────────────────────────────────────────────────────

@dataclass
class SlotAccumulator:
    """Eine einzelne Bewertung (Mid, Final, ...). Spätere überschreiben frühere."""

    now: float = 0.0
    full: float = 0.0
    present: bool = False

    def add(self, pct_now: float, configured: bool) -> None:
        self.now = pct_now
        self.full = 1.0 if configured else 0.0
        self.present = True


@dataclass
class PoolAccumulator:
    """Mehrere Bewertungen (CTs, Lab-Bewertungen), später reduziert."""

    now: list[float] = field(default_factory=list)
    full: list[float] = field(default_factory=list)

    def add(self, pct_now: float, configured: bool) -> None:
        self.now.append(pct_now)
        if configured:
            self.full.append(1.0)


def _score(name: str, weight: float, now_pct: float, full_pct: float) -> ComponentScore:
    return ComponentScore(name=name, weight=weight, now=now_pct * weight, full=full_pct * weight)


# ─── Kurstyp ──────────────────────────────────────────────────────────────────

def parse_course_type(value: Any) -> CourseType:
    """theory/lab/hybrid (case-insensitiv). None/leer → theory.

    Raises:
        UnsupportedCourseTypeError: bei jedem anderen Wert.
    """
    if isinstance(value, CourseType):
        return value
    if value is None:
        return CourseType.THEORY
    text = str(value).strip().lower()
    if not text:
        return CourseType.THEORY
    try:
        return CourseType(text)
    except ValueError:
        raise UnsupportedCourseTypeError(value) from None


def _as_assessments(items: Iterable[AssessmentLike]) -> list[Assessment]:
    return [a if isinstance(a, Assessment) else Assessment.model_validate(a) for a in items]


# ─── Formeln ──────────────────────────────────────────────────────────────────

def theory_components(assessments: list[Assessment], obtained_by_id: Mapping) -> list[ComponentScore]:
    """Komponenten der theory-Formel."""
    ct = PoolAccumulator()
    slots = {name: SlotAccumulator() for name in ("mid", "final", "attendance",
                                                   "assignment", "presentation")}

    for a in assessments:
        bucket = scoring_bucket(a.name)
        if bucket is None:
            logger.debug(f"'{a.name}' matches no theory component, ignored")
            continue
        pct_now = percentage(obtained_by_id, a.id, a.full_marks)
        target = ct if bucket == "ct" else slots[bucket]
        target.add(pct_now, a.is_configured)

    components = [
        _score("ct", THEORY_WEIGHTS["ct"], best_two_average(ct.now), best_two_average(ct.full)),
    ]
    for name in ("mid", "final", "attendance"):
        components.append(_score(name, THEORY_WEIGHTS[name], slots[name].now, slots[name].full))

    # Assignment/Presentation: 5+5 wenn beide existieren, sonst volle 10 für die eine
    assign, pres = slots["assignment"], slots["presentation"]
    total = THEORY_WEIGHTS["assignment_presentation"]
    if assign.present and pres.present:
        assign_weight = pres_weight = ASSIGNMENT_SPLIT_WEIGHT
    elif assign.present:
        assign_weight, pres_weight = total, 0
    elif pres.present:
        assign_weight, pres_weight = 0, total
    else:
        assign_weight = pres_weight = 0
    components.append(_score("assignment", assign_weight, assign.now, assign.full))
    components.append(_score("presentation", pres_weight, pres.now, pres.full))
    return components


def lab_components(assessments: list[Assessment], obtained_by_id: Mapping) -> list[ComponentScore]:
    """Komponenten der lab-Formel: alles außer Mid/Final/Attendance ist Lab-Bewertung."""
    lab = PoolAccumulator()
    slots = {name: SlotAccumulator() for name in ("mid", "final", "attendance")}

    for a in assessments:
        bucket = lab_bucket(a.name)
        pct_now = percentage(obtained_by_id, a.id, a.full_marks)
        target = lab if bucket == "lab" else slots[bucket]
        target.add(pct_now, a.is_configured)

    components = [_score("lab", LAB_WEIGHTS["lab"], mean(lab.now), mean(lab.full))]
    for name in ("mid", "final", "attendance"):
        components.append(_score(name, LAB_WEIGHTS[name], slots[name].now, slots[name].full))
    return components


# ─── Aggregator ───────────────────────────────────────────────────────────────

class GradeAggregator:
    """Berechnet GradeSummary-Objekte unter einer Kurstyp-Policy."""

    def __init__(self, policy: Optional[GradingPolicyConfig] = None) -> None:
        self.policy = policy or GradingPolicyConfig()

    def resolve_course_type(self, value: Any) -> CourseType:
        """Wie parse_course_type, unbekannte Werte je nach Policy → theory."""
        try:
            return parse_course_type(value)
        except UnsupportedCourseTypeError:
            if self.policy.unknown_course_type == "reject":
                raise
            logger.warning(f"Unsupported course type {value!r}, using theory")
            return CourseType.THEORY

    def formula_for(self, course_type: CourseType) -> CourseType:
        """Formel zum Kurstyp. Hybrid → theory oder Fehler (Policy)."""
        if course_type == CourseType.HYBRID:
            if self.policy.hybrid_formula == "reject":
                raise UnsupportedCourseTypeError(
                    course_type.value,
                    "Hybrid courses have no grading formula configured.",
                )
            return CourseType.THEORY
        return course_type

    def summarize(
        self,
        course_type: Any,
        assessments: Iterable[AssessmentLike],
        obtained_by_id: Optional[Mapping] = None,
    ) -> GradeSummary:
        """Gesamtnote für eine Person aus Bewertungen und erzielten Punkten."""
        requested = self.resolve_course_type(course_type)
        formula = self.formula_for(requested)
        items = _as_assessments(assessments)
        obtained = {str(k): v for k, v in (obtained_by_id or {}).items()}

        if formula == CourseType.LAB:
            components = lab_components(items, obtained)
        else:
            components = theory_components(items, obtained)

        current_total = sum(c.now for c in components)
        max_possible = sum(c.full for c in components)
        needed = needed_for_a_plus(current_total)

        return GradeSummary(
            course_type=requested,
            formula=formula,
            current_total=round2(current_total),
            max_possible=round2(max_possible),
            grade=letter_grade(current_total),
            a_plus_needed=round2(needed),
            total_obtained=round2(current_total),
            a_plus_info=APlusInfo(needed=round2(needed), max_possible=round2(max_possible)),
            components=[
                c.model_copy(update={"now": round2(c.now), "full": round2(c.full)})
                for c in components
            ],
        )

    def summarize_course(self, course: Course, assessments, obtained_by_id) -> GradeSummary:
        """Kurzform mit Course-Objekt (course_type ist dort immer gültig)."""
        return self.summarize(course.course_type, assessments, obtained_by_id)


def compute_summary(
    course_type: Any,
    assessments: Iterable[AssessmentLike],
    obtained_by_id: Optional[Mapping] = None,
) -> GradeSummary:
    """Strikte Variante: unbekannte Kurstypen werfen UnsupportedCourseTypeError.

    Hybrid wird als theory gerechnet.
    """
    strict = GradingPolicyConfig(unknown_course_type="reject", hybrid_formula="theory")
    return GradeAggregator(strict).summarize(course_type, assessments, obtained_by_id)
