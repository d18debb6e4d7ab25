"""Kursbericht: Noten aller Studenten + Konsistenz-Check des Datensatzes.

Berechnet pro Student eine GradeSummary und fasst den Kurs zusammen
(Durchschnitt, Extremwerte, Notenverteilung). Der Konsistenz-Check meldet
Auffälligkeiten, die die Berechnung stillschweigend toleriert.
"""

import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel

from config.defaults import FAILING_GRADE, GRADE_THRESHOLDS, UNIQUE_CATEGORY_MESSAGES
from config.schema import GradingPolicyConfig
from grading.aggregator import GradeAggregator, GradeSummary
from grading.classifier import classify, lab_bucket, loose_only_ct, scoring_bucket
from grading.grade_bands import round2
from models.course import CourseType
from models.course_data import CourseData

logger = logging.getLogger(__name__)


# ─── Modelle ──────────────────────────────────────────────────────────────────

class StudentGradeRow(BaseModel):
    """Eine Zeile des Kursberichts."""

    student_id: str
    name: str
    roll: Optional[str] = None
    obtained: dict[str, Optional[float]]   # assessment_id → Punkte (None = fehlt)
    summary: GradeSummary


class CourseDataIssue(BaseModel):
    """Eine Auffälligkeit im Datensatz."""

    severity: str        # "error" / "warning"
    check: str           # z.B. "unknown_assessment"
    description: str


class CourseDataReport(BaseModel):
    """Ergebnis des Konsistenz-Checks."""

    issues: list[CourseDataIssue]

    @property
    def is_consistent(self) -> bool:
        return not any(i.severity == "error" for i in self.issues)


class CourseGradeReport(BaseModel):
    """Kursbericht über alle Studenten."""

    course_id: str
    course_code: str
    course_type: str
    formula: str
    assessment_names: list[tuple[str, str]]   # (id, name) in Anzeige-Reihenfolge
    rows: list[StudentGradeRow]
    average_total: float
    highest_total: float
    lowest_total: float
    grade_distribution: dict[str, int]       # alle Noten, auch mit 0
    a_plus_count: int
    data_report: CourseDataReport

    def print_rich(self) -> None:
        """Gibt den Bericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        lines = [
            f"[bold]{self.course_code or self.course_id}[/bold]  |  "
            f"{self.course_type} (formula: {self.formula})",
            f"Students: {len(self.rows)}",
            f"Average: {self.average_total:.2f} | "
            f"Highest: {self.highest_total:.2f} | Lowest: {self.lowest_total:.2f}",
            f"A+: {self.a_plus_count}",
        ]
        console.print(Panel("\n".join(lines), title="Course report", border_style="cyan"))

        table = Table(box=box.ROUNDED)
        table.add_column("Student", style="bold")
        for _, name in self.assessment_names:
            table.add_column(name, justify="right")
        table.add_column("Total", justify="right")
        table.add_column("Max", justify="right")
        table.add_column("Grade")
        for row in self.rows:
            cells = [
                "–" if row.obtained.get(aid) is None else f"{row.obtained[aid]:g}"
                for aid, _ in self.assessment_names
            ]
            color = "red" if row.summary.grade == FAILING_GRADE else "green"
            table.add_row(
                row.name, *cells,
                f"{row.summary.current_total:.2f}",
                f"{row.summary.max_possible:.2f}",
                f"[{color}]{row.summary.grade}[/{color}]",
            )
        console.print(table)

        dist = Table(title="Grade distribution", box=box.SIMPLE)
        dist.add_column("Grade")
        dist.add_column("Students", justify="right")
        for grade, count in self.grade_distribution.items():
            dist.add_row(grade, str(count))
        console.print(dist)

        if self.data_report.issues:
            console.print("\n[yellow bold]Data issues:[/yellow bold]")
            for issue in self.data_report.issues:
                color = "red" if issue.severity == "error" else "yellow"
                console.print(f"  [{color}]• {issue.description}[/{color}]")


# ─── Konsistenz-Check ─────────────────────────────────────────────────────────

def check_course_data(data: CourseData,
                      formula: Optional[CourseType] = None) -> CourseDataReport:
    """Prüft den Datensatz auf Auffälligkeiten.

    Prüfungen:
    1. Punkte für unbekannte Bewertungen
    2. Bewertungen ohne volle Punktzahl (full_marks ≤ 0)
    3. Punkte über der vollen Punktzahl
    4. Doppelte Mid/Final/... nach Namen (nur über Umbenennen möglich)
       und Komponenten, in die mehrere Bewertungen fallen (nur die letzte zählt)
    5. Namen, die als CT gesperrt, aber nicht als CT gewertet werden
    """
    issues: list[CourseDataIssue] = []
    by_id = {a.id: a for a in data.assessments}

    # ── 1. Unbekannte Bewertungen ──
    unknown = sorted({m.assessment_id for m in data.marks if m.assessment_id not in by_id})
    for aid in unknown:
        issues.append(CourseDataIssue(
            severity="error", check="unknown_assessment",
            description=f"Marks reference unknown assessment {aid}; they are ignored.",
        ))

    # ── 2. Nicht konfiguriert ──
    for a in data.assessments:
        if not a.is_configured:
            issues.append(CourseDataIssue(
                severity="warning", check="unconfigured_assessment",
                description=f"'{a.name}' has no positive full marks; it scores 0.",
            ))

    # ── 3. Über der vollen Punktzahl ──
    for m in data.marks:
        a = by_id.get(m.assessment_id)
        if a is not None and a.is_configured and m.obtained_marks > a.full_marks:
            issues.append(CourseDataIssue(
                severity="warning", check="marks_above_full",
                description=(
                    f"Student {m.student_id}: {m.obtained_marks:g} > {a.full_marks:g} "
                    f"on '{a.name}' (capped at full marks)."
                ),
            ))

    # ── 4. Doppelte Kategorien (Eindeutigkeit, lose Namensregeln) ──
    for category in UNIQUE_CATEGORY_MESSAGES:
        names = [a.name for a in data.assessments if classify(a.name).flag(category)]
        if len(names) > 1:
            issues.append(CourseDataIssue(
                severity="warning", check="duplicate_category",
                description=(
                    f"More than one {category} assessment by name: {', '.join(names)} "
                    f"(only possible through renaming)."
                ),
            ))

    # ── 4b. Mehrfach belegte Einzel-Komponenten (Bewertung) ──
    if formula is None:
        formula = CourseType.LAB if data.course.course_type == CourseType.LAB else CourseType.THEORY
    bucket_of = lab_bucket if formula == CourseType.LAB else scoring_bucket
    by_bucket: dict[str, list[str]] = {}
    for a in data.sorted_assessments():
        bucket = bucket_of(a.name)
        if bucket not in (None, "ct", "lab"):
            by_bucket.setdefault(bucket, []).append(a.name)
    for bucket, names in by_bucket.items():
        if len(names) > 1:
            issues.append(CourseDataIssue(
                severity="warning", check="shadowed_assessment",
                description=(
                    f"{', '.join(names)} all score as {bucket}; "
                    f"only the last one ('{names[-1]}') is scored."
                ),
            ))

    # ── 5. Lose vs. strenge CT-Regel ──
    for a in data.assessments:
        if loose_only_ct(a.name):
            issues.append(CourseDataIssue(
                severity="warning", check="loose_ct_name",
                description=(
                    f"'{a.name}' counts as a class test for uniqueness "
                    f"but is not scored as a CT."
                ),
            ))

    return CourseDataReport(issues=issues)


# ─── Bericht ──────────────────────────────────────────────────────────────────

class CourseReportBuilder:
    """Baut einen CourseGradeReport für einen CourseData-Schnappschuss."""

    def __init__(self, policy: Optional[GradingPolicyConfig] = None) -> None:
        self.aggregator = GradeAggregator(policy)

    def summarize_student(self, data: CourseData, student_id: str) -> GradeSummary:
        return self.aggregator.summarize_course(
            data.course, data.sorted_assessments(), data.marks_for(student_id))

    def build(self, data: CourseData) -> CourseGradeReport:
        assessments = data.sorted_assessments()
        rows: list[StudentGradeRow] = []

        for student_id in data.student_ids():
            obtained = data.marks_for(student_id)
            summary = self.aggregator.summarize_course(data.course, assessments, obtained)
            student = data.get_student(student_id)
            rows.append(StudentGradeRow(
                student_id=student_id,
                name=student.display_name if student else student_id,
                roll=student.roll if student else None,
                obtained={a.id: obtained.get(a.id) for a in assessments},
                summary=summary,
            ))

        totals = [r.summary.current_total for r in rows]
        counts = Counter(r.summary.grade for r in rows)
        grades = [g for g, _ in GRADE_THRESHOLDS] + [FAILING_GRADE]
        formula = self.aggregator.formula_for(data.course.course_type)

        report = CourseGradeReport(
            course_id=data.course.id,
            course_code=data.course.code,
            course_type=data.course.course_type.value,
            formula=formula.value,
            assessment_names=[(a.id, a.name) for a in assessments],
            rows=rows,
            average_total=round2(sum(totals) / len(totals)) if totals else 0.0,
            highest_total=max(totals, default=0.0),
            lowest_total=min(totals, default=0.0),
            grade_distribution={g: counts.get(g, 0) for g in grades},
            a_plus_count=counts.get("A+", 0),
            data_report=check_course_data(data, formula),
        )
        logger.info(
            f"Course report {report.course_code or report.course_id}: "
            f"{len(rows)} students, average {report.average_total:.2f}"
        )
        return report
