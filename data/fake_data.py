"""Testdaten-Generator für den Notenrechner.

Erzeugt einen realistischen Kurs mit Studenten, Bewertungen, Punkten und
Anwesenheit. Absichtlich enthalten:

  1. Teilbewertung: die Final ist bei einem Teil der Studenten noch leer
  2. Streuung: einzelne Studenten liegen unter 45 (F), einzelne über 80 (A+)
  3. Anwesenheit: wird über save_attendance als Mark geschrieben
"""

import random
from typing import Optional

from config.schema import GraderConfig
from models.course import Course, CourseType
from models.course_data import CourseData
from models.student import Student

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Arif", "Nusrat", "Tanvir", "Farhana", "Rakib", "Sadia", "Imran",
    "Maliha", "Shafin", "Tasnim", "Fahim", "Jannat", "Rashed", "Anika",
    "Sabbir", "Mim", "Zahid", "Lamia", "Nayeem", "Riya",
]

_LAST_NAMES = [
    "Hossain", "Rahman", "Ahmed", "Islam", "Chowdhury", "Khan", "Karim",
    "Sarker", "Uddin", "Haque", "Akter", "Mahmud", "Siddique", "Alam",
]

# ─── Bewertungspläne je Kurstyp: (Name, volle Punktzahl) ──────────────────────

_THEORY_PLAN: list[tuple[str, float]] = [
    ("CT1", 20), ("CT2", 20), ("CT3", 20),
    ("Mid", 30), ("Final", 40),
    ("Assignment", 10), ("Presentation", 10),
]

_LAB_PLAN: list[tuple[str, float]] = [
    ("Lab Eval 01", 20), ("Lab Eval 02", 20), ("Lab Eval 03", 20),
    ("Lab Report", 10), ("Mid", 30), ("Final", 40),
]


class FakeCourseGenerator:
    """Erzeugt einen CourseData-Datensatz mit Zufallsdaten."""

    def __init__(self, config: GraderConfig, seed: Optional[int] = None) -> None:
        self.config = config
        self.seed = seed
        self.rng = random.Random(seed)

    def _generate_students(self, count: int) -> list[Student]:
        students = []
        for i in range(1, count + 1):
            name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"
            students.append(Student(id=f"s{i:03d}", name=name, roll=f"{2100 + i}"))
        return students

    def _score(self, ability: float, full: float) -> float:
        """Punkte um die Fähigkeit des Studenten gestreut, auf halbe Punkte."""
        ratio = min(1.0, max(0.0, self.rng.gauss(ability, 0.12)))
        return round(ratio * full * 2) / 2

    def generate(
        self,
        course_type: CourseType = CourseType.THEORY,
        num_students: int = 30,
        final_graded_share: float = 0.7,
    ) -> CourseData:
        """Erzeugt den Kurs. final_graded_share: Anteil Studenten mit Final-Punkten."""
        course_type = CourseType(course_type)
        course = Course(
            id=f"demo-{course_type.value}",
            code="CSE 3101" if course_type != CourseType.LAB else "CSE 3102",
            title="Demo course",
            section="A",
            semester="Fall",
            year=2026,
            course_type=course_type,
        )
        data = CourseData(course=course, students=self._generate_students(num_students))

        plan = _LAB_PLAN if course_type == CourseType.LAB else _THEORY_PLAN
        for order, (name, full) in enumerate(plan, start=1):
            data.add_assessment(name, full, order=order, assessment_id=name.lower().replace(" ", "-"))

        rows = []
        attendance = []
        for student in data.students:
            ability = self.rng.uniform(0.35, 0.98)
            for a in data.assessments:
                if "final" in a.name.lower() and self.rng.random() > final_graded_share:
                    continue
                rows.append({"studentId": student.id, "assessmentId": a.id,
                             "obtainedMarks": self._score(ability, a.full_marks)})
            total = 28
            attended = min(total, max(0, round(self.rng.gauss(ability * total + 4, 3))))
            attendance.append({"studentId": student.id, "totalClasses": total,
                               "attendedClasses": attended})

        data.upsert_marks(rows)
        data.save_attendance(attendance, self.config.attendance)
        return data

    def print_summary(self, data: CourseData) -> None:
        """Gibt eine kurze Übersicht über Rich aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title=f"Demo course {data.course.code}", box=box.ROUNDED)
        table.add_column("Assessment", style="bold")
        table.add_column("Full marks", justify="right")
        table.add_column("Marks entered", justify="right")
        for a in data.sorted_assessments():
            entered = sum(1 for m in data.marks if m.assessment_id == a.id)
            table.add_row(a.name, f"{a.full_marks:g}", str(entered))
        console.print(table)
        console.print(
            f"Students: {len(data.students)} | "
            f"Course type: {data.course.course_type.value} | Seed: {self.seed}"
        )
