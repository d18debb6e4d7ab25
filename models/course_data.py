"""CourseData: konsistenter Schnappschuss eines Kurses (Pydantic v2).

Bewertungen, Punkte, Studenten und Anwesenheit eines Kurses. Alle
Upserts sind idempotent: zweimal dieselbe Eingabe ergibt denselben Zustand.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel

from models.assessment import Assessment
from models.attendance import AttendanceSummary
from models.course import Course
from models.mark import Mark
from models.numbers import as_number
from models.student import Student

logger = logging.getLogger(__name__)


def _first(row: Mapping, *keys: str) -> Any:
    """Erster nicht-leerer Wert unter einem der Schlüssel."""
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


class CourseData(BaseModel):
    """Vollständiger Kurs-Datensatz für die Notenberechnung."""

    course: Course
    students: list[Student] = []
    assessments: list[Assessment] = []
    marks: list[Mark] = []
    attendance: list[AttendanceSummary] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Lesen ───

    def sorted_assessments(self) -> list[Assessment]:
        """Nach order, dann Erstellungszeit (fehlende Zeit zuerst)."""
        oldest = datetime.min.replace(tzinfo=timezone.utc)

        def key(a: Assessment):
            created = a.created_at or oldest
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            return (a.order, created)

        return sorted(self.assessments, key=key)

    def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        return next((a for a in self.assessments if a.id == str(assessment_id)), None)

    def marks_for(self, student_id: str) -> dict[str, float]:
        """{assessment_id: obtained_marks} für einen Studenten."""
        student_id = str(student_id)
        return {m.assessment_id: m.obtained_marks
                for m in self.marks if m.student_id == student_id}

    def student_ids(self) -> list[str]:
        """Eingeschriebene Studenten plus alle, für die Punkte existieren."""
        ids = [s.id for s in self.students]
        seen = set(ids)
        for m in self.marks:
            if m.student_id not in seen:
                ids.append(m.student_id)
                seen.add(m.student_id)
        return ids

    def get_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == str(student_id)), None)

    # ─── Bewertungen ───

    def add_assessment(self, name: Optional[str], full_marks: Any,
                       order: Optional[int] = None,
                       assessment_id: Optional[str] = None) -> Assessment:
        """Legt eine Bewertung an. Prüft Pflichtfelder und die Eindeutigkeit.

        Raises:
            InvalidAssessmentError: ohne Namen oder ohne volle Punktzahl.
            DuplicateAssessmentError: Mid/Final/... bereits vorhanden.
        """
        from grading.exceptions import InvalidAssessmentError
        from grading.uniqueness import ensure_unique

        if not name or not str(name).strip() or full_marks is None:
            raise InvalidAssessmentError("Name and fullMarks are required")

        ensure_unique(name, [a.name for a in self.assessments])

        assessment = Assessment(
            id=assessment_id or uuid.uuid4().hex,
            course_id=self.course.id,
            name=name,
            full_marks=full_marks,
            order=order if order is not None else 0,
            created_at=datetime.now(timezone.utc),
        )
        self.assessments.append(assessment)
        logger.info(f"Assessment '{assessment.name}' added to course {self.course.id}")
        return assessment

    def update_assessment(self, assessment_id: str, name: Optional[str] = None,
                          full_marks: Any = None,
                          order: Optional[int] = None) -> Assessment:
        """Ändert Name/Punktzahl/Reihenfolge.

        Die Eindeutigkeit wird hier NICHT erneut geprüft; ein Umbenennen kann
        also eine zweite Mid erzeugen (siehe CourseDataReport).
        """
        from grading.exceptions import AssessmentNotFoundError

        for i, a in enumerate(self.assessments):
            if a.id == str(assessment_id):
                update = {}
                if name is not None:
                    update["name"] = str(name).strip()
                if full_marks is not None:
                    update["full_marks"] = as_number(full_marks)
                if order is not None:
                    update["order"] = int(order)
                self.assessments[i] = a.model_copy(update=update)
                return self.assessments[i]
        raise AssessmentNotFoundError(str(assessment_id))

    def delete_assessment(self, assessment_id: str) -> int:
        """Löscht eine Bewertung samt aller Punkte. Gibt die Zahl gelöschter Punkte zurück."""
        from grading.exceptions import AssessmentNotFoundError

        assessment_id = str(assessment_id)
        if self.get_assessment(assessment_id) is None:
            raise AssessmentNotFoundError(assessment_id)
        before = len(self.marks)
        self.marks = [m for m in self.marks if m.assessment_id != assessment_id]
        self.assessments = [a for a in self.assessments if a.id != assessment_id]
        return before - len(self.marks)

    # ─── Punkte ───

    def upsert_marks(self, rows: Iterable[Mapping]) -> int:
        """Bulk-Upsert von Punkten, Schlüssel (Student, Bewertung).

        Akzeptiert {studentId, assessmentId, obtainedMarks} und
        {student, assessment, obtainedMarks}. Zeilen ohne Student/Bewertung
        oder mit nicht-numerischen Punkten werden verworfen.

        Returns:
            Anzahl übernommener Zeilen.
        """
        index = {m.key: i for i, m in enumerate(self.marks)}
        applied = 0
        for row in rows:
            student_id = _first(row, "studentId", "student_id", "student")
            assessment_id = _first(row, "assessmentId", "assessment_id", "assessment")
            obtained = as_number(_first(row, "obtainedMarks", "obtained_marks"), default=None)
            if student_id is None or assessment_id is None or obtained is None:
                continue
            mark = Mark(course_id=self.course.id, student_id=student_id,
                        assessment_id=assessment_id, obtained_marks=obtained)
            if self.get_assessment(mark.assessment_id) is None:
                logger.warning(
                    f"Mark for unknown assessment {mark.assessment_id} "
                    f"(student {mark.student_id}) stored anyway"
                )
            if mark.key in index:
                self.marks[index[mark.key]] = mark
            else:
                index[mark.key] = len(self.marks)
                self.marks.append(mark)
            applied += 1
        return applied

    # ─── Anwesenheit ───

    def save_attendance(self, records: Iterable[Mapping], config=None) -> list[AttendanceSummary]:
        """Speichert Anwesenheit und schreibt die 0–5 Punkte als Mark.

        records: [{studentId, totalClasses, attendedClasses}, ...]
        Legt die synthetische Attendance-Bewertung an, falls keine existiert.
        """
        from config.schema import AttendanceConfig
        from grading.attendance import (
            attendance_marks,
            attendance_percentage,
            find_attendance_assessment,
            new_attendance_assessment,
        )

        config = config or AttendanceConfig()
        cleaned = []
        for r in records:
            student_id = _first(r, "studentId", "student_id", "student")
            if student_id is None:
                continue
            cleaned.append((
                str(student_id),
                as_number(_first(r, "totalClasses", "total_classes")),
                as_number(_first(r, "attendedClasses", "attended_classes")),
            ))

        summaries = []
        index = {s.student_id: i for i, s in enumerate(self.attendance)}
        for student_id, total, attended in cleaned:
            pct = attendance_percentage(attended, total)
            summary = AttendanceSummary(
                course_id=self.course.id, student_id=student_id,
                total_classes=total, attended_classes=attended,
                percentage=pct, marks=attendance_marks(pct),
            )
            if student_id in index:
                self.attendance[index[student_id]] = summary
            else:
                index[student_id] = len(self.attendance)
                self.attendance.append(summary)
            summaries.append(summary)

        if summaries:
            assessment = find_attendance_assessment(self.assessments, config.assessment_name)
            if assessment is None:
                assessment = new_attendance_assessment(
                    uuid.uuid4().hex, self.course.id, config)
                self.assessments.append(assessment)
                logger.info(f"Attendance assessment created for course {self.course.id}")
            self.upsert_marks(
                {"studentId": s.student_id, "assessmentId": assessment.id,
                 "obtainedMarks": s.marks}
                for s in summaries
            )
            logger.info(f"Attendance saved for {len(summaries)} students")
        return summaries

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        """Speichert den Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "CourseData":
        """Lädt einen Datensatz aus einer JSON-Datei.

        Akzeptiert auch die camelCase-Felder der Persistenzschicht
        (fullMarks, studentId, obtainedMarks, courseType).
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        course = raw.get("course") or {}
        if "courseType" in course and "course_type" not in course:
            course["course_type"] = course.pop("courseType")
        return cls.model_validate(raw)
