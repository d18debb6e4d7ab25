"""Tests für Kursbericht, Konsistenz-Check und Testdaten-Generator."""

import pytest

from analysis.course_report import CourseReportBuilder, check_course_data
from config.defaults import default_grader_config
from config.schema import GradingPolicyConfig
from data.fake_data import FakeCourseGenerator
from grading.exceptions import UnsupportedCourseTypeError
from models import Course, CourseData, CourseType, Student


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_theory_course() -> CourseData:
    """Referenzkurs: s1 erreicht 72.75 (A-), s2 hat noch nichts."""
    data = CourseData(
        course=Course(id="c1", code="CSE 3101", course_type="theory"),
        students=[Student(id="s1", name="Arif", roll="2101"), Student(id="s2", name="Mim")],
    )
    for i, (name, full) in enumerate(
        [("CT1", 10), ("CT2", 10), ("CT3", 10), ("Mid", 30), ("Final", 40), ("Attendance", 5)],
        start=1,
    ):
        data.add_assessment(name, full, order=i, assessment_id=name.lower())
    data.upsert_marks([
        {"studentId": "s1", "assessmentId": aid, "obtainedMarks": v}
        for aid, v in [("ct1", 8), ("ct2", 6), ("ct3", 9), ("mid", 25), ("final", 30),
                       ("attendance", 5)]
    ])
    return data


# ─── KURSBERICHT ──────────────────────────────────────────────────────────────

class TestCourseReport:
    @pytest.fixture(scope="class")
    def report(self):
        return CourseReportBuilder().build(_make_theory_course())

    def test_rows_per_student(self, report):
        """Eine Zeile pro eingeschriebenem Studenten, in Einschreibungsreihenfolge."""
        assert [r.student_id for r in report.rows] == ["s1", "s2"]
        assert report.rows[0].roll == "2101"

    def test_reference_totals(self, report):
        s1, s2 = report.rows
        assert s1.summary.current_total == pytest.approx(72.75)
        assert s1.summary.grade == "A-"
        assert s2.summary.current_total == 0
        assert s2.summary.max_possible == pytest.approx(90)

    def test_missing_marks_are_none(self, report):
        """Fehlende Punkte erscheinen als None, nicht als 0."""
        assert report.rows[1].obtained["mid"] is None
        assert report.rows[0].obtained["mid"] == 25

    def test_statistics(self, report):
        assert report.average_total == pytest.approx(36.38)
        assert report.highest_total == pytest.approx(72.75)
        assert report.lowest_total == 0

    def test_distribution_contains_all_grades(self, report):
        """Alle Noten erscheinen, auch mit 0 Studenten."""
        assert list(report.grade_distribution) == [
            "A+", "A", "A-", "B+", "B", "B-", "C", "D", "F"]
        assert report.grade_distribution["A-"] == 1
        assert report.grade_distribution["F"] == 1
        assert sum(report.grade_distribution.values()) == len(report.rows)
        assert report.a_plus_count == 0

    def test_assessment_order(self, report):
        assert [aid for aid, _ in report.assessment_names] == [
            "ct1", "ct2", "ct3", "mid", "final", "attendance"]

    def test_consistent_course(self, report):
        assert report.data_report.is_consistent
        assert report.data_report.issues == []

    def test_hybrid_formula_reported(self):
        data = _make_theory_course()
        data.course = data.course.model_copy(update={"course_type": CourseType.HYBRID})
        report = CourseReportBuilder().build(data)
        assert report.course_type == "hybrid"
        assert report.formula == "theory"
        assert report.rows[0].summary.current_total == pytest.approx(72.75)

    def test_hybrid_rejected_by_policy(self):
        data = _make_theory_course()
        data.course = data.course.model_copy(update={"course_type": CourseType.HYBRID})
        builder = CourseReportBuilder(GradingPolicyConfig(hybrid_formula="reject"))
        with pytest.raises(UnsupportedCourseTypeError):
            builder.build(data)

    def test_empty_course(self):
        """Kurs ohne Studenten → leerer Bericht, keine Division durch 0."""
        report = CourseReportBuilder().build(CourseData(course=Course(id="empty")))
        assert report.rows == []
        assert report.average_total == 0
        assert sum(report.grade_distribution.values()) == 0


# ─── KONSISTENZ-CHECK ─────────────────────────────────────────────────────────

class TestCheckCourseData:
    def _checks(self, data: CourseData) -> list[str]:
        return [i.check for i in check_course_data(data).issues]

    def test_unknown_assessment_is_error(self):
        data = _make_theory_course()
        data.upsert_marks([{"studentId": "s1", "assessmentId": "ghost", "obtainedMarks": 3}])
        report = check_course_data(data)
        assert "unknown_assessment" in [i.check for i in report.issues]
        assert not report.is_consistent

    def test_unconfigured_assessment(self):
        data = _make_theory_course()
        data.add_assessment("CT4", 0, assessment_id="ct4")
        assert "unconfigured_assessment" in self._checks(data)

    def test_marks_above_full(self):
        data = _make_theory_course()
        data.upsert_marks([{"studentId": "s2", "assessmentId": "ct1", "obtainedMarks": 12}])
        assert "marks_above_full" in self._checks(data)

    def test_duplicate_category_after_rename(self):
        """Umbenennen kann eine zweite Mid erzeugen; der Check meldet es."""
        data = _make_theory_course()
        data.add_assessment("Viva", 10, assessment_id="viva")
        data.update_assessment("viva", name="Midterm Viva")
        report = check_course_data(data)
        dupes = [i for i in report.issues if i.check == "duplicate_category"]
        assert len(dupes) == 1
        assert "Mid, Midterm Viva" in dupes[0].description
        assert report.is_consistent   # nur Warnung

    def test_overlapping_names_scored_separately(self):
        """'Presentation' und 'Final Presentation' fallen in verschiedene Komponenten."""
        data = _make_theory_course()
        data.add_assessment("Presentation", 10, order=7, assessment_id="pres")
        data.add_assessment("Viva", 10, order=8, assessment_id="viva")
        data.update_assessment("viva", name="Final Presentation")
        issues = check_course_data(data).issues

        dupes = {i.description for i in issues if i.check == "duplicate_category"}
        assert any("presentation assessment by name" in d for d in dupes)
        assert not any("scored" in d for d in dupes)

        shadowed = [i.description for i in issues if i.check == "shadowed_assessment"]
        assert shadowed == [
            "Final, Final Presentation all score as final; "
            "only the last one ('Final Presentation') is scored."
        ]

        summary = CourseReportBuilder().summarize_student(data, "s1")
        assert summary.component("final").weight == 40
        assert summary.component("presentation").weight == 10

    def test_lab_course_pools_presentations(self):
        """Im Lab-Kurs sind Presentation-Bewertungen Lab-Bewertungen, nichts wird verdrängt."""
        data = _make_theory_course()
        data.course = data.course.model_copy(update={"course_type": CourseType.LAB})
        data.add_assessment("Presentation", 10, assessment_id="pres")
        data.add_assessment("Viva", 10, assessment_id="viva")
        data.update_assessment("viva", name="Group Presentation")
        checks = self._checks(data)
        assert "duplicate_category" in checks
        assert "shadowed_assessment" not in checks

    def test_loose_ct_name(self):
        data = _make_theory_course()
        data.add_assessment("Project", 20, assessment_id="project")
        assert "loose_ct_name" in self._checks(data)


# ─── TESTDATEN-GENERATOR ──────────────────────────────────────────────────────

class TestFakeCourseGenerator:
    def test_theory_course(self):
        data = FakeCourseGenerator(default_grader_config(), seed=1).generate(num_students=10)
        assert data.course.course_type == CourseType.THEORY
        assert len(data.students) == 10
        names = [a.name for a in data.sorted_assessments()]
        assert names[:3] == ["CT1", "CT2", "CT3"]
        assert names[-1] == "Attendance"
        assert len(data.attendance) == 10

    def test_lab_course(self):
        data = FakeCourseGenerator(default_grader_config(), seed=1).generate(
            course_type=CourseType.LAB, num_students=5)
        assert data.course.id == "demo-lab"
        assert data.get_assessment("lab-eval-01") is not None
        report = CourseReportBuilder().build(data)
        assert report.formula == "lab"

    def test_deterministic_with_seed(self):
        """Gleicher Seed → gleiche Punkte."""
        a = FakeCourseGenerator(default_grader_config(), seed=42).generate(num_students=8)
        b = FakeCourseGenerator(default_grader_config(), seed=42).generate(num_students=8)
        assert [m.obtained_marks for m in a.marks] == [m.obtained_marks for m in b.marks]
        assert [s.name for s in a.students] == [s.name for s in b.students]

    def test_generated_data_consistent(self):
        """Generierte Punkte liegen nie über der vollen Punktzahl."""
        data = FakeCourseGenerator(default_grader_config(), seed=3).generate(num_students=20)
        checks = [i.check for i in check_course_data(data).issues]
        assert "marks_above_full" not in checks
        assert "unknown_assessment" not in checks
        assert "duplicate_category" not in checks

    def test_partial_final(self):
        """final_graded_share=0 → niemand hat Final-Punkte."""
        data = FakeCourseGenerator(default_grader_config(), seed=5).generate(
            num_students=6, final_graded_share=0.0)
        assert not [m for m in data.marks if m.assessment_id == "final"]
        report = CourseReportBuilder().build(data)
        for row in report.rows:
            assert row.summary.current_total <= row.summary.max_possible
