"""Tests für das Konfigurationssystem, die Datenmodelle und die CLI."""

import json

import pytest
from click.testing import CliRunner
from pydantic import ValidationError

from config.defaults import default_grader_config
from config.manager import ConfigManager
from config.schema import AttendanceConfig, GraderConfig, GradingPolicyConfig
from grading.exceptions import (
    AssessmentNotFoundError,
    DuplicateAssessmentError,
    InvalidAssessmentError,
)
from models import Assessment, Course, CourseData, CourseType, Mark, Student


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_config_valid(self):
        """Vollständige Default-Config ist valide."""
        config = default_grader_config()
        assert config.grading.unknown_course_type == "default"
        assert config.grading.hybrid_formula == "theory"
        assert config.attendance.assessment_name == "Attendance"
        assert "full_marks" not in config.attendance.model_dump()
        assert config.attendance.order == 999
        assert config.export.output_dir == "output"

    def test_invalid_policy_rejected(self):
        """Nur die bekannten Policy-Werte sind erlaubt."""
        with pytest.raises(ValidationError):
            GradingPolicyConfig(unknown_course_type="guess")
        with pytest.raises(ValidationError):
            GradingPolicyConfig(hybrid_formula="lab")

    def test_attendance_full_marks_fixed(self):
        """Die volle Punktzahl der Attendance-Bewertung ist nicht konfigurierbar."""
        config = AttendanceConfig.model_validate({"assessment_name": "Attendance", "full_marks": 10})
        assert not hasattr(config, "full_marks")


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path):
        """Speichern + Laden ergibt dieselbe Config."""
        mgr = ConfigManager()
        original = GraderConfig(
            institution_name="Roundtrip-Fakultät",
            grading=GradingPolicyConfig(unknown_course_type="reject", hybrid_formula="reject"),
        )
        path = tmp_path / "test_config.yaml"
        mgr.save(original, path)
        loaded = mgr.load(path)
        assert loaded == original

    def test_saved_yaml_has_comments(self, tmp_path):
        """Die YAML-Datei enthält Kopf- und Abschnittskommentare."""
        path = tmp_path / "config.yaml"
        ConfigManager().save(default_grader_config(), path)
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "─── Course types ───" in text
        assert "unknown_course_type: default" in text

    def test_load_missing_raises(self, tmp_path):
        """Fehlende Datei → FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "nope.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path):
        """Ungültige Werte → ValueError mit Pydantic-Details."""
        path = tmp_path / "bad.yaml"
        path.write_text("grading:\n  unknown_course_type: maybe\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid configuration"):
            ConfigManager().load(path)

    def test_first_run_check(self, tmp_path, monkeypatch):
        """Ohne config/grader_config.yaml ist es ein Erstaufruf."""
        monkeypatch.chdir(tmp_path)
        mgr = ConfigManager()
        assert mgr.first_run_check()
        mgr.save(default_grader_config())
        assert not mgr.first_run_check()

    def test_scenarios(self, tmp_path, monkeypatch):
        """Szenario speichern, auflisten und wieder laden."""
        monkeypatch.chdir(tmp_path)
        mgr = ConfigManager()
        config = GraderConfig(grading=GradingPolicyConfig(hybrid_formula="reject"))
        mgr.save_scenario(config, "strict", "Hybrid abgelehnt")

        scenarios = mgr.list_scenarios()
        assert [s.name for s in scenarios] == ["strict"]
        assert scenarios[0].description == "Hybrid abgelehnt"
        assert mgr.load_scenario("strict").grading.hybrid_formula == "reject"

    def test_load_unknown_scenario(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(FileNotFoundError):
            ConfigManager().load_scenario("missing")


# ─── DATENMODELLE ─────────────────────────────────────────────────────────────

class TestModels:
    def test_assessment_camel_case(self):
        """Assessment akzeptiert die camelCase-Felder der Persistenzschicht."""
        a = Assessment.model_validate(
            {"_id": 12, "courseId": "c1", "name": "  Mid ", "fullMarks": "30", "order": 2})
        assert a.id == "12"
        assert a.course_id == "c1"
        assert a.name == "Mid"
        assert a.full_marks == 30
        assert a.is_configured

    def test_assessment_non_numeric_full_marks(self):
        """Nicht-numerische volle Punktzahl → 0, also nicht konfiguriert."""
        a = Assessment(id="x", name="CT1", full_marks="n/a")
        assert a.full_marks == 0
        assert not a.is_configured

    def test_mark_aliases(self):
        m = Mark.model_validate(
            {"course": 1, "student": 42, "assessment": "mid", "obtainedMarks": 12.5})
        assert m.key == ("42", "mid")
        assert m.obtained_marks == 12.5

    def test_course_type_default(self):
        """Fehlender oder ungültiger Kurstyp → theory."""
        assert Course(id=1).course_type == CourseType.THEORY
        assert Course(id="c", course_type="LAB").course_type == CourseType.LAB
        assert Course(id="c", course_type="seminar").course_type == CourseType.THEORY

    def test_student_display_name(self):
        assert Student(id="s1", name="Nusrat Rahman").display_name == "Nusrat Rahman"
        assert Student(id="s1", roll=2101).display_name == "2101"
        assert Student(id="s1").display_name == "s1"


# ─── COURSE-DATA ──────────────────────────────────────────────────────────────

@pytest.fixture
def course_data() -> CourseData:
    data = CourseData(
        course=Course(id="c1", code="CSE 3101", course_type="theory"),
        students=[Student(id="s1", name="Arif"), Student(id="s2", name="Mim")],
    )
    data.add_assessment("CT1", 10, order=1, assessment_id="ct1")
    data.add_assessment("Mid", 30, order=2, assessment_id="mid")
    return data


class TestCourseData:
    def test_add_requires_name_and_full_marks(self, course_data):
        with pytest.raises(InvalidAssessmentError, match="Name and fullMarks are required"):
            course_data.add_assessment("", 10)
        with pytest.raises(InvalidAssessmentError):
            course_data.add_assessment("Final", None)

    def test_add_rejects_second_mid(self, course_data):
        """Zweite Mid wird beim Anlegen abgelehnt."""
        with pytest.raises(DuplicateAssessmentError, match="Only one Mid exam"):
            course_data.add_assessment("Mid Exam", 30)
        assert len(course_data.assessments) == 2

    def test_add_generates_id_and_timestamp(self, course_data):
        a = course_data.add_assessment("CT2", 10)
        assert a.id
        assert a.course_id == "c1"
        assert a.created_at is not None

    def test_rename_is_not_revalidated(self, course_data):
        """Umbenennen prüft die Eindeutigkeit nicht."""
        course_data.add_assessment("Lab Viva", 10, assessment_id="viva")
        updated = course_data.update_assessment("viva", name="Midterm")
        assert updated.name == "Midterm"
        assert [a.name for a in course_data.assessments].count("Midterm") == 1

    def test_update_unknown_raises(self, course_data):
        with pytest.raises(AssessmentNotFoundError):
            course_data.update_assessment("nope", name="X")

    def test_delete_cascades_marks(self, course_data):
        """Löschen entfernt alle Punkte der Bewertung."""
        course_data.upsert_marks([
            {"studentId": "s1", "assessmentId": "mid", "obtainedMarks": 20},
            {"studentId": "s2", "assessmentId": "mid", "obtainedMarks": 25},
            {"studentId": "s1", "assessmentId": "ct1", "obtainedMarks": 8},
        ])
        assert course_data.delete_assessment("mid") == 2
        assert course_data.get_assessment("mid") is None
        assert [m.assessment_id for m in course_data.marks] == ["ct1"]

    def test_delete_unknown_raises(self, course_data):
        with pytest.raises(AssessmentNotFoundError):
            course_data.delete_assessment("nope")

    def test_sorted_assessments(self, course_data):
        course_data.add_assessment("CT0", 10, order=0, assessment_id="ct0")
        assert [a.id for a in course_data.sorted_assessments()] == ["ct0", "ct1", "mid"]

    def test_upsert_idempotent(self, course_data):
        """Zweimal dieselben Zeilen → derselbe Zustand."""
        rows = [
            {"studentId": "s1", "assessmentId": "ct1", "obtainedMarks": 8},
            {"student": "s2", "assessment": "ct1", "obtainedMarks": "7.5"},
        ]
        assert course_data.upsert_marks(rows) == 2
        first = [m.model_dump() for m in course_data.marks]
        assert course_data.upsert_marks(rows) == 2
        assert [m.model_dump() for m in course_data.marks] == first

    def test_upsert_overwrites(self, course_data):
        course_data.upsert_marks([{"studentId": "s1", "assessmentId": "ct1", "obtainedMarks": 4}])
        course_data.upsert_marks([{"studentId": "s1", "assessmentId": "ct1", "obtainedMarks": 9}])
        assert course_data.marks_for("s1") == {"ct1": 9}

    def test_upsert_drops_invalid_rows(self, course_data):
        """Ohne Student/Bewertung oder mit nicht-numerischen Punkten → verworfen."""
        applied = course_data.upsert_marks([
            {"assessmentId": "ct1", "obtainedMarks": 5},
            {"studentId": "s1", "obtainedMarks": 5},
            {"studentId": "s1", "assessmentId": "ct1", "obtainedMarks": "abc"},
        ])
        assert applied == 0
        assert course_data.marks == []

    def test_mark_for_unknown_assessment_stored_not_scored(self, course_data):
        """Punkte für unbekannte Bewertungen werden gespeichert, aber nicht gewertet."""
        from grading.aggregator import compute_summary
        applied = course_data.upsert_marks(
            [{"studentId": "s1", "assessmentId": "ghost", "obtainedMarks": 9}])
        assert applied == 1
        assert course_data.marks_for("s1") == {"ghost": 9}
        summary = compute_summary(
            "theory", course_data.sorted_assessments(), course_data.marks_for("s1"))
        assert summary.current_total == 0

    def test_student_ids_include_unenrolled(self, course_data):
        """Studenten mit Punkten, aber ohne Einschreibung, erscheinen am Ende."""
        course_data.upsert_marks([{"studentId": "s9", "assessmentId": "ct1", "obtainedMarks": 3}])
        assert course_data.student_ids() == ["s1", "s2", "s9"]

    def test_save_attendance_creates_assessment_once(self, course_data):
        """Anwesenheit legt die Attendance-Bewertung an und schreibt die Punkte."""
        records = [
            {"studentId": "s1", "totalClasses": 30, "attendedClasses": 24},
            {"studentId": "s2", "totalClasses": 30, "attendedClasses": 27},
        ]
        course_data.save_attendance(records)
        course_data.save_attendance(records)

        att = [a for a in course_data.assessments if a.name == "Attendance"]
        assert len(att) == 1
        assert att[0].full_marks == 5
        assert course_data.marks_for("s1")[att[0].id] == 4
        assert course_data.marks_for("s2")[att[0].id] == 5
        assert len(course_data.attendance) == 2
        assert len([m for m in course_data.marks if m.assessment_id == att[0].id]) == 2

    def test_full_attendance_earns_full_component(self, course_data):
        """100 % Anwesenheit ergibt die vollen 5 Punkte der Attendance-Komponente."""
        from grading.aggregator import compute_summary
        course_data.save_attendance(
            [{"studentId": "s1", "totalClasses": 30, "attendedClasses": 30}],
            AttendanceConfig(assessment_name="Attendance", order=50),
        )
        summary = compute_summary(
            "theory", course_data.sorted_assessments(), course_data.marks_for("s1"))
        assert summary.component("attendance").now == pytest.approx(5)
        assert summary.component("attendance").full == pytest.approx(5)

    def test_save_attendance_reuses_existing(self, course_data):
        """Eine vorhandene 'attendance'-Bewertung wird wiederverwendet."""
        course_data.add_assessment("attendance", 5, assessment_id="att")
        course_data.save_attendance([{"studentId": "s1", "totalClasses": 0, "attendedClasses": 0}])
        assert course_data.marks_for("s1")["att"] == 0
        assert len(course_data.assessments) == 3

    def test_json_roundtrip(self, course_data, tmp_path):
        course_data.upsert_marks([{"studentId": "s1", "assessmentId": "ct1", "obtainedMarks": 8}])
        path = tmp_path / "course.json"
        course_data.save_json(path)
        loaded = CourseData.load_json(path)
        assert loaded.course == course_data.course
        assert loaded.assessments == course_data.assessments
        assert loaded.marks == course_data.marks
        assert loaded.modified_at is not None

    def test_load_camel_case_json(self, tmp_path):
        """load_json versteht die camelCase-Exporte der Persistenzschicht."""
        raw = {
            "course": {"id": 7, "code": "CSE 3102", "courseType": "lab"},
            "assessments": [{"_id": "l1", "name": "Lab1", "fullMarks": 20}],
            "marks": [{"studentId": "s1", "assessmentId": "l1", "obtainedMarks": 18}],
        }
        path = tmp_path / "export.json"
        path.write_text(json.dumps(raw), encoding="utf-8")
        data = CourseData.load_json(path)
        assert data.course.course_type == CourseType.LAB
        assert data.marks_for("s1") == {"l1": 18}

    def test_load_missing_json(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CourseData.load_json(tmp_path / "missing.json")


# ─── CLI ──────────────────────────────────────────────────────────────────────

class TestCli:
    @pytest.fixture
    def runner(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        return CliRunner()

    def test_bands(self, runner):
        from main import cli
        result = runner.invoke(cli, ["bands"])
        assert result.exit_code == 0
        assert "A+" in result.output

    def test_attendance(self, runner):
        from main import cli
        result = runner.invoke(cli, ["attendance", "27", "30"])
        assert result.exit_code == 0
        assert "90.00%" in result.output

    def test_check_assessment_rejects(self, runner):
        from main import cli
        result = runner.invoke(cli, ["check-assessment", "Mid Exam", "-e", "Midterm"])
        assert result.exit_code == 1
        assert "Only one Mid exam" in result.output

    def test_check_assessment_allows(self, runner):
        from main import cli
        result = runner.invoke(cli, ["check-assessment", "CT4", "-e", "CT1", "-e", "CT2"])
        assert result.exit_code == 0

    def test_setup_defaults(self, runner, tmp_path):
        from main import cli
        result = runner.invoke(cli, ["setup", "--defaults"])
        assert result.exit_code == 0
        assert (tmp_path / "config" / "grader_config.yaml").exists()

    def test_generate_and_summary_json(self, runner, tmp_path):
        """generate schreibt einen Kurs, summary --json rechnet ihn."""
        from main import cli
        path = tmp_path / "course.json"
        result = runner.invoke(cli, ["generate", "--seed", "7", "--students", "5",
                                     "--json-path", str(path)])
        assert result.exit_code == 0, result.output
        assert path.exists()

        result = runner.invoke(cli, ["summary", str(path), "--json"])
        assert result.exit_code == 0, result.output
        summaries = json.loads(result.stdout)
        assert len(summaries) == 5
        for s in summaries.values():
            assert s["currentTotal"] <= s["maxPossible"]
            assert s["totalObtained"] == s["currentTotal"]

    def test_summary_missing_file(self, runner):
        from main import cli
        result = runner.invoke(cli, ["summary", "nope.json"])
        assert result.exit_code == 1

    def test_setup_wizard_accepts_defaults(self, runner, tmp_path):
        """Wizard mit Enter überall ergibt die Standard-Config."""
        from main import cli
        result = runner.invoke(cli, ["setup"], input="\n" * 8)
        assert result.exit_code == 0, result.output
        loaded = ConfigManager().load(tmp_path / "config" / "grader_config.yaml")
        assert loaded == default_grader_config()

    def test_config_show(self, runner):
        from main import cli
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "Hybrid formula" in result.output

    def test_classify(self, runner):
        from main import cli
        result = runner.invoke(cli, ["classify", "Mid", "Lab Eval 01"])
        assert result.exit_code == 0
        assert "mid" in result.output

    def test_report_and_export(self, runner, tmp_path):
        from main import cli
        path = tmp_path / "course.json"
        runner.invoke(cli, ["generate", "--course-type", "lab", "--students", "4",
                            "--json-path", str(path)])
        result = runner.invoke(cli, ["report", str(path)])
        assert result.exit_code == 0, result.output
        assert "Course report" in result.output

        xlsx = tmp_path / "grades.xlsx"
        result = runner.invoke(cli, ["export", str(path), "-o", str(xlsx)])
        assert result.exit_code == 0, result.output
        assert xlsx.exists()

    def test_invalid_config_reported_without_traceback(self, runner, tmp_path):
        """Ungültige YAML-Konfiguration → Fehlermeldung und Exit-Code 1."""
        from main import cli
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "grader_config.yaml").write_text(
            "grading:\n  unknown_course_type: maybe\n", encoding="utf-8")
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid configuration" in result.output

    def test_unknown_scenario_reported_without_traceback(self, runner):
        from main import cli
        result = runner.invoke(cli, ["scenario", "load", "missing"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "not found" in result.output
