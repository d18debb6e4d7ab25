"""Notenrechner — Haupt-CLI.

Verwendung:
  python main.py setup                          Ersteinrichtung (Wizard)
  python main.py config show                    Konfiguration anzeigen
  python main.py classify <name>                Bewertungsnamen klassifizieren
  python main.py check-assessment <name> -e ..  Eindeutigkeit prüfen
  python main.py attendance <besucht> <gesamt>  Anwesenheit → Punkte
  python main.py bands                          Notenbänder anzeigen
  python main.py generate                       Demo-Kurs erzeugen
  python main.py summary <kurs.json>            Noten berechnen
  python main.py report <kurs.json>             Kursbericht
  python main.py export <kurs.json>             Excel-Notenliste
  python main.py scenario save <name>           Szenario speichern
  python main.py scenario load <name>           Szenario laden
  python main.py scenario list                  Szenarien auflisten
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich import box
from rich.markup import escape

console = Console()

# Standard-Pfad für gespeicherte Kursdaten
DEFAULT_DATA_JSON = Path("output/course_data.json")


def _load_config():
    """Lädt die Konfiguration; ohne Datei gelten die Standardwerte."""
    from config.manager import ConfigManager
    from config.defaults import default_grader_config
    mgr = ConfigManager()
    if mgr.first_run_check():
        return mgr, default_grader_config()
    try:
        return mgr, mgr.load()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def _load_course_or_abort(path: Path):
    from models.course_data import CourseData
    try:
        return CourseData.load_json(path)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--defaults", "use_defaults", is_flag=True, default=False,
              help="Write the default configuration without prompting.")
def cmd_setup(use_defaults: bool):
    """Create the configuration file."""
    from config.defaults import default_grader_config
    from config.manager import ConfigManager
    from config.wizard import run_wizard

    mgr = ConfigManager()
    if not mgr.first_run_check() and not use_defaults:
        console.print("[yellow]A configuration already exists.[/yellow]")
        if not click.confirm("Set up again?", default=False):
            return

    config = default_grader_config() if use_defaults else run_wizard()
    if config is not None:
        mgr.save(config)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Show the configuration."""


@cmd_config.command("show")
def config_show():
    """Show the active configuration."""
    from config.wizard import show_summary
    mgr, config = _load_config()
    if mgr.first_run_check():
        console.print("[dim]No configuration file, using defaults.[/dim]")
    show_summary(config)


# ─── CLASSIFY / CHECK-ASSESSMENT ──────────────────────────────────────────────

@click.command("classify")
@click.argument("names", nargs=-1, required=True)
def cmd_classify(names: tuple[str, ...]):
    """Show how assessment names are classified."""
    from grading.classifier import classify, scoring_bucket, lab_bucket

    table = Table(box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Categories")
    table.add_column("Theory bucket")
    table.add_column("Lab bucket")
    for name in names:
        flags = classify(name)
        table.add_row(
            name,
            ", ".join(flags.categories) or "[dim]none[/dim]",
            scoring_bucket(name) or "[dim]ignored[/dim]",
            lab_bucket(name),
        )
    console.print(table)


@click.command("check-assessment")
@click.argument("name")
@click.option("--existing", "-e", multiple=True,
              help="Name of an existing assessment (repeatable).")
def cmd_check_assessment(name: str, existing: tuple[str, ...]):
    """Check whether a new assessment may be created."""
    from grading.uniqueness import check_unique

    violation = check_unique(name, existing)
    if violation is None:
        console.print(f"[green]✓[/green] '{name}' can be created.")
        return
    console.print(f"[red]✗ {violation.message}[/red] (conflicts with '{violation.conflicting_name}')")
    sys.exit(1)


# ─── ATTENDANCE / BANDS ───────────────────────────────────────────────────────

@click.command("attendance")
@click.argument("attended", type=float)
@click.argument("total", type=float)
def cmd_attendance(attended: float, total: float):
    """Convert attended/total classes into attendance marks (0-5)."""
    from config.defaults import ATTENDANCE_MAX_MARKS
    from grading.attendance import attendance_marks, attendance_percentage

    pct = attendance_percentage(attended, total)
    console.print(f"Attendance: {pct:.2f}% → [bold]{attendance_marks(pct)}[/bold] / {ATTENDANCE_MAX_MARKS}")


@click.command("bands")
def cmd_bands():
    """Show grade and attendance bands."""
    from config.defaults import ATTENDANCE_MARK_BANDS, FAILING_GRADE, GRADE_THRESHOLDS

    table = Table(title="Grade bands", box=box.ROUNDED)
    table.add_column("Grade", style="bold")
    table.add_column("Minimum total", justify="right")
    for grade, minimum in GRADE_THRESHOLDS:
        table.add_row(grade, f"{minimum:g}")
    table.add_row(FAILING_GRADE, "–")
    console.print(table)

    table2 = Table(title="Attendance marks", box=box.ROUNDED)
    table2.add_column("Attendance ≥", justify="right")
    table2.add_column("Marks", justify="right")
    for minimum, marks in ATTENDANCE_MARK_BANDS:
        table2.add_row(f"{minimum:g}%", str(marks))
    table2.add_row("below", "0")
    console.print(table2)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Random seed for reproducible data.")
@click.option("--course-type", type=click.Choice(["theory", "lab", "hybrid"]),
              default="theory", help="Course type of the demo course.")
@click.option("--students", default=30, help="Number of students.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Output path for the course JSON.")
def cmd_generate(seed: int, course_type: str, students: int, json_path: str):
    """Generate a demo course with marks and attendance."""
    from data.fake_data import FakeCourseGenerator

    _, config = _load_config()
    gen = FakeCourseGenerator(config, seed=seed)
    data = gen.generate(course_type=course_type, num_students=students)
    gen.print_summary(data)

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON saved: {out_path}")


# ─── SUMMARY / REPORT / EXPORT ────────────────────────────────────────────────

@click.command("summary")
@click.argument("datei", type=click.Path(path_type=Path), default=DEFAULT_DATA_JSON)
@click.option("--student", "-s", "student_id", default=None,
              help="Only this student.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the summary as JSON.")
def cmd_summary(datei: Path, student_id: str, as_json: bool):
    """Compute grade summaries for a course."""
    import json
    from analysis.course_report import CourseReportBuilder
    from grading.exceptions import UnsupportedCourseTypeError

    _, config = _load_config()
    data = _load_course_or_abort(datei)
    builder = CourseReportBuilder(config.grading)
    ids = [student_id] if student_id else data.student_ids()

    try:
        summaries = {sid: builder.summarize_student(data, sid) for sid in ids}
    except UnsupportedCourseTypeError as e:
        console.print(f"[red bold]Configuration error:[/red bold] {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({sid: s.to_legacy_dict() for sid, s in summaries.items()}, indent=2))
        return
    for sid, summary in summaries.items():
        student = data.get_student(sid)
        summary.print_rich(title=student.display_name if student else sid)


@click.command("report")
@click.argument("datei", type=click.Path(path_type=Path), default=DEFAULT_DATA_JSON)
def cmd_report(datei: Path):
    """Course report with grade distribution and data checks."""
    from analysis.course_report import CourseReportBuilder
    from grading.exceptions import UnsupportedCourseTypeError

    _, config = _load_config()
    data = _load_course_or_abort(datei)
    try:
        report = CourseReportBuilder(config.grading).build(data)
    except UnsupportedCourseTypeError as e:
        console.print(f"[red bold]Configuration error:[/red bold] {e}")
        sys.exit(1)
    report.print_rich()


@click.command("export")
@click.argument("datei", type=click.Path(path_type=Path), default=DEFAULT_DATA_JSON)
@click.option("--output", "-o", default=None, help="Path of the Excel file.")
def cmd_export(datei: Path, output: str):
    """Export the course grade sheet as Excel."""
    from analysis.course_report import CourseReportBuilder
    from export.excel_export import GradeSheetExporter
    from grading.exceptions import UnsupportedCourseTypeError

    _, config = _load_config()
    data = _load_course_or_abort(datei)
    try:
        report = CourseReportBuilder(config.grading).build(data)
    except UnsupportedCourseTypeError as e:
        console.print(f"[red bold]Configuration error:[/red bold] {e}")
        sys.exit(1)

    out_path = Path(output) if output else (
        Path(config.export.output_dir) / f"grades_{data.course.id}.xlsx")
    GradeSheetExporter(report, config.institution_name).export(out_path)
    console.print(f"[green]✓[/green] Grade sheet saved: {out_path}")


# ─── SCENARIO ─────────────────────────────────────────────────────────────────

@click.group("scenario")
def cmd_scenario():
    """Manage configuration scenarios (save, load, list)."""


@cmd_scenario.command("save")
@click.argument("name")
@click.option("--description", "-d", default="", help="Scenario description.")
def scenario_save(name: str, description: str):
    """Save the active configuration as a scenario."""
    mgr, config = _load_config()
    mgr.save_scenario(config, name, description)


@cmd_scenario.command("load")
@click.argument("name")
def scenario_load(name: str):
    """Make a saved scenario the active configuration."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        config = mgr.load_scenario(name)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    mgr.save(config)
    console.print(f"[green]✓[/green] Scenario '{name}' is now active.")


@cmd_scenario.command("list")
def scenario_list():
    """List saved scenarios."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    scenarios = mgr.list_scenarios()

    if not scenarios:
        console.print("[dim]No scenarios saved.[/dim]")
        return

    table = Table(title="Saved scenarios", box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Created")
    table.add_column("Description")
    for s in scenarios:
        table.add_row(s.name, s.created, s.description)
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging.")
def cli(verbose: bool):
    """Course grade calculator (theory / lab courses)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_classify)
cli.add_command(cmd_check_assessment)
cli.add_command(cmd_attendance)
cli.add_command(cmd_bands)
cli.add_command(cmd_generate)
cli.add_command(cmd_summary)
cli.add_command(cmd_report)
cli.add_command(cmd_export)
cli.add_command(cmd_scenario)


if __name__ == "__main__":
    main()
