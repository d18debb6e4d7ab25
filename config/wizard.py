"""Interaktiver Setup-Wizard für die Ersteinrichtung des Notenrechners.

Nutzt rich für die Konsolenausgabe. Standardwerte können mit Enter
übernommen werden.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.defaults import ATTENDANCE_MAX_MARKS
from config.schema import (
    AttendanceConfig,
    ExportConfig,
    GraderConfig,
    GradingPolicyConfig,
)

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _wizard_grading() -> GradingPolicyConfig:
    _header("Course types")
    _info("theory, lab and hybrid are supported. Hybrid has no formula of its own.")
    unknown = Prompt.ask(
        "Unknown course type",
        choices=["default", "reject"],
        default="default",
    )
    hybrid = Prompt.ask(
        "Hybrid courses",
        choices=["theory", "reject"],
        default="theory",
    )
    return GradingPolicyConfig(unknown_course_type=unknown, hybrid_formula=hybrid)


def _wizard_attendance() -> AttendanceConfig:
    _header("Attendance")
    _info("Attendance marks (0–5) are stored against this assessment.")
    name = Prompt.ask("Assessment name", default="Attendance")
    order = IntPrompt.ask("Sort order", default=999)
    return AttendanceConfig(assessment_name=name, order=order)


def show_summary(config: GraderConfig) -> None:
    """Zeigt die Konfiguration als rich-Tabelle an."""
    table = Table(title="Configuration", box=box.ROUNDED)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Institution", config.institution_name)
    table.add_row("Unknown course type", config.grading.unknown_course_type)
    table.add_row("Hybrid formula", config.grading.hybrid_formula)
    table.add_row("Attendance assessment",
                  f"{config.attendance.assessment_name} "
                  f"({ATTENDANCE_MAX_MARKS} marks, "
                  f"order {config.attendance.order})")
    table.add_row("Output directory", config.export.output_dir)
    console.print(table)


def run_wizard() -> Optional[GraderConfig]:
    """Führt den interaktiven Setup-Wizard aus.

    Returns:
        Fertige GraderConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Course grade calculator setup[/bold]\n\n"
        "[dim]Press Enter to accept a default.[/dim]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nSet up now?", default=True):
        console.print("[yellow]Setup cancelled.[/yellow]")
        return None

    try:
        name = Prompt.ask("Institution", default="Department of Computer Science")
        grading = _wizard_grading()
        attendance = _wizard_attendance()
        output_dir = Prompt.ask("Output directory", default="output")

        config = GraderConfig(
            institution_name=name,
            grading=grading,
            attendance=attendance,
            export=ExportConfig(output_dir=output_dir),
        )
        show_summary(config)

        if not Confirm.ask("\nSave configuration?", default=True):
            console.print("[yellow]Configuration not saved.[/yellow]")
            return None

        _success("Saving configuration...")
        return config

    except KeyboardInterrupt:
        console.print("\n[yellow]Setup cancelled.[/yellow]")
        return None
