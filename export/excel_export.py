"""Excel-Export der Notenliste eines Kurses (openpyxl)."""

from pathlib import Path

from analysis.course_report import CourseGradeReport

from export.helpers import COLORS, grade_color, today_str


class GradeSheetExporter:
    """Exportiert einen CourseGradeReport in eine Excel-Datei mit 2 Sheets."""

    # Spaltenbreiten (Excel-Einheiten)
    COL_NAME_W  = 28
    COL_ROLL_W  = 12
    COL_MARK_W  = 12

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 22

    SUMMARY_HEADERS = ["Total", "Max possible", "Needed for A+", "Grade"]

    def __init__(self, report: CourseGradeReport, institution_name: str = ""):
        self.report = report
        self.institution_name = institution_name

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> None:
        """Erstellt die Excel-Datei ("Grades" + "Distribution")."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_grades(wb)
        self._sheet_distribution(wb)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self):
        from openpyxl.styles import Alignment
        return Alignment(horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, row: int, headers: list[str]) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align()
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    # ─── Sheets ───────────────────────────────────────────────────────────────

    def _sheet_grades(self, wb) -> None:
        """Ein Student pro Zeile: Punkte je Bewertung, Gesamt, Note."""
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        r = self.report
        ws = wb.create_sheet("Grades")
        title = f"{r.course_code or r.course_id} ({r.course_type})"
        if self.institution_name:
            title = f"{self.institution_name} – {title}"
        ws.cell(row=1, column=1, value=title).font = Font(bold=True, size=12)
        ws.cell(row=2, column=1, value=f"Exported {today_str()}").font = Font(size=8)

        headers = (["Student", "Roll"]
                   + [name for _, name in r.assessment_names]
                   + self.SUMMARY_HEADERS)
        self._write_header_row(ws, 4, headers)

        border = self._thin_border()
        for i, row in enumerate(r.rows, start=5):
            values = [row.name, row.roll or ""]
            values += [row.obtained.get(aid) for aid, _ in r.assessment_names]
            values += [
                row.summary.current_total,
                row.summary.max_possible,
                row.summary.a_plus_needed,
                row.summary.grade,
            ]
            for col, value in enumerate(values, 1):
                c = ws.cell(row=i, column=col, value=value)
                c.border = border
                if col > 2:
                    c.alignment = self._center_align()
                if value is None:
                    c.fill = self._fill(COLORS["missing"])
            grade_cell = ws.cell(row=i, column=len(values))
            grade_cell.fill = self._fill(grade_color(row.summary.grade))
            grade_cell.font = Font(bold=True)

        ws.column_dimensions["A"].width = self.COL_NAME_W
        ws.column_dimensions["B"].width = self.COL_ROLL_W
        for col in range(3, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_MARK_W
        ws.freeze_panes = "C5"

    def _sheet_distribution(self, wb) -> None:
        """Notenverteilung und Kurs-Kennzahlen."""
        r = self.report
        ws = wb.create_sheet("Distribution")
        self._write_header_row(ws, 1, ["Grade", "Students"])
        row = 2
        for grade, count in r.grade_distribution.items():
            ws.cell(row=row, column=1, value=grade)
            ws.cell(row=row, column=2, value=count)
            ws.cell(row=row, column=1).fill = self._fill(grade_color(grade))
            row += 1

        row += 1
        for label, value in (
            ("Students", len(r.rows)),
            ("Average", r.average_total),
            ("Highest", r.highest_total),
            ("Lowest", r.lowest_total),
        ):
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
            row += 1
        ws.column_dimensions["A"].width = 14
        ws.column_dimensions["B"].width = 12
