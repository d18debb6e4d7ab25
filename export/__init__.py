"""Export-Modul: Excel-Notenliste (openpyxl)."""

from export.excel_export import GradeSheetExporter

__all__ = ["GradeSheetExporter"]
