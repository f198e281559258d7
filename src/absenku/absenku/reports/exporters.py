from __future__ import annotations

import base64
import csv
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any

import pandas as pd

from ..core.enums import ExportFormat, ReportType

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Where each report keeps its table rows and its summary block.
_ROW_KEYS = ("data", "siswa", "daily_summary", "siswa_summary")
_SUMMARY_KEYS = ("summary", "overall_summary")

_SHEET_NAMES = {
    ReportType.DAILY: "Laporan Harian",
    ReportType.WEEKLY: "Laporan Mingguan",
    ReportType.MONTHLY: "Laporan Bulanan",
    ReportType.CUSTOM: "Laporan Absensi",
}


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    mimetype: str
    content: bytes

    def to_payload(self) -> dict:
        return {
            "filename": self.filename,
            "mimetype": self.mimetype,
            "content_base64": base64.b64encode(self.content).decode("ascii"),
        }


def report_rows(report_data: Any) -> list[dict]:
    """Pull the table rows out of any generated report (or a bare list of rows)."""
    if isinstance(report_data, list):
        return [r for r in report_data if isinstance(r, dict)]
    if isinstance(report_data, dict):
        for key in _ROW_KEYS:
            rows = report_data.get(key)
            if isinstance(rows, list):
                return [r for r in rows if isinstance(r, dict)]
        return [report_data]
    return []


def report_summary(report_data: Any) -> dict:
    if isinstance(report_data, dict):
        for key in _SUMMARY_KEYS:
            summary = report_data.get(key)
            if isinstance(summary, dict):
                return summary
    return {}


def _filename(report_type: ReportType, today: date, ext: str) -> str:
    return f"laporan_{report_type.value}_{today.strftime('%Y%m%d')}.{ext}"


class ReportExporter(ABC):
    @abstractmethod
    def export(self, report_data: Any, report_type: ReportType, *, today: date) -> ExportedFile:
        raise NotImplementedError


class CsvExporter(ReportExporter):
    def export(self, report_data: Any, report_type: ReportType, *, today: date) -> ExportedFile:
        rows = report_rows(report_data)
        fieldnames: list[str] = []
        for row in rows:
            for key in row:
                if key not in fieldnames:
                    fieldnames.append(key)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        # BOM so Excel opens UTF-8 names correctly.
        return ExportedFile(
            filename=_filename(report_type, today, "csv"),
            mimetype="text/csv",
            content=out.getvalue().encode("utf-8-sig"),
        )


class ExcelExporter(ReportExporter):
    def export(self, report_data: Any, report_type: ReportType, *, today: date) -> ExportedFile:
        # json_normalize flattens nested dicts (e.g. periode.start).
        df = pd.json_normalize(report_rows(report_data))
        summary = report_summary(report_data)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=_SHEET_NAMES[report_type])
            if summary:
                pd.json_normalize(summary).to_excel(writer, index=False, sheet_name="Ringkasan")
        output.seek(0)

        return ExportedFile(
            filename=_filename(report_type, today, "xlsx"),
            mimetype=XLSX_MIMETYPE,
            content=output.getvalue(),
        )


class PdfExporter(ReportExporter):
    """Placeholder: PDF rendering is not implemented."""

    def export(self, report_data: Any, report_type: ReportType, *, today: date) -> ExportedFile:
        return ExportedFile(
            filename=_filename(report_type, today, "pdf"),
            mimetype="application/pdf",
            content=b"PDF placeholder",
        )


_EXPORTERS = {
    ExportFormat.CSV: CsvExporter,
    ExportFormat.EXCEL: ExcelExporter,
    ExportFormat.PDF: PdfExporter,
}


def get_exporter(fmt: ExportFormat) -> ReportExporter:
    return _EXPORTERS[ExportFormat(fmt)]()
