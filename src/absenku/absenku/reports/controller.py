from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..container import Container
from ..core.enums import ExportFormat
from ..rpc.controller import get_registry, require_roles
from ..rpc.errors import map_exception
from ..rpc.roles import STAFF
from ..rpc.schemas import AttendanceFilter
from .schemas import DailyReportInput, ExportInput, ExportReportInput, MonthlyReportInput, WeeklyReportInput


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.report_service

    @rpc.query("reports.generateAttendance", input=AttendanceFilter, roles=STAFF)
    def generate_attendance(data: AttendanceFilter):
        return service.generate_attendance(data.to_domain())

    rpc.alias("reports.generate", "reports.generateAttendance")

    @rpc.query("reports.getSummary", input=AttendanceFilter, roles=STAFF)
    def get_summary(data: AttendanceFilter):
        return service.get_summary(data.to_domain())

    @rpc.query("reports.generateDaily", input=DailyReportInput, roles=STAFF)
    def generate_daily(data: DailyReportInput):
        return service.generate_daily(data.tanggal, data.kelas_id)

    @rpc.query("reports.generateWeekly", input=WeeklyReportInput, roles=STAFF)
    def generate_weekly(data: WeeklyReportInput):
        return service.generate_weekly(data.start_date, data.kelas_id)

    @rpc.query("reports.generateMonthly", input=MonthlyReportInput, roles=STAFF)
    def generate_monthly(data: MonthlyReportInput):
        return service.generate_monthly(data.year, data.month, data.kelas_id)

    @rpc.mutation("reports.exportToPDF", input=ExportReportInput, roles=STAFF)
    def export_pdf(data: ExportReportInput):
        return service.export_report(data.report_data, data.report_type, ExportFormat.PDF).to_payload()

    @rpc.mutation("reports.exportToExcel", input=ExportReportInput, roles=STAFF)
    def export_excel(data: ExportReportInput):
        return service.export_report(data.report_data, data.report_type, ExportFormat.EXCEL).to_payload()

    @rpc.mutation("reports.export", input=ExportInput, roles=STAFF)
    def export(data: ExportInput):
        return service.export(data.format, data.filter.to_domain()).to_payload()

    def _download(fmt: ExportFormat):
        try:
            require_roles(STAFF)
            flt = AttendanceFilter.model_validate(request.args.to_dict())
            exported = service.export(fmt, flt.to_domain())
        except Exception as e:
            payload, status = map_exception(e)
            return jsonify(payload), status
        return send_file(
            io.BytesIO(exported.content),
            mimetype=exported.mimetype,
            as_attachment=True,
            download_name=exported.filename,
        )

    @app.route("/reports/attendance.csv", methods=["GET"], endpoint="report_attendance_csv")
    def report_attendance_csv():
        return _download(ExportFormat.CSV)

    @app.route("/reports/attendance.xlsx", methods=["GET"], endpoint="report_attendance_xlsx")
    def report_attendance_xlsx():
        return _download(ExportFormat.EXCEL)
