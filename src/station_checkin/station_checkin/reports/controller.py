from __future__ import annotations

import csv
import io
from datetime import timedelta

from flask import Flask, jsonify, request

from ..auth.context import AdminContext
from ..auth.decorators import admin_required
from ..common.datetime_utils import parse_iso_date, utc_now
from ..container import Container
from .service import REPORT_FIELDS, ReportData


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _range():
        today = utc_now().date()
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        end = parse_iso_date(end_s) if end_s else today
        start = parse_iso_date(start_s) if start_s else end - timedelta(days=7)
        return start, end

    def _write_report_csv(*, data: ReportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/summary", methods=["GET"], endpoint="admin_summary")
    @admin_required
    def admin_summary(admin: AdminContext):
        return jsonify(service.dashboard_counts(admin))

    @app.route("/api/admin/reports/activity", methods=["GET"], endpoint="admin_report_activity")
    @admin_required
    def admin_report_activity(admin: AdminContext):
        start, end = _range()
        data = service.build(admin, start=start, end=end)
        return jsonify(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "rows": data.rows,
                "summary": data.summary,
                "totalMinutes": data.total_minutes,
            }
        )

    @app.route("/api/admin/reports/activity.csv", methods=["GET"], endpoint="admin_report_activity_csv")
    @admin_required
    def admin_report_activity_csv(admin: AdminContext):
        start, end = _range()
        data = service.build(admin, start=start, end=end)
        filename = f"activity_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(data=data, filename=filename)
