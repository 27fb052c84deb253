from __future__ import annotations

import csv
import io
from datetime import timedelta

from flask import Flask, g, jsonify, request

from ..access.web import login_required
from ..common.datetime_utils import today_local
from ..common.http import parse_date_param, parse_int_param
from ..core.constants import DEFAULT_REPORT_DAYS
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)
    policy = container.access_policy

    def _parse_range():
        """startDate/endDate query params; defaults to the last week ending today."""
        today = today_local()
        start_s = request.args.get("startDate") or (today - timedelta(days=DEFAULT_REPORT_DAYS - 1)).isoformat()
        end_s = request.args.get("endDate") or today.isoformat()
        return parse_date_param(start_s, "startDate"), parse_date_param(end_s, "endDate")

    def _write_summary_csv(*, summary, filename: str):
        """Per-day counts of a class summary as a CSV download."""
        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["date", "present", "absent", "late", "excused", "unmarked"],
            extrasaction="ignore",
        )
        writer.writeheader()
        for day in summary.per_day:
            writer.writerow(day.to_dict())

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/student-summary", methods=["GET"], endpoint="report_student_summary")
    @auth
    def student_summary():
        student_id = parse_int_param(request.args.get("studentId"), "studentId")
        policy.require_student_access(g.caller, student_id)

        start, end = _parse_range()
        summary = container.report_service.summarize_for_student(student_id, start, end)
        return jsonify(summary.to_dict())

    @app.route("/api/reports/class-summary", methods=["GET"], endpoint="report_class_summary")
    @auth
    def class_summary():
        policy.require_staff(g.caller)

        class_id = parse_int_param(request.args.get("classId"), "classId")
        start, end = _parse_range()
        summary = container.report_service.summarize_for_class(class_id, start, end)
        return jsonify(summary.to_dict())

    @app.route("/api/reports/class-summary.csv", methods=["GET"], endpoint="report_class_summary_csv")
    @auth
    def class_summary_csv():
        policy.require_staff(g.caller)

        class_id = parse_int_param(request.args.get("classId"), "classId")
        start, end = _parse_range()
        summary = container.report_service.summarize_for_class(class_id, start, end)
        filename = f"class_{class_id}_attendance_{start.isoformat()}_{end.isoformat()}.csv"
        return _write_summary_csv(summary=summary, filename=filename)

    @app.route("/api/reports/school-summary", methods=["GET"], endpoint="report_school_summary")
    @auth
    def school_summary():
        policy.require_staff(g.caller)

        start, end = _parse_range()
        return jsonify(container.report_service.summarize_for_school(start, end).to_dict())
