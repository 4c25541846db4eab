from __future__ import annotations

from flask import Flask, jsonify, request

from ..common import validators as v
from ..common.datetime_utils import now_local, parse_timestamp
from ..common.http import current_user_id, get_request_data, json_endpoint, login_required
from ..common.serializers import (
    attendance_to_json,
    course_stats_to_json,
    recent_to_json,
    today_stats_to_json,
    today_status_to_json,
)
from ..container import Container
from ..core.constants import DEFAULT_RECENT_LIMIT
from .export import export_filename, render_csv


def register(app: Flask, container: Container) -> None:
    api = json_endpoint(app)

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @login_required
    @api
    def record_attendance():
        data = get_request_data()
        record = container.attendance_recorder.record_attendance(
            v.require_int(data.get("studentId"), "studentId"),
            v.require_int(data.get("courseId"), "courseId"),
            data.get("status"),
            data.get("verificationMethod"),
            occurred_at=parse_timestamp(data.get("date"), "date"),
        )
        return jsonify(attendance_to_json(record)), 201

    @app.route("/api/attendance/course/<int:course_id>", methods=["GET"], endpoint="course_attendance")
    @login_required
    @api
    def course_attendance(course_id: int):
        rows = container.attendance_recorder.list_by_course(course_id)
        return jsonify([attendance_to_json(r) for r in rows]), 200

    @app.route("/api/attendance/course/<int:course_id>/today", methods=["GET"], endpoint="course_attendance_today")
    @login_required
    @api
    def course_attendance_today(course_id: int):
        items = container.attendance_recorder.today_statuses(course_id)
        return jsonify([today_status_to_json(i) for i in items]), 200

    @app.route("/api/attendance/student/<int:student_id>", methods=["GET"], endpoint="student_attendance")
    @login_required
    @api
    def student_attendance(student_id: int):
        rows = container.attendance_recorder.list_by_student(student_id)
        return jsonify([attendance_to_json(r) for r in rows]), 200

    @app.route("/api/attendance/recent", methods=["GET"], endpoint="recent_attendance")
    @login_required
    @api
    def recent_attendance():
        raw = request.args.get("limit")
        limit = v.require_int(raw, "limit") if raw else DEFAULT_RECENT_LIMIT
        items = container.attendance_recorder.list_recent(limit)
        return jsonify([recent_to_json(i) for i in items]), 200

    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    @login_required
    @api
    def dashboard_stats():
        stats = container.attendance_recorder.compute_today_stats(current_user_id())
        return jsonify(today_stats_to_json(stats)), 200

    @app.route("/api/dashboard/course-stats", methods=["GET"], endpoint="dashboard_course_stats")
    @login_required
    @api
    def dashboard_course_stats():
        stats = container.attendance_recorder.compute_course_stats(current_user_id())
        return jsonify([course_stats_to_json(s) for s in stats]), 200

    @app.route("/api/reports/export/<int:course_id>", methods=["GET"], endpoint="export_course_attendance")
    @login_required
    @api
    def export_course_attendance(course_id: int):
        code, rows = container.attendance_recorder.export_course_attendance(course_id)
        filename = export_filename(code, now_local().date())
        app.logger.info("Exporting %d attendance rows for course %s", len(rows), code)
        return app.response_class(
            render_csv(rows),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

