from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_user_id, get_request_data, json_endpoint, login_required, wire_to_fields
from ..common.serializers import course_to_json, student_to_json
from ..container import Container

COURSE_WIRE_FIELDS = {
    "code": "code",
    "name": "name",
    "room": "room",
    "schedule": "schedule",
    "totalStudents": "total_students",
}


def register(app: Flask, container: Container) -> None:
    api = json_endpoint(app)

    @app.route("/api/courses", methods=["GET"], endpoint="list_courses")
    @login_required
    @api
    def list_courses():
        courses = container.course_service.list_for_instructor(current_user_id())
        return jsonify([course_to_json(c) for c in courses]), 200

    @app.route("/api/courses", methods=["POST"], endpoint="create_course")
    @login_required
    @api
    def create_course():
        fields = wire_to_fields(get_request_data(), COURSE_WIRE_FIELDS)
        course = container.course_service.create(current_user_id(), fields)
        return jsonify(course_to_json(course)), 201

    @app.route("/api/courses/<int:course_id>", methods=["GET"], endpoint="get_course")
    @login_required
    @api
    def get_course(course_id: int):
        return jsonify(course_to_json(container.course_service.get(course_id))), 200

    @app.route("/api/courses/<int:course_id>", methods=["PATCH"], endpoint="update_course")
    @login_required
    @api
    def update_course(course_id: int):
        fields = wire_to_fields(get_request_data(), COURSE_WIRE_FIELDS)
        course = container.course_service.update(course_id, fields)
        return jsonify(course_to_json(course)), 200

    @app.route("/api/courses/<int:course_id>", methods=["DELETE"], endpoint="delete_course")
    @login_required
    @api
    def delete_course(course_id: int):
        container.course_service.delete(course_id)
        return "", 204

    @app.route("/api/courses/<int:course_id>/students", methods=["GET"], endpoint="course_students")
    @login_required
    @api
    def course_students(course_id: int):
        students = container.student_service.list_by_course(course_id)
        return jsonify([student_to_json(s) for s in students]), 200
