from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import get_request_data, json_endpoint, login_required, parse_json_field, uploaded_bytes, wire_to_fields
from ..common.serializers import student_to_json
from ..container import Container

STUDENT_WIRE_FIELDS = {
    "name": "name",
    "studentId": "student_id",
    "email": "email",
    "faceDescriptor": "face_descriptor",
    "courses": "courses",
}


def register(app: Flask, container: Container) -> None:
    api = json_endpoint(app)

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @login_required
    @api
    def list_students():
        students = container.student_service.list_all()
        return jsonify([student_to_json(s) for s in students]), 200

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    @login_required
    @api
    def create_student():
        fields = wire_to_fields(get_request_data(), STUDENT_WIRE_FIELDS)
        student = container.student_service.create(fields)
        return jsonify(student_to_json(student)), 201

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="get_student")
    @login_required
    @api
    def get_student(student_id: int):
        return jsonify(student_to_json(container.student_service.get(student_id))), 200

    @app.route("/api/students/<int:student_id>", methods=["PATCH"], endpoint="update_student")
    @login_required
    @api
    def update_student(student_id: int):
        fields = wire_to_fields(get_request_data(), STUDENT_WIRE_FIELDS)
        student = container.student_service.update(student_id, fields)
        return jsonify(student_to_json(student)), 200

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    @api
    def delete_student(student_id: int):
        container.student_service.delete(student_id)
        return "", 204

    @app.route("/api/students/<int:student_id>/face", methods=["POST"], endpoint="enroll_face")
    @login_required
    @api
    def enroll_face(student_id: int):
        data = get_request_data()
        descriptor = data.get("faceDescriptor")
        if isinstance(descriptor, str):
            descriptor = parse_json_field(descriptor, "faceDescriptor", default=[])
        student = container.verification_service.enroll_face(
            student_id,
            descriptor if descriptor is not None else [],
            image=uploaded_bytes("faceImage"),
        )
        return jsonify(student_to_json(student)), 200
