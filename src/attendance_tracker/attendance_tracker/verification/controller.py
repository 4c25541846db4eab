from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import get_request_data, json_endpoint, login_required, parse_json_field, uploaded_bytes
from ..common.serializers import attendance_to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    api = json_endpoint(app)

    @app.route("/api/attendance/verify-face", methods=["POST"], endpoint="verify_face")
    @login_required
    @api
    def verify_face():
        # multipart form: faceImage, studentId, courseId, optional JSON faceDescriptor
        data = get_request_data()
        descriptor = data.get("faceDescriptor")
        if isinstance(descriptor, str):
            descriptor = parse_json_field(descriptor, "faceDescriptor")

        record = container.verification_service.verify_and_record(
            data.get("studentId"),
            data.get("courseId"),
            uploaded_bytes("faceImage"),
            descriptor,
        )
        app.logger.info(
            "Face check-in accepted (policy=%s) for student %s in course %s",
            container.verification_service.policy.name,
            record.student_id,
            record.course_id,
        )
        return jsonify({"success": True, "attendance": attendance_to_json(record)}), 201
