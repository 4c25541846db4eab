from __future__ import annotations

import csv
import io
import json

import pytest


def _course_by_code(client, code):
    courses = client.get("/api/courses").get_json()
    return next(c for c in courses if c["code"] == code)


def test_data_routes_require_session(app):
    anonymous = app.test_client()

    for path in ("/api/students", "/api/courses", "/api/dashboard/stats", "/api/auth/user"):
        resp = anonymous.get(path)
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Unauthorized"


def test_login_rejects_bad_credentials(app):
    resp = app.test_client().post("/api/auth/login", json={"username": "faculty", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_login_profile_has_no_password(client):
    user = client.get("/api/auth/user").get_json()

    assert user["username"] == "faculty"
    assert user["name"] == "Prof. Jane Smith"
    assert "passwordHash" not in user and "password_hash" not in user


def test_logout_clears_session(client):
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/user").status_code == 401


def test_language_update(client):
    assert client.patch("/api/user/language", json={"language": "fr"}).get_json()["language"] == "fr"
    assert client.patch("/api/user/language", json={"language": "xx"}).status_code == 400


def test_demo_courses_are_listed_with_roster_totals(client):
    courses = {c["code"]: c for c in client.get("/api/courses").get_json()}

    assert set(courses) == {"CS101", "CS201", "CS301", "CS401"}
    assert courses["CS101"]["totalStudents"] == 3
    assert courses["CS401"]["totalStudents"] == 1


def test_student_crud_roundtrip(client):
    created = client.post(
        "/api/students",
        json={"name": "Ana Lima", "studentId": "S20001", "email": "ana@example.com", "courses": ["CS401"]},
    )
    assert created.status_code == 201
    student = created.get_json()
    assert student["studentId"] == "S20001"
    assert _course_by_code(client, "CS401")["totalStudents"] == 2

    patched = client.patch(f"/api/students/{student['id']}", json={"courses": []})
    assert patched.get_json()["courses"] == []
    assert _course_by_code(client, "CS401")["totalStudents"] == 1

    assert client.delete(f"/api/students/{student['id']}").status_code == 204
    assert client.delete(f"/api/students/{student['id']}").status_code == 404


def test_student_validation_errors_are_reported_per_field(client):
    resp = client.post("/api/students", json={"name": "A", "studentId": "", "email": "bad"})

    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {"name", "studentId", "email"}


def test_duplicate_student_id_conflicts(client):
    resp = client.post("/api/students", json={"name": "Copy Cat", "studentId": "S12345"})
    assert resp.status_code == 409


def test_course_students_unknown_course_is_empty(client):
    resp = client.get("/api/courses/9999/students")
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_new_course_stats_after_one_present(client):
    course = client.post("/api/courses", json={"code": "PH101", "name": "Physics"}).get_json()
    student = client.post(
        "/api/students", json={"name": "Ana Lima", "studentId": "S30001", "courses": ["PH101"]}
    ).get_json()

    resp = client.post(
        "/api/attendance",
        json={"studentId": student["id"], "courseId": course["id"], "status": "present", "verificationMethod": "manual"},
    )
    assert resp.status_code == 201

    stats = {s["code"]: s for s in client.get("/api/dashboard/course-stats").get_json()}
    assert stats["PH101"]["percentage"] == 100
    assert stats["PH101"]["total"] == 1


def test_dashboard_stats_reflect_seeded_day(client):
    stats = client.get("/api/dashboard/stats").get_json()

    # seeded today: present, present, absent, late
    assert stats["todayAttendance"] == "2/4"
    assert stats["todayPercentage"] == 50
    assert stats["totalStudents"] == 4
    assert stats["courseCount"] == 4


def test_record_attendance_unknown_student_is_404(client):
    course = _course_by_code(client, "CS101")
    resp = client.post(
        "/api/attendance",
        json={"studentId": 9999, "courseId": course["id"], "status": "present", "verificationMethod": "manual"},
    )
    assert resp.status_code == 404


def test_recent_defaults_and_limit(client):
    recent = client.get("/api/attendance/recent").get_json()
    assert len(recent) == 4
    assert recent[0]["student"]["name"] == "Emily Chen"
    assert recent[0]["course"]["code"] == "CS401"

    assert len(client.get("/api/attendance/recent?limit=1").get_json()) == 1


def test_export_empty_course_is_header_only(client):
    course = client.post("/api/courses", json={"code": "EM101", "name": "Empty Course"}).get_json()

    resp = client.get(f"/api/reports/export/{course['id']}")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_EM101_" in resp.headers["Content-Disposition"]
    rows = list(csv.reader(io.StringIO(resp.data.decode("utf-8-sig"))))
    assert rows == [["Date", "Student ID", "Student Name", "Course", "Status", "Verification Method"]]


def test_export_resolves_students_from_roster(client):
    course = _course_by_code(client, "CS201")

    rows = list(csv.reader(io.StringIO(client.get(f"/api/reports/export/{course['id']}").data.decode("utf-8-sig"))))

    # the seeded CS201 check-in belongs to a student who is not on the CS201 roster
    assert rows[1][1:5] == ["Unknown", "Unknown", "Data Structures", "present"]


def test_export_unknown_course_is_404(client):
    assert client.get("/api/reports/export/9999").status_code == 404


def test_verify_face_requires_course_id(client):
    resp = client.post(
        "/api/attendance/verify-face",
        data={"studentId": "1", "faceImage": (io.BytesIO(b"fake-jpeg"), "face.jpg")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Student ID and Course ID are required"


def test_verify_face_records_present_face(client):
    course = _course_by_code(client, "CS101")

    resp = client.post(
        "/api/attendance/verify-face",
        data={
            "studentId": "1",
            "courseId": str(course["id"]),
            "faceDescriptor": json.dumps([0.1, 0.2]),
            "faceImage": (io.BytesIO(b"fake-jpeg"), "face.jpg"),
        },
        content_type="multipart/form-data",
    )

    assert resp.status_code == 201
    attendance = resp.get_json()["attendance"]
    assert attendance["status"] == "present"
    assert attendance["verificationMethod"] == "face"


def test_enroll_face_unknown_student_is_404(client):
    resp = client.post(
        "/api/students/9999/face",
        data={"faceDescriptor": "[0.1, 0.2]", "faceImage": (io.BytesIO(b"img"), "face.jpg")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 404


def test_upload_over_limit_is_413(app, client):
    app.config["MAX_CONTENT_LENGTH"] = 1024

    resp = client.post(
        "/api/students/1/face",
        data={"faceImage": (io.BytesIO(b"x" * 4096), "face.jpg")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 413


@pytest.mark.parametrize("path", ["/api/students/9999", "/api/courses/9999"])
def test_missing_entities_are_404(client, path):
    assert client.get(path).status_code == 404
