from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..attendance.model import AttendanceRecord, CourseStats, RecentAttendance, StudentTodayStatus, TodayStats
from ..courses.model import Course
from ..students.model import Student
from ..users.model import User


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def user_to_json(user: User) -> dict[str, Any]:
    # password_hash never leaves the server
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "department": user.department,
        "language": user.language,
        "profileImage": user.profile_image,
        "createdAt": _iso(user.created_at),
    }


def student_to_json(student: Student) -> dict[str, Any]:
    return {
        "id": student.id,
        "name": student.name,
        "studentId": student.student_id,
        "email": student.email,
        "faceDescriptor": list(student.face_descriptor) if student.face_descriptor is not None else None,
        "courses": list(student.courses),
        "createdAt": _iso(student.created_at),
    }


def course_to_json(course: Course) -> dict[str, Any]:
    return {
        "id": course.id,
        "code": course.code,
        "name": course.name,
        "instructorId": course.instructor_id,
        "room": course.room,
        "schedule": course.schedule,
        "totalStudents": course.total_students,
        "createdAt": _iso(course.created_at),
    }


def attendance_to_json(record: AttendanceRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "studentId": record.student_id,
        "courseId": record.course_id,
        "date": _iso(record.date),
        "status": record.status.value,
        "verificationMethod": record.verification_method.value,
    }


def recent_to_json(item: RecentAttendance) -> dict[str, Any]:
    data = attendance_to_json(item.record)
    data["student"] = student_to_json(item.student)
    data["course"] = course_to_json(item.course)
    return data


def today_status_to_json(item: StudentTodayStatus) -> dict[str, Any]:
    return {
        "student": student_to_json(item.student),
        "attendance": attendance_to_json(item.record) if item.record else None,
    }


def today_stats_to_json(stats: TodayStats) -> dict[str, Any]:
    return {
        "todayAttendance": stats.today_attendance,
        "todayPercentage": stats.today_percentage,
        "presentToday": stats.present_today,
        "totalToday": stats.total_today,
        "weeklyAverage": stats.weekly_average,
        "totalStudents": stats.total_students,
        "courseCount": stats.course_count,
    }


def course_stats_to_json(stats: CourseStats) -> dict[str, Any]:
    return {
        "id": stats.id,
        "name": stats.name,
        "code": stats.code,
        "present": stats.present,
        "total": stats.total,
        "percentage": stats.percentage,
    }
