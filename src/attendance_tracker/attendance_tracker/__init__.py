"""Attendance Tracker package.

Faculty-facing attendance tracking organised by feature modules (users,
students, courses, attendance, verification) with a thin Flask controller
layer on top of service/repository layers.
"""
