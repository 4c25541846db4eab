from __future__ import annotations

import csv
import io
from datetime import date

from src.attendance_tracker.attendance_tracker.attendance.export import export_filename, render_csv
from src.attendance_tracker.attendance_tracker.attendance.model import ExportRow


def _parse(payload: bytes) -> list[list[str]]:
    return list(csv.reader(io.StringIO(payload.decode("utf-8-sig"))))


def test_empty_export_is_header_only():
    rows = _parse(render_csv([]))

    assert rows == [["Date", "Student ID", "Student Name", "Course", "Status", "Verification Method"]]


def test_values_with_commas_are_quoted():
    payload = render_csv(
        [ExportRow("2025-03-12 09:30:00", "S1", "Lima, Ana", "Intro", "present", "face")]
    )

    assert _parse(payload)[1] == ["2025-03-12 09:30:00", "S1", "Lima, Ana", "Intro", "present", "face"]


def test_filename_uses_code_and_day():
    assert export_filename("CS101", date(2025, 3, 12)) == "attendance_CS101_2025-03-12.csv"
