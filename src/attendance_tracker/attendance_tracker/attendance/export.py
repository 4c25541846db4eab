from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from .model import ExportRow

EXPORT_HEADERS = {
    "date": "Date",
    "student_id": "Student ID",
    "student_name": "Student Name",
    "course": "Course",
    "status": "Status",
    "verification_method": "Verification Method",
}


def render_csv(rows: Iterable[ExportRow]) -> bytes:
    """Serialize export rows; the header line is always written.

    Encoded as utf-8-sig so spreadsheet tools detect the encoding.
    """

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(EXPORT_HEADERS))
    writer.writerow(EXPORT_HEADERS)
    for row in rows:
        writer.writerow(
            {
                "date": row.date,
                "student_id": row.student_id,
                "student_name": row.student_name,
                "course": row.course,
                "status": row.status,
                "verification_method": row.verification_method,
            }
        )
    return out.getvalue().encode("utf-8-sig")


def export_filename(course_code: str, day: date) -> str:
    return f"attendance_{course_code}_{day.strftime('%Y-%m-%d')}.csv"
