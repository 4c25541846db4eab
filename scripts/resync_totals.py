from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container


def main() -> None:
    """Recompute every course's cached total_students from the student rosters."""

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(backend="mysql", db_config=dict(settings.DB_CONFIG))

    changed = container.course_service.resync_totals()
    if not changed:
        print("OK: all course totals already match their rosters")
        return
    for code, total in sorted(changed.items()):
        print(f"{code}: total_students -> {total}")


if __name__ == "__main__":
    main()
