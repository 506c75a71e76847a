from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "student_records"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from student_records.container import build_container
from student_records.seed.sample_data import seed_sample_data


def main() -> None:
    parser = argparse.ArgumentParser(description="Replace all records with demonstration data.")
    parser.add_argument("--with-attendance", action="store_true", help="also generate sample attendance")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        storage_backend=settings.STORAGE_BACKEND,
        storage_mode=settings.STORAGE_MODE,
        data_dir=settings.DATA_DIR,
        db_config=dict(settings.DB_CONFIG),
    )
    summary = seed_sample_data(container.store, with_attendance=args.with_attendance)
    print(
        f"OK: Seeded {settings.STORAGE_BACKEND} storage -> "
        f"{summary.classes} classes, {summary.students} students, {summary.attendance_records} attendance records"
    )


if __name__ == "__main__":
    main()
