"""Backup all records.

Note: Writes the same JSON document served by ``GET /api/export``, so any storage
backend can be backed up and restored through ``POST /api/import``.
"""

from __future__ import annotations

import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "student_records"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from student_records.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        storage_backend=settings.STORAGE_BACKEND,
        storage_mode="strict",
        data_dir=settings.DATA_DIR,
        db_config=dict(settings.DB_CONFIG),
    )

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"student_records_{ts}.json"
    out_file.write_text(json.dumps(container.store.export_data(), ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
