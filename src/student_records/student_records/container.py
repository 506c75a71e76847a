from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .core.constants import DEFAULT_DATA_DIR
from .core.enums import StorageBackend, StorageMode
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .records.store import RecordStore
from .reports.service import FrequencyReportService
from .storage.file_storage import JsonFileKeyValueStorage
from .storage.memory_storage import InMemoryKeyValueStorage
from .storage.mysql_storage import MySQLKeyValueStorage
from .storage.repository import KeyValueStorage


@dataclass(frozen=True)
class Container:
    storage: KeyValueStorage
    store: RecordStore

    attendance_service: AttendanceService
    frequency_report_service: FrequencyReportService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def build_storage(
    backend: StorageBackend | str,
    *,
    data_dir: str = DEFAULT_DATA_DIR,
    db_config: Optional[dict] = None,
) -> tuple[KeyValueStorage, Optional[DatabaseConnection]]:
    backend = StorageBackend(backend)
    if backend == StorageBackend.MEMORY:
        return InMemoryKeyValueStorage(), None
    if backend == StorageBackend.FILE:
        return JsonFileKeyValueStorage(data_dir), None

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
    return MySQLKeyValueStorage(conn), conn


def build_container(
    *,
    storage_backend: StorageBackend | str = StorageBackend.FILE,
    storage_mode: StorageMode | str = StorageMode.LENIENT,
    data_dir: str = DEFAULT_DATA_DIR,
    db_config: Optional[dict] = None,
    storage: Optional[KeyValueStorage] = None,
) -> Container:
    conn = None
    if storage is None:
        storage, conn = build_storage(storage_backend, data_dir=data_dir, db_config=db_config)

    store = RecordStore(storage, mode=StorageMode(storage_mode))

    return Container(
        storage=storage,
        store=store,
        attendance_service=AttendanceService(store),
        frequency_report_service=FrequencyReportService(store),
        dashboard_service=DashboardService(store),
        conn=conn,
    )
