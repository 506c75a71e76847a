from __future__ import annotations

from enum import Enum


class Period(str, Enum):
    """Reporting granularity stored on each attendance record."""

    SEMESTER = "semester"
    YEAR = "year"


class StorageMode(str, Enum):
    """How the record store reacts to persistence failures."""

    LENIENT = "lenient"
    STRICT = "strict"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    FILE = "file"
    MYSQL = "mysql"
