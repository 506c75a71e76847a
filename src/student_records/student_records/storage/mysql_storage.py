from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import KeyValueStorage


class MySQLKeyValueStorage(KeyValueStorage):
    """Stores each collection as one row of the ``kv_store`` table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self, key: str) -> Optional[bytes]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payload
                FROM kv_store
                WHERE store_key=%s
                """,
                (key,),
            )
            row = fetchone(cur)
            if not row:
                return None
            payload = row["payload"]
            if isinstance(payload, str):
                return payload.encode("utf-8")
            return bytes(payload)

    def save(self, key: str, data: bytes) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store (store_key, payload)
                VALUES (%s, %s)
                ON DUPLICATE KEY UPDATE payload=VALUES(payload)
                """,
                (key, data),
            )

    def delete(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE store_key=%s", (key,))
