"""Asset catalog storage operations."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterable

from alertstore.core.models import Asset
from alertstore.core.storage.schema import ALERT_ASSETS_TABLE, ID_COLUMN
from alertstore.core.storage.sqlite import clear_table, get_table_max_int_value


class AssetStorage:
    """Storage operations for the alertAssets table."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection

    def insert_for_alert(self, alert_id: int, assets: Iterable[Asset]) -> int:
        """Insert an alert's asset catalog. Returns count inserted."""
        conn = self._get_connection()
        next_id = get_table_max_int_value(conn, ALERT_ASSETS_TABLE, ID_COLUMN) + 1
        rows = [
            (row_id, alert_id, asset.avs_id, asset.url)
            for row_id, asset in enumerate(assets, start=next_id)
        ]
        if not rows:
            return 0

        conn.executemany(
            f"INSERT INTO {ALERT_ASSETS_TABLE} (id, alert_id, avs_id, url) VALUES (?, ?, ?, ?)",
            rows,
        )
        return len(rows)

    def fetch_all(self) -> list[sqlite3.Row]:
        conn = self._get_connection()
        return conn.execute(f"SELECT * FROM {ALERT_ASSETS_TABLE}").fetchall()

    def delete_for_alert(self, alert_id: int) -> int:
        """Delete all assets of an alert. Returns count deleted."""
        conn = self._get_connection()
        cursor = conn.execute(f"DELETE FROM {ALERT_ASSETS_TABLE} WHERE alert_id = ?", (alert_id,))
        return cursor.rowcount

    def clear(self) -> None:
        """Delete all asset rows."""
        clear_table(self._get_connection(), ALERT_ASSETS_TABLE)
