"""Asset play-order storage operations."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Sequence

from alertstore.core.storage.schema import ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE, ID_COLUMN
from alertstore.core.storage.sqlite import clear_table, get_table_max_int_value


class PlayOrderStorage:
    """Storage operations for the alertAssetPlayOrderItems table."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection

    def insert_for_alert(self, alert_id: int, tokens: Sequence[str]) -> int:
        """Insert an alert's playlist, numbering positions from 1. Returns count inserted."""
        if not tokens:
            return 0

        conn = self._get_connection()
        next_id = get_table_max_int_value(conn, ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE, ID_COLUMN) + 1
        conn.executemany(
            f"""
            INSERT INTO {ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE}
                (id, alert_id, asset_play_order_position, asset_play_order_token)
            VALUES (?, ?, ?, ?)
            """,
            [
                (next_id + offset, alert_id, offset + 1, token)
                for offset, token in enumerate(tokens)
            ],
        )
        return len(tokens)

    def fetch_all(self) -> list[sqlite3.Row]:
        conn = self._get_connection()
        return conn.execute(f"SELECT * FROM {ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE}").fetchall()

    def delete_for_alert(self, alert_id: int) -> int:
        """Delete the playlist of an alert. Returns count deleted."""
        conn = self._get_connection()
        cursor = conn.execute(
            f"DELETE FROM {ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE} WHERE alert_id = ?",
            (alert_id,),
        )
        return cursor.rowcount

    def clear(self) -> None:
        """Delete all play-order rows."""
        clear_table(self._get_connection(), ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE)
