"""Alert row storage operations."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable

from alertstore.core.codec import alert_state_to_db_field, alert_type_to_db_field
from alertstore.core.models import Alert
from alertstore.core.storage.schema import ALERTS_TABLE, ID_COLUMN
from alertstore.core.storage.sqlite import clear_table, get_table_max_int_value, table_columns


class AlertStorage:
    """Storage operations for the alerts table."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection

    def exists(self, token: str) -> bool:
        """Check whether an alert with this token is stored."""
        conn = self._get_connection()
        cursor = conn.execute(f"SELECT COUNT(*) FROM {ALERTS_TABLE} WHERE token = ?", (token,))
        return cursor.fetchone()[0] > 0

    def exists_by_id(self, alert_id: int) -> bool:
        """Check whether an alert with this database id is stored."""
        conn = self._get_connection()
        cursor = conn.execute(f"SELECT COUNT(*) FROM {ALERTS_TABLE} WHERE id = ?", (alert_id,))
        return cursor.fetchone()[0] > 0

    def next_id(self) -> int:
        """Allocate the id for the next insert (current max + 1)."""
        return get_table_max_int_value(self._get_connection(), ALERTS_TABLE, ID_COLUMN) + 1

    def insert(self, alert: Alert, alert_id: int) -> None:
        """Insert the parent row of an alert under the given id."""
        alert_type = alert_type_to_db_field(alert.type_name)
        alert_state = alert_state_to_db_field(alert.state)

        conn = self._get_connection()
        conn.execute(
            f"""
            INSERT INTO {ALERTS_TABLE} (id, token, type, state,
                                        scheduled_time_unix, scheduled_time_iso_8601,
                                        asset_loop_count, asset_loop_pause_milliseconds,
                                        background_asset)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                alert_id,
                alert.token,
                alert_type,
                alert_state,
                alert.scheduled_time_unix,
                alert.scheduled_time_iso_8601,
                alert.loop_count,
                alert.loop_pause_ms,
                alert.background_asset_id,
            ),
        )

    def update_schedule(self, alert: Alert) -> int:
        """Update the state and scheduled time of a stored alert. Returns rows changed."""
        alert_state = alert_state_to_db_field(alert.state)

        conn = self._get_connection()
        cursor = conn.execute(
            f"""
            UPDATE {ALERTS_TABLE}
            SET state = ?, scheduled_time_unix = ?, scheduled_time_iso_8601 = ?
            WHERE id = ?
            """,
            (alert_state, alert.scheduled_time_unix, alert.scheduled_time_iso_8601, alert.id),
        )
        return cursor.rowcount

    def delete(self, alert_id: int) -> int:
        """Delete the parent row of an alert. Returns count deleted."""
        conn = self._get_connection()
        cursor = conn.execute(f"DELETE FROM {ALERTS_TABLE} WHERE id = ?", (alert_id,))
        return cursor.rowcount

    def columns(self, table: str = ALERTS_TABLE) -> set[str]:
        """Get the column names of an alerts table (current or legacy)."""
        return table_columns(self._get_connection(), table)

    def fetch_all(self, table: str = ALERTS_TABLE) -> list[sqlite3.Row]:
        """Get every row of an alerts table (current or legacy)."""
        conn = self._get_connection()
        return conn.execute(f'SELECT * FROM "{table}"').fetchall()

    def clear(self) -> None:
        """Delete all alert rows."""
        clear_table(self._get_connection(), ALERTS_TABLE)
