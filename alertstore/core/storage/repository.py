"""Repository that exposes the alert store contract."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from alertstore.core.exceptions import (
    AlertNotFoundError,
    AlertStoreError,
    DatabaseStateError,
    DuplicateTokenError,
    InvalidAlertError,
)
from alertstore.core.models import Alert
from alertstore.core.storage.alerts import AlertStorage
from alertstore.core.storage.assembler import load_alerts
from alertstore.core.storage.assets import AssetStorage
from alertstore.core.storage.migration import migrate_v1_to_v2
from alertstore.core.storage.play_order import PlayOrderStorage
from alertstore.core.storage.schema import (
    ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE,
    ALERT_ASSETS_TABLE,
    ALERTS_TABLE,
    create_tables,
    detect_schema_version,
)
from alertstore.core.storage.sqlite import (
    close_sqlite_database,
    create_sqlite_database,
    get_number_table_rows,
    open_sqlite_database,
    transaction,
)

logger = logging.getLogger(__name__)

_FAILURES = (AlertStoreError, sqlite3.Error, OSError, OverflowError)


class AlertRepository:
    """Facade that coordinates alert, asset, and play-order storage.

    Every public operation returns ``True`` on success and ``False`` on
    failure; the reason for a failure is logged, never raised. Writes are
    transactional, so a failed call leaves the file unchanged.

    One instance owns one database handle and is not safe for concurrent
    use.
    """

    def __init__(self) -> None:
        self._conn: sqlite3.Connection | None = None

        self.alerts = AlertStorage(self._get_connection)
        self.assets = AssetStorage(self._get_connection)
        self.play_order = PlayOrderStorage(self._get_connection)

    def _get_connection(self) -> sqlite3.Connection:
        """Get the open database connection."""
        if self._conn is None:
            raise DatabaseStateError("Database handle is not open.")
        return self._conn

    def __enter__(self) -> AlertRepository:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    def create_database(self, path: Path | str) -> bool:
        """Create a fresh database file with all tables and keep it open."""
        path = Path(path)
        if self._conn is not None:
            logger.error("create_database failed: database handle is already open.")
            return False

        try:
            self._conn = create_sqlite_database(path)
        except _FAILURES as e:
            logger.error(f"create_database failed: {e} (file path: {path})")
            return False

        try:
            with transaction(self._conn):
                create_tables(self._conn)
        except _FAILURES as e:
            logger.error(f"create_database failed: tables could not be created: {e}")
            self.close()
            return False

        return True

    def open(self, path: Path | str) -> bool:
        """Open an existing database file, migrating it to the current schema."""
        path = Path(path)
        if self._conn is not None:
            logger.error("open failed: database handle is already open.")
            return False

        try:
            self._conn = open_sqlite_database(path)
        except _FAILURES as e:
            logger.error(f"open failed: {e} (file path: {path})")
            return False

        try:
            migrate_v1_to_v2(self._conn, self.alerts, self.assets, self.play_order, self._insert)
        except _FAILURES as e:
            logger.error(f"open failed: could not migrate database file from V1 to V2: {e}")
            self.close()
            return False

        return True

    def is_open(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            close_sqlite_database(self._conn)
            self._conn = None

    def alert_exists(self, token: str) -> bool:
        """Check whether an alert with this token is stored."""
        try:
            return self.alerts.exists(token)
        except _FAILURES as e:
            logger.error(f"alert_exists failed: {e}")
            return False

    def _insert(self, alert: Alert) -> int:
        """Insert an alert and its children under a fresh id and return the id."""
        if self.alerts.exists(alert.token):
            raise DuplicateTokenError(f"Alert already exists (token: {alert.token})")

        alert_id = self.alerts.next_id()
        self.alerts.insert(alert, alert_id)

        config = alert.asset_configuration
        self.assets.insert_for_alert(alert_id, config.assets.values())
        self.play_order.insert_for_alert(alert_id, config.asset_play_order_items)
        return alert_id

    @staticmethod
    def _validate(alert: Alert) -> None:
        if not alert.token:
            raise InvalidAlertError("Alert token is empty.")
        if alert.loop_count < 0 or alert.loop_pause_ms < 0:
            raise InvalidAlertError(
                f"Negative loop settings (token: {alert.token}, count: {alert.loop_count}, "
                f"pause: {alert.loop_pause_ms})"
            )

    def store(self, alert: Alert | None) -> bool:
        """Store a new alert with its assets and playlist.

        On success the assigned database id is written to ``alert.id``.
        """
        try:
            if alert is None:
                raise DatabaseStateError("Alert parameter is None.")
            self._validate(alert)
            conn = self._get_connection()
            with transaction(conn):
                alert_id = self._insert(alert)
        except _FAILURES as e:
            logger.error(f"store failed: {e}")
            return False

        alert.id = alert_id
        return True

    def modify(self, alert: Alert | None) -> bool:
        """Update the state and scheduled time of a stored alert.

        No other field of the alert, and none of its assets or playlist
        items, is written.
        """
        try:
            if alert is None:
                raise DatabaseStateError("Alert parameter is None.")
            conn = self._get_connection()
            with transaction(conn):
                if not self.alerts.exists(alert.token):
                    raise AlertNotFoundError(f"Cannot modify alert (token: {alert.token})")
                if self.alerts.update_schedule(alert) == 0:
                    raise AlertNotFoundError(f"No alert with id {alert.id} (token: {alert.token})")
        except _FAILURES as e:
            logger.error(f"modify failed: {e}")
            return False

        return True

    def _delete(self, alert_id: int) -> None:
        """Delete an alert and its children from all tables."""
        self.alerts.delete(alert_id)
        self.assets.delete_for_alert(alert_id)
        self.play_order.delete_for_alert(alert_id)

    def erase(self, alert: Alert | None) -> bool:
        """Delete a stored alert with its assets and playlist."""
        try:
            if alert is None:
                raise DatabaseStateError("Alert parameter is None.")
            conn = self._get_connection()
            with transaction(conn):
                if not self.alerts.exists(alert.token):
                    raise AlertNotFoundError(
                        f"Cannot delete alert - not in database (token: {alert.token})"
                    )
                if alert.id is None:
                    raise AlertNotFoundError(f"Alert has no database id (token: {alert.token})")
                self._delete(alert.id)
        except _FAILURES as e:
            logger.error(f"erase failed: {e}")
            return False

        return True

    def erase_ids(self, alert_ids: Iterable[int]) -> bool:
        """Delete several alerts by database id.

        Every id is checked before anything is deleted: if one is missing,
        the call fails and no alert is erased.
        """
        try:
            conn = self._get_connection()
            ids = list(alert_ids)
            with transaction(conn):
                for alert_id in ids:
                    if not self.alerts.exists_by_id(alert_id):
                        raise AlertNotFoundError(
                            f"Cannot erase an alert - does not exist in db (id: {alert_id})"
                        )
                for alert_id in ids:
                    self._delete(alert_id)
        except _FAILURES as e:
            logger.error(f"erase failed: {e}")
            return False

        return True

    def load(self, out: list[Alert]) -> bool:
        """Append every stored alert, with assets and playlist, to ``out``.

        ``out`` is left untouched if loading fails.
        """
        try:
            loaded = load_alerts(self.alerts, self.assets, self.play_order)
        except _FAILURES as e:
            logger.error(f"load failed: {e}")
            return False

        out.extend(loaded)
        return True

    def clear_database(self) -> bool:
        """Delete every alert, asset, and playlist row, keeping the tables."""
        try:
            conn = self._get_connection()
            with transaction(conn):
                self.alerts.clear()
                self.assets.clear()
                self.play_order.clear()
        except _FAILURES as e:
            logger.error(f"clear_database failed: {e}")
            return False

        return True

    def count_alerts(self) -> int:
        """Count stored alerts.

        Raises:
            DatabaseStateError: If the database is not open
        """
        return get_number_table_rows(self._get_connection(), ALERTS_TABLE)

    def get_stats(self) -> dict[str, int]:
        """Get row counts of each table and the schema version."""
        conn = self._get_connection()
        return {
            "schema_version": detect_schema_version(conn),
            "alerts": get_number_table_rows(conn, ALERTS_TABLE),
            "assets": get_number_table_rows(conn, ALERT_ASSETS_TABLE),
            "play_order_items": get_number_table_rows(conn, ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE),
        }
