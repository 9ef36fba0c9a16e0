"""Integration tests for migrating legacy alert databases."""

import logging
import sqlite3
import tempfile
from pathlib import Path

import pytest

from alertstore.core.models import Alert, AlertState, AlertType
from alertstore.core.storage import AlertRepository

V1_SCHEMA = """
CREATE TABLE alerts (
    id INT PRIMARY KEY NOT NULL,
    token TEXT NOT NULL,
    type INT NOT NULL,
    state INT NOT NULL,
    scheduled_time_unix INT NOT NULL,
    scheduled_time_iso_8601 TEXT NOT NULL,
    asset_loop_count INT NOT NULL,
    asset_loop_pause_milliseconds INT NOT NULL
);
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


def write_v1_database(path: Path, rows: list[tuple]) -> None:
    """Write a legacy database holding only the V1 alerts table."""
    conn = sqlite3.connect(path)
    conn.executescript(V1_SCHEMA)
    conn.executemany("INSERT INTO alerts VALUES (?, ?, ?, ?, ?, ?, ?, ?)", rows)
    conn.commit()
    conn.close()


def table_names(path: Path) -> set[str]:
    conn = sqlite3.connect(path)
    names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    conn.close()
    return names


V1_ROWS = [
    (4, "legacy-alarm", 1, 2, 1700000000, "2023-11-14T22:13:20Z", 2, 100),
    (9, "legacy-timer", 2, 6, 1700000600, "2023-11-14T22:23:20Z", 0, 0),
]


class TestMigration:
    """Tests for the V1 to V2 migration on open."""

    def test_migrates_rows(self, temp_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that V1 rows move to alerts_v2 and the legacy table is dropped."""
        path = temp_dir / "legacy.db"
        write_v1_database(path, V1_ROWS)

        repo = AlertRepository()
        with caplog.at_level(logging.INFO, logger="alertstore"):
            assert repo.open(path)
        alerts: list[Alert] = []
        assert repo.load(alerts)
        repo.close()

        assert "Migrated 2 alerts from V1 to V2" in caplog.text
        assert table_names(path) == {"alerts_v2", "alertAssets", "alertAssetPlayOrderItems"}

        by_token = {a.token: a for a in alerts}
        assert set(by_token) == {"legacy-alarm", "legacy-timer"}

        alarm = by_token["legacy-alarm"]
        assert alarm.type == AlertType.ALARM
        assert alarm.state == AlertState.SET
        assert alarm.scheduled_time_unix == 1700000000
        assert alarm.scheduled_time_iso_8601 == "2023-11-14T22:13:20Z"
        assert alarm.loop_count == 2
        assert alarm.loop_pause_ms == 100
        assert alarm.background_asset_id == ""

        timer = by_token["legacy-timer"]
        assert timer.type == AlertType.TIMER
        assert timer.state == AlertState.SNOOZED

        # New ids are assigned by the V2 store
        assert sorted(a.id for a in alerts) == [1, 2]

    def test_migrated_database_is_writable(self, temp_dir: Path) -> None:
        path = temp_dir / "legacy.db"
        write_v1_database(path, V1_ROWS)

        with AlertRepository() as repo:
            assert repo.open(path)
            alert = Alert(token="new", type=AlertType.REMINDER)
            alert.set_time_unix(1700001000)
            assert repo.store(alert)
            assert alert.id == 3
            assert not repo.store(Alert(token="legacy-timer", type=AlertType.TIMER))

    def test_reopen_is_noop(self, temp_dir: Path) -> None:
        path = temp_dir / "legacy.db"
        write_v1_database(path, V1_ROWS)

        for _ in range(2):
            with AlertRepository() as repo:
                assert repo.open(path)
                assert repo.get_stats()["alerts"] == 2

    def test_empty_file_gets_current_tables(self, temp_dir: Path) -> None:
        """Test that a database with no alerts table at all is brought to V2."""
        path = temp_dir / "empty.db"
        sqlite3.connect(path).close()
        path.touch()

        with AlertRepository() as repo:
            assert repo.open(path)
            assert repo.get_stats()["schema_version"] == 2

    def test_existing_child_tables_are_kept(self, temp_dir: Path) -> None:
        """Test that children of legacy alerts move to the new alert ids."""
        path = temp_dir / "legacy.db"
        write_v1_database(path, V1_ROWS)
        conn = sqlite3.connect(path)
        conn.executescript(
            """
            CREATE TABLE alertAssets (id INT, alert_id INT, avs_id TEXT, url TEXT);
            INSERT INTO alertAssets VALUES (1, 9, 'tick', 'https://example.com/tick.mp3');
            CREATE TABLE alertAssetPlayOrderItems (
                id INT, alert_id INT, asset_play_order_position INT, asset_play_order_token TEXT
            );
            INSERT INTO alertAssetPlayOrderItems VALUES (1, 9, 1, 'tick');
            """
        )
        conn.commit()
        conn.close()

        with AlertRepository() as repo:
            assert repo.open(path)
            alerts: list[Alert] = []
            assert repo.load(alerts)
            stats = repo.get_stats()

        timer = next(a for a in alerts if a.token == "legacy-timer")
        assert list(timer.asset_configuration.assets) == ["tick"]
        assert timer.asset_configuration.asset_play_order_items == ["tick"]
        assert stats["assets"] == 1
        assert stats["play_order_items"] == 1

    def test_failed_migration_leaves_file_unchanged(
        self, temp_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a migration failure rolls back and open fails."""
        path = temp_dir / "legacy.db"
        write_v1_database(
            path,
            [
                (1, "same", 1, 2, 1700000000, "2023-11-14T22:13:20Z", 0, 0),
                (2, "same", 2, 2, 1700000600, "2023-11-14T22:23:20Z", 0, 0),
            ],
        )

        repo = AlertRepository()
        with caplog.at_level(logging.ERROR):
            assert not repo.open(path)

        assert not repo.is_open()
        assert "could not migrate" in caplog.text
        assert table_names(path) == {"alerts"}

    def test_corrupt_legacy_state_fails(self, temp_dir: Path) -> None:
        path = temp_dir / "legacy.db"
        write_v1_database(path, [(1, "bad", 1, 77, 1700000000, "2023-11-14T22:13:20Z", 0, 0)])

        repo = AlertRepository()
        assert not repo.open(path)
        assert table_names(path) == {"alerts"}
