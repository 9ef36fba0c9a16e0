"""Integration tests for the command line."""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from alertstore.cli import app

runner = CliRunner()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Create an initialized database through the CLI."""
    path = temp_dir / "alerts.db"
    result = runner.invoke(app, ["init", "--db", str(path)])
    assert result.exit_code == 0, result.output
    return path


def add_alert(db_path: Path, token: str, *extra: str) -> None:
    result = runner.invoke(
        app, ["add", "--db", str(db_path), "--token", token, "--at", "1700000000", *extra]
    )
    assert result.exit_code == 0, result.output


class TestCli:
    """Tests for the alertstore commands."""

    def test_init_creates_file(self, db_path: Path) -> None:
        assert db_path.exists()

    def test_init_twice_fails(self, db_path: Path) -> None:
        result = runner.invoke(app, ["init", "--db", str(db_path)])
        assert result.exit_code == 1

    def test_add_and_list_json(self, db_path: Path) -> None:
        add_alert(
            db_path,
            "t1",
            "--type",
            "timer",
            "--loop-count",
            "3",
            "--background-asset",
            "a1",
            "--asset",
            "a1=u1",
            "--asset",
            "a2=u2",
            "--play",
            "a1",
            "--play",
            "a2",
        )

        result = runner.invoke(app, ["list", "--db", str(db_path), "--json"])

        assert result.exit_code == 0, result.output
        alerts = json.loads(result.stdout)
        assert alerts == [
            {
                "id": 1,
                "token": "t1",
                "type": "TIMER",
                "state": "SET",
                "scheduled_time_unix": 1700000000,
                "scheduled_time_iso_8601": "2023-11-14T22:13:20Z",
                "loop_count": 3,
                "loop_pause_ms": 0,
                "background_asset": "a1",
                "assets": {"a1": "u1", "a2": "u2"},
                "play_order": ["a1", "a2"],
            }
        ]

    def test_add_duplicate_token_fails(self, db_path: Path) -> None:
        add_alert(db_path, "t1")
        result = runner.invoke(
            app, ["add", "--db", str(db_path), "--token", "t1", "--at", "1700000000"]
        )
        assert result.exit_code == 1

    def test_add_bad_asset(self, db_path: Path) -> None:
        result = runner.invoke(
            app,
            ["add", "--db", str(db_path), "--token", "t1", "--at", "1", "--asset", "no-url"],
        )
        assert result.exit_code != 0

    def test_list_text(self, db_path: Path) -> None:
        add_alert(db_path, "t1")
        result = runner.invoke(app, ["list", "--db", str(db_path)])

        assert result.exit_code == 0, result.output
        assert "t1" in result.stdout
        assert "ALARM" in result.stdout

    def test_list_empty(self, db_path: Path) -> None:
        result = runner.invoke(app, ["list", "--db", str(db_path)])
        assert "No alerts stored" in result.stdout

    def test_stats(self, db_path: Path) -> None:
        add_alert(db_path, "t1")
        add_alert(db_path, "t2")

        result = runner.invoke(app, ["stats", "--db", str(db_path)])
        assert result.exit_code == 0, result.output
        assert "ONE-LINE-STAT: Number of alerts:2" in result.stdout

        result = runner.invoke(app, ["stats", "--db", str(db_path), "--level", "summary"])
        assert "token=t2" in result.stdout

    def test_stats_json(self, db_path: Path) -> None:
        add_alert(db_path, "t1", "--asset", "a1=u1", "--play", "a1")

        result = runner.invoke(app, ["stats", "--db", str(db_path), "--json"])

        assert json.loads(result.stdout) == {
            "schema_version": 2,
            "alerts": 1,
            "assets": 1,
            "play_order_items": 1,
        }

    def test_erase(self, db_path: Path) -> None:
        for token in ("t1", "t2", "t3"):
            add_alert(db_path, token)

        result = runner.invoke(app, ["erase", "--db", str(db_path), "1", "3"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["erase", "--db", str(db_path), "2", "4"])
        assert result.exit_code == 1

        result = runner.invoke(app, ["list", "--db", str(db_path), "--json"])
        assert [a["token"] for a in json.loads(result.stdout)] == ["t2"]

    def test_clear_with_confirmation(self, db_path: Path) -> None:
        add_alert(db_path, "t1")

        result = runner.invoke(app, ["clear", "--db", str(db_path)], input="n\n")
        assert result.exit_code != 0

        result = runner.invoke(app, ["clear", "--db", str(db_path)], input="y\n")
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["list", "--db", str(db_path), "--json"])
        assert json.loads(result.stdout) == []

    def test_missing_database(self, temp_dir: Path) -> None:
        result = runner.invoke(app, ["list", "--db", str(temp_dir / "missing.db")])
        assert result.exit_code == 1
