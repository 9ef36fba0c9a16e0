"""Rebuild alerts from the rows of the three alert tables.

Loading runs three independent queries rather than a JOIN: an alert owns
any number of assets and any number of play-order items, and the result is
nested rather than tabular. Rows are then grouped by ``alert_id`` and
attached to their parent alert.

The engine does not promise a column order for ``SELECT *``, so every row
is read by column name.
"""

from __future__ import annotations

import logging
import sqlite3
from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from alertstore.core.codec import db_field_to_alert_state, db_field_to_alert_type
from alertstore.core.exceptions import CodecError, SchemaError
from alertstore.core.models import Alert, Asset, AssetConfiguration
from alertstore.core.storage.alerts import AlertStorage
from alertstore.core.storage.assets import AssetStorage
from alertstore.core.storage.play_order import PlayOrderStorage
from alertstore.core.storage.schema import ALERTS_TABLE

logger = logging.getLogger(__name__)

REQUIRED_ALERT_COLUMNS = frozenset(
    {
        "id",
        "token",
        "type",
        "state",
        "scheduled_time_iso_8601",
        "asset_loop_count",
        "asset_loop_pause_milliseconds",
    }
)
REQUIRED_ASSET_COLUMNS = frozenset({"alert_id", "avs_id", "url"})
REQUIRED_PLAY_ORDER_COLUMNS = frozenset(
    {"alert_id", "asset_play_order_position", "asset_play_order_token"}
)


def check_columns(columns: Iterable[str], required: frozenset[str], table: str) -> None:
    missing = required - set(columns)
    if missing:
        raise SchemaError(f"Table {table} is missing columns: {', '.join(sorted(missing))}")


def _row_values(row: sqlite3.Row, required: frozenset[str], table: str) -> dict[str, Any]:
    """Map column names to values, checking the required columns are present."""
    values = dict(zip(row.keys(), tuple(row)))
    check_columns(values.keys(), required, table)
    return values


def alert_from_row(row: sqlite3.Row, table: str = ALERTS_TABLE) -> Alert:
    """Create an Alert (without assets or playlist) from an alerts row.

    Legacy rows may lack ``background_asset``, which then defaults to an
    empty string, and ``scheduled_time_unix``, which is then derived from
    the ISO-8601 time.
    """
    values = _row_values(row, REQUIRED_ALERT_COLUMNS, table)

    alert = Alert(
        id=values["id"],
        token=values["token"],
        type=db_field_to_alert_type(values["type"]),
        state=db_field_to_alert_state(values["state"]),
        loop_count=values["asset_loop_count"],
        loop_pause_ms=values["asset_loop_pause_milliseconds"],
        asset_configuration=AssetConfiguration(
            background_asset_id=values.get("background_asset") or ""
        ),
    )

    iso_8601 = values["scheduled_time_iso_8601"]
    if values.get("scheduled_time_unix") is not None:
        alert.scheduled_time_unix = values["scheduled_time_unix"]
        alert.scheduled_time_iso_8601 = iso_8601
    elif not alert.set_time_iso_8601(iso_8601):
        raise CodecError(f"Could not parse scheduled time {iso_8601!r} of alert {alert.token}")

    return alert


def group_assets(rows: list[sqlite3.Row]) -> dict[int, list[Asset]]:
    """Group asset rows by the alert they belong to."""
    assets: dict[int, list[Asset]] = defaultdict(list)
    for row in rows:
        values = _row_values(row, REQUIRED_ASSET_COLUMNS, "alertAssets")
        assets[values["alert_id"]].append(Asset(avs_id=values["avs_id"], url=values["url"]))
    return assets


def group_play_order(rows: list[sqlite3.Row]) -> dict[int, list[str]]:
    """Group play-order rows by alert, each list in ascending position.

    Positions are unique per alert; if a position repeats, the first row
    read wins and the others are dropped with a warning.
    """
    by_position: dict[int, dict[int, str]] = defaultdict(dict)
    for row in rows:
        values = _row_values(row, REQUIRED_PLAY_ORDER_COLUMNS, "alertAssetPlayOrderItems")
        alert_id = values["alert_id"]
        position = values["asset_play_order_position"]
        items = by_position[alert_id]
        if position in items:
            logger.warning(
                f"Duplicate play order position {position} for alert {alert_id}, "
                f"ignoring token {values['asset_play_order_token']!r}"
            )
            continue
        items[position] = values["asset_play_order_token"]

    return {
        alert_id: [items[position] for position in sorted(items)]
        for alert_id, items in by_position.items()
    }


def assemble(
    alert_rows: list[sqlite3.Row],
    asset_rows: list[sqlite3.Row],
    play_order_rows: list[sqlite3.Row],
    table: str = ALERTS_TABLE,
) -> list[Alert]:
    """Join alert, asset, and play-order rows into complete alerts."""
    alerts = [alert_from_row(row, table) for row in alert_rows]
    assets = group_assets(asset_rows)
    play_order = group_play_order(play_order_rows)

    for alert in alerts:
        config = alert.asset_configuration
        for asset in assets.get(alert.id, []):
            config.add_asset(asset)
        config.asset_play_order_items = play_order.get(alert.id, [])

    return alerts


def load_alerts(
    alerts: AlertStorage,
    assets: AssetStorage,
    play_order: PlayOrderStorage,
    table: str = ALERTS_TABLE,
) -> list[Alert]:
    """Load every alert of an alerts table with its assets and playlist.

    The alerts table layout is checked up front, so a table that cannot
    be read is reported even while it holds no rows.
    """
    check_columns(alerts.columns(table), REQUIRED_ALERT_COLUMNS, table)
    return assemble(alerts.fetch_all(table), assets.fetch_all(), play_order.fetch_all(), table)
