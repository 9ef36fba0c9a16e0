"""Table definitions and schema version detection."""

from __future__ import annotations

import logging
import sqlite3

from alertstore.core.storage.sqlite import table_exists

logger = logging.getLogger(__name__)

SCHEMA_VERSION_NONE = 0
SCHEMA_VERSION_ONE = 1
SCHEMA_VERSION_TWO = 2

ALERTS_V1_TABLE = "alerts"
ALERTS_TABLE = "alerts_v2"
ALERT_ASSETS_TABLE = "alertAssets"
ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE = "alertAssetPlayOrderItems"

ID_COLUMN = "id"

CREATE_ALERTS_TABLE = f"""
CREATE TABLE {ALERTS_TABLE} (
    id INT PRIMARY KEY NOT NULL,
    token TEXT NOT NULL,
    type INT NOT NULL,
    state INT NOT NULL,
    scheduled_time_unix INT NOT NULL,
    scheduled_time_iso_8601 TEXT NOT NULL,
    asset_loop_count INT NOT NULL,
    asset_loop_pause_milliseconds INT NOT NULL,
    background_asset TEXT NOT NULL
)
"""

CREATE_ALERT_ASSETS_TABLE = f"""
CREATE TABLE {ALERT_ASSETS_TABLE} (
    id INT PRIMARY KEY NOT NULL,
    alert_id INT NOT NULL,
    avs_id TEXT NOT NULL,
    url TEXT NOT NULL
)
"""

CREATE_ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE = f"""
CREATE TABLE {ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE} (
    id INT PRIMARY KEY NOT NULL,
    alert_id INT NOT NULL,
    asset_play_order_position INT NOT NULL,
    asset_play_order_token TEXT NOT NULL
)
"""

# Creation order matters: the alerts table first, then its children
TABLE_DEFINITIONS: list[tuple[str, str]] = [
    (ALERTS_TABLE, CREATE_ALERTS_TABLE),
    (ALERT_ASSETS_TABLE, CREATE_ALERT_ASSETS_TABLE),
    (ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE, CREATE_ALERT_ASSET_PLAY_ORDER_ITEMS_TABLE),
]


def create_tables(conn: sqlite3.Connection, if_missing: bool = False) -> list[str]:
    """Create the current-schema tables.

    Args:
        conn: Open connection
        if_missing: Skip tables that already exist instead of failing

    Returns:
        Names of the tables that were created
    """
    created = []
    for name, ddl in TABLE_DEFINITIONS:
        if if_missing and table_exists(conn, name):
            continue
        conn.execute(ddl)
        logger.debug(f"Created table {name}")
        created.append(name)
    return created


def detect_schema_version(conn: sqlite3.Connection) -> int:
    """Infer the on-disk layout from which alerts table is present."""
    if table_exists(conn, ALERTS_TABLE):
        return SCHEMA_VERSION_TWO
    if table_exists(conn, ALERTS_V1_TABLE):
        return SCHEMA_VERSION_ONE
    return SCHEMA_VERSION_NONE
