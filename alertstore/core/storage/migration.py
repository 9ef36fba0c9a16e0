"""Migration of legacy (V1) alert files to the current (V2) layout.

V1 files keep alerts in a single ``alerts`` table. V2 renames it to
``alerts_v2`` and adds the asset and play-order tables. Migration runs on
every open and is a no-op once ``alerts_v2`` exists.

The whole migration is one transaction: if any step fails the file is left
exactly as it was, still V1, and the next open retries.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable

from alertstore.core.exceptions import AlertStoreError, MigrationError
from alertstore.core.models import Alert
from alertstore.core.storage.alerts import AlertStorage
from alertstore.core.storage.assembler import load_alerts
from alertstore.core.storage.assets import AssetStorage
from alertstore.core.storage.play_order import PlayOrderStorage
from alertstore.core.storage.schema import (
    ALERTS_TABLE,
    ALERTS_V1_TABLE,
    create_tables,
)
from alertstore.core.storage.sqlite import drop_table, table_exists, transaction

logger = logging.getLogger(__name__)

StoreCallback = Callable[[Alert], int]


def migrate_v1_to_v2(
    conn: sqlite3.Connection,
    alerts: AlertStorage,
    assets: AssetStorage,
    play_order: PlayOrderStorage,
    store: StoreCallback,
) -> int:
    """Bring an open database up to the V2 layout.

    Args:
        conn: Open connection
        alerts: Alert row storage bound to ``conn``
        assets: Asset storage bound to ``conn``
        play_order: Play-order storage bound to ``conn``
        store: Inserts one alert into the V2 tables and returns its new id

    Returns:
        Number of legacy alerts moved

    Raises:
        MigrationError: If a legacy alert could not be read or re-stored
    """
    if table_exists(conn, ALERTS_TABLE):
        return 0

    with transaction(conn):
        created = create_tables(conn, if_missing=True)
        logger.info(f"Migrating alerts database to V2, created tables: {', '.join(created)}")

        if not table_exists(conn, ALERTS_V1_TABLE):
            return 0

        try:
            legacy = load_alerts(alerts, assets, play_order, table=ALERTS_V1_TABLE)
        except (AlertStoreError, sqlite3.Error) as e:
            raise MigrationError(f"Could not load V1 alert records: {e}") from e

        # Children were loaded with their alerts and are re-inserted under new ids
        assets.clear()
        play_order.clear()

        for alert in legacy:
            try:
                alert.id = store(alert)
            except (AlertStoreError, sqlite3.Error) as e:
                logger.error(f"Could not migrate alert to V2 database: {alert.summary(detailed=True)}")
                raise MigrationError(f"Could not migrate alert {alert.token}: {e}") from e

        drop_table(conn, ALERTS_V1_TABLE)

    logger.info(f"Migrated {len(legacy)} alerts from V1 to V2")
    return len(legacy)
