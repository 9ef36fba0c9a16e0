"""
Storage layer: SQLite persistence for alerts.

This module provides database operations split by concern:

Components:
    - AlertRepository: Facade exposing the boolean-result alert store contract
    - AlertStorage: CRUD operations for the alerts_v2 table
    - AssetStorage: CRUD operations for the alertAssets table
    - PlayOrderStorage: CRUD operations for the alertAssetPlayOrderItems table
    - assembler: Joins rows of the three tables back into Alert objects
    - migration: Moves legacy V1 files to the V2 layout

Database Schema (V2):
    alerts_v2: id, token, type, state, scheduled_time_unix, scheduled_time_iso_8601,
               asset_loop_count, asset_loop_pause_milliseconds, background_asset
    alertAssets: id, alert_id, avs_id, url
    alertAssetPlayOrderItems: id, alert_id, asset_play_order_position, asset_play_order_token
"""

from alertstore.core.storage.alerts import AlertStorage
from alertstore.core.storage.assets import AssetStorage
from alertstore.core.storage.play_order import PlayOrderStorage
from alertstore.core.storage.repository import AlertRepository

__all__ = [
    "AlertRepository",
    "AlertStorage",
    "AssetStorage",
    "PlayOrderStorage",
]
