"""
Core module: data models, codec, exceptions, and storage.

This module provides the foundational types and persistence layer:

Models (models.py):
    - Alert: An alarm, timer, or reminder with its asset configuration
    - Asset/AssetConfiguration: Audio clips and the order they play in
    - AlertType/AlertState/StatLevel: Enums for categorization

Codec (codec.py):
    - Integer codes for alert types and states as stored in rows

Exceptions (exceptions.py):
    - AlertStoreError: Base exception for all alertstore errors

Storage (storage/):
    - AlertRepository: Facade for all database operations
"""

from alertstore.core.exceptions import (
    AlertNotFoundError,
    AlertStoreError,
    CodecError,
    DatabaseStateError,
    DuplicateTokenError,
    InvalidAlertError,
    MigrationError,
    SchemaError,
)
from alertstore.core.models import (
    Alert,
    AlertState,
    AlertType,
    Asset,
    AssetConfiguration,
    StatLevel,
)
from alertstore.core.storage import AlertRepository

__all__ = [
    # Models
    "Alert",
    "AlertState",
    "AlertType",
    "Asset",
    "AssetConfiguration",
    "StatLevel",
    # Exceptions
    "AlertStoreError",
    "AlertNotFoundError",
    "CodecError",
    "DatabaseStateError",
    "DuplicateTokenError",
    "InvalidAlertError",
    "MigrationError",
    "SchemaError",
    # Storage
    "AlertRepository",
]
