"""Alertstore custom exceptions."""


class AlertStoreError(Exception):
    """Base exception for Alertstore errors."""


class CodecError(AlertStoreError):
    """A value has no database encoding, or a stored code has no meaning."""


class DatabaseStateError(AlertStoreError):
    """The database handle or file is not in the state an operation requires."""


class AlertNotFoundError(AlertStoreError):
    """Alert not found in the database."""


class DuplicateTokenError(AlertStoreError):
    """An alert with the same token is already stored."""


class SchemaError(AlertStoreError):
    """A table is missing a column the loader requires."""


class MigrationError(AlertStoreError):
    """Legacy alerts could not be moved to the current schema."""


class InvalidAlertError(AlertStoreError):
    """An alert carries a value that cannot be stored."""
