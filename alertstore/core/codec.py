"""Integer codes for alert kinds and states as persisted in rows.

The codes are part of the on-disk format and must never be renumbered.
A new state takes the next unused code and a schema version bump.
"""

from __future__ import annotations

from alertstore.core.exceptions import CodecError
from alertstore.core.models import AlertState, AlertType

ALERT_TYPE_CODES: dict[str, int] = {
    AlertType.ALARM.value: 1,
    AlertType.TIMER.value: 2,
    AlertType.REMINDER.value: 3,
}

ALERT_STATE_CODES: dict[AlertState, int] = {
    AlertState.UNSET: 1,
    AlertState.SET: 2,
    AlertState.ACTIVATING: 3,
    AlertState.ACTIVE: 4,
    AlertState.SNOOZING: 5,
    AlertState.SNOOZED: 6,
    AlertState.STOPPING: 7,
    AlertState.STOPPED: 8,
    AlertState.COMPLETED: 9,
    AlertState.READY: 10,
}

_TYPES_BY_CODE = {code: AlertType(name) for name, code in ALERT_TYPE_CODES.items()}
_STATES_BY_CODE = {code: state for state, code in ALERT_STATE_CODES.items()}


def alert_type_to_db_field(type_name: str) -> int:
    """Encode an alert type name ("ALARM", "TIMER", "REMINDER")."""
    try:
        return ALERT_TYPE_CODES[type_name]
    except KeyError:
        raise CodecError(f"Could not determine alert type: {type_name!r}") from None


def db_field_to_alert_type(code: int) -> AlertType:
    """Decode a stored alert type code."""
    try:
        return _TYPES_BY_CODE[code]
    except KeyError:
        raise CodecError(f"Unknown alert type code read from database: {code!r}") from None


def alert_state_to_db_field(state: AlertState) -> int:
    """Encode an alert state."""
    try:
        return ALERT_STATE_CODES[state]
    except KeyError:
        raise CodecError(f"Could not convert alert state: {state!r}") from None


def db_field_to_alert_state(code: int) -> AlertState:
    """Decode a stored alert state code."""
    try:
        return _STATES_BY_CODE[code]
    except KeyError:
        raise CodecError(f"Unknown alert state code read from database: {code!r}") from None
