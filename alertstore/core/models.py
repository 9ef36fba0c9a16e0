"""Data models for Alertstore."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

_ISO_8601_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class AlertType(Enum):
    """Kinds of alerts that can be scheduled."""

    ALARM = "ALARM"
    TIMER = "TIMER"
    REMINDER = "REMINDER"


class AlertState(Enum):
    """Lifecycle states of an alert."""

    UNSET = "UNSET"
    SET = "SET"
    ACTIVATING = "ACTIVATING"
    ACTIVE = "ACTIVE"
    SNOOZING = "SNOOZING"
    SNOOZED = "SNOOZED"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    COMPLETED = "COMPLETED"
    READY = "READY"


class StatLevel(Enum):
    """Verbosity of diagnostic output."""

    ONE_LINE = "one-line"
    ALERTS_SUMMARY = "summary"
    EVERYTHING = "everything"


@dataclass
class Asset:
    """A downloadable audio clip played by an alert."""

    avs_id: str
    url: str


@dataclass
class AssetConfiguration:
    """The asset catalog of an alert and the order its assets play in."""

    assets: dict[str, Asset] = field(default_factory=dict)
    asset_play_order_items: list[str] = field(default_factory=list)
    background_asset_id: str = ""

    def add_asset(self, asset: Asset) -> None:
        """Add an asset to the catalog, replacing any with the same id."""
        self.assets[asset.avs_id] = asset


@dataclass
class Alert:
    """A user-scheduled alarm, timer, or reminder."""

    token: str
    type: AlertType
    state: AlertState = AlertState.SET
    scheduled_time_unix: int = 0
    scheduled_time_iso_8601: str = ""
    loop_count: int = 0
    loop_pause_ms: int = 0
    asset_configuration: AssetConfiguration = field(default_factory=AssetConfiguration)
    # Assigned by the repository on store
    id: int | None = None

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, AlertType) else str(self.type)

    @property
    def background_asset_id(self) -> str:
        return self.asset_configuration.background_asset_id

    def set_time_unix(self, seconds: int) -> None:
        """Schedule the alert at a unix time, keeping the ISO-8601 form in step."""
        self.scheduled_time_unix = seconds
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
        self.scheduled_time_iso_8601 = moment.strftime("%Y-%m-%dT%H:%M:%SZ")

    def set_time_iso_8601(self, text: str) -> bool:
        """Schedule the alert from an ISO-8601 timestamp.

        Accepts ``Z``, ``+0000`` and ``+00:00`` offsets; a timestamp without
        an offset is taken as UTC.

        Returns:
            False if the text could not be parsed (the alert is unchanged)
        """
        try:
            moment = datetime.strptime(text, _ISO_8601_FORMAT)
        except ValueError:
            try:
                moment = datetime.fromisoformat(text)
            except ValueError:
                return False
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        self.scheduled_time_iso_8601 = text
        self.scheduled_time_unix = int(moment.timestamp())
        return True

    def summary(self, detailed: bool = False) -> str:
        """Describe the alert on one line, or with its assets when detailed."""
        text = (
            f"{self.type_name} id={self.id} token={self.token} state={self.state.value} "
            f"scheduled={self.scheduled_time_iso_8601} ({self.scheduled_time_unix})"
        )
        if not detailed:
            return text

        config = self.asset_configuration
        assets = ", ".join(f"{a.avs_id}={a.url}" for a in config.assets.values())
        return (
            f"{text} loop_count={self.loop_count} loop_pause_ms={self.loop_pause_ms} "
            f"background_asset={config.background_asset_id or '-'} "
            f"assets=[{assets}] play_order=[{', '.join(config.asset_play_order_items)}]"
        )
