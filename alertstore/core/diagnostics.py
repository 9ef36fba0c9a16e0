"""Read-only diagnostic summaries of an alert database."""

from __future__ import annotations

import logging
import sqlite3

from alertstore.core.exceptions import AlertStoreError
from alertstore.core.models import Alert, StatLevel
from alertstore.core.storage import AlertRepository

logger = logging.getLogger(__name__)


def collect_stats(repo: AlertRepository, level: StatLevel) -> list[str]:
    """Build the diagnostic lines for a verbosity level.

    Failures are logged and produce no lines.
    """
    try:
        count = repo.count_alerts()
    except (AlertStoreError, sqlite3.Error) as e:
        logger.error(f"collect_stats failed: could not read number of alerts: {e}")
        return []

    lines = [f"ONE-LINE-STAT: Number of alerts:{count}"]
    if level is StatLevel.ONE_LINE:
        return lines

    alerts: list[Alert] = []
    if not repo.load(alerts):
        return lines

    detailed = level is StatLevel.EVERYTHING
    lines.extend(alert.summary(detailed=detailed) for alert in alerts)
    return lines


def print_stats(repo: AlertRepository, level: StatLevel) -> None:
    """Log the diagnostic lines for a verbosity level."""
    for line in collect_stats(repo, level):
        logger.info(line)
