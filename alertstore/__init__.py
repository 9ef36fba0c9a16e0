"""
Alertstore: durable SQLite storage for alarms, timers, and reminders.

Alertstore keeps user-scheduled alerts across process restarts:
- Three-table schema (alerts, assets, play-order items)
- Automatic migration of legacy single-table files
- Boolean-result CRUD contract with logged failures

Usage:
    from alertstore.config import get_default_db_path
    from alertstore.core import Alert, AlertRepository

    repo = AlertRepository()
    repo.open(get_default_db_path())
    alerts: list[Alert] = []
    repo.load(alerts)
"""

__version__ = "0.1.0"
