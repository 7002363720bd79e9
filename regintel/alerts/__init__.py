"""
Alerts Module - threshold-triggered notifications.
"""

from regintel.alerts.database import Alert
from regintel.alerts.service import create_alert, list_alerts, mark_all_read, unread_count

__all__ = [
    "Alert",
    "create_alert",
    "list_alerts",
    "mark_all_read",
    "unread_count",
]
