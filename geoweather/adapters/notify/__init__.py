"""
Notification adapters for GeoWeather.
"""

from .log_notifier import LogNotifier, format_alert

__all__ = ["LogNotifier", "format_alert"]
