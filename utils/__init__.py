# utils/__init__.py
"""
Utility functions for the companion policy service.
"""

# Datetime utilities
from .datetime_utils import utc_now, now_ms, datetime_to_ms, ms_to_datetime, format_iso_ms

# Logging
from .logging import get_logger

# Telemetry
from .telemetry import log_event, perf_timer, recent_events, clear_events

__all__ = [
    # Datetime
    "utc_now",
    "now_ms",
    "datetime_to_ms",
    "ms_to_datetime",
    "format_iso_ms",

    # Logging
    "get_logger",

    # Telemetry
    "log_event",
    "perf_timer",
    "recent_events",
    "clear_events",
]
