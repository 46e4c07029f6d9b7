"""Small shared helpers."""

from .timestamps import format_timestamp_for_log, utc_now

__all__ = ["utc_now", "format_timestamp_for_log"]
