"""Soft configuration checks that warn instead of failing."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check a raw configuration mapping for risky but valid settings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    messages = []

    crawl = config_dict.get("crawl") or {}
    if isinstance(crawl, dict):
        if crawl.get("max_pages") == 0:
            messages.append(
                "crawl.max_pages is 0: crawling is unbounded and stops only on the 'next disabled' signal"
            )
        if crawl.get("max_attempts_per_page") == 1:
            messages.append("crawl.max_attempts_per_page is 1: any render failure aborts the run")

    output = config_dict.get("output") or {}
    if isinstance(output, dict) and output.get("format") == "json":
        messages.append(
            "json output derives file names from job titles; listings sharing a title overwrite each other"
        )

    warehouse = config_dict.get("warehouse") or {}
    if isinstance(warehouse, dict) and warehouse.get("enabled"):
        if not warehouse.get("project"):
            messages.append(
                "warehouse.project not set; falling back to GOOGLE_CLOUD_PROJECT or client defaults"
            )

    return messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
