#!/usr/bin/env python3
"""Validate a crawler configuration file without touching the network."""

import sys
from pathlib import Path

from careers_crawler.config import validate_config_file
from careers_crawler.config.loader import _read_yaml
from careers_crawler.config.exceptions import ConfigurationError
from careers_crawler.config.models import AppConfig


def summarize(config_file: Path) -> None:
    """Print the settings a reviewer usually wants to double-check."""
    config = AppConfig.model_validate(_read_yaml(config_file))

    print(f"  - Start URL: {config.crawl.url_template.format(page=config.crawl.start_page)}")
    print(f"  - Page cap: {config.crawl.max_pages or 'unlimited'}")
    print(f"  - Output: {config.output.format} -> {config.output.path}")
    if config.warehouse.enabled:
        print(
            f"  - Warehouse: gs://{config.warehouse.bucket}/{config.warehouse.object_name} "
            f"-> {config.warehouse.dataset}.{config.warehouse.table}"
        )
    else:
        print("  - Warehouse: disabled")
    print(f"  - Scan interval: {config.scan_interval}")


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")

    if not path.exists():
        print(f"✗ {path} not found")
        sys.exit(1)

    if not validate_config_file(path):
        sys.exit(1)

    try:
        summarize(path)
    except ConfigurationError as e:
        print(f"✗ {e}")
        sys.exit(1)
