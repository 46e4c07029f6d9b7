"""Main entry point for the careers crawler."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import signal
import sys
import threading
import time
from pathlib import Path, PurePath
from typing import Optional, Tuple

from pydantic import ValidationError

from careers_crawler.config.environment import EnvironmentConfig
from careers_crawler.config.exceptions import ConfigurationError
from careers_crawler.config.loader import load_config
from careers_crawler.config.models import AppConfig
from careers_crawler.logging import get_logger
from careers_crawler.logging.config import configure_logging
from careers_crawler.pipeline import CrawlPipeline
from careers_crawler.scheduler import SchedulerService

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


def load_runtime_config(
    config_path: Optional[Path],
    log_level_override: Optional[str],
    output_override: Optional[str] = None,
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration, apply CLI overrides and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file > INFO.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if output_override:
        app_config = apply_output_override(app_config, output_override)

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def apply_output_override(app_config: AppConfig, output_path: str) -> AppConfig:
    """
    Return a copy of app_config writing to output_path.

    A warehouse object name that was derived from the old output path is
    derived again from the new one; an explicit object name is kept.
    """
    data = app_config.model_dump()
    if data["warehouse"]["object_name"] == PurePath(app_config.output.path).name:
        data["warehouse"]["object_name"] = None
    data["output"]["path"] = output_path

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid --output value: {output_path}", errors=[str(e)]) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Careers Crawler - scrape paginated job listings and forward them to a warehouse"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml, then built-in defaults)",
    )
    parser.add_argument(
        "--manual-run",
        action="store_true",
        help="Run a single crawl immediately and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Output file (csv) or directory (json); overrides output.path",
    )
    return parser


def run_manual(pipeline: CrawlPipeline) -> int:
    """Run one crawl in the foreground and map its outcome to an exit code."""

    def request_cancel(signum, frame):
        logger.warning(
            f"Received signal {signum}, stopping after the current page",
            extra={"event": "service.signal_received", "signal": signum},
        )
        pipeline.cancel()

    signal.signal(signal.SIGINT, request_cancel)
    signal.signal(signal.SIGTERM, request_cancel)

    result = pipeline.run_once()

    logger.info(
        f"Manual crawl completed: {result.crawl.pages_visited} pages, "
        f"{result.records_written} records written, {result.crawl.skipped} skipped",
        extra={
            "event": "service.manual_run.completed",
            "duration_seconds": result.total_duration_seconds,
            "had_errors": result.had_errors,
            "cancelled": result.cancelled,
            "artifact_path": result.artifact_path,
            "uploaded_uri": result.uploaded_uri,
        },
    )

    if result.had_errors:
        print(f"Fatal error: {result.error_type}: {result.fatal_error}", file=sys.stderr)
        return EXIT_FAILURE
    if result.cancelled:
        return EXIT_CANCELLED
    return EXIT_OK


def run_daemon(pipeline: CrawlPipeline, interval_seconds: int) -> int:
    """Run the crawl on a schedule until SIGINT/SIGTERM."""
    shutdown_event = threading.Event()
    scheduler_service = SchedulerService(
        pipeline_callable=pipeline.run_once,
        interval_seconds=interval_seconds,
        shutdown_event=shutdown_event,
    )

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        pipeline.cancel()
        scheduler_service.shutdown(wait=False)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    scheduler_service.start()
    logger.info(
        "Scheduler started. Press Ctrl+C to stop",
        extra={"event": "service.daemon_mode.started"},
    )

    shutdown_event.wait()
    return EXIT_OK


def main(argv=None) -> int:
    """
    Main entry point for the careers crawler.

    Returns:
        Exit code: 0 on success (including zero records), 1 on fatal or
        configuration errors, 130 when a manual run was cancelled.
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level, args.output)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Careers crawler starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "manual_run": args.manual_run,
                "output_format": app_config.output.format,
                "output_path": app_config.output.path,
                "warehouse_enabled": app_config.warehouse.enabled,
            },
        )

        pipeline = CrawlPipeline(app_config=app_config, env_config=env_config)

        if args.manual_run:
            exit_code = run_manual(pipeline)
        else:
            exit_code = run_daemon(pipeline, app_config.scan_interval_seconds)

        logger.info(
            "Careers crawler stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
                "exit_code": exit_code,
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return EXIT_CANCELLED
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
