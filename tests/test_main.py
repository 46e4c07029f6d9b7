"""Unit tests for the main entry point.

Tests the main() function including:
- Configuration loading with log level priority (CLI > env > config)
- Output path override
- Manual run mode vs daemon mode
- Exit code handling
"""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest

from careers_crawler.config.environment import EnvironmentConfig
from careers_crawler.config.exceptions import ConfigurationError
from careers_crawler.config.models import AppConfig, LoggingConfig, OutputConfig, WarehouseConfig
from careers_crawler.crawl.models import CrawlStats
from careers_crawler.main import apply_output_override, load_runtime_config, main
from careers_crawler.pipeline import PipelineRunResult


def make_result(**kwargs):
    now = datetime.now(timezone.utc)
    return PipelineRunResult(run_id="run-1", run_started_at=now, run_finished_at=now, **kwargs)


@pytest.fixture
def configs():
    return AppConfig(logging=LoggingConfig(level="WARNING")), EnvironmentConfig()


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    def test_cli_level_wins(self, configs):
        configs[1].log_level = "ERROR"
        with patch("careers_crawler.main.load_config", return_value=configs):
            _, env_config = load_runtime_config(None, "DEBUG")

        assert env_config.log_level == "DEBUG"

    def test_env_level_wins_over_config(self, configs):
        configs[1].log_level = "ERROR"
        with patch("careers_crawler.main.load_config", return_value=configs):
            _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "ERROR"

    def test_config_level_used_without_overrides(self, configs):
        with patch("careers_crawler.main.load_config", return_value=configs):
            _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "WARNING"

    def test_output_override(self, configs):
        with patch("careers_crawler.main.load_config", return_value=configs):
            app_config, _ = load_runtime_config(None, None, "exports/today.csv")

        assert app_config.output.path == "exports/today.csv"
        assert app_config.warehouse.object_name == "today.csv"


class TestApplyOutputOverride:
    """Test suite for the --output override."""

    def test_explicit_object_name_is_kept(self):
        config = AppConfig(
            output=OutputConfig(path="jobs.csv"),
            warehouse=WarehouseConfig(enabled=True, object_name="daily/jobs.csv"),
        )

        updated = apply_output_override(config, "other.csv")

        assert updated.output.path == "other.csv"
        assert updated.warehouse.object_name == "daily/jobs.csv"

    def test_original_config_is_not_modified(self):
        config = AppConfig()

        apply_output_override(config, "other.csv")

        assert config.output.path == "ibm_jobs.csv"


class TestMain:
    """Test suite for main()."""

    @pytest.fixture(autouse=True)
    def quiet_process(self):
        """Keep tests from reconfiguring logging or replacing signal handlers."""
        with patch("careers_crawler.main.configure_logging"), patch("careers_crawler.main.signal.signal"):
            yield

    @pytest.fixture
    def mock_pipeline_cls(self, configs):
        with patch("careers_crawler.main.load_config", return_value=configs), patch(
            "careers_crawler.main.CrawlPipeline"
        ) as mock_cls:
            yield mock_cls

    def test_manual_run_success(self, mock_pipeline_cls):
        mock_pipeline_cls.return_value.run_once.return_value = make_result(
            crawl=CrawlStats(pages_visited=2, records_written=5)
        )

        assert main(["--manual-run"]) == 0
        mock_pipeline_cls.return_value.run_once.assert_called_once()

    def test_manual_run_with_zero_records_succeeds(self, mock_pipeline_cls):
        mock_pipeline_cls.return_value.run_once.return_value = make_result()

        assert main(["--manual-run"]) == 0

    def test_manual_run_fatal_error(self, mock_pipeline_cls, capsys):
        mock_pipeline_cls.return_value.run_once.return_value = make_result(
            fatal_error="Job completed with error: Too many errors", error_type="LoadResultError"
        )

        assert main(["--manual-run"]) == 1
        assert "LoadResultError" in capsys.readouterr().err

    def test_manual_run_cancelled(self, mock_pipeline_cls):
        mock_pipeline_cls.return_value.run_once.return_value = make_result(
            crawl=CrawlStats(cancelled=True)
        )

        assert main(["--manual-run"]) == 130

    def test_configuration_error(self, capsys):
        with patch(
            "careers_crawler.main.load_config",
            side_effect=ConfigurationError("Configuration validation failed", errors=["bad"]),
        ):
            assert main(["--manual-run"]) == 1

        assert "Configuration Error" in capsys.readouterr().err

    def test_unexpected_error(self, mock_pipeline_cls):
        mock_pipeline_cls.side_effect = RuntimeError("boom")

        assert main(["--manual-run"]) == 1

    def test_daemon_mode_starts_scheduler(self, mock_pipeline_cls):
        with patch("careers_crawler.main.SchedulerService") as mock_scheduler_cls, patch(
            "careers_crawler.main.threading"
        ) as mock_threading:
            mock_threading.Event.return_value.wait = Mock()

            assert main([]) == 0

        kwargs = mock_scheduler_cls.call_args.kwargs
        assert kwargs["interval_seconds"] == 86400
        assert kwargs["pipeline_callable"] == mock_pipeline_cls.return_value.run_once
        mock_scheduler_cls.return_value.start.assert_called_once()
