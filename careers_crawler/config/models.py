"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import PurePath
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range

DEFAULT_URL_TEMPLATE = "https://www.ibm.com/careers/search?p={page}"


class OutputFormat(str, Enum):
    """Persistence shapes supported by the record sink."""

    CSV = "csv"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SelectorConfig(BaseModel):
    """CSS selectors used to locate listings and their fields."""

    listing: str = Field(".bx--card-group__cards__col", min_length=1, description="One listing card")
    title: str = Field(".bx--card__heading", min_length=1, description="Title element inside a card")
    level_location: str = Field(
        ".ibm--card__copy__inner",
        min_length=1,
        description="Block holding '<level><br/><location>'",
    )
    link: str = Field("a.bx--card-group__card", min_length=1, description="Anchor carrying the job href")
    next_disabled: str = Field(
        'a[data-key="next"][aria-disabled="true"]',
        min_length=1,
        description="Matches only when the 'next page' control is disabled",
    )


class CrawlConfig(BaseModel):
    """Pagination and retry settings."""

    url_template: str = Field(DEFAULT_URL_TEMPLATE, description="Result page URL with a {page} placeholder")
    start_page: int = Field(1, ge=1, description="First page number to load")
    max_pages: int = Field(500, ge=0, description="Safety cap on pages per run (0 = unlimited)")
    page_timeout: int = Field(30, ge=1, le=600, description="Seconds to wait for listings to become visible")
    max_attempts_per_page: int = Field(3, ge=1, le=10, description="Render attempts per page before aborting")
    retry_initial_delay: float = Field(2.0, ge=0, le=60, description="Delay before the first retry (seconds)")
    retry_backoff_multiplier: float = Field(2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier")
    description_placeholder: str = Field(
        "to be implemented", description="Description value written for every record"
    )
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)

    @field_validator("url_template")
    @classmethod
    def validate_url_template(cls, v: str) -> str:
        """Require an http(s) URL with exactly one {page} placeholder."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"url_template must be an http(s) URL, got: {v}")
        if v.count("{page}") != 1:
            raise ValueError("url_template must contain the {page} placeholder exactly once")
        try:
            v.format(page=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"url_template may only contain the {{page}} placeholder; "
                f"escape other braces as '{{{{' and '}}}}' ({type(e).__name__}: {e})"
            ) from e
        return v


class OutputConfig(BaseModel):
    """Where and how records are persisted."""

    format: OutputFormat = Field(OutputFormat.CSV, description="csv (one file) or json (one file per record)")
    path: Optional[str] = Field(
        None, description="CSV file path, or directory for json output"
    )

    model_config = {"use_enum_values": True}

    @model_validator(mode="after")
    def default_path(self):
        """Fill in the default path for the selected format."""
        if not self.path or not self.path.strip():
            self.path = "ibm_jobs.csv" if self.format == OutputFormat.CSV.value else "ibm_jobs"
        else:
            self.path = self.path.strip()
        return self


class WarehouseConfig(BaseModel):
    """Object store upload and warehouse load settings."""

    enabled: bool = Field(False, description="Forward the CSV artifact after the crawl")
    bucket: str = Field("ibm_jobs_bucket", min_length=1, description="Destination bucket")
    object_name: Optional[str] = Field(None, description="Destination object (default: output file name)")
    project: Optional[str] = Field(None, description="Cloud project (default: GOOGLE_CLOUD_PROJECT)")
    dataset: str = Field("ibm_jobs", min_length=1, description="Warehouse dataset")
    table: str = Field("ibm_jobs_main_table", min_length=1, description="Warehouse table")
    location: Optional[str] = Field(None, description="Warehouse location for the load job")
    poll_interval: float = Field(2.0, gt=0, le=60, description="Seconds between load job status polls")
    load_timeout: int = Field(600, ge=10, le=86400, description="Seconds to wait for the load job")

    @field_validator("bucket", "dataset", "table")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped


class BrowserConfig(BaseModel):
    """Headless browser settings for the page renderer."""

    headless: bool = Field(True, description="Run the browser without a window")
    user_agent: Optional[str] = Field(None, description="Override the browser User-Agent")
    navigation_timeout: int = Field(60, ge=5, le=600, description="Seconds allowed for page navigation")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format (json or key-value)")

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the careers crawler."""

    crawl: CrawlConfig = Field(default_factory=CrawlConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    warehouse: WarehouseConfig = Field(default_factory=WarehouseConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan_interval: str = Field("24h", description="Interval between scheduled crawls")

    # Computed field
    scan_interval_seconds: Optional[int] = None

    @field_validator("scan_interval")
    @classmethod
    def validate_scan_interval(cls, v: str) -> str:
        try:
            validate_duration_range(parse_duration(v), min_seconds=300, max_seconds=7 * 86400)
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def validate_cross_fields(self):
        """Check warehouse/output compatibility and compute derived fields."""
        if self.warehouse.enabled and self.output.format != OutputFormat.CSV.value:
            raise ValueError("warehouse forwarding requires output.format to be 'csv'")

        if self.warehouse.object_name is None or not self.warehouse.object_name.strip():
            self.warehouse.object_name = PurePath(self.output.path).name

        self.scan_interval_seconds = parse_duration(self.scan_interval)
        return self
