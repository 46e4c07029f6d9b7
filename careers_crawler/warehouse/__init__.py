"""Forwarding of the crawl artifact to Cloud Storage and BigQuery.

    from careers_crawler.warehouse import BatchPublisher, WarehouseLoader

    BatchPublisher(project).publish("ibm_jobs.csv", "ibm_jobs_bucket", "ibm_jobs.csv")
    WarehouseLoader(project).load("ibm_jobs_bucket", "ibm_jobs.csv", "ibm_jobs", "ibm_jobs_main_table")
"""

from .exceptions import (
    LoadResultError,
    LoadSubmitError,
    LoadWaitError,
    UploadError,
    WarehouseError,
)
from .loader import WarehouseLoader, build_load_job_config
from .publisher import BatchPublisher

__all__ = [
    "BatchPublisher",
    "WarehouseLoader",
    "build_load_job_config",
    # Exceptions
    "WarehouseError",
    "UploadError",
    "LoadSubmitError",
    "LoadWaitError",
    "LoadResultError",
]
