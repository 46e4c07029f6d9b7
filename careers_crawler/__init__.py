"""Careers Crawler: paginated job-listing scraper with warehouse forwarding."""

__version__ = "0.1.0"
