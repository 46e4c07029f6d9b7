"""Test helper utilities for careers crawler tests."""

from .fake_clients import FakeBigQueryClient, FakeLoadJob, FakeStorageClient
from .fake_renderer import FakeRenderer, listing_card

__all__ = [
    "FakeRenderer",
    "listing_card",
    "FakeStorageClient",
    "FakeBigQueryClient",
    "FakeLoadJob",
]
