"""Page renderer capability used by the pagination controller."""

from .base import PageRenderer
from .exceptions import (
    EvaluationError,
    NavigationError,
    RenderError,
    RendererLaunchError,
    RenderTimeoutError,
)
from .playwright_renderer import PlaywrightRenderer

__all__ = [
    "PageRenderer",
    "PlaywrightRenderer",
    # Exceptions
    "RenderError",
    "RendererLaunchError",
    "NavigationError",
    "RenderTimeoutError",
    "EvaluationError",
]
