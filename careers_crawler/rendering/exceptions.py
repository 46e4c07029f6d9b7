"""Exceptions raised by page renderers.

Render failures mean the crawler lost its view of the site. The
pagination controller may retry a page a bounded number of times, after
which the run aborts.
"""


class RenderError(Exception):
    """Base exception for all renderer failures."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class RendererLaunchError(RenderError):
    """The browser could not be started."""

    pass


class NavigationError(RenderError):
    """Navigating to a URL failed (network error, bad status, crash)."""

    pass


class RenderTimeoutError(RenderError):
    """A selector did not become visible, or navigation did not finish, in time."""

    def __init__(self, message: str, url: str | None = None, timeout: float | None = None) -> None:
        super().__init__(message, url=url)
        self.timeout = timeout


class EvaluationError(RenderError):
    """A script evaluated in the page raised or returned an unusable value."""

    pass
