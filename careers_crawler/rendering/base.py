"""Abstract page renderer contract.

The crawler depends only on three operations: navigate to a URL, wait for
a selector to become visible, and evaluate a script in the rendered page.
Any browser automation backend can implement them.
"""

from abc import ABC, abstractmethod
from typing import Any


class PageRenderer(ABC):
    """Base class for JavaScript-capable page renderers.

    Renderers are context managers; leaving the block releases the
    browser regardless of how the crawl ended.
    """

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Load url in the current page.

        Raises:
            NavigationError: Navigation failed
            RenderTimeoutError: Navigation did not complete in time
        """

    @abstractmethod
    def wait_visible(self, selector: str, timeout: float) -> None:
        """Block until an element matching selector is visible.

        Args:
            selector: CSS selector to wait for
            timeout: Seconds to wait before giving up

        Raises:
            RenderTimeoutError: Element did not become visible in time
        """

    @abstractmethod
    def evaluate(self, script: str) -> Any:
        """Evaluate a JavaScript expression and return its JSON-compatible value.

        Raises:
            EvaluationError: Script raised in the page
        """

    def close(self) -> None:
        """Release browser resources. Safe to call more than once."""

    def __enter__(self) -> "PageRenderer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
