"""Page renderer backed by Playwright's synchronous Chromium API."""

from typing import Any, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from careers_crawler.logging import get_logger

from .base import PageRenderer
from .exceptions import EvaluationError, NavigationError, RendererLaunchError, RenderTimeoutError

logger = get_logger(__name__, component="renderer")


class PlaywrightRenderer(PageRenderer):
    """Headless Chromium renderer.

    The browser is launched lazily on first navigation and reused for
    every page of the crawl.

    Attributes:
        headless: Run Chromium without a window
        user_agent: Optional User-Agent override
        navigation_timeout: Seconds allowed for page.goto()
    """

    def __init__(
        self,
        headless: bool = True,
        user_agent: Optional[str] = None,
        navigation_timeout: float = 60,
    ) -> None:
        self.headless = headless
        self.user_agent = user_agent
        self.navigation_timeout = navigation_timeout

        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._current_url: Optional[str] = None

    def _ensure_page(self):
        if self._page is not None:
            return self._page

        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.headless)
            context_options = {"user_agent": self.user_agent} if self.user_agent else {}
            self._context = self._browser.new_context(**context_options)
            self._page = self._context.new_page()
        except PlaywrightError as e:
            self.close()
            raise RendererLaunchError(f"Failed to launch Chromium: {e}") from e

        logger.info(
            "Browser launched",
            extra={"event": "renderer.launched", "headless": self.headless},
        )
        return self._page

    def navigate(self, url: str) -> None:
        page = self._ensure_page()
        self._current_url = url

        try:
            response = page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.navigation_timeout * 1000,
            )
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(
                f"Navigation to {url} timed out after {self.navigation_timeout} seconds",
                url=url,
                timeout=self.navigation_timeout,
            ) from e
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {url} failed: {e}", url=url) from e

        if response is not None and response.status >= 400:
            raise NavigationError(f"HTTP {response.status} loading {url}", url=url)

    def wait_visible(self, selector: str, timeout: float) -> None:
        page = self._ensure_page()

        try:
            page.wait_for_selector(selector, state="visible", timeout=timeout * 1000)
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(
                f"Selector '{selector}' not visible after {timeout} seconds",
                url=self._current_url,
                timeout=timeout,
            ) from e
        except PlaywrightError as e:
            raise NavigationError(
                f"Waiting for '{selector}' failed: {e}", url=self._current_url
            ) from e

    def evaluate(self, script: str) -> Any:
        page = self._ensure_page()

        try:
            return page.evaluate(script)
        except PlaywrightError as e:
            raise EvaluationError(f"Script evaluation failed: {e}", url=self._current_url) from e

    def close(self) -> None:
        # Release in reverse order of creation; each step is independent
        for resource in (self._context, self._browser):
            if resource is not None:
                try:
                    resource.close()
                except PlaywrightError as e:
                    logger.warning(
                        "Failed to close browser resource",
                        extra={"event": "renderer.close.failed", "error": str(e)},
                    )
        if self._playwright is not None:
            self._playwright.stop()
            logger.debug("Browser closed", extra={"event": "renderer.closed"})

        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
