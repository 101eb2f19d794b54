"""Headless browser sessions and page navigation.

``HeadlessBrowser`` is the capability the pipeline depends on: open a page,
navigate it with a bounded wait, close everything. ``BrowserManager`` is the
Playwright implementation; tests substitute a fake that serves canned DOM
states.

Each session is a scoped resource: ``BrowserManager.create()`` is an async
context manager whose exit always tears down the context, the browser and
the Playwright driver, even when the body raised.
"""

import random
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Self

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from config.settings import GlobalConfig, get_config
from pricewatch.exceptions import (
    BrowserLaunchError,
    NavigationError,
    NavigationTimeout,
)
from pricewatch.logger import get_logger

log = get_logger(__name__)

# Runs before any page script; hides the most common automation tells.
STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});

Object.defineProperty(navigator, 'languages', {
    get: () => ['en-US', 'en'],
});

window.chrome = {
    runtime: {},
};
"""


class HeadlessBrowser(ABC):
    """A single open browser session.

    Implementations must be usable for several sequential navigations on
    the same page and must release every resource in ``close()``.
    """

    @abstractmethod
    async def new_page(self) -> Page:
        """Open a page configured with the session's client identity."""
        ...

    @abstractmethod
    async def navigate(self, page: Page, url: str, timeout_ms: int) -> None:
        """Load ``url`` and wait for the network to settle.

        Raises:
            NavigationTimeout: If the page does not settle within ``timeout_ms``.
            NavigationError: For any other load failure.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the session. Safe to call more than once."""
        ...


class BrowserManager(HeadlessBrowser):
    """Playwright-backed browser session.

    Attributes:
        config: GlobalConfig instance for runtime configuration.
        user_agent: User-agent applied to every page of this session.
        _playwright: Playwright driver (started on entry).
        _browser: Chromium browser process.
        _context: BrowserContext carrying the client identity.

    Example:
        async with BrowserManager.create() as browser:
            page = await browser.new_page()
            await browser.navigate(page, "https://example.com", timeout_ms=30000)
    """

    def __init__(self, config: GlobalConfig) -> None:
        """Initialize BrowserManager with configuration.

        Note:
            Do not instantiate directly; use ``create()`` so the session is
            always closed.
        """
        self.config = config
        self.user_agent: str = random.choice(config.user_agents)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    @classmethod
    @asynccontextmanager
    async def create(
        cls, config: GlobalConfig | None = None
    ) -> AsyncGenerator[Self, None]:
        """Open a session for the duration of the ``async with`` block.

        Args:
            config: Optional GlobalConfig. Uses singleton if not provided.

        Yields:
            Launched BrowserManager instance.

        Raises:
            BrowserLaunchError: If the browser cannot be started.
        """
        if config is None:
            config = get_config()

        instance = cls(config)
        try:
            await instance._launch()
            yield instance
        finally:
            await instance.close()

    def _launch_args(self) -> list[str]:
        return [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-blink-features=AutomationControlled",
            f"--window-size={self.config.viewport_width},{self.config.viewport_height}",
        ]

    async def _launch(self) -> None:
        """Start Playwright, launch Chromium and open a browser context.

        Raises:
            BrowserLaunchError: If any step fails; partial resources are released.
        """
        log.info(
            "Launching browser",
            headless=self.config.headless,
            executable_path=str(self.config.browser_executable_path or "bundled"),
        )

        launch_options = {
            "headless": self.config.headless,
            "args": self._launch_args(),
        }
        if self.config.browser_executable_path is not None:
            launch_options["executable_path"] = str(self.config.browser_executable_path)

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(**launch_options)
            self._context = await self._browser.new_context(
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
                user_agent=self.user_agent,
                locale="en-US",
                timezone_id="America/New_York",
            )
            await self._context.add_init_script(STEALTH_JS)
        except Exception as exc:
            await self.close()
            raise BrowserLaunchError(reason=str(exc), browser_type="chromium") from exc

        log.info("Browser launched", user_agent=self.user_agent[:50] + "...")

    async def new_page(self) -> Page:
        """Create a new page within the session's context.

        Raises:
            BrowserLaunchError: If the session is not open.
        """
        if self._context is None:
            raise BrowserLaunchError(
                reason="Browser context not initialized", browser_type="chromium"
            )

        page = await self._context.new_page()
        log.debug("New page created")
        return page

    async def navigate(self, page: Page, url: str, timeout_ms: int) -> None:
        log.debug("Navigating to URL", url=url, wait_until=self.config.wait_until)

        try:
            response = await page.goto(
                url, wait_until=self.config.wait_until, timeout=timeout_ms
            )
        except (PlaywrightTimeoutError, TimeoutError) as exc:
            raise NavigationTimeout(url=url, timeout_ms=timeout_ms) from exc
        except Exception as exc:
            raise NavigationError(url=url, reason=str(exc)) from exc

        if response is None:
            raise NavigationError(url=url, reason="No response received")

        if response.status >= 400:
            raise NavigationError(
                url=url,
                reason=f"HTTP {response.status}",
                status_code=response.status,
            )

        log.info("Navigation successful", url=url, status_code=response.status)

    async def close(self) -> None:
        """Release context, browser and driver in reverse launch order."""
        if self._context is not None:
            try:
                await self._context.close()
            except Exception as exc:
                log.warning("Error closing context", error=str(exc))
            self._context = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as exc:
                log.warning("Error closing browser", error=str(exc))
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.warning("Error stopping playwright", error=str(exc))
            self._playwright = None
            log.info("Browser resources cleaned up")
