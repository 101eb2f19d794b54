"""Extraction strategy base class.

An extractor turns one loaded page into one result object. ``fetch()``
owns the navigate-then-extract sequence and its failure policy: a page that
cannot be loaded yields the extractor's empty result instead of an
exception, so a single bad page never costs the rest of the run.

Concrete strategies live in ``pricewatch.scraper``.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from playwright.async_api import Page

from config.settings import GlobalConfig, get_config
from pricewatch.browser import HeadlessBrowser
from pricewatch.exceptions import NavigationError
from pricewatch.logger import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class BaseExtractor(ABC, Generic[T]):
    """Abstract base class for site-specific extraction strategies.

    Attributes:
        config: GlobalConfig instance for selectors and timeouts.
        browser: Open HeadlessBrowser used for navigation.

    Type Parameters:
        T: Result type produced per page.
    """

    def __init__(
        self,
        browser: HeadlessBrowser,
        config: GlobalConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.browser = browser

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name used in log records."""
        ...

    @property
    @abstractmethod
    def timeout_ms(self) -> int:
        """Navigation timeout for this source."""
        ...

    @abstractmethod
    def empty_result(self, label: str) -> T:
        """Result standing in for a page that could not be read."""
        ...

    @abstractmethod
    async def extract_from_page(self, page: Page, label: str) -> T:
        """Extract a result from a loaded page.

        Missing elements must map to absent fields, not exceptions.

        Args:
            page: Page already navigated to the source URL.
            label: Identifier of the item being extracted (for results and logs).
        """
        ...

    async def fetch(self, page: Page, url: str, label: str) -> T:
        """Navigate ``page`` to ``url`` and extract from it.

        Args:
            page: Page to reuse for this navigation.
            url: Source URL.
            label: Identifier of the item being fetched.

        Returns:
            Extracted result, or ``empty_result(label)`` if navigation failed.
        """
        try:
            await self.browser.navigate(page, url, self.timeout_ms)
        except NavigationError as exc:
            log.warning(
                "Navigation failed, result degraded to N/A",
                extractor=self.name,
                item=label,
                url=url,
                error=exc.message,
            )
            return self.empty_result(label)

        result = await self.extract_from_page(page, label)
        log.debug("Extraction complete", extractor=self.name, item=label, result=result)
        return result
