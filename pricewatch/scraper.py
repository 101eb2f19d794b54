"""Concrete extractors for the two supported page layouts.

GoogleFinanceScraper reads the quoted price and the signed percent change
of the page's own ticker. Quote pages also list related tickers and market
movers that reuse the same class names, so every query is scoped to the
entity container (``[data-last-price]``) that wraps only the main ticker.
An unscoped query silently returns whichever ticker renders first.

KitcoScraper reads the spot price from the first heading whose text is a
bare number such as ``5,165.70``. First match wins; the page layout puts
the bid price ahead of any other numeric heading.
"""

import re

from playwright.async_api import Locator, Page

from pricewatch.extractor import BaseExtractor
from pricewatch.logger import get_logger
from pricewatch.models import FetchResult, ReferencePrice

log = get_logger(__name__)

CHANGE_LABEL_PATTERN = re.compile(r"(Up|Down) by ([0-9.]+)%", re.IGNORECASE)
REFERENCE_PRICE_PATTERN = re.compile(r"[0-9,]+\.[0-9]+")


def parse_change_label(label: str | None) -> str | None:
    """Rebuild a signed percent change from an accessibility label.

    The visible text of the change badge drops the sign (it is conveyed by
    an arrow icon), but the aria-label spells it out.

    Args:
        label: aria-label text such as ``"Up by 1.87%"``.

    Returns:
        ``"+1.87%"`` / ``"-2.3%"``, or None when the label does not match.

    Example:
        >>> parse_change_label("Down by 2.3%")
        '-2.3%'
    """
    if not label:
        return None

    match = CHANGE_LABEL_PATTERN.search(label)
    if match is None:
        return None

    sign = "+" if match.group(1).lower() == "up" else "-"
    return f"{sign}{match.group(2)}%"


def match_reference_heading(texts: list[str]) -> float | None:
    """Return the first heading text that is a bare decimal number, as a float.

    Headings with currency symbols, units or words are skipped.

    Args:
        texts: Heading inner texts in document order.
    """
    for text in texts:
        candidate = text.strip()
        if REFERENCE_PRICE_PATTERN.fullmatch(candidate):
            return float(candidate.replace(",", ""))
    return None


async def _first_or_none(locator: Locator) -> Locator | None:
    first = locator.first
    if await first.count() == 0:
        return None
    return first


class GoogleFinanceScraper(BaseExtractor[FetchResult]):
    """Primary extractor for Google Finance quote pages.

    Example:
        async with BrowserManager.create() as browser:
            page = await browser.new_page()
            scraper = GoogleFinanceScraper(browser)
            result = await scraper.fetch(page, item_url, "GCW00")
    """

    @property
    def name(self) -> str:
        return "GoogleFinanceScraper"

    @property
    def timeout_ms(self) -> int:
        return self.config.primary_timeout_ms

    def empty_result(self, label: str) -> FetchResult:
        return FetchResult()

    async def extract_from_page(self, page: Page, label: str) -> FetchResult:
        """Read price and signed change from the page's entity container.

        Args:
            page: Loaded quote page.
            label: Ticker of the item, for logging.

        Returns:
            FetchResult with absent fields for anything not found.
        """
        container = await _first_or_none(
            page.locator(self.config.css_selector_entity_container)
        )
        if container is None:
            log.warning(
                "Entity container not found",
                item=label,
                selector=self.config.css_selector_entity_container,
                url=page.url,
            )
            return FetchResult()

        return FetchResult(
            raw_price=await self._extract_price(container),
            raw_change=await self._extract_change(container),
        )

    async def _extract_price(self, container: Locator) -> str | None:
        price_el = await _first_or_none(container.locator(self.config.css_selector_price))
        if price_el is None:
            price_el = await _first_or_none(
                container.locator(self.config.css_selector_price_fallback)
            )
        if price_el is None:
            return None

        text = (await price_el.inner_text()).strip()
        return text or None

    async def _extract_change(self, container: Locator) -> str | None:
        change_el = await _first_or_none(container.locator(self.config.css_selector_change))
        if change_el is None:
            return None

        label = await change_el.get_attribute("aria-label")
        return parse_change_label(label)


class KitcoScraper(BaseExtractor[ReferencePrice]):
    """Reference extractor for Kitco spot price pages."""

    @property
    def name(self) -> str:
        return "KitcoScraper"

    @property
    def timeout_ms(self) -> int:
        return self.config.reference_timeout_ms

    def empty_result(self, label: str) -> ReferencePrice:
        return ReferencePrice(display_name=label)

    async def extract_from_page(self, page: Page, label: str) -> ReferencePrice:
        texts = await page.locator(self.config.css_selector_reference_heading).all_inner_texts()
        value = match_reference_heading(texts)

        if value is None:
            log.warning(
                "No numeric heading found on reference page",
                item=label,
                headings_scanned=len(texts),
                url=page.url,
            )

        return ReferencePrice(display_name=label, value=value)
