"""Run orchestration.

A run is a single linear pass:

1. Primary session: fetch every tracked item, in order.
2. Reference session: fetch every reference item, in order.
3. Normalize and cross-validate every tracked item that has a reference.
4. Return a RunReport for the reporter.

Each session is its own ``async with`` block and is closed before the next
step starts. Failures are isolated per item: whatever goes wrong while
fetching one item becomes absent data for that item, and the loop moves
on. A politeness delay follows every item, successful or not.
"""

import asyncio
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager

from config.settings import GlobalConfig, get_config
from pricewatch.assets import REFERENCE_ITEMS, TRACKED_ITEMS
from pricewatch.browser import BrowserManager, HeadlessBrowser
from pricewatch.exceptions import BrowserLaunchError
from pricewatch.logger import get_logger
from pricewatch.models import (
    AssetReport,
    FetchResult,
    ReferenceItem,
    ReferencePrice,
    RunReport,
    TrackedItem,
)
from pricewatch.scraper import GoogleFinanceScraper, KitcoScraper
from pricewatch.validator import cross_validate, parse_price

log = get_logger(__name__)

BrowserFactory = Callable[[GlobalConfig], AbstractAsyncContextManager[HeadlessBrowser]]


class PricePipeline:
    """Fetches, cross-validates and assembles prices for one run.

    Attributes:
        config: GlobalConfig with timeouts, selectors and delay.
        tracked_items: Assets quoted on the primary source, in report order.
        reference_items: Assets with a reference source.
        browser_factory: Opens a scoped HeadlessBrowser session.

    Example:
        pipeline = PricePipeline(get_config())
        report = await pipeline.run()
    """

    def __init__(
        self,
        config: GlobalConfig | None = None,
        tracked_items: Sequence[TrackedItem] = TRACKED_ITEMS,
        reference_items: Sequence[ReferenceItem] = REFERENCE_ITEMS,
        browser_factory: BrowserFactory = BrowserManager.create,
    ) -> None:
        self.config = config or get_config()
        self.tracked_items = tuple(tracked_items)
        self.reference_items = tuple(reference_items)
        self.browser_factory = browser_factory

    async def run(self) -> RunReport:
        """Execute the full run.

        Returns:
            RunReport with one AssetReport per tracked item, in order.

        Raises:
            BrowserLaunchError: If either browser session cannot be started.
        """
        log.info(
            "Fetching live prices (primary quotes + reference validation)",
            tracked_items=len(self.tracked_items),
            reference_items=len(self.reference_items),
        )

        launch_error: BrowserLaunchError | None = None
        quotes: list[FetchResult] = []
        try:
            quotes = await self.collect_quotes()
        except BrowserLaunchError as exc:
            log.error("Primary session could not be started", error=exc.message)
            launch_error = exc

        # The reference session is attempted even when the primary one failed.
        references = await self.collect_references()
        if launch_error is not None:
            raise launch_error

        report = self.assemble(quotes, references)

        log.info("Run complete", **report.summary())
        return report

    async def collect_quotes(self) -> list[FetchResult]:
        """Fetch every tracked item from the primary source.

        Returns:
            One FetchResult per tracked item, in tracking order; failed
            items get an all-absent result.
        """
        results: list[FetchResult] = []
        if not self.tracked_items:
            return results

        async with self.browser_factory(self.config) as browser:
            page = await browser.new_page()
            scraper = GoogleFinanceScraper(browser, self.config)

            for item in self.tracked_items:
                try:
                    result = await scraper.fetch(page, str(item.source_url), item.ticker)
                except Exception as exc:
                    log.warning(
                        "Error fetching quote",
                        item=item.ticker,
                        error_type=type(exc).__name__,
                        error=str(exc),
                    )
                    result = FetchResult()
                results.append(result)
                await self._polite_pause()

        return results

    async def collect_references(self) -> dict[str, ReferencePrice]:
        """Fetch every reference item from the reference source.

        Returns:
            ReferencePrice per display name; failed items have no value.
            When two reference items share a display name, the first wins.
        """
        prices: dict[str, ReferencePrice] = {}
        if not self.reference_items:
            return prices

        async with self.browser_factory(self.config) as browser:
            page = await browser.new_page()
            scraper = KitcoScraper(browser, self.config)

            for ref in self.reference_items:
                try:
                    price = await scraper.fetch(
                        page, str(ref.source_url), ref.display_name
                    )
                except Exception as exc:
                    log.warning(
                        "Reference fetch failed",
                        item=ref.display_name,
                        error_type=type(exc).__name__,
                        error=str(exc),
                    )
                    price = ReferencePrice(display_name=ref.display_name)
                prices.setdefault(ref.display_name, price)
                await self._polite_pause()

        return prices

    def assemble(
        self,
        quotes: Sequence[FetchResult],
        references: dict[str, ReferencePrice],
    ) -> RunReport:
        """Normalize and cross-validate results into a RunReport.

        ``quotes`` is positional: entry i belongs to tracked item i, and
        missing trailing entries count as absent. Only items whose display
        name has a reference item are validated.
        """
        padded = list(quotes) + [FetchResult()] * (len(self.tracked_items) - len(quotes))

        assets: list[AssetReport] = []
        for item, fetch in zip(self.tracked_items, padded):
            primary_value = parse_price(fetch.raw_price)
            reference = references.get(item.display_name)

            if reference is None and self._has_reference_item(item):
                reference = ReferencePrice(display_name=item.display_name)

            outcome = None
            if reference is not None:
                outcome = cross_validate(primary_value, reference.value)

            assets.append(
                AssetReport(
                    item=item,
                    fetch=fetch,
                    primary_value=primary_value,
                    reference=reference,
                    outcome=outcome,
                )
            )

        return RunReport(
            assets=assets,
            references_attempted=len(self.reference_items),
            references_found=sum(1 for price in references.values() if price.value is not None),
        )

    def _has_reference_item(self, item: TrackedItem) -> bool:
        return any(ref.display_name == item.display_name for ref in self.reference_items)

    async def _polite_pause(self) -> None:
        if self.config.politeness_delay_sec > 0:
            await asyncio.sleep(self.config.politeness_delay_sec)
