"""Pytest configuration and shared fixtures for the PriceWatch test suite.

Hermetic by construction:
- No network and no real browser. Pages are fake objects serving canned
  DOM states through the subset of the Playwright Locator API the
  extractors use.
- Isolated configuration: ``mock_config`` clears the ``get_config`` cache
  and drives every setting from environment variables.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest

from config.settings import GlobalConfig
from pricewatch.browser import HeadlessBrowser
from pricewatch.exceptions import BrowserLaunchError
from pricewatch.models import ReferenceItem, TrackedItem


@pytest.fixture
def mock_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GlobalConfig:
    """Provide isolated GlobalConfig with safe test defaults.

    Args:
        tmp_path: Pytest temporary directory fixture.
        monkeypatch: Pytest monkeypatch fixture for patching.

    Returns:
        GlobalConfig instance with no file logging and no politeness delay.
    """
    from config.settings import get_config

    get_config.cache_clear()
    monkeypatch.chdir(tmp_path)

    test_env = {
        "APP_NAME": "PriceWatch-Test",
        "ENVIRONMENT": "development",
        "DEBUG": "false",
        "HEADLESS": "true",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": "",
        "PRIMARY_TIMEOUT_MS": "5000",
        "REFERENCE_TIMEOUT_MS": "7000",
        "POLITENESS_DELAY_SEC": "0",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)

    config = get_config()

    yield config

    get_config.cache_clear()


# ---------------------------------------------------------------------------
# Fake DOM
# ---------------------------------------------------------------------------


class FakeElement:
    """A DOM node: visible text, attributes and children keyed by selector."""

    def __init__(
        self,
        text: str = "",
        attrs: dict[str, str] | None = None,
        children: dict[str, list["FakeElement"]] | None = None,
    ) -> None:
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}


class FakeLocator:
    """Playwright Locator stand-in over a fixed list of matched elements."""

    def __init__(self, elements: list[FakeElement]) -> None:
        self._elements = elements

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._elements[:1])

    async def count(self) -> int:
        return len(self._elements)

    def locator(self, selector: str) -> "FakeLocator":
        matched: list[FakeElement] = []
        for element in self._elements:
            matched.extend(element.children.get(selector, []))
        return FakeLocator(matched)

    def _single(self) -> FakeElement:
        if len(self._elements) != 1:
            raise AssertionError(
                f"strict mode violation: locator resolved to {len(self._elements)} elements"
            )
        return self._elements[0]

    async def inner_text(self) -> str:
        return self._single().text

    async def get_attribute(self, name: str) -> str | None:
        return self._single().attrs.get(name)

    async def all_inner_texts(self) -> list[str]:
        return [element.text for element in self._elements]


class FakePage:
    """Playwright Page stand-in; ``dom`` is swapped in by FakeBrowser.navigate."""

    def __init__(self) -> None:
        self.url = "about:blank"
        self.dom = FakeElement()
        self.closed = False

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self.dom.children.get(selector, []))

    async def close(self) -> None:
        self.closed = True


def google_finance_dom(
    price: str | None = "$5,179.00",
    change_label: str | None = "Up by 0.41%",
    price_selector: str = ".YMlKec.fxKbKc",
    with_container: bool = True,
    sidebar_label: str = "Up by 1.02%",
) -> FakeElement:
    """Build a quote page whose sidebar repeats the price/change selectors.

    The sidebar entries sit outside the entity container, so only a scoped
    query returns the main ticker's values.
    """
    sidebar_price = FakeElement(text="$67,616.72")
    sidebar_change = FakeElement(attrs={"aria-label": sidebar_label})

    container_children: dict[str, list[FakeElement]] = {}
    if price is not None:
        container_children[price_selector] = [FakeElement(text=price)]
        if price_selector != ".YMlKec":
            container_children[".YMlKec"] = [FakeElement(text=price)]
    if change_label is not None:
        container_children['[jsname="Fe7oBc"]'] = [
            FakeElement(text="0.41%", attrs={"aria-label": change_label})
        ]

    root_children: dict[str, list[FakeElement]] = {
        ".YMlKec.fxKbKc": [sidebar_price],
        ".YMlKec": [sidebar_price],
        '[jsname="Fe7oBc"]': [sidebar_change],
    }
    if with_container:
        root_children["[data-last-price]"] = [
            FakeElement(attrs={"data-last-price": "5179"}, children=container_children)
        ]

    return FakeElement(children=root_children)


def kitco_dom(headings: list[str]) -> FakeElement:
    """Build a reference page with the given ``h3`` texts in document order."""
    return FakeElement(children={"h3": [FakeElement(text=text) for text in headings]})


# ---------------------------------------------------------------------------
# Fake browser
# ---------------------------------------------------------------------------


class FakeBrowser(HeadlessBrowser):
    """HeadlessBrowser serving canned pages.

    ``pages`` maps URL to a FakeElement (the loaded DOM) or to an exception
    instance raised by ``navigate``.
    """

    def __init__(self, pages: dict[str, Any]) -> None:
        self.pages = pages
        self.navigations: list[tuple[str, int]] = []
        self.created_pages: list[FakePage] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage()
        self.created_pages.append(page)
        return page

    async def navigate(self, page: FakePage, url: str, timeout_ms: int) -> None:
        self.navigations.append((url, timeout_ms))
        outcome = self.pages.get(url, FakeElement())
        if isinstance(outcome, BaseException):
            raise outcome
        page.url = url
        page.dom = outcome

    async def close(self) -> None:
        self.closed = True


class FakeBrowserFactory:
    """Callable matching ``BrowserManager.create``; records every session.

    Args:
        pages: Shared URL → DOM/exception map for all sessions.
        fail_on_launch: Session indexes (0 = primary, 1 = reference) whose
            launch raises BrowserLaunchError.
    """

    def __init__(self, pages: dict[str, Any], fail_on_launch: set[int] | None = None) -> None:
        self.pages = pages
        self.fail_on_launch = fail_on_launch or set()
        self.sessions: list[FakeBrowser] = []
        self.launch_attempts = 0

    @asynccontextmanager
    async def __call__(self, config: GlobalConfig) -> AsyncIterator[FakeBrowser]:
        index = self.launch_attempts
        self.launch_attempts += 1
        if index in self.fail_on_launch:
            raise BrowserLaunchError(reason="Executable doesn't exist")

        browser = FakeBrowser(self.pages)
        self.sessions.append(browser)
        try:
            yield browser
        finally:
            await browser.close()


@pytest.fixture
def tracked_items() -> tuple[TrackedItem, ...]:
    return (
        TrackedItem(
            ticker="BTC-USD",
            display_name="Bitcoin",
            source_url="https://finance.test/quote/BTC-USD",
            emoji="₿",
        ),
        TrackedItem(
            ticker="GCW00",
            display_name="Gold",
            source_url="https://finance.test/quote/GCW00:COMEX",
            emoji="🥇",
        ),
        TrackedItem(
            ticker="SIW00",
            display_name="Silver",
            source_url="https://finance.test/quote/SIW00:COMEX",
            emoji="🥈",
        ),
    )


@pytest.fixture
def reference_items() -> tuple[ReferenceItem, ...]:
    return (
        ReferenceItem(display_name="Gold", source_url="https://spot.test/gold/"),
        ReferenceItem(display_name="Silver", source_url="https://spot.test/silver/"),
    )


@pytest.fixture
def mock_playwright(mocker: Any) -> dict[str, Any]:
    """Playwright mock chain for the ``async_playwright().start()`` pattern.

    Returns:
        Dict with ``async_playwright``, ``playwright``, ``browser``,
        ``context`` and ``page`` mocks.
    """
    page = mocker.MagicMock()
    page.goto = mocker.AsyncMock(return_value=mocker.MagicMock(status=200))

    context = mocker.MagicMock()
    context.add_init_script = mocker.AsyncMock()
    context.new_page = mocker.AsyncMock(return_value=page)
    context.close = mocker.AsyncMock()

    browser = mocker.MagicMock()
    browser.new_context = mocker.AsyncMock(return_value=context)
    browser.close = mocker.AsyncMock()

    playwright = mocker.MagicMock()
    playwright.chromium.launch = mocker.AsyncMock(return_value=browser)
    playwright.stop = mocker.AsyncMock()

    async_playwright_instance = mocker.MagicMock()
    async_playwright_instance.start = mocker.AsyncMock(return_value=playwright)

    return {
        "async_playwright": async_playwright_instance,
        "playwright": playwright,
        "browser": browser,
        "context": context,
        "page": page,
    }


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests exercising the full pipeline wiring",
    )
