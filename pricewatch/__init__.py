"""PriceWatch core package.

Business logic for the live price ingestion pipeline:
- browser: Playwright-based headless browser sessions and navigation
- extractor: strategy base for per-page extraction with graceful degradation
- scraper: Google Finance quote and Kitco spot price extractors
- validator: price normalization and cross-source validation
- reporter: console report formatting
- pipeline: run orchestration across tracked and reference items
- logger: loguru configuration
- exceptions: custom exception hierarchy
"""

__version__ = "1.0.0"
