"""Test suite for PriceWatch.

Hermetic tests: no network and no real browser. Extractors run against
fake pages serving canned DOM states; Playwright itself is mocked.
"""
