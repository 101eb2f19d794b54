"""Production asset lists.

Order matters: items are fetched and reported in declaration order.
Bitcoin has no reference source and is never cross-validated.
"""

from pricewatch.models import ReferenceItem, TrackedItem

TRACKED_ITEMS: tuple[TrackedItem, ...] = (
    TrackedItem(
        ticker="BTC-USD",
        display_name="Bitcoin",
        source_url="https://www.google.com/finance/quote/BTC-USD",
        emoji="₿",
    ),
    TrackedItem(
        ticker="GCW00",
        display_name="Gold",
        source_url="https://www.google.com/finance/quote/GCW00:COMEX",
        emoji="🥇",
    ),
    TrackedItem(
        ticker="SIW00",
        display_name="Silver",
        source_url="https://www.google.com/finance/quote/SIW00:COMEX",
        emoji="🥈",
    ),
)

REFERENCE_ITEMS: tuple[ReferenceItem, ...] = (
    ReferenceItem(
        display_name="Gold",
        source_url="https://www.kitco.com/gold-price-today-usa/",
    ),
    ReferenceItem(
        display_name="Silver",
        source_url="https://www.kitco.com/silver-price-today-usa/",
    ),
)
