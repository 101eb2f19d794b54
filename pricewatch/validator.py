"""Price normalization and cross-source validation.

Both functions are pure and never raise on bad input: a price that cannot
be read is simply absent, and a comparison with an absent side is
UNAVAILABLE.
"""

import re

from pricewatch.logger import get_logger
from pricewatch.models import ValidationOutcome

log = get_logger(__name__)

# Relative difference allowed between primary and reference prices.
PRICE_TOLERANCE = 0.02

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")


def parse_price(raw: str | None) -> float | None:
    """Convert a displayed price string to a float.

    Every character other than a digit or a decimal point is dropped first,
    so currency symbols and thousands separators disappear. The longest
    leading number of what remains is parsed.

    Args:
        raw: Price text such as ``"$5,179.00"`` or ``"67,616.72"``.

    Returns:
        Parsed value, or None when ``raw`` is absent or holds no digits.

    Example:
        >>> parse_price("$5,179.00")
        5179.0
    """
    if not raw:
        return None

    cleaned = _NON_NUMERIC.sub("", raw)
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return None

    return float(match.group(0))


def cross_validate(
    primary: float | None,
    reference: float | None,
    tolerance: float = PRICE_TOLERANCE,
) -> ValidationOutcome:
    """Compare a primary price against its reference.

    The relative difference is measured against the primary price, so the
    check asks how far the primary source drifted from the reference.

    Args:
        primary: Normalized primary source price.
        reference: Reference source price.
        tolerance: Largest accepted relative difference (inclusive).

    Returns:
        UNAVAILABLE if either side is absent, MISMATCH if the relative
        difference exceeds ``tolerance``, MATCH otherwise.
    """
    if primary is None or reference is None:
        return ValidationOutcome.UNAVAILABLE

    if primary == 0:
        return ValidationOutcome.MATCH if reference == 0 else ValidationOutcome.MISMATCH

    rel_diff = abs(primary - reference) / primary
    if rel_diff > tolerance:
        log.warning(
            "Price mismatch detected",
            primary=primary,
            reference=reference,
            relative_difference=f"{rel_diff:.4%}",
            tolerance=f"{tolerance:.1%}",
        )
        return ValidationOutcome.MISMATCH

    return ValidationOutcome.MATCH
