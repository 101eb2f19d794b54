"""Pydantic data model for a single pipeline run.

Items are static configuration; everything else is produced once per run
and discarded afterwards. Absent values are ``None`` throughout: a missing
field means "could not be extracted", never an error.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class TrackedItem(BaseModel):
    """An asset quoted on the primary source.

    Attributes:
        ticker: Primary source ticker symbol (used as the log identifier).
        display_name: Human-readable name; joins the item to its reference.
        source_url: Quote page URL.
        emoji: Report line prefix.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    source_url: HttpUrl
    emoji: str = ""


class ReferenceItem(BaseModel):
    """An asset with an independent reference price page."""

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., min_length=1)
    source_url: HttpUrl


class FetchResult(BaseModel):
    """Raw strings extracted from one primary source page.

    Attributes:
        raw_price: Price text as displayed, e.g. ``"$5,179.00"``.
        raw_change: Signed percent change, e.g. ``"+1.02%"``.
    """

    raw_price: str | None = None
    raw_change: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.raw_price is not None and self.raw_change is not None


class ReferencePrice(BaseModel):
    """Numeric spot price read from a reference page, keyed by display name."""

    display_name: str
    value: float | None = None


class ValidationOutcome(str, Enum):
    """Result of comparing a primary price against its reference."""

    MATCH = "match"
    MISMATCH = "mismatch"
    UNAVAILABLE = "unavailable"


class AssetReport(BaseModel):
    """Everything the reporter needs for one tracked asset.

    ``reference`` is None for assets without a reference source; such
    assets are never cross-validated and carry no ``outcome``.
    """

    item: TrackedItem
    fetch: FetchResult
    primary_value: float | None = None
    reference: ReferencePrice | None = None
    outcome: ValidationOutcome | None = None

    @property
    def has_reference(self) -> bool:
        return self.reference is not None


class RunReport(BaseModel):
    """Ordered per-asset results of a run plus summary counters."""

    assets: list[AssetReport] = Field(default_factory=list)
    references_attempted: int = 0
    references_found: int = 0

    @property
    def quotes_complete(self) -> int:
        return sum(1 for asset in self.assets if asset.fetch.is_complete)

    def count_outcome(self, outcome: ValidationOutcome) -> int:
        return sum(1 for asset in self.assets if asset.outcome is outcome)

    def summary(self) -> dict[str, int]:
        """Summary counters for the end-of-run log line."""
        return {
            "items_tracked": len(self.assets),
            "quotes_complete": self.quotes_complete,
            "quotes_degraded": len(self.assets) - self.quotes_complete,
            "references_attempted": self.references_attempted,
            "references_found": self.references_found,
            "matches": self.count_outcome(ValidationOutcome.MATCH),
            "mismatches": self.count_outcome(ValidationOutcome.MISMATCH),
            "unavailable": self.count_outcome(ValidationOutcome.UNAVAILABLE),
        }
