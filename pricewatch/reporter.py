"""Console report formatting.

One line per tracked asset, in tracking order, under a fixed banner:

    💰 Live Prices:
    ₿ Bitcoin: $67,616.72 (+1.02%)
    🥇 Gold: $5,179.00 (+0.41%) | Reference: $5,165.70 ✅
    🥈 Silver: N/A (change N/A) | Reference: N/A
"""

from pricewatch.models import AssetReport, RunReport, ValidationOutcome

BANNER = "💰 Live Prices:"
NOT_AVAILABLE = "N/A"
REFERENCE_LABEL = "Reference"

STATUS_GLYPHS: dict[ValidationOutcome, str] = {
    ValidationOutcome.MATCH: "✅",
    ValidationOutcome.MISMATCH: "⚠️ Price mismatch detected",
}


def format_reference_price(value: float | None) -> str:
    """Render a reference price as ``$5,165.70``; absent or zero is N/A."""
    if not value:
        return NOT_AVAILABLE
    return f"${value:,.2f}"


def format_asset_line(asset: AssetReport) -> str:
    """Format the report line for one asset.

    Assets with a reference source get a ``| Reference: ...`` suffix. The
    status glyph appears only when both prices were available.
    """
    price = asset.fetch.raw_price or NOT_AVAILABLE
    change = f"({asset.fetch.raw_change})" if asset.fetch.raw_change else "(change N/A)"
    line = f"{asset.item.emoji} {asset.item.display_name}: {price} {change}".lstrip()

    if not asset.has_reference:
        return line

    suffix = f" | {REFERENCE_LABEL}: {format_reference_price(asset.reference.value)}"
    glyph = STATUS_GLYPHS.get(asset.outcome)
    if glyph:
        suffix = f"{suffix} {glyph}"

    return line + suffix


class ReportFormatter:
    """Turns a RunReport into printable lines.

    Example:
        for line in ReportFormatter().render(run_report):
            print(line)
    """

    def __init__(self, banner: str = BANNER) -> None:
        self.banner = banner

    def render(self, report: RunReport) -> list[str]:
        return [self.banner, *(format_asset_line(asset) for asset in report.assets)]

    def render_text(self, report: RunReport) -> str:
        return "\n".join(self.render(report))
