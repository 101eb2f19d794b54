"""Global configuration management using pydantic-settings.

Runtime knobs (timeouts, politeness delay, browser identity, DOM selectors)
are loaded from environment variables or a ``.env`` file with strict type
validation. The tracked asset lists are not configuration here; they are
passed explicitly into the pipeline (see ``pricewatch.assets``).
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GlobalConfig(BaseSettings):
    """Centralized configuration with environment variable binding.

    Attributes:
        app_name: Application identifier for logging.
        environment: Deployment environment (development/staging/production).
        debug: Enable verbose exception diagnostics in log output.
        log_level: Minimum log level for output filtering.
        log_dir: Directory for structured JSON log files. No file sink when unset.
        log_rotation: Log file rotation interval.
        log_retention: Log file retention period.
        headless: Run the browser without a visible window.
        browser_executable_path: Explicit Chrome/Chromium binary to launch.
        viewport_width: Browser window width in pixels.
        viewport_height: Browser window height in pixels.
        user_agents: Desktop user-agent pool; one is picked per session.
        primary_timeout_ms: Navigation timeout for the primary quote source.
        reference_timeout_ms: Navigation timeout for the reference source.
        wait_until: Playwright load state that counts as "network settled".
        politeness_delay_sec: Pause after every fetched item.
        css_selector_entity_container: Container scoping the page's own ticker.
        css_selector_price: Price node inside the entity container.
        css_selector_price_fallback: Alternate price node for layout variance.
        css_selector_change: Percent-change node carrying the aria-label.
        css_selector_reference_heading: Heading tag scanned on the reference page.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Metadata
    app_name: str = Field(default="PriceWatch", description="Application identifier")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    log_dir: Path | None = Field(
        default=None, description="JSON log directory (file logging disabled when unset)"
    )
    log_rotation: str = Field(default="1 week", description="Log rotation interval")
    log_retention: str = Field(default="1 month", description="Log retention period")

    # Browser Configuration
    headless: bool = Field(default=True, description="Run browser in headless mode")
    browser_executable_path: Path | None = Field(
        default=None, description="Chrome/Chromium binary (bundled Chromium when unset)"
    )
    viewport_width: int = Field(default=1280, ge=320, le=3840, description="Window width")
    viewport_height: int = Field(default=800, ge=240, le=2160, description="Window height")
    user_agents: list[str] = Field(
        default=[
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
        ],
        min_length=1,
        description="User-agent pool for a realistic client identity",
    )

    # Navigation
    primary_timeout_ms: int = Field(
        default=30000, ge=1000, le=120000, description="Primary source navigation timeout"
    )
    reference_timeout_ms: int = Field(
        default=45000, ge=1000, le=120000, description="Reference source navigation timeout"
    )
    # networkidle needs zero open connections for 500 ms. Pages that keep a
    # polling connection open can only time out under it; use "load" for those.
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="networkidle", description="Navigation wait condition"
    )
    politeness_delay_sec: float = Field(
        default=2.0, ge=0.0, le=60.0, description="Delay after every fetched item"
    )

    # CSS Selectors (Primary: Google Finance quote page)
    css_selector_entity_container: str = Field(
        default="[data-last-price]", description="Main ticker entity container"
    )
    css_selector_price: str = Field(
        default=".YMlKec.fxKbKc", description="Price selector"
    )
    css_selector_price_fallback: str = Field(
        default=".YMlKec", description="Fallback price selector"
    )
    css_selector_change: str = Field(
        default='[jsname="Fe7oBc"]', description="Percent-change selector"
    )

    # CSS Selectors (Reference: Kitco spot price page)
    css_selector_reference_heading: str = Field(
        default="h3", description="Heading tag holding the bare spot price"
    )

    @field_validator("log_dir", "browser_executable_path", mode="before")
    @classmethod
    def ensure_path(cls, value: str | Path | None) -> Path | None:
        """Convert string paths to Path objects, treating blank strings as unset."""
        if isinstance(value, str):
            return Path(value) if value.strip() else None
        return value


@lru_cache(maxsize=1)
def get_config() -> GlobalConfig:
    """Retrieve the singleton GlobalConfig instance.

    Returns:
        GlobalConfig: The validated configuration instance.
    """
    return GlobalConfig()
