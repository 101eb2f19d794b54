"""Custom exception hierarchy for PriceWatch.

Only browser launch failures are allowed to end a run. Navigation errors are
raised by the browser layer and converted to absent data at the item
boundary; a missing DOM node is never an exception at all.
"""

from datetime import UTC, datetime
from typing import Any


class PriceWatchError(Exception):
    """Base exception for all PriceWatch errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional debugging information.
        timestamp: UTC timestamp when the exception was raised.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(UTC)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format exception message with context for logging."""
        base = f"[{self.timestamp.isoformat()}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} | Context: {context_str}"
        return base


class BrowserLaunchError(PriceWatchError):
    """Raised when the headless browser cannot be started.

    Fatal for the whole run: missing browser binaries, a bad executable
    path or sandbox restrictions all end up here.
    """

    def __init__(self, reason: str, browser_type: str = "chromium") -> None:
        super().__init__(
            message=f"Failed to launch {browser_type} browser: {reason}",
            context={"browser_type": browser_type, "reason": reason},
        )


class NavigationError(PriceWatchError):
    """Raised when a page load fails.

    Covers network errors, missing responses and HTTP error statuses.
    """

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(
            message=f"Navigation to '{url}' failed: {reason}",
            context={"url": url, "reason": reason, "status_code": status_code},
        )
        self.url = url


class NavigationTimeout(NavigationError):
    """Raised when a page does not settle within its navigation timeout."""

    def __init__(self, url: str, timeout_ms: int) -> None:
        super().__init__(url=url, reason=f"Navigation timeout after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class LoggingInitializationError(PriceWatchError):
    """Raised when the logging system fails to initialize.

    Startup-blocking: the run does not start without working logging.
    """

    def __init__(self, log_dir: str, reason: str) -> None:
        super().__init__(
            message=f"Failed to initialize logging at '{log_dir}': {reason}",
            context={"log_dir": log_dir, "reason": reason},
        )
