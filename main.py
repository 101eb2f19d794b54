"""PriceWatch entry point.

Bootstrap and orchestration only; all functional code lives in the
``pricewatch`` package.

Responsibilities:
    1. Load and validate configuration
    2. Initialize logging (fail-fast on error)
    3. Run the price pipeline and print the report to stdout
    4. Map fatal errors to exit codes

Usage:
    python main.py
    # or, once installed
    pricewatch
"""

import asyncio
import sys
from typing import NoReturn

from loguru import logger

from config.settings import GlobalConfig, get_config
from pricewatch.exceptions import (
    BrowserLaunchError,
    LoggingInitializationError,
    PriceWatchError,
)
from pricewatch.logger import configure_logging
from pricewatch.pipeline import PricePipeline
from pricewatch.reporter import ReportFormatter


async def _run_pipeline(config: GlobalConfig, pipeline: PricePipeline | None = None) -> int:
    """Execute one pipeline run and write the report to stdout.

    Args:
        config: The validated GlobalConfig instance.
        pipeline: Pre-built pipeline; defaults to the production asset lists.

    Returns:
        Exit code (0 for success). Degraded items do not change it.
    """
    logger.info(
        "Pipeline execution started",
        app_name=config.app_name,
        environment=config.environment,
    )

    pipeline = pipeline or PricePipeline(config)
    report = await pipeline.run()

    print(ReportFormatter().render_text(report), flush=True)

    logger.info("Pipeline execution completed successfully")
    return 0


def _handle_fatal_error(exc: Exception) -> NoReturn:
    """Log a fatal error to the diagnostic stream and exit with status 1."""
    if isinstance(exc, BrowserLaunchError):
        logger.critical(
            "Fatal error: browser could not be launched",
            message=exc.message,
            context=exc.context,
        )
        sys.exit(1)

    if isinstance(exc, PriceWatchError):
        logger.critical(
            "Fatal application error",
            error_type=type(exc).__name__,
            message=exc.message,
            context=exc.context,
        )
        sys.exit(1)

    logger.exception("Unexpected fatal error", error=str(exc))
    sys.exit(1)


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    # Report lines contain emoji.
    if (sys.stdout.encoding or "").lower() != "utf-8" and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")

    try:
        config = get_config()
    except Exception as exc:
        # Cannot log yet - print to stderr
        print(f"FATAL: Configuration loading failed: {exc}", file=sys.stderr)
        return 1

    try:
        configure_logging(config)
    except LoggingInitializationError as exc:
        print(f"FATAL: {exc}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(_run_pipeline(config))
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user (Ctrl+C)")
        return 130
    except Exception as exc:
        _handle_fatal_error(exc)


if __name__ == "__main__":
    sys.exit(main())
