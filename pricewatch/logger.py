"""Logging configuration using loguru.

Two sinks:
- a colorized console sink on stderr (stdout is reserved for the report)
- an optional structured JSON-lines file sink, enabled by ``LOG_DIR``,
  with rotation, retention and compression
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from config.settings import GlobalConfig, get_config
from pricewatch.exceptions import LoggingInitializationError


def _json_serializer(record: dict[str, Any]) -> str:
    """Render a loguru record as a single-line JSON document.

    Args:
        record: Loguru record dictionary containing log metadata.

    Returns:
        JSON-formatted string representation of the log record.
    """
    subset = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    if record["exception"] is not None:
        subset["exception"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else None,
            "value": str(record["exception"].value) if record["exception"].value else None,
            "traceback": record["exception"].traceback is not None,
        }

    if record["extra"]:
        subset["context"] = {k: v for k, v in record["extra"].items() if k != "serialized"}

    return json.dumps(subset, default=str, ensure_ascii=False)


def _attach_serialized(record: dict[str, Any]) -> bool:
    record["extra"]["serialized"] = _json_serializer(record)
    return True


def _validate_log_directory(log_dir: Path) -> None:
    """Validate log directory exists and is writable.

    Args:
        log_dir: Path to the log directory.

    Raises:
        LoggingInitializationError: If directory creation or write test fails.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)

        test_file = log_dir / ".write_test"
        test_file.write_text("write_test")
        test_file.unlink()

    except PermissionError as exc:
        raise LoggingInitializationError(
            log_dir=str(log_dir),
            reason=f"Permission denied: {exc}",
        ) from exc
    except OSError as exc:
        raise LoggingInitializationError(
            log_dir=str(log_dir),
            reason=f"OS error during directory validation: {exc}",
        ) from exc


def configure_logging(config: GlobalConfig | None = None) -> None:
    """Initialize the logging infrastructure.

    Should be called once during bootstrap, before any other module logs.

    Args:
        config: Optional GlobalConfig instance. If None, uses singleton.

    Raises:
        LoggingInitializationError: If the configured log directory is unusable.
    """
    if config is None:
        config = get_config()

    logger.remove()

    if config.log_dir is not None:
        _validate_log_directory(config.log_dir)

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stderr,
        format=console_format,
        level=config.log_level,
        colorize=True,
        backtrace=config.debug,
        diagnose=config.debug,
    )

    if config.log_dir is not None:
        log_file_path = config.log_dir / "pricewatch_{time:YYYY-MM-DD}.json"
        logger.add(
            str(log_file_path),
            format="{extra[serialized]}",
            level=config.log_level,
            rotation=config.log_rotation,
            retention=config.log_retention,
            compression="gz",
            encoding="utf-8",
            filter=_attach_serialized,
        )

    logger.info(
        "Logging infrastructure initialized",
        app_name=config.app_name,
        environment=config.environment,
        log_level=config.log_level,
        log_dir=str(config.log_dir) if config.log_dir else None,
    )


def get_logger(name: str) -> "logger":
    """Get a logger bound with the module name for log attribution.

    Args:
        name: Module or component name.

    Returns:
        Loguru logger instance bound with the provided name context.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("Fetching quote", item="BTC-USD")
    """
    return logger.bind(module=name)
