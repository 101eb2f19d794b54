"""Tests for the logging infrastructure."""

import json
from pathlib import Path

import pytest
from loguru import logger

from config.settings import GlobalConfig
from pricewatch.exceptions import LoggingInitializationError
from pricewatch.logger import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_loguru():
    yield
    logger.remove()


class TestLoggingInfrastructure:

    def test_no_log_files_without_log_dir(self, mock_config: GlobalConfig, tmp_path: Path) -> None:
        configure_logging(mock_config)

        get_logger(__name__).info("Console only")

        assert list(tmp_path.rglob("*.json")) == []

    def test_log_file_contains_valid_json(
        self, mock_config: GlobalConfig, tmp_path: Path
    ) -> None:
        mock_config.log_dir = tmp_path / "logs"
        configure_logging(mock_config)

        get_logger(__name__).warning("Error fetching quote", item="SIW00")
        logger.complete()

        log_files = list(mock_config.log_dir.glob("*.json"))
        assert len(log_files) == 1

        entries = [
            json.loads(line)
            for line in log_files[0].read_text(encoding="utf-8").splitlines()
            if line.strip()
        ]
        warning = next(entry for entry in entries if entry["message"] == "Error fetching quote")
        assert warning["level"] == "WARNING"
        assert warning["context"]["item"] == "SIW00"
        assert "timestamp" in warning

    def test_unwritable_log_dir_fails_fast(
        self, mock_config: GlobalConfig, tmp_path: Path
    ) -> None:
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("")
        mock_config.log_dir = blocker / "logs"

        with pytest.raises(LoggingInitializationError) as exc_info:
            configure_logging(mock_config)

        assert "not-a-directory" in str(exc_info.value)
