"""Configuration module for PriceWatch.

Centralized configuration management using pydantic-settings, with strict
validation of every environment variable the pipeline reads.
"""

from config.settings import GlobalConfig, get_config

__all__ = ["GlobalConfig", "get_config"]
