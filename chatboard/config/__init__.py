"""
Configuration module for the ChatBoard server.

This module provides type-safe, validated configuration using Pydantic BaseSettings.

Usage:
    from chatboard.config import get_config

    config = get_config()
    logger.info("Configuration loaded", host=config.server.host, port=config.server.port)
"""

import threading

from .models import AppConfig

__all__ = ["get_config", "reset_config", "AppConfig"]


class _ConfigState:
    """Holder for the cached configuration instance."""

    instance: AppConfig | None = None


_config_state = _ConfigState()
_config_lock = threading.Lock()


def get_config() -> AppConfig:
    """
    Get the cached application configuration, loading it on first use.

    Returns:
        AppConfig: Validated configuration for the current environment
    """
    if _config_state.instance is None:
        with _config_lock:
            if _config_state.instance is None:
                _config_state.instance = AppConfig()
    return _config_state.instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    with _config_lock:
        _config_state.instance = None
