# 🧰 homego/shared/utils/__init__.py
"""
🧰 Спільні утиліти ядра: наразі лише схема логування.
"""

from __future__ import annotations

from .logger import (
    LOG_NAME,
    LoggingConfig,
    get_logger,
    init_logging,
    init_logging_from_config,
)

__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
]
