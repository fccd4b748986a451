"""
🧪 test_logger.py: ініціалізація логування з конфігу
"""

import json
import logging
from logging.handlers import TimedRotatingFileHandler

from homego.shared.utils.logger import LOG_NAME, LoggingConfig, get_logger, init_logging, init_logging_from_config


def _reset():
    init_logging(LoggingConfig(console=False, file=""))


def test_json_file_output_includes_extra(tmp_path):
    log_file = tmp_path / "logs" / "homego.log"
    root = init_logging(LoggingConfig(console=False, json=True, file=str(log_file)))
    try:
        get_logger("test").info("hello", extra={"order": 7})
        for handler in root.handlers:
            handler.flush()

        records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        record = records[-1]
        assert record["message"] == "hello"
        assert record["name"] == f"{LOG_NAME}.test"
        assert record["order"] == 7
    finally:
        _reset()


def test_reinit_replaces_handlers(tmp_path):
    init_logging(LoggingConfig(console=True, file=str(tmp_path / "a.log")))
    root = init_logging(LoggingConfig(console=True, file=""))
    try:
        assert not any(isinstance(h, TimedRotatingFileHandler) for h in root.handlers)
        assert sum(isinstance(h, logging.StreamHandler) for h in root.handlers) == 1
    finally:
        _reset()


def test_from_config_node_applies_level_and_suppress():
    root = init_logging_from_config({"level": "debug", "console": False, "file": "", "suppress": {"httpx": "ERROR"}, "bogus": 1})
    try:
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.ERROR
    finally:
        _reset()
