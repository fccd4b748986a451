# 📜 homego/shared/utils/logger.py
"""
📜 Єдина схема логування для ядра HomeGo.

🔹 Кореневий логер `homego` з консольним і файловим (з ротацією) виводом.
🔹 JSON-формат для файлу вмикається з конфігу, сторонні бібліотеки можна приглушити.
🔹 Модулі отримують логер через `logging.getLogger(LOG_NAME)` або `get_logger("suffix")`.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json									# 📦 Серіалізація payload логів
import logging									# 🪵 Логери Python
import sys									# 🧵 stdout
import threading								# 🔒 Захист ініціалізації
from dataclasses import dataclass, field					# 🧱 DTO-конфіг логування
from logging.handlers import TimedRotatingFileHandler			# 📁 Ротація файлів
from pathlib import Path							# 📂 Шляхи
from typing import Any, Dict, Mapping, Optional, Union			# 🧰 Типи

# ================================
# 🧾 КОНСТАНТИ МОДУЛЯ
# ================================
LOG_NAME: str = "homego"							# 🏷️ Базовий префікс логерів
PLAIN_FORMAT: str = "%(asctime)s [%(levelname)s] - (%(name)s).%(funcName)s(%(lineno)d) - %(message)s"
CONSOLE_FORMAT: str = "[%(levelname).1s] %(message)s"

_lock = threading.Lock()
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


# ================================
# 🧾 DTO КОНФІГУРАЦІЇ
# ================================
@dataclass
class LoggingConfig:
    """Налаштування логування з дефолтами, придатними для локального запуску."""
    level: str = "INFO"
    console: bool = True
    json: bool = False
    file: Optional[str] = "logs/homego.log"					# 📁 None → без файлового хендлера
    when: str = "midnight"
    interval: int = 1
    backup_count: int = 7
    encoding: str = "utf-8"
    suppress: Dict[str, str] = field(default_factory=dict)			# 🙊 {"httpx": "WARNING"}
    console_level: Optional[str] = None
    file_level: Optional[str] = None

    @classmethod
    def from_mapping(cls, node: Optional[Mapping[str, Any]]) -> "LoggingConfig":
        """Будує конфіг із вузла `logging` ConfigService, ігноруючи невідомі ключі."""
        node = node or {}
        known = {k: v for k, v in node.items() if k in cls.__dataclass_fields__ and v is not None}
        return cls(**known)


# ================================
# 🧰 ФОРМАТТЕР
# ================================
class JsonFormatter(logging.Formatter):
    """Форматує запис у плоский JSON, додаючи `extra`-поля."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "func": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
                continue
            try:
                json.dumps(value)					# ✅ Перевіряємо серіалізованість
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _to_level(value: Union[str, int, None], default: int) -> int:
    """Перетворює рядок/інт у числовий рівень логування."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).upper(), default)


# ================================
# 🚀 ПУБЛІЧНИЙ API
# ================================
def init_logging(cfg: Optional[LoggingConfig] = None) -> logging.Logger:
    """Ініціалізує кореневий логер `homego`. Повторний виклик замінює наші хендлери."""
    cfg = cfg or LoggingConfig()
    with _lock:
        root_logger = logging.getLogger(LOG_NAME)
        base_level = _to_level(cfg.level, logging.INFO)
        console_level = _to_level(cfg.console_level, base_level)
        file_level = _to_level(cfg.file_level, base_level)
        root_logger.setLevel(min(base_level, console_level, file_level))

        for handler in list(root_logger.handlers):			# 🧹 Прибираємо попередні хендлери
            if isinstance(handler, (logging.StreamHandler, TimedRotatingFileHandler)):
                root_logger.removeHandler(handler)
                handler.close()

        if cfg.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            console_handler.setLevel(console_level)
            root_logger.addHandler(console_handler)

        if cfg.file:
            log_path = Path(cfg.file)
            log_path.parent.mkdir(parents=True, exist_ok=True)	# 🧱 Гарантуємо директорію
            file_handler = TimedRotatingFileHandler(
                filename=str(log_path),
                when=cfg.when,
                interval=cfg.interval,
                backupCount=cfg.backup_count,
                encoding=cfg.encoding,
            )
            file_handler.setFormatter(JsonFormatter() if cfg.json else logging.Formatter(PLAIN_FORMAT))
            file_handler.setLevel(file_level)
            root_logger.addHandler(file_handler)

        for name, level in cfg.suppress.items():
            logging.getLogger(name).setLevel(_to_level(level, logging.WARNING))

        root_logger.info(
            "✅ Logging initialized | level=%s console=%s json=%s file=%s",
            cfg.level.upper(),
            "ON" if cfg.console else "OFF",
            "ON" if cfg.json else "OFF",
            cfg.file or "-",
        )
        return root_logger


def init_logging_from_config(node: Optional[Mapping[str, Any]]) -> logging.Logger:
    """Ініціалізує логування з розділу `logging` конфігурації."""
    return init_logging(LoggingConfig.from_mapping(node))


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Повертає дочірній логер з префіксом `LOG_NAME`."""
    return logging.getLogger(LOG_NAME if not suffix else f"{LOG_NAME}.{suffix}")


__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "JsonFormatter",
    "init_logging",
    "init_logging_from_config",
    "get_logger",
]
