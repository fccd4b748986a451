# 📦 homego/config/setup/container.py
"""
📦 Контейнер залежностей ядра HomeGo.

🔹 Створює сервіси в правильному порядку DI
🔹 Ділить одну шину подій і одне сховище між сесією та валютами
🔹 Дає єдину точку `initialize()` / `close()` для хоста (UI, CLI, тести)
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from pathlib import Path
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from homego.config.config_service import ConfigService
from homego.domain.storage.interfaces import IKeyValueStore
from homego.errors.exception_handler_service import ExceptionHandlerService
from homego.errors.strategies import HttpxErrorStrategy
from homego.infrastructure.auth.auth_api_client import AuthApiClient
from homego.infrastructure.auth.auth_broadcaster import AuthStateBroadcaster
from homego.infrastructure.auth.session_manager import SessionManager
from homego.infrastructure.currency.currency_manager import CurrencyManager
from homego.infrastructure.storage.key_value_store import JsonFileKeyValueStore
from homego.shared.events.event_bus import EventBus
from homego.shared.metrics.exporters import maybe_start_prometheus
from homego.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(LOG_NAME)

_DEFAULT_STORAGE_FILE = "data/local_storage.json"


def bootstrap_logging(config: Optional[ConfigService] = None) -> logging.Logger:
    """
    Зчитує конфіг логування і запускає кореневий логер.
    """
    cfg = config or ConfigService()
    node = cfg.get("logging", {}) or {}
    return init_logging_from_config(node)


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class Container:
    """
    Координує складання сесії, валют та їхньої спільної інфраструктури.
    """

    def __init__(self, config: ConfigService, *, storage: Optional[IKeyValueStore] = None):
        self.config = config
        logger.info("🚀 Стартуємо побудову контейнера залежностей")
        self._bootstrap_metrics_if_enabled()
        self._setup_infrastructure(storage)
        self._setup_auth()
        self._setup_currency()
        logger.info("✅ Контейнер ініціалізовано успішно")

    # ================================
    # 📈 МЕТРИКИ
    # ================================
    def _bootstrap_metrics_if_enabled(self) -> None:
        node = self.config.get("metrics", {}) or {}
        self.metrics_started = maybe_start_prometheus(node)

    # ================================
    # 🧰 СПІЛЬНА ІНФРАСТРУКТУРА
    # ================================
    def _setup_infrastructure(self, storage: Optional[IKeyValueStore]) -> None:
        self.exception_handler_service = ExceptionHandlerService(strategies=[HttpxErrorStrategy()])
        self.event_bus = EventBus()
        if storage is None:
            path = self.config.get("storage.file", _DEFAULT_STORAGE_FILE) or _DEFAULT_STORAGE_FILE
            storage = JsonFileKeyValueStore(Path(path))
        self.storage: IKeyValueStore = storage

    # ================================
    # 🔐 СЕСІЯ
    # ================================
    def _setup_auth(self) -> None:
        self.auth_api_client = AuthApiClient(self.config, error_handler=self.exception_handler_service)
        self.auth_broadcaster = AuthStateBroadcaster(self.event_bus)
        self.session_manager = SessionManager(
            self.auth_api_client,
            self.storage,
            self.auth_broadcaster,
            login_redirect=str(self.config.get("auth_api.login_redirect", "login.html") or "login.html"),
            remote_sign_out=bool(self.config.get("auth_api.remote_sign_out", False)),
            error_handler=self.exception_handler_service,
        )

    # ================================
    # 💱 ВАЛЮТИ
    # ================================
    def _setup_currency(self) -> None:
        self.currency_manager = CurrencyManager(
            self.config,
            self.storage,
            self.event_bus,
            error_handler=self.exception_handler_service,
        )

    # ================================
    # 🔄 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    async def initialize(self, *, refresh_rates: bool = True) -> None:
        """Відновлює сесію та валюти зі сховища; перевірки в мережі йдуть у фоні."""
        await self.currency_manager.initialize(refresh=refresh_rates)
        await self.session_manager.initialize()

    async def close(self) -> None:
        await self.session_manager.close()
        await self.currency_manager.close()
        logger.info("🛑 Контейнер закрито")


__all__ = ["Container", "bootstrap_logging"]
