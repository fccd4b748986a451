# 💵 homego/infrastructure/currency/currency_manager.py
"""
💵 CurrencyManager: сервіс життєвого циклу валютних курсів вітрини.

🔁 Decimal-first:
    • внутрішньо всі курси зберігаються як Decimal (одиниць валюти за 1 USD);
    • `get_converter()` повертає незмінний знімок-конвертер для розрахунків.

🎯 Призначення:
    • стартує зі статичного знімка курсів, підтягує збережений знімок зі сховища;
    • асинхронно оновлює курси з API, якщо минуло 24 години (TTL);
    • при збої оновлення ніколи не піднімає виняток: свіжий збережений знімок → дані в пам'яті;
    • зберігає обрану валюту відображення та сповіщає UI через `currencyChanged`.

⚙️ Нотатки:
    • у сховищі курси лежать рядками (`"0.92"`), щоб не втрачати точність;
    • запис таблиці курсів серіалізується `asyncio.Lock`, заміна таблиці: одним присвоєнням.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                        # 🌐 HTTP-клієнт для API курсів

# 🔠 Системні імпорти
import asyncio                                                      # 🔁 Локи, фонове оновлення
import json                                                         # 📄 Серіалізація знімка курсів
import math                                                         # ♾️ Перевірка скінченності міток часу
import logging                                                      # 🧾 Логи сервісу
import time                                                         # ⏱️ TTL/мітки часу
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, cast

# 🧩 Внутрішні модулі проєкту
from homego.config.config_service import ConfigService
from homego.domain.currency.entities import (
    BASE_CURRENCY,
    FRESHNESS_TTL_SEC,
    STATIC_CURRENCIES,
    CurrencyInfo,
    RatesSource,
    RatesUpdateResult,
)
from homego.domain.currency.interfaces import Amount
from homego.domain.storage.interfaces import CURRENCY_KEY, RATES_KEY, IKeyValueStore
from homego.errors.custom_errors import StaleDataUsed
from homego.errors.exception_handler_service import ExceptionHandlerService
from homego.infrastructure.currency.currency_converter import CurrencyConverter, normalize_code, to_decimal
from homego.shared.events.event_bus import CURRENCY_CHANGED, EventBus
from homego.shared.metrics.counters import RATE_REFRESHES
from homego.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)


class CurrencyManager:
    """
    🏦 Тримає таблицю курсів, активну валюту і політику свіжості.
    """

    def __init__(
        self,
        config_service: ConfigService,
        storage: IKeyValueStore,
        event_bus: EventBus,
        *,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
        error_handler: Optional[ExceptionHandlerService] = None,
    ) -> None:
        self._config = config_service
        self._storage = storage
        self._bus = event_bus
        self._clock = clock
        self._errors = error_handler or ExceptionHandlerService()

        # ── Параметри з конфігів ────────────────────────────────────────────
        api_url = self._config.get("currency_api.url")
        if not api_url or not isinstance(api_url, str):
            raise ValueError("Config 'currency_api.url' is required and must be str.")
        self._base: str = normalize_code(self._config.get("currency_api.base", BASE_CURRENCY)) or BASE_CURRENCY
        self._api_url: str = f"{api_url.rstrip('/')}/latest/{self._base}"
        self._timeout = float(self._config.get("currency_api.timeout_sec", 5) or 5)
        self._retries = max(1, int(self._config.get("currency_api.retry_attempts", 2) or 1))
        self._retry_delay = max(0.0, float(self._config.get("currency_api.retry_delay_sec", 1) or 0))
        self._ttl_sec = float(self._config.get("currency_api.freshness_ttl_sec", FRESHNESS_TTL_SEC) or FRESHNESS_TTL_SEC)

        # ── Стан ────────────────────────────────────────────────────────────
        self._currencies: Dict[str, CurrencyInfo] = self._build_static_table()
        default_code = normalize_code(self._config.get("currency.default", self._base))
        self._active: str = default_code if default_code in self._currencies else self._base
        self._last_refreshed: Optional[float] = None                 # 🕒 None → живих курсів ще не було
        self._client = client
        self._owns_client = client is None
        self._initialized = False
        self._lock = asyncio.Lock()                                  # 🔐 Серіалізація оновлення курсів
        self._init_lock = asyncio.Lock()
        self._refresh_task: Optional[asyncio.Task[RatesUpdateResult]] = None
        logger.debug("⚙️ CurrencyManager config: url=%s base=%s ttl=%s", self._api_url, self._base, self._ttl_sec)

    # ================================
    # 🚀 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    async def initialize(self, refresh: bool = True) -> None:
        """
        Підтягує активну валюту та збережений знімок курсів (будь-якого віку).

        Якщо знімок застарів або його немає, запускає фонове оновлення й не чекає на нього.
        """
        async with self._init_lock:
            if not self._initialized:
                await self._restore_active_currency()
                persisted = await self._read_persisted()
                if persisted is not None:
                    rates, ts = persisted
                    async with self._lock:
                        self._currencies = self._merge_rates(self._currencies, rates)[0]
                        self._last_refreshed = ts
                    logger.info("📖 Завантажено збережені курси (вік %.0f с)", self._age(ts))
                if self._client is None:
                    self._client = httpx.AsyncClient(timeout=self._timeout)
                self._initialized = True
                logger.info("🔧 CurrencyManager ініціалізовано, активна валюта %s", self._active)

        if refresh and self.needs_update() and self._refresh_task is None:
            logger.info("⏰ Курси застарілі: запускаю фонове оновлення")
            self._refresh_task = asyncio.create_task(self.update_rates())
            self._refresh_task.add_done_callback(self._on_refresh_done)

    async def ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize(refresh=False)

    async def wait_for_refresh(self) -> Optional[RatesUpdateResult]:
        """Чекає на фонове оновлення, якщо воно запущене."""
        task = self._refresh_task
        if task is None:
            return None
        return await task

    async def close(self) -> None:
        task = self._refresh_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт менеджера валют закрито.")

    # ================================
    # 🔓 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    @property
    def base_currency(self) -> str:
        return self._base

    @property
    def last_refreshed(self) -> Optional[float]:
        return self._last_refreshed

    def get_currency(self) -> str:
        return self._active

    def get_converter(self) -> CurrencyConverter:
        """Незмінний знімок поточних курсів."""
        return CurrencyConverter(self._currencies, base=self._base)

    def get_all_rates(self) -> Dict[str, Decimal]:
        return {code: info.rate for code, info in self._currencies.items()}

    def get_available_currencies(self) -> List[CurrencyInfo]:
        return list(self._currencies.values())

    def get_rate(self, code: str) -> Decimal:
        return self.get_converter().get_rate(code)

    def get_symbol(self, code: Optional[str] = None) -> str:
        return self.get_converter().get_symbol(code or self._active)

    def get_name(self, code: Optional[str] = None) -> str:
        return self.get_converter().get_name(code or self._active)

    def convert(self, amount_in_base: Amount, target: Optional[str] = None) -> Decimal:
        return self.get_converter().convert(amount_in_base, target or self._active)

    def convert_between(self, amount: Amount, from_code: str, to_code: str) -> Decimal:
        return self.get_converter().convert_between(amount, from_code, to_code)

    def format(
        self,
        amount_in_base: Amount,
        *,
        currency: Optional[str] = None,
        decimals: int = 2,
        show_code: bool = False,
    ) -> str:
        return self.get_converter().format(
            amount_in_base, currency or self._active, decimals=decimals, show_code=show_code
        )

    def needs_update(self) -> bool:
        """True, якщо живих курсів ще не було або вони старші за TTL."""
        if self._last_refreshed is None:
            return True
        return self._age(self._last_refreshed) >= self._ttl_sec

    async def set_currency(self, code: str) -> bool:
        """
        Обирає валюту відображення.

        Повертає False (стан не змінюється) для невідомого коду; інакше зберігає
        вибір і публікує `currencyChanged`.
        """
        ccy = normalize_code(code)
        if ccy not in self._currencies:
            logger.warning("🚫 Невідома валюта %r: вибір відхилено", code)
            return False
        await self._storage.set(CURRENCY_KEY, ccy)
        self._active = ccy
        symbol = self._currencies[ccy].symbol
        logger.info("💱 Валюту змінено на %s", ccy)
        self._bus.publish(CURRENCY_CHANGED, {"currency": ccy, "symbol": symbol})
        return True

    async def update_rates(self) -> RatesUpdateResult:
        """
        🔄 Оновлює курси з API. Ніколи не піднімає виняток (окрім скасування задачі).

        Успіх: перезаписує лише відстежувані валюти, що є у відповіді, і зберігає знімок.
        Збій: свіжий збережений знімок (молодший за TTL) → інакше дані в пам'яті.
        """
        await self.ensure_initialized()
        try:
            api_rates = await self._fetch_api_rates()
        except asyncio.CancelledError:
            raise
        except Exception as e:                                      # noqa: BLE001
            domain_error = self._errors.report(e, operation="update_rates")
            return await self._fallback(domain_error.message)

        async with self._lock:
            self._currencies, updated = self._merge_rates(self._currencies, api_rates)
            self._last_refreshed = self._clock()
            await self._persist_rates()
        RATE_REFRESHES.labels(outcome=RatesSource.LIVE.value).inc()
        logger.info("🕒 Курси оновлено (%s), last_refreshed=%s", ", ".join(updated) or "без змін", self._last_refreshed)
        return RatesUpdateResult(rates=self.get_all_rates(), source=RatesSource.LIVE, updated_codes=updated)

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    def _build_static_table(self) -> Dict[str, CurrencyInfo]:
        table: Dict[str, CurrencyInfo] = {info.code: info for info in STATIC_CURRENCIES}
        overrides = self._config.get("currency.static_rates", {}) or {}
        if isinstance(overrides, Mapping):
            for raw_code, node in overrides.items():
                code = normalize_code(raw_code)
                if not code or not isinstance(node, Mapping):
                    continue
                try:
                    rate = to_decimal(node.get("rate"))
                except ValueError:
                    logger.warning("⚠️ Пропускаю статичний курс %s: невалідний rate %r", code, node.get("rate"))
                    continue
                previous = table.get(code)
                table[code] = CurrencyInfo(
                    code=code,
                    rate=rate,
                    symbol=str(node.get("symbol") or (previous.symbol if previous else code)),
                    name=str(node.get("name") or (previous.name if previous else code)),
                )
        base_info = table.get(self._base)
        table[self._base] = CurrencyInfo(
            self._base,
            Decimal("1"),
            base_info.symbol if base_info else "$",
            base_info.name if base_info else self._base,
        )
        return table

    def _merge_rates(
        self, current: Mapping[str, CurrencyInfo], incoming: Mapping[str, Any]
    ) -> Tuple[Dict[str, CurrencyInfo], Tuple[str, ...]]:
        """Нова таблиця: відстежувані коди з `incoming` замінено, база лишається 1."""
        merged = dict(current)
        updated: List[str] = []
        normalized = {normalize_code(k): v for k, v in incoming.items()}
        for code, info in current.items():
            if code == self._base or code not in normalized:
                continue
            try:
                rate = to_decimal(normalized[code])
            except ValueError:
                logger.warning("⚠️ Неможливо конвертувати курс %s: %r", code, normalized[code])
                continue
            if rate <= 0:
                logger.warning("⚠️ Ігнорую непозитивний курс %s: %s", code, rate)
                continue
            if rate != info.rate:
                merged[code] = info.with_rate(rate)
                updated.append(code)
        return merged, tuple(updated)

    async def _fetch_api_rates(self) -> Mapping[str, Any]:
        """Багатоспробне отримання `rates` з API; після останньої спроби піднімає помилку."""
        client = self._client
        if client is None:
            raise RuntimeError("HTTP-клієнт не ініціалізовано (initialize() не викликано).")

        last_error: Optional[Exception] = None
        for attempt in range(self._retries):
            try:
                response = await client.get(self._api_url)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.error("❌ Спроба %s/%s: помилка API курсів: %s", attempt + 1, self._retries, e)
                if attempt < self._retries - 1:
                    await asyncio.sleep(self._retry_delay)
                continue
            rates = payload.get("rates") if isinstance(payload, dict) else None
            if not isinstance(rates, dict):
                raise ValueError("Rates API response has no 'rates' object")
            logger.info("✅ Дані з API курсів отримано (%d валют).", len(rates))
            return cast(Mapping[str, Any], rates)
        assert last_error is not None
        raise last_error

    async def _fallback(self, reason: str) -> RatesUpdateResult:
        persisted = await self._read_persisted()
        if persisted is not None and self._age(persisted[1]) < self._ttl_sec:
            rates, ts = persisted
            async with self._lock:
                self._currencies = self._merge_rates(self._currencies, rates)[0]
                self._last_refreshed = ts
            notice = StaleDataUsed(reason=reason, source=RatesSource.PERSISTED.value, age_sec=self._age(ts))
            source = RatesSource.PERSISTED
        else:
            age = self._age(self._last_refreshed) if self._last_refreshed is not None else None
            notice = StaleDataUsed(reason=reason, source=RatesSource.MEMORY.value, age_sec=age)
            source = RatesSource.MEMORY
        RATE_REFRESHES.labels(outcome=source.value).inc()
        logger.warning("⚠️ Використано запасні курси (%s): %s", source.value, reason)
        return RatesUpdateResult(rates=self.get_all_rates(), source=source, notice=notice)

    async def _read_persisted(self) -> Optional[Tuple[Dict[str, Decimal], float]]:
        raw = await self._storage.get(RATES_KEY)
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
            if not isinstance(parsed, dict) or not isinstance(parsed.get("rates"), dict):
                raise ValueError("persisted rates must be an object with 'rates'")
            if normalize_code(parsed.get("base", self._base)) != self._base:
                logger.warning("⚠️ Збережені курси мають іншу базу (%s), ігнорую", parsed.get("base"))
                return None
            ts = float(parsed["timestamp"])
            if not math.isfinite(ts):
                raise ValueError(f"invalid timestamp {parsed['timestamp']!r}")
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("⚠️ Не вдалося прочитати збережені курси: %s", e)
            return None

        rates: Dict[str, Decimal] = {}
        for raw_code, raw_rate in parsed["rates"].items():
            try:
                rate = to_decimal(raw_rate)
            except ValueError:
                logger.warning("⚠️ Пропускаю збережений курс %s: %r", raw_code, raw_rate)
                continue
            if rate > 0:
                rates[normalize_code(raw_code)] = rate
        return rates, ts

    async def _persist_rates(self) -> None:
        payload = {
            "base": self._base,
            "timestamp": self._last_refreshed,
            "rates": {code: str(info.rate) for code, info in self._currencies.items()},
        }
        try:
            await self._storage.set(RATES_KEY, json.dumps(payload))
            logger.debug("💾 Курси збережено у сховище")
        except OSError as e:
            logger.error("❌ Помилка під час збереження курсів: %s", e)

    async def _restore_active_currency(self) -> None:
        saved = normalize_code(await self._storage.get(CURRENCY_KEY))
        if not saved:
            return
        if saved in self._currencies:
            self._active = saved
        else:
            logger.warning("⚠️ Збережена валюта %s не підтримується, лишаю %s", saved, self._active)

    def _age(self, ts: float) -> float:
        return max(0.0, self._clock() - ts)

    def _on_refresh_done(self, task: "asyncio.Task[RatesUpdateResult]") -> None:
        if task.cancelled():
            logger.debug("⏹️ Фонове оновлення курсів скасовано")
            return
        error = task.exception()
        if error is not None:
            logger.error("🔥 Фонове оновлення курсів впало", exc_info=error)


__all__ = ["CurrencyManager"]
