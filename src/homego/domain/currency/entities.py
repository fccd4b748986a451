# 💱 homego/domain/currency/entities.py
"""
💱 Доменні DTO валют.

🔹 `CurrencyInfo`: курс відносно базової валюти, символ і назва.
🔹 `STATIC_CURRENCIES`: статичний знімок курсів (база USD), доступний без мережі.
🔹 `RatesUpdateResult`: підсумок `update_rates()`: таблиця, джерело, позначка про застарілі дані.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, NewType, Optional, Tuple

from homego.errors.custom_errors import StaleDataUsed


CurrencyCode = NewType("CurrencyCode", str)						# 🔤 ISO-4217, верхній регістр

BASE_CURRENCY = CurrencyCode("USD")
FRESHNESS_TTL_SEC = 24 * 60 * 60								# ⏱️ 24 години


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    rate: Decimal													# 💱 Одиниць валюти за 1 одиницю базової
    symbol: str
    name: str

    def with_rate(self, rate: Decimal) -> "CurrencyInfo":
        return CurrencyInfo(code=self.code, rate=rate, symbol=self.symbol, name=self.name)


STATIC_CURRENCIES: Tuple[CurrencyInfo, ...] = (
    CurrencyInfo("USD", Decimal("1"), "$", "US Dollar"),
    CurrencyInfo("INR", Decimal("83.12"), "₹", "Indian Rupee"),
    CurrencyInfo("EUR", Decimal("0.92"), "€", "Euro"),
    CurrencyInfo("GBP", Decimal("0.79"), "£", "British Pound"),
)


class RatesSource(str, Enum):
    LIVE = "live"                  # 🌐 Щойно отримано з API
    PERSISTED = "persisted"        # 💾 Свіжий знімок зі сховища
    MEMORY = "memory"              # 🧠 Те, що вже в пам'яті (статичне або застаріле)


@dataclass(frozen=True)
class RatesUpdateResult:
    rates: Dict[str, Decimal]
    source: RatesSource
    updated_codes: Tuple[str, ...] = ()
    notice: Optional[StaleDataUsed] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.source is RatesSource.LIVE

    @property
    def stale_data_used(self) -> bool:
        return self.notice is not None


__all__ = [
    "BASE_CURRENCY",
    "FRESHNESS_TTL_SEC",
    "CurrencyCode",
    "CurrencyInfo",
    "RatesSource",
    "RatesUpdateResult",
    "STATIC_CURRENCIES",
]
