# 💱 homego/domain/currency/__init__.py
"""
💱 Пакет `domain.currency` публікує DTO та контракти для валютних операцій.

🔹 `entities.py`: `CurrencyInfo`, статичний знімок курсів, результат оновлення.
🔹 `interfaces.py`: `IMoneyConverter` та `ICurrencyRatesProvider`.
"""

from .entities import (
    BASE_CURRENCY,
    FRESHNESS_TTL_SEC,
    STATIC_CURRENCIES,
    CurrencyCode,
    CurrencyInfo,
    RatesSource,
    RatesUpdateResult,
)
from .interfaces import Amount, ICurrencyRatesProvider, IMoneyConverter

__all__ = [
    "Amount",
    "BASE_CURRENCY",
    "FRESHNESS_TTL_SEC",
    "STATIC_CURRENCIES",
    "CurrencyCode",
    "CurrencyInfo",
    "ICurrencyRatesProvider",
    "IMoneyConverter",
    "RatesSource",
    "RatesUpdateResult",
]
