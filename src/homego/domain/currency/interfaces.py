# 🧩 homego/domain/currency/interfaces.py
"""
🧩 Контракти валютної підсистеми.

🔹 `IMoneyConverter`: чиста конвертація/форматування поверх знімка курсів.
🔹 `ICurrencyRatesProvider`: асинхронний провайдер з життєвим циклом і кешем курсів.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Protocol, Union

from .entities import CurrencyInfo, RatesUpdateResult

Amount = Union[Decimal, int, float, str]


class IMoneyConverter(Protocol):
    def get_rate(self, code: str) -> Decimal: ...

    def convert(self, amount_in_base: Amount, target: str) -> Decimal: ...

    def convert_between(self, amount: Amount, from_code: str, to_code: str) -> Decimal: ...

    def format(self, amount_in_base: Amount, currency: str, *, decimals: int = 2, show_code: bool = False) -> str: ...


class ICurrencyRatesProvider(Protocol):
    async def initialize(self, refresh: bool = True) -> None: ...

    async def close(self) -> None: ...

    async def update_rates(self) -> RatesUpdateResult: ...

    async def set_currency(self, code: str) -> bool: ...

    def needs_update(self) -> bool: ...

    def get_converter(self) -> IMoneyConverter: ...

    def get_all_rates(self) -> Dict[str, Decimal]: ...

    def get_available_currencies(self) -> List[CurrencyInfo]: ...

    @property
    def last_refreshed(self) -> Optional[float]: ...


__all__ = ["Amount", "IMoneyConverter", "ICurrencyRatesProvider"]
