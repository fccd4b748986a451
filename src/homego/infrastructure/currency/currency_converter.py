# 💱 homego/infrastructure/currency/currency_converter.py
"""
💱 Stateless-конвертер поверх «знімка» таблиці курсів у Decimal.

🔹 Реалізує `IMoneyConverter`: курс, конвертація з базової, крос-конвертація, форматування.
🔹 Усі курси відносні до базової валюти (її курс завжди рівно 1).
🔹 Форматування округлює за ROUND_HALF_UP до заданої кількості знаків і додає роздільники тисяч.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування операцій
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation			# 💰 Точна арифметика та округлення
from types import MappingProxyType										# 🧊 Незмінний знімок
from typing import Dict, Iterable, List, Mapping, Union

# 🧩 Внутрішні модулі проєкту
from homego.domain.currency.entities import BASE_CURRENCY, CurrencyInfo
from homego.domain.currency.interfaces import Amount
from homego.errors.custom_errors import UnknownCurrencyError
from homego.shared.utils.logger import LOG_NAME


logger = logging.getLogger(LOG_NAME)


# ================================
# 🧰 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def to_decimal(value: Union[Amount, None]) -> Decimal:
    """
    🧮 Безпечно приводить значення до Decimal через рядкове представлення.

    Приймає лише скінченні числа: NaN/Infinity, bool, None і рядки з комами
    (`"1,000"` неоднозначний) → ValueError.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Невалідне числове значення: {value!r}")
    if isinstance(value, Decimal):
        normalized = value
    else:
        try:
            normalized = Decimal(str(value).strip())					# 🧼 Позбавляємося артефактів float
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Невалідне числове значення: {value!r}") from exc
    if not normalized.is_finite():
        raise ValueError(f"Нескінченне або NaN значення: {value!r}")
    return normalized


def normalize_code(code: object) -> str:
    return str(code or "").strip().upper()


# ================================
# 💱 КОНВЕРТЕР
# ================================
class CurrencyConverter:
    """
    💱 Синхронний конвертер на базі знімка курсів.

    - Знімок копіюється при створенні; зміни в менеджері на нього не впливають.
    - Невідома валюта в `get_rate/convert/format` → курс базової (1); у `convert_between` → помилка.
    """

    def __init__(self, currencies: Union[Mapping[str, CurrencyInfo], Iterable[CurrencyInfo]], *, base: str = BASE_CURRENCY) -> None:
        items = currencies.values() if isinstance(currencies, Mapping) else currencies
        table: Dict[str, CurrencyInfo] = {}
        for info in items:
            code = normalize_code(info.code)
            if code:
                table[code] = info
        self._base = normalize_code(base)
        base_info = table.get(self._base)
        if base_info is None or base_info.rate != 1:					# 🟡 База завжди присутня з курсом 1
            table[self._base] = CurrencyInfo(
                self._base,
                Decimal("1"),
                base_info.symbol if base_info else "$",
                base_info.name if base_info else self._base,
            )
        self._table: Mapping[str, CurrencyInfo] = MappingProxyType(table)
        logger.debug("💱 CurrencyConverter готовий (валют: %d, база=%s)", len(table), self._base)

    @property
    def base(self) -> str:
        return self._base

    @property
    def currencies(self) -> Mapping[str, CurrencyInfo]:
        return self._table

    def __contains__(self, code: object) -> bool:
        return normalize_code(code) in self._table

    def list_currencies(self) -> List[CurrencyInfo]:
        return list(self._table.values())

    # ================================
    # 🔍 ДОВІДКОВІ ДАНІ
    # ================================
    def get_rate(self, code: str) -> Decimal:
        info = self._table.get(normalize_code(code))
        return info.rate if info is not None else Decimal("1")

    def get_symbol(self, code: str) -> str:
        info = self._table.get(normalize_code(code)) or self._table[self._base]
        return info.symbol

    def get_name(self, code: str) -> str:
        info = self._table.get(normalize_code(code)) or self._table[self._base]
        return info.name

    # ================================
    # 🧮 КОНВЕРТАЦІЯ
    # ================================
    def convert(self, amount_in_base: Amount, target: str) -> Decimal:
        """💵 Сума в базовій валюті → цільова валюта (без округлення)."""
        return to_decimal(amount_in_base) * self.get_rate(target)

    def convert_between(self, amount: Amount, from_code: str, to_code: str) -> Decimal:
        """
        🔁 Крос-конвертація через базову валюту: amount / rate(from) * rate(to).

        Raises:
            UnknownCurrencyError: курс відсутній або нульовий.
        """
        value = to_decimal(amount)
        src, dst = normalize_code(from_code), normalize_code(to_code)
        src_rate = self._require_rate(src)
        dst_rate = self._require_rate(dst)
        if src == dst:
            return value
        result = value / src_rate * dst_rate
        logger.debug("🔁 convert_between: %s %s → %s %s", value, src, result, dst)
        return result

    def format(self, amount_in_base: Amount, currency: str, *, decimals: int = 2, show_code: bool = False) -> str:
        """
        🏷️ Конвертує і форматує: символ + сума з роздільниками тисяч (+ код, якщо треба).

        Приклад (статичний знімок): format(100000, "USD") → "$100,000.00",
        format(10, "EUR", show_code=True) → "€9.20 EUR".
        """
        if decimals < 0:
            raise ValueError("decimals must be >= 0")
        code = normalize_code(currency)
        converted = self.convert(amount_in_base, code)
        quantum = Decimal(1).scaleb(-decimals)
        rounded = converted.quantize(quantum, rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        text = f"{sign}{self.get_symbol(code)}{abs(rounded):,f}"
        return f"{text} {code}" if show_code else text

    def _require_rate(self, code: str) -> Decimal:
        info = self._table.get(code)
        if info is None or info.rate == 0:
            logger.error("❌ Відсутній або нульовий курс для %s", code)
            raise UnknownCurrencyError(code)
        return info.rate


__all__ = ["CurrencyConverter", "normalize_code", "to_decimal"]
