# 💱 homego/infrastructure/currency/__init__.py
"""
💱 Інфраструктурні сервіси для роботи з валютами.

🔹 `CurrencyConverter`: незмінний знімок курсів: конвертація та форматування.
🔹 `CurrencyManager`: курси, активна валюта, оновлення з API за TTL.
"""

from __future__ import annotations

from .currency_converter import CurrencyConverter
from .currency_manager import CurrencyManager

__all__ = ["CurrencyConverter", "CurrencyManager"]
