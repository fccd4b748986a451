# 🗄️ homego/domain/storage/interfaces.py
"""
🗄️ Контракт персистентного key-value сховища (аналог localStorage).
"""

from __future__ import annotations

from typing import Optional, Protocol


class IKeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


# 🔑 Ключі, якими користується ядро
TOKEN_KEY = "token"
CURRENCY_KEY = "currency"
RATES_KEY = "currency_rates"


__all__ = ["IKeyValueStore", "TOKEN_KEY", "CURRENCY_KEY", "RATES_KEY"]
