# 📜 homego/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у доменні `AppError`.

🔹 Нові стратегії додаються без змін у `ExceptionHandlerService`.
🔹 `HttpxErrorStrategy`: таймаути, збої з'єднання та неочікувані статуси httpx.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)

# 🔠 Системні імпорти
import logging
from typing import Optional, Protocol

# 🧩 Внутрішні модулі проєкту
from .custom_errors import AppError, NetworkRequestError


logger = logging.getLogger("homego.errors.strategies")


class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт: повертає `AppError`, якщо виняток розпізнано, або None."""

    def handle(self, error: Exception) -> Optional[AppError]: ...


def _request_url(error: httpx.HTTPError) -> str:
    try:
        return str(error.request.url)
    except RuntimeError:												# 🚫 request не прив'язано
        return "N/A"


class HttpxErrorStrategy:
    """🌐 Перетворює httpx-помилки на `NetworkRequestError`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if isinstance(error, httpx.TimeoutException):					# ⏱️ Будь-який таймаут
            url = _request_url(error)
            logger.debug("⏱️ httpx timeout", extra={"url": url})
            return NetworkRequestError("Request timed out", url=url, details=str(error))

        if isinstance(error, httpx.HTTPStatusError):
            url = _request_url(error)
            status = error.response.status_code
            logger.debug("🔢 httpx status error", extra={"url": url, "status": status})
            return NetworkRequestError(
                f"Unexpected HTTP status {status}",
                url=url,
                status_code=status,
                details=str(error),
            )

        if isinstance(error, httpx.TransportError):						# 🌐 Connect/Read/Write/Proxy
            url = _request_url(error)
            logger.debug("🌐 httpx transport error", extra={"url": url})
            return NetworkRequestError("Connection failed", url=url, details=str(error))

        return None


__all__ = ["IErrorHandlingStrategy", "HttpxErrorStrategy"]
