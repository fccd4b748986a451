# 🛡️ homego/errors/exception_handler_service.py
"""
🛡️ Центральний конвертер винятків.

🔹 Пропускає виняток через стратегії й повертає доменний `AppError`.
🔹 Невідомі винятки загортаються в базовий `AppError` (оригінал лишається в `__cause__`).
🔹 `report()` логує помилку з `to_log_extra()` і ніколи не піднімає.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Iterable, List, Optional

# 🧩 Внутрішні модулі проєкту
from homego.shared.utils.logger import LOG_NAME
from .custom_errors import AppError, UserVisibleError
from .strategies import HttpxErrorStrategy, IErrorHandlingStrategy


logger = logging.getLogger(LOG_NAME)


class ExceptionHandlerService:
    """🧠 Перетворює сторонні винятки на `AppError` за набором стратегій."""

    def __init__(self, strategies: Optional[Iterable[IErrorHandlingStrategy]] = None) -> None:
        self._strategies: List[IErrorHandlingStrategy] = list(strategies or [HttpxErrorStrategy()])
        logger.debug("🛡️ ExceptionHandlerService init", extra={"strategies": len(self._strategies)})

    def convert(self, error: Exception) -> AppError:
        """🔄 Повертає доменну помилку для будь-якого винятку."""
        if isinstance(error, AppError):
            return error
        for strategy in self._strategies:
            converted = strategy.handle(error)
            if converted is not None:
                return converted
        wrapped = AppError("Unexpected error", details=f"{type(error).__name__}: {error}")
        wrapped.__cause__ = error
        return wrapped

    def report(self, error: Exception, *, operation: str) -> AppError:
        """🧾 Логує помилку фонової операції та повертає її доменну форму."""
        domain_error = self.convert(error)
        extra = dict(domain_error.to_log_extra())
        extra["operation"] = operation
        if isinstance(domain_error, UserVisibleError):
            logger.warning("⚠️ %s failed: %s", operation, domain_error.message, extra=extra)
        else:
            logger.error("🔥 %s failed unexpectedly", operation, exc_info=error, extra=extra)
        return domain_error


__all__ = ["ExceptionHandlerService"]
