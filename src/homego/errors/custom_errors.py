# 🚨 homego/errors/custom_errors.py
"""
🚨 Ієрархія доменних винятків ядра HomeGo.

🔹 `AppError`: корінь; `UserVisibleError`: помилки, текст яких UI може показати як є.
🔹 Кожен виняток вміє віддати `to_log_extra()` для структурованого логування.
🔹 `StaleDataUsed`: не виняток, а інформаційна позначка про використання запасних даних.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging														# 🧾 Логування створення помилок
from dataclasses import dataclass									# 🧱 Інформаційні DTO
from typing import Dict, Optional, Sequence							# 📐 Типізація


logger = logging.getLogger("homego.errors")


# ================================
# ⚠️ КОДИ ПОМИЛОК
# ================================
class ErrorCode:
    """⚠️ Стабільні коди для логів і метрик."""

    INVALID_CREDENTIALS = "invalid_credentials"
    USER_EXISTS = "user_already_exists"
    NETWORK = "network_error"
    AUTH_REQUIRED = "auth_required"
    PERMISSION_DENIED = "permission_denied"
    UNKNOWN_CURRENCY = "unknown_currency"
    UNKNOWN = "unknown_error"


# ================================
# 🧠 БАЗОВІ ВИНЯТКИ
# ================================
class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    code: str = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message										# 💬 Людський текст
        self.details = details										# 🔍 Технічні подробиці

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Словник для logger.extra."""
        extra: Dict[str, object] = {"error_code": self.code}
        if self.details:
            extra["details"] = self.details
        return extra


class UserVisibleError(AppError):
    """👀 Помилка, яку можна показати користувачу без перекладу."""


# ================================
# 🔐 АВТЕНТИФІКАЦІЯ
# ================================
class InvalidCredentialsError(UserVisibleError):
    """🔐 Сервер відхилив облікові дані (або запит на реєстрацію)."""

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(
        self,
        message: str = "Invalid credentials",
        *,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class UserAlreadyExistsError(UserVisibleError):
    """👥 Користувач із таким email уже зареєстрований."""

    code = ErrorCode.USER_EXISTS

    def __init__(self, email: str, *, details: Optional[str] = None) -> None:
        super().__init__("User already exists", details=details)
        self.email = email


class NetworkRequestError(UserVisibleError):
    """🌐 Транспортна помилка або таймаут."""

    code = ErrorCode.NETWORK

    def __init__(
        self,
        message: str = "Network request failed",
        *,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code
        logger.debug("🌐 NetworkRequestError created", extra={"url": url, "status_code": status_code})

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.url:
            extra["url"] = self.url
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class AuthRequiredError(UserVisibleError):
    """🚪 Потрібна сесія; UI має перейти на `redirect_to`."""

    code = ErrorCode.AUTH_REQUIRED

    def __init__(self, redirect_to: str) -> None:
        super().__init__("Authentication required")
        self.redirect_to = redirect_to

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["redirect_to"] = self.redirect_to
        return extra


class PermissionDeniedError(UserVisibleError):
    """⛔ Роль поточного користувача не дозволяє дію."""

    code = ErrorCode.PERMISSION_DENIED

    def __init__(self, role: str, required: Sequence[str]) -> None:
        super().__init__(f"{' or '.join(required).capitalize()} access required")
        self.role = role
        self.required = tuple(required)

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra.update({"role": self.role, "required": list(self.required)})
        return extra


# ================================
# 💱 ВАЛЮТИ
# ================================
class UnknownCurrencyError(AppError, KeyError):
    """💱 Курс для валюти відсутній або нульовий."""

    code = ErrorCode.UNKNOWN_CURRENCY

    def __init__(self, currency: str) -> None:
        AppError.__init__(self, f"Unknown currency: {currency}")
        self.currency = currency

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class StaleDataUsed:
    """ℹ️ Позначка: оновлення курсів не вдалося, використано запасні дані."""

    reason: str														# 🔍 Чому живі курси недоступні
    source: str														# 🗂️ persisted | memory
    age_sec: Optional[float] = None									# ⏱️ Вік даних (None: ніколи не оновлювались)


__all__ = [
    "ErrorCode",
    "AppError",
    "UserVisibleError",
    "InvalidCredentialsError",
    "UserAlreadyExistsError",
    "NetworkRequestError",
    "AuthRequiredError",
    "PermissionDeniedError",
    "UnknownCurrencyError",
    "StaleDataUsed",
]
