# 🚨 homego/errors/__init__.py
"""
🚨 Помилки ядра: ієрархія винятків, стратегії конвертації та сервіс обробки.
"""

from .custom_errors import (
    AppError,
    AuthRequiredError,
    ErrorCode,
    InvalidCredentialsError,
    NetworkRequestError,
    PermissionDeniedError,
    StaleDataUsed,
    UnknownCurrencyError,
    UserAlreadyExistsError,
    UserVisibleError,
)
from .exception_handler_service import ExceptionHandlerService
from .strategies import HttpxErrorStrategy, IErrorHandlingStrategy

__all__ = [
    "AppError",
    "AuthRequiredError",
    "ErrorCode",
    "ExceptionHandlerService",
    "HttpxErrorStrategy",
    "IErrorHandlingStrategy",
    "InvalidCredentialsError",
    "NetworkRequestError",
    "PermissionDeniedError",
    "StaleDataUsed",
    "UnknownCurrencyError",
    "UserAlreadyExistsError",
    "UserVisibleError",
]
