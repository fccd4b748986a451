# 🔐 homego/domain/auth/__init__.py
"""
🔐 Пакет `domain.auth` публікує сутності сесії та контракт auth-шлюзу.
"""

from .entities import AuthEvent, AuthResult, AuthState, AuthStateChange, Session, User, UserRole
from .interfaces import IAuthGateway

__all__ = [
    "AuthEvent",
    "AuthResult",
    "AuthState",
    "AuthStateChange",
    "IAuthGateway",
    "Session",
    "User",
    "UserRole",
]
