# 🔐 homego/infrastructure/auth/__init__.py
"""
🔐 Інфраструктура автентифікації.

🔹 `AuthApiClient`: HTTP-шлюз до бекенду.
🔹 `AuthStateBroadcaster`: події `authStateChanged`.
🔹 `SessionManager`: стан сесії, ролі, guard-и.
"""

from .auth_api_client import AuthApiClient
from .auth_broadcaster import AuthStateBroadcaster
from .session_manager import SessionManager

__all__ = ["AuthApiClient", "AuthStateBroadcaster", "SessionManager"]
