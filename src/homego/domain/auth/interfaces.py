# 🧩 homego/domain/auth/interfaces.py
"""
🧩 Контракти автентифікації.

🔹 `IAuthGateway`: віддалений auth-сервіс (HTTP-реалізація в `infrastructure.auth`).
🔹 Реалізації піднімають лише доменні помилки з `homego.errors`.
"""

from __future__ import annotations

from typing import Protocol

from .entities import AuthResult, User, UserRole


class IAuthGateway(Protocol):
    async def login(self, email: str, password: str) -> AuthResult:
        """Raises InvalidCredentialsError | NetworkRequestError."""
        ...

    async def register(self, email: str, password: str, full_name: str, role: UserRole) -> AuthResult:
        """Raises UserAlreadyExistsError | InvalidCredentialsError | NetworkRequestError."""
        ...

    async def fetch_profile(self, token: str) -> User:
        """Whoami із bearer-токеном. Raises InvalidCredentialsError | NetworkRequestError."""
        ...

    async def sign_out(self, token: str) -> None: ...

    async def close(self) -> None: ...


__all__ = ["IAuthGateway"]
