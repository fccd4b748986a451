# 👤 homego/domain/auth/entities.py
"""
👤 Доменні сутності автентифікації: ролі, користувач, знімок сесії, події переходів.

🔹 `Session`: незмінний знімок; менеджер сесії замінює його одним присвоєнням.
🔹 `User.from_payload()` толерує легасі-ключі сервера (`_id`, `userType`, `name`).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


# ================================
# 🎭 РОЛІ
# ================================
class UserRole(str, Enum):
    """🎭 Роль визначає доступні маршрути та дашборди."""

    CUSTOMER = "customer"
    SELLER = "seller"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any, default: Optional["UserRole"] = None) -> "UserRole":
        """Невідома або порожня роль → `default` (за замовчуванням customer)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return default or cls.CUSTOMER


class AuthState(str, Enum):
    UNKNOWN = "unknown"                  # 🕓 Старт: токен є, але не перевірений
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


# ================================
# 👤 КОРИСТУВАЧ
# ================================
@dataclass(frozen=True)
class User:
    id: str
    email: str
    full_name: str
    role: UserRole = UserRole.CUSTOMER

    @classmethod
    def from_payload(cls, payload: Any) -> "User":
        """
        Будує користувача з JSON-відповіді сервера.

        Raises:
            ValueError: payload не є об'єктом або не містить email.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"User payload must be an object, got {type(payload).__name__}")
        email = str(payload.get("email") or "").strip()
        if not email:
            raise ValueError("User payload has no email")
        user_id = payload.get("id", payload.get("_id"))
        full_name = payload.get("fullName") or payload.get("full_name") or payload.get("name") or ""
        role = payload.get("role") or payload.get("userType")
        return cls(
            id="" if user_id is None else str(user_id),
            email=email,
            full_name=str(full_name),
            role=UserRole.parse(role),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or "User"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "fullName": self.full_name, "role": self.role.value}


@dataclass(frozen=True)
class AuthResult:
    """🎟️ Успішна відповідь login/register: токен + користувач."""

    token: str
    user: User


# ================================
# 🧾 СЕСІЯ
# ================================
@dataclass(frozen=True)
class Session:
    token: Optional[str] = None
    user: Optional[User] = None
    state: AuthState = AuthState.UNAUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        # user is None ⇒ завжди False, незалежно від state
        return bool(self.token) and self.user is not None and self.state is AuthState.AUTHENTICATED

    @classmethod
    def unverified(cls, token: str) -> "Session":
        return cls(token=token, user=None, state=AuthState.UNKNOWN)

    @classmethod
    def signed_in(cls, token: str, user: User) -> "Session":
        return cls(token=token, user=user, state=AuthState.AUTHENTICATED)

    @classmethod
    def signed_out(cls) -> "Session":
        return cls()


@dataclass(frozen=True)
class AuthStateChange:
    """📣 Подія для UI: що сталося, хто тепер користувач і чи є сесія."""

    event: AuthEvent
    user: Optional[User]
    is_authenticated: bool

    def to_payload(self) -> Dict[str, Any]:
        return {
            "event": self.event.value,
            "user": self.user.to_dict() if self.user else None,
            "isAuthenticated": self.is_authenticated,
        }


__all__ = ["UserRole", "AuthState", "AuthEvent", "User", "AuthResult", "Session", "AuthStateChange"]
