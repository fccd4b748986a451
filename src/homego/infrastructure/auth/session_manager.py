# 🔐 homego/infrastructure/auth/session_manager.py
"""
🔐 SessionManager: єдине джерело правди про те, хто увійшов, і яким токеном.

🎯 Призначення:
    • login / register / logout / check_auth проти віддаленого auth-сервісу;
    • токен зберігається у key-value сховищі, користувач: лише в пам'яті
      (після рестарту перезапитується за збереженим токеном);
    • рольові запити та guard-и (`require_auth`, `require_role`) для UI-шару.

⚙️ Конкурентність:
    • виклики можуть перекриватися (check_auth при старті проти login користувача);
    • кожен завершений виклик робить запис у сховище та заміну знімка `Session`
      під одним локом: виграє той, хто завершився останнім, «рваного» стану немає;
    • скасований виклик нічого не записує.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from typing import Dict, Iterable, Optional, Union

# 🧩 Внутрішні модулі проєкту
from homego.domain.auth.entities import AuthEvent, AuthResult, AuthState, Session, User, UserRole
from homego.domain.auth.interfaces import IAuthGateway
from homego.domain.storage.interfaces import TOKEN_KEY, IKeyValueStore
from homego.errors.custom_errors import AppError, AuthRequiredError, PermissionDeniedError
from homego.errors.exception_handler_service import ExceptionHandlerService
from homego.infrastructure.auth.auth_broadcaster import AuthStateBroadcaster
from homego.shared.metrics.counters import AUTH_FAILURES
from homego.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

RoleLike = Union[UserRole, str]


def _strict_role(role: RoleLike) -> UserRole:
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(str(role).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown role: {role!r}") from None


class SessionManager:
    """
    🧾 Менеджер сесії; створюється явно й передається UI-шару.

    Життєвий цикл: create → `initialize()` → use → `close()`.
    """

    def __init__(
        self,
        gateway: IAuthGateway,
        storage: IKeyValueStore,
        broadcaster: AuthStateBroadcaster,
        *,
        login_redirect: str = "login.html",
        remote_sign_out: bool = False,
        error_handler: Optional[ExceptionHandlerService] = None,
    ) -> None:
        self._gateway = gateway
        self._storage = storage
        self._broadcaster = broadcaster
        self._login_redirect = login_redirect
        self._remote_sign_out = remote_sign_out
        self._errors = error_handler or ExceptionHandlerService()
        self._session = Session(state=AuthState.UNKNOWN)
        self._write_lock = asyncio.Lock()                       # 🔐 Запис у сховище + заміна знімка
        self._init_task: Optional[asyncio.Task[bool]] = None
        self._initialized = False

    # ================================
    # 🚀 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    async def initialize(self, *, wait: bool = False) -> None:
        """
        Читає збережений токен. Якщо він є, запускає перевірку на сервері
        (`check_auth`) як ініціалізацію «в польоті»; `wait=True` чекає на неї.
        """
        if not self._initialized:
            self._initialized = True
            token = await self._storage.get(TOKEN_KEY)
            if token:
                self._session = Session.unverified(token)
                self._init_task = asyncio.create_task(self.check_auth())
                logger.info("🕓 Знайдено збережений токен, перевіряю сесію…")
            else:
                self._session = Session.signed_out()
                logger.info("👤 Збереженого токена немає: гість")
        if wait:
            await self.wait_until_ready()

    async def wait_until_ready(self) -> None:
        """Чекає, доки стартова перевірка сесії (якщо є) завершиться."""
        task = self._init_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def close(self) -> None:
        task = self._init_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        await self._gateway.close()

    # ================================
    # 🔍 СТАН (чисті запити)
    # ================================
    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> AuthState:
        return self._session.state

    @property
    def user(self) -> Optional[User]:
        return self._session.user

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def email(self) -> Optional[str]:
        user = self._session.user
        return user.email if user else None

    @property
    def display_name(self) -> str:
        user = self._session.user
        return user.display_name if user else "User"

    @property
    def role(self) -> Optional[UserRole]:
        user = self._session.user
        return user.role if user else None

    def has_role(self, role: RoleLike) -> bool:
        user = self._session.user
        if user is None:
            return False
        try:
            return user.role is _strict_role(role)
        except ValueError:
            return False

    def is_customer(self) -> bool:
        return self.has_role(UserRole.CUSTOMER)

    def is_seller(self) -> bool:
        return self.has_role(UserRole.SELLER)

    def is_admin(self) -> bool:
        return self.has_role(UserRole.ADMIN)

    def auth_headers(self) -> Dict[str, str]:
        """Заголовки для авторизованих API-викликів; порожні без сесії."""
        session = self._session
        if not session.is_authenticated:
            return {}
        return {"Authorization": f"Bearer {session.token}", "Content-Type": "application/json"}

    # ================================
    # 🔑 ОПЕРАЦІЇ
    # ================================
    async def login(self, email: str, password: str) -> User:
        """
        Вхід за email/паролем.

        Raises:
            InvalidCredentialsError: сервер відхилив дані (попередня сесія не змінюється).
            NetworkRequestError: транспортний збій; автоматичних повторів немає.
        """
        try:
            result = await self._gateway.login(email, password)
        except AppError as e:
            AUTH_FAILURES.labels(operation="login", reason=e.code).inc()
            raise
        await self._sign_in(result)
        return result.user

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role: RoleLike = UserRole.CUSTOMER,
    ) -> User:
        """
        Реєстрація; той самий контракт, що й `login`.

        Raises:
            ValueError: невідома роль.
            UserAlreadyExistsError: email уже зайнятий.
            InvalidCredentialsError / NetworkRequestError: як у `login`.
        """
        parsed_role = _strict_role(role)
        try:
            result = await self._gateway.register(email, password, full_name, parsed_role)
        except AppError as e:
            AUTH_FAILURES.labels(operation="register", reason=e.code).inc()
            raise
        await self._sign_in(result)
        return result.user

    async def check_auth(self) -> bool:
        """
        Перевіряє токен на сервері. Ніколи не піднімає (окрім скасування):
        будь-яка невдача → `logout()` і False. Без токена мережі не чіпає.
        """
        token = self._session.token
        if not token:
            if self._session.state is AuthState.UNKNOWN:
                self._session = Session.signed_out()
            return False

        try:
            user = await self._gateway.fetch_profile(token)
        except asyncio.CancelledError:
            raise
        except Exception as e:                                  # noqa: BLE001
            domain_error = self._errors.report(e, operation="check_auth")
            AUTH_FAILURES.labels(operation="check_auth", reason=domain_error.code).inc()
            await self.logout()
            return False

        await self._sign_in(AuthResult(token=token, user=user))
        return True

    async def logout(self) -> None:
        """Завжди успішний: очищає токен і користувача, видаляє токен зі сховища, шле SIGNED_OUT."""
        token = self._session.token
        if self._remote_sign_out and token:
            try:
                await self._gateway.sign_out(token)
            except asyncio.CancelledError:
                raise
            except Exception as e:                              # noqa: BLE001
                logger.warning("⚠️ Віддалений sign-out не вдався, ігнорую: %s", e)

        async with self._write_lock:
            try:
                await self._storage.remove(TOKEN_KEY)
            except OSError as e:
                logger.error("❌ Не вдалося видалити токен зі сховища: %s", e)
            self._session = Session.signed_out()
        self._broadcaster.emit(AuthEvent.SIGNED_OUT, None, False)

    async def require_auth(self) -> User:
        """
        Guard для дій, що потребують сесії.

        Raises:
            AuthRequiredError: сесії немає; `redirect_to`: сторінка входу.
        """
        if not self._initialized:
            await self.initialize()
        await self.wait_until_ready()
        session = self._session
        if session.is_authenticated and session.user is not None:
            return session.user
        logger.info("🚪 Потрібна автентифікація → %s", self._login_redirect)
        raise AuthRequiredError(self._login_redirect)

    async def require_role(self, *roles: RoleLike) -> User:
        """
        Guard із перевіркою ролі (напр. `require_role("seller", "admin")`).

        Raises:
            AuthRequiredError: сесії немає.
            PermissionDeniedError: роль не входить до `roles`.
        """
        allowed = self._parse_roles(roles)
        user = await self.require_auth()
        if user.role not in allowed:
            raise PermissionDeniedError(user.role.value, [r.value for r in allowed])
        return user

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _sign_in(self, result: AuthResult) -> None:
        async with self._write_lock:
            try:
                await self._storage.set(TOKEN_KEY, result.token)
            except OSError as e:
                logger.error("❌ Не вдалося зберегти токен у сховище: %s", e)
            self._session = Session.signed_in(result.token, result.user)
        self._broadcaster.emit(AuthEvent.SIGNED_IN, result.user, True)

    @staticmethod
    def _parse_roles(roles: Iterable[RoleLike]) -> tuple:
        parsed = tuple(_strict_role(r) for r in roles)
        if not parsed:
            raise ValueError("require_role() needs at least one role")
        return parsed


__all__ = ["SessionManager"]
