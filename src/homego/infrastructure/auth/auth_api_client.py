# 🌐 homego/infrastructure/auth/auth_api_client.py
"""
🌐 HTTP-реалізація `IAuthGateway` поверх `httpx.AsyncClient`.

🔹 `POST /auth/login`, `POST /auth/register`, `GET /user/profile` (bearer), `POST /auth/logout`.
🔹 Транспортні збої → `NetworkRequestError` (через `ExceptionHandlerService`).
🔹 Відмови сервера → `InvalidCredentialsError` / `UserAlreadyExistsError` з текстом сервера.
🔹 Структуру токена не перевіряє: це непрозорий рядок.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx

# 🔠 Системні імпорти
import logging
from typing import Any, Dict, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from homego.config.config_service import ConfigService
from homego.domain.auth.entities import AuthResult, User, UserRole
from homego.errors.custom_errors import (
    InvalidCredentialsError,
    NetworkRequestError,
    UserAlreadyExistsError,
)
from homego.errors.exception_handler_service import ExceptionHandlerService
from homego.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

_DEFAULT_BASE_URL = "http://localhost:3000/api"


class AuthApiClient:
    """🔐 Клієнт auth-ендпоїнтів бекенду вітрини."""

    def __init__(
        self,
        config_service: ConfigService,
        *,
        client: Optional[httpx.AsyncClient] = None,
        error_handler: Optional[ExceptionHandlerService] = None,
    ) -> None:
        base_url = str(config_service.get("auth_api.base_url", _DEFAULT_BASE_URL) or _DEFAULT_BASE_URL)
        self._base_url = base_url.rstrip("/")
        self._login_path = config_service.get("auth_api.login_path", "/auth/login")
        self._register_path = config_service.get("auth_api.register_path", "/auth/register")
        self._profile_path = config_service.get("auth_api.profile_path", "/user/profile")
        self._logout_path = config_service.get("auth_api.logout_path", "/auth/logout")
        timeout = float(config_service.get("auth_api.timeout_sec", 10) or 10)
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        self._errors = error_handler or ExceptionHandlerService()

    # ================================
    # 🔓 ПУБЛІЧНИЙ API
    # ================================
    async def login(self, email: str, password: str) -> AuthResult:
        response = await self._request("POST", self._login_path, json={"email": email, "password": password})
        if not response.is_success:
            message = self._error_message(response, "Invalid credentials")
            logger.info("🔐 Login rejected for %s (status=%s)", email, response.status_code)
            raise InvalidCredentialsError(message, status_code=response.status_code)
        return self._auth_result(response)

    async def register(self, email: str, password: str, full_name: str, role: UserRole) -> AuthResult:
        body = {"email": email, "password": password, "fullName": full_name, "role": role.value}
        response = await self._request("POST", self._register_path, json=body)
        if not response.is_success:
            message = self._error_message(response, "Registration failed")
            if response.status_code == 409 or (response.status_code == 400 and "exist" in message.lower()):
                raise UserAlreadyExistsError(email, details=message)
            raise InvalidCredentialsError(message, status_code=response.status_code)
        return self._auth_result(response)

    async def fetch_profile(self, token: str) -> User:
        response = await self._request("GET", self._profile_path, token=token)
        if not response.is_success:
            raise InvalidCredentialsError(
                self._error_message(response, "Session is no longer valid"),
                status_code=response.status_code,
            )
        data = self._json(response)
        payload = data.get("user", data) if isinstance(data, Mapping) else data
        try:
            return User.from_payload(payload)
        except ValueError as e:
            raise NetworkRequestError("Malformed profile response", url=str(response.url), details=str(e)) from e

    async def sign_out(self, token: str) -> None:
        response = await self._request("POST", self._logout_path, token=token)
        if not response.is_success:
            raise NetworkRequestError(
                "Remote sign-out failed",
                url=str(response.url),
                status_code=response.status_code,
            )

    async def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self._base_url}{path}"
        try:
            return await self._client.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("🌐 %s %s failed: %s", method, url, e)
            raise self._errors.convert(e) from e

    def _auth_result(self, response: httpx.Response) -> AuthResult:
        data = self._json(response)
        token = data.get("token") if isinstance(data, Mapping) else None
        if not token or not isinstance(token, str):
            raise NetworkRequestError("Auth response has no token", url=str(response.url))
        try:
            user = User.from_payload(data.get("user"))
        except ValueError as e:
            raise NetworkRequestError("Malformed auth response", url=str(response.url), details=str(e)) from e
        return AuthResult(token=token, user=user)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    def _error_message(self, response: httpx.Response, default: str) -> str:
        data = self._json(response)
        if isinstance(data, Mapping):
            for key in ("message", "error"):
                value = data.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
        return default


__all__ = ["AuthApiClient"]
