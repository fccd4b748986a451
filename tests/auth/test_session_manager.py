"""
🧪 test_session_manager.py: unit-тести для SessionManager

Перевіряє:
- register → login → logout та події authStateChanged
- check_auth без токена не йде в мережу
- «виграє останній, хто завершився» для перекритих викликів
- guard-и require_auth / require_role і рольові запити
"""

import asyncio

import pytest

from homego.domain.auth.entities import AuthResult, AuthState, User, UserRole
from homego.domain.storage.interfaces import TOKEN_KEY
from homego.errors.custom_errors import (
    AuthRequiredError,
    InvalidCredentialsError,
    NetworkRequestError,
    PermissionDeniedError,
    UserAlreadyExistsError,
)
from homego.infrastructure.auth.auth_broadcaster import AuthStateBroadcaster
from homego.infrastructure.auth.session_manager import SessionManager
from homego.infrastructure.storage.key_value_store import InMemoryKeyValueStore
from homego.shared.events.event_bus import EventBus


# ──────────────────────────────────────────────────────────────────────────────
#                          🔧 Тестові заглушки/фейки
# ──────────────────────────────────────────────────────────────────────────────

class _FakeGateway:
    """Бекенд у пам'яті; `pending_*` дозволяють керувати порядком відповідей."""

    def __init__(self):
        self.accounts = {}            # email -> (password, User)
        self.tokens = {}              # token -> User
        self.profile_calls = 0
        self.pending_profiles = []    # futures для fetch_profile
        self.pending_logins = []      # futures для login
        self.signed_out = []
        self.sign_out_error = None
        self.closed = False

    def add_account(self, email, password, full_name="Ann Doe", role=UserRole.CUSTOMER):
        user = User(id=str(len(self.accounts) + 1), email=email, full_name=full_name, role=role)
        self.accounts[email] = (password, user)
        return user

    async def login(self, email, password):
        if self.pending_logins:
            return await self.pending_logins.pop(0)
        await asyncio.sleep(0)
        record = self.accounts.get(email)
        if record is None or record[0] != password:
            raise InvalidCredentialsError("Invalid email or password", status_code=401)
        token = f"tok-{len(self.tokens) + 1}"
        self.tokens[token] = record[1]
        return AuthResult(token=token, user=record[1])

    async def register(self, email, password, full_name, role):
        if email in self.accounts:
            raise UserAlreadyExistsError(email)
        self.add_account(email, password, full_name, role)
        return await self.login(email, password)

    async def fetch_profile(self, token):
        self.profile_calls += 1
        if self.pending_profiles:
            return await self.pending_profiles.pop(0)
        await asyncio.sleep(0)
        user = self.tokens.get(token)
        if user is None:
            raise InvalidCredentialsError("Session is no longer valid", status_code=401)
        return user

    async def sign_out(self, token):
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.signed_out.append(token)

    async def close(self):
        self.closed = True


@pytest.fixture
def gateway():
    return _FakeGateway()


@pytest.fixture
def storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def events(bus):
    received = []
    AuthStateBroadcaster(bus).subscribe(received.append)
    return received


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def manager(gateway, storage, bus):
    return SessionManager(gateway, storage, AuthStateBroadcaster(bus))


# ──────────────────────────────────────────────────────────────────────────────
#                                   Тести
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_register_then_login_authenticates(manager, storage, events):
    user = await manager.register("a@b.c", "secret", "Ann Doe", "customer")

    assert user.email == "a@b.c"
    assert manager.is_authenticated
    assert manager.is_customer() and not manager.is_admin()
    assert await storage.get(TOKEN_KEY) == manager.token
    assert events[-1] == {"event": "SIGNED_IN", "user": user.to_dict(), "isAuthenticated": True}

    await manager.logout()
    user = await manager.login("a@b.c", "secret")

    assert manager.is_authenticated
    assert manager.user == user
    assert manager.display_name == "Ann Doe"
    assert [e["event"] for e in events] == ["SIGNED_IN", "SIGNED_OUT", "SIGNED_IN"]


@pytest.mark.asyncio
async def test_register_existing_email_raises(manager, gateway):
    gateway.add_account("a@b.c", "secret")

    with pytest.raises(UserAlreadyExistsError):
        await manager.register("a@b.c", "other", "Ann", UserRole.SELLER)
    assert not manager.is_authenticated


@pytest.mark.asyncio
async def test_register_unknown_role_is_rejected_before_network(manager, gateway):
    with pytest.raises(ValueError):
        await manager.register("a@b.c", "secret", "Ann", "superuser")
    assert gateway.accounts == {}


@pytest.mark.asyncio
async def test_failed_login_leaves_previous_session_untouched(manager, gateway, events):
    gateway.add_account("a@b.c", "secret")
    user = await manager.login("a@b.c", "secret")
    token = manager.token

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await manager.login("a@b.c", "wrong")

    assert exc_info.value.message == "Invalid email or password"
    assert manager.token == token and manager.user == user
    assert [e["event"] for e in events] == ["SIGNED_IN"]


@pytest.mark.asyncio
async def test_logout_clears_state_and_check_auth_skips_network(manager, gateway, storage, events):
    gateway.add_account("a@b.c", "secret")
    await manager.login("a@b.c", "secret")

    await manager.logout()

    assert manager.token is None and manager.user is None
    assert manager.state is AuthState.UNAUTHENTICATED
    assert await storage.get(TOKEN_KEY) is None
    assert events[-1] == {"event": "SIGNED_OUT", "user": None, "isAuthenticated": False}

    assert await manager.check_auth() is False
    assert gateway.profile_calls == 0


@pytest.mark.asyncio
async def test_logout_without_session_still_broadcasts(manager, events):
    await manager.logout()
    assert [e["event"] for e in events] == ["SIGNED_OUT"]


@pytest.mark.asyncio
async def test_remote_sign_out_failure_is_ignored(gateway, storage, bus):
    manager = SessionManager(gateway, storage, AuthStateBroadcaster(bus), remote_sign_out=True)
    gateway.add_account("a@b.c", "secret")
    await manager.login("a@b.c", "secret")
    gateway.sign_out_error = NetworkRequestError("down")

    await manager.logout()

    assert not manager.is_authenticated
    assert await storage.get(TOKEN_KEY) is None


@pytest.mark.asyncio
async def test_remote_sign_out_sends_token(gateway, storage, bus):
    manager = SessionManager(gateway, storage, AuthStateBroadcaster(bus), remote_sign_out=True)
    gateway.add_account("a@b.c", "secret")
    await manager.login("a@b.c", "secret")
    token = manager.token

    await manager.logout()

    assert gateway.signed_out == [token]


@pytest.mark.asyncio
async def test_initialize_restores_session_from_stored_token(gateway, storage, bus, events):
    user = gateway.add_account("a@b.c", "secret", role=UserRole.SELLER)
    gateway.tokens["stored"] = user
    await storage.set(TOKEN_KEY, "stored")
    manager = SessionManager(gateway, storage, AuthStateBroadcaster(bus))

    await manager.initialize()
    assert manager.state is AuthState.UNKNOWN
    assert not manager.is_authenticated

    await manager.wait_until_ready()
    assert manager.is_authenticated
    assert manager.is_seller()
    assert events[-1]["event"] == "SIGNED_IN"


@pytest.mark.asyncio
async def test_initialize_with_invalid_token_logs_out(gateway, storage, bus, events):
    await storage.set(TOKEN_KEY, "expired")
    manager = SessionManager(gateway, storage, AuthStateBroadcaster(bus))

    await manager.initialize(wait=True)

    assert not manager.is_authenticated
    assert await storage.get(TOKEN_KEY) is None
    assert [e["event"] for e in events] == ["SIGNED_OUT"]


@pytest.mark.asyncio
async def test_overlapping_check_auth_last_completion_wins(manager, gateway, storage):
    gateway.add_account("a@b.c", "secret")
    user = await manager.login("a@b.c", "secret")
    loop = asyncio.get_running_loop()
    first, second = loop.create_future(), loop.create_future()
    gateway.pending_profiles = [first, second]

    first_call = asyncio.create_task(manager.check_auth())
    second_call = asyncio.create_task(manager.check_auth())
    await asyncio.sleep(0)

    second.set_result(user)
    assert await second_call is True
    assert manager.is_authenticated

    first.set_exception(InvalidCredentialsError("Token expired", status_code=401))
    assert await first_call is False

    assert not manager.is_authenticated
    assert manager.token is None
    assert await storage.get(TOKEN_KEY) is None


@pytest.mark.asyncio
async def test_login_completing_after_check_auth_wins(manager, gateway, storage):
    ann = gateway.add_account("a@b.c", "secret")
    bob = gateway.add_account("bob@b.c", "pw", full_name="Bob")
    await manager.login("a@b.c", "secret")
    loop = asyncio.get_running_loop()
    profile, login = loop.create_future(), loop.create_future()
    gateway.pending_profiles = [profile]
    gateway.pending_logins = [login]

    check_call = asyncio.create_task(manager.check_auth())
    login_call = asyncio.create_task(manager.login("bob@b.c", "pw"))
    await asyncio.sleep(0)

    profile.set_result(ann)
    await check_call
    login.set_result(AuthResult(token="tok-bob", user=bob))
    await login_call

    assert manager.user == bob
    assert manager.token == "tok-bob"
    assert await storage.get(TOKEN_KEY) == "tok-bob"


@pytest.mark.asyncio
async def test_cancelled_login_applies_no_write(manager, gateway, storage, events):
    loop = asyncio.get_running_loop()
    gateway.pending_logins = [loop.create_future()]

    call = asyncio.create_task(manager.login("a@b.c", "secret"))
    await asyncio.sleep(0)
    call.cancel()
    with pytest.raises(asyncio.CancelledError):
        await call

    assert manager.token is None
    assert await storage.get(TOKEN_KEY) is None
    assert events == []


@pytest.mark.asyncio
async def test_require_auth_raises_with_redirect(gateway, storage, bus):
    manager = SessionManager(gateway, storage, AuthStateBroadcaster(bus), login_redirect="/login")

    with pytest.raises(AuthRequiredError) as exc_info:
        await manager.require_auth()
    assert exc_info.value.redirect_to == "/login"


@pytest.mark.asyncio
async def test_require_auth_waits_for_startup_check(gateway, storage, bus):
    user = gateway.add_account("a@b.c", "secret")
    gateway.tokens["stored"] = user
    await storage.set(TOKEN_KEY, "stored")
    manager = SessionManager(gateway, storage, AuthStateBroadcaster(bus))

    assert await manager.require_auth() == user


@pytest.mark.asyncio
async def test_require_role(manager, gateway):
    gateway.add_account("admin@b.c", "pw", role=UserRole.ADMIN)
    gateway.add_account("c@b.c", "pw")

    await manager.login("admin@b.c", "pw")
    assert (await manager.require_role("seller", "admin")).role is UserRole.ADMIN

    await manager.login("c@b.c", "pw")
    with pytest.raises(PermissionDeniedError) as exc_info:
        await manager.require_role("seller", "admin")
    assert exc_info.value.message == "Seller or admin access required"
    assert exc_info.value.role == "customer"


@pytest.mark.asyncio
async def test_auth_headers(manager, gateway):
    assert manager.auth_headers() == {}
    gateway.add_account("a@b.c", "secret")
    await manager.login("a@b.c", "secret")

    headers = manager.auth_headers()
    assert headers["Authorization"] == f"Bearer {manager.token}"
    assert headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_role_queries_without_session(manager):
    assert manager.role is None
    assert manager.display_name == "User"
    assert manager.has_role("admin") is False
    assert manager.has_role("nonsense") is False


@pytest.mark.asyncio
async def test_close_closes_gateway(manager, gateway):
    await manager.close()
    assert gateway.closed is True


class _ReadOnlyStore(InMemoryKeyValueStore):
    """Сховище, що читає нормально, але кожен запис падає з OSError."""

    async def set(self, key, value):
        raise OSError("disk full")


@pytest.mark.asyncio
async def test_check_auth_survives_storage_write_failure(gateway, bus, events):
    user = gateway.add_account("a@b.c", "secret")
    gateway.tokens["t"] = user
    manager = SessionManager(gateway, _ReadOnlyStore({TOKEN_KEY: "t"}), AuthStateBroadcaster(bus))

    await manager.initialize(wait=True)

    assert manager.is_authenticated
    assert manager.user == user
    assert await manager.check_auth() is True
    assert [e["event"] for e in events] == ["SIGNED_IN", "SIGNED_IN"]


@pytest.mark.asyncio
async def test_login_succeeds_when_token_cannot_be_persisted(gateway, bus, events):
    gateway.add_account("a@b.c", "secret")
    store = _ReadOnlyStore()
    manager = SessionManager(gateway, store, AuthStateBroadcaster(bus))

    user = await manager.login("a@b.c", "secret")

    assert manager.is_authenticated and manager.user == user
    assert await store.get(TOKEN_KEY) is None
    assert events[-1]["event"] == "SIGNED_IN"
