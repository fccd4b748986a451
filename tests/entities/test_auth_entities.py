import pytest

from homego.domain.auth.entities import AuthState, Session, User, UserRole


def test_user_from_payload_accepts_legacy_keys():
    user = User.from_payload({"_id": 42, "email": " a@b.c ", "name": "Ann", "userType": "Seller"})

    assert user.id == "42"
    assert user.email == "a@b.c"
    assert user.full_name == "Ann"
    assert user.role is UserRole.SELLER


def test_user_from_payload_defaults_role_and_name():
    user = User.from_payload({"id": "1", "email": "a@b.c", "role": "wizard"})

    assert user.role is UserRole.CUSTOMER
    assert user.display_name == "User"


@pytest.mark.parametrize("payload", [None, [], {"id": "1"}])
def test_user_from_payload_rejects_malformed(payload):
    with pytest.raises(ValueError):
        User.from_payload(payload)


def test_session_is_authenticated_requires_token_user_and_state():
    user = User(id="1", email="a@b.c", full_name="Ann")

    assert Session.signed_in("t", user).is_authenticated
    assert not Session.unverified("t").is_authenticated
    assert not Session(token="t", user=None, state=AuthState.AUTHENTICATED).is_authenticated
    assert not Session(token=None, user=user, state=AuthState.AUTHENTICATED).is_authenticated
    assert Session.signed_out().state is AuthState.UNAUTHENTICATED
