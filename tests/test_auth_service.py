from datetime import datetime, timedelta, timezone

import jwt
import pytest

from models.refresh_token import RefreshToken
from models.user import Role, User
from services.auth_service import (
    EXPIRED_REFRESH_TOKEN,
    INVALID_CREDENTIALS,
    INVALID_REFRESH_TOKEN,
)
from utils.errors import AuthenticationError, AuthorizationError, ConflictError

pytestmark = pytest.mark.auth


def _as_utc(value):
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _expire(storage, token):
    row = storage.find_by(RefreshToken, token=token)
    row.expires_at = datetime.now(timezone.utc) - timedelta(seconds=5)
    storage.save()


def test_register_defaults_to_user_role_and_hashes_password(auth_service):
    user = auth_service.register("a@x.com", "pw1")
    assert user.role is Role.USER
    assert user.password_hash != "pw1"


def test_register_with_admin_role(auth_service):
    assert auth_service.register("boss@x.com", "pw1", "ADMIN").role is Role.ADMIN


def test_register_same_email_twice_conflicts(auth_service, storage):
    auth_service.register("a@x.com", "pw1")
    with pytest.raises(ConflictError):
        auth_service.register("a@x.com", "other")
    assert storage.count(User) == 1


def test_login_issues_access_token_with_stored_role(auth_service, token_issuer):
    auth_service.register("boss@x.com", "pw1", "ADMIN")
    result = auth_service.login("boss@x.com", "pw1")
    claims = token_issuer.decode_access_token(result["access_token"])
    assert claims["role"] == "ADMIN"
    assert claims["userId"] == result["user"].id


def test_login_persists_refresh_token_for_seven_days(auth_service, storage):
    auth_service.register("a@x.com", "pw1")
    result = auth_service.login("a@x.com", "pw1")

    row = storage.find_by(RefreshToken, token=result["refresh_token"])
    assert row is not None
    assert row.user_id == result["user"].id
    expected = datetime.now(timezone.utc) + timedelta(days=7)
    assert abs(_as_utc(row.expires_at) - expected) < timedelta(minutes=1)


def test_login_failures_share_one_message(auth_service):
    auth_service.register("a@x.com", "pw1")
    with pytest.raises(AuthenticationError) as unknown:
        auth_service.login("unknown@x.com", "pw")
    with pytest.raises(AuthenticationError) as wrong:
        auth_service.login("a@x.com", "wrongpw")
    assert unknown.value.message == wrong.value.message == INVALID_CREDENTIALS


def test_concurrent_sessions_each_get_a_refresh_token(auth_service, storage):
    auth_service.register("a@x.com", "pw1")
    first = auth_service.login("a@x.com", "pw1")
    second = auth_service.login("a@x.com", "pw1")
    assert first["refresh_token"] != second["refresh_token"]
    assert storage.count(RefreshToken) == 2


def test_refresh_returns_new_access_token_without_rotation(auth_service, storage, token_issuer):
    auth_service.register("a@x.com", "pw1")
    refresh_token = auth_service.login("a@x.com", "pw1")["refresh_token"]

    access = auth_service.refresh(refresh_token)
    assert token_issuer.decode_access_token(access)["email"] == "a@x.com"
    # still usable: refreshing does not consume the refresh token
    assert auth_service.refresh(refresh_token)
    assert storage.find_by(RefreshToken, token=refresh_token) is not None


def test_refresh_with_unknown_token_is_forbidden(auth_service, token_issuer):
    unknown = token_issuer.issue_refresh_token("nobody")
    with pytest.raises(AuthorizationError) as exc:
        auth_service.refresh(unknown)
    assert exc.value.message == INVALID_REFRESH_TOKEN


def test_refresh_with_expired_row_deletes_it(auth_service, storage):
    auth_service.register("a@x.com", "pw1")
    refresh_token = auth_service.login("a@x.com", "pw1")["refresh_token"]
    _expire(storage, refresh_token)

    with pytest.raises(AuthorizationError) as first:
        auth_service.refresh(refresh_token)
    assert first.value.message == EXPIRED_REFRESH_TOKEN
    assert storage.find_by(RefreshToken, token=refresh_token) is None

    with pytest.raises(AuthorizationError) as second:
        auth_service.refresh(refresh_token)
    assert second.value.message == INVALID_REFRESH_TOKEN


def test_refresh_with_badly_signed_stored_token_is_forbidden(auth_service, storage):
    user = auth_service.register("a@x.com", "pw1")
    forged = jwt.encode({"userId": user.id, "iat": 0, "exp": 4102444800}, "wrong-secret", algorithm="HS256")
    storage.new(
        RefreshToken(token=forged, user_id=user.id, expires_at=datetime.now(timezone.utc) + timedelta(days=1))
    )
    storage.save()

    with pytest.raises(AuthorizationError):
        auth_service.refresh(forged)
    # only timestamp expiry removes the row
    assert storage.find_by(RefreshToken, token=forged) is not None


def test_refresh_reflects_current_role(auth_service, storage, token_issuer):
    user = auth_service.register("a@x.com", "pw1")
    refresh_token = auth_service.login("a@x.com", "pw1")["refresh_token"]
    user = storage.get(User, user.id)
    user.role = Role.ADMIN
    storage.save()

    claims = token_issuer.decode_access_token(auth_service.refresh(refresh_token))
    assert claims["role"] == "ADMIN"


def test_logout_is_idempotent(auth_service, storage):
    auth_service.register("a@x.com", "pw1")
    refresh_token = auth_service.login("a@x.com", "pw1")["refresh_token"]

    assert auth_service.logout(refresh_token) == 1
    assert auth_service.logout(refresh_token) == 0
    assert auth_service.logout(None) == 0
    assert storage.count(RefreshToken) == 0


def test_logout_leaves_other_sessions_alone(auth_service, storage):
    auth_service.register("a@x.com", "pw1")
    first = auth_service.login("a@x.com", "pw1")["refresh_token"]
    second = auth_service.login("a@x.com", "pw1")["refresh_token"]

    auth_service.logout(first)
    assert storage.find_by(RefreshToken, token=second) is not None
    with pytest.raises(AuthorizationError):
        auth_service.refresh(first)
