"""Tests for AuthService access-token verification."""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from jose import jwt

from pubwon.dao.user_dao import UserDAO
from pubwon.services import AuthenticationError
from pubwon.services.auth_service import _ALGORITHM, AuthService

TEST_SECRET = "test-jwt-secret-for-unit-tests"
USER_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


def _make_service() -> tuple[AuthService, UserDAO]:
    dao = UserDAO()
    return AuthService(dao), dao


def _encode_token(payload: dict, secret: str = TEST_SECRET) -> str:
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def _valid_payload(**overrides) -> dict:
    payload = {
        "sub": str(USER_ID),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=15),
    }
    payload.update(overrides)
    return payload


class TestDecodeSubject:
    def test_valid_token(self):
        service, _ = _make_service()
        assert service.decode_subject(_encode_token(_valid_payload())) == USER_ID

    def test_expired_token(self):
        service, _ = _make_service()
        token = _encode_token(_valid_payload(exp=datetime.now(timezone.utc) - timedelta(seconds=1)))
        with pytest.raises(AuthenticationError, match="invalid access token"):
            service.decode_subject(token)

    def test_wrong_secret(self):
        service, _ = _make_service()
        token = _encode_token(_valid_payload(), secret="some-other-secret")
        with pytest.raises(AuthenticationError, match="invalid access token"):
            service.decode_subject(token)

    def test_garbage(self):
        service, _ = _make_service()
        with pytest.raises(AuthenticationError):
            service.decode_subject("not-a-jwt")

    def test_missing_sub(self):
        service, _ = _make_service()
        payload = _valid_payload()
        del payload["sub"]
        with pytest.raises(AuthenticationError, match="invalid token payload"):
            service.decode_subject(_encode_token(payload))

    def test_sub_not_a_uuid(self):
        service, _ = _make_service()
        with pytest.raises(AuthenticationError, match="invalid token payload"):
            service.decode_subject(_encode_token(_valid_payload(sub="alice")))

    def test_audience_checked_when_configured(self, monkeypatch):
        service, _ = _make_service()
        monkeypatch.setenv("PUBWON_JWT_AUDIENCE", "authenticated")

        good = _encode_token(_valid_payload(aud="authenticated"))
        assert service.decode_subject(good) == USER_ID

        with pytest.raises(AuthenticationError):
            service.decode_subject(_encode_token(_valid_payload(aud="anon")))

    def test_missing_secret_is_a_configuration_error(self, monkeypatch):
        service, _ = _make_service()
        monkeypatch.delenv("PUBWON_JWT_SECRET")
        with pytest.raises(RuntimeError, match="PUBWON_JWT_SECRET"):
            service.decode_subject(_encode_token(_valid_payload()))


class TestGetCurrentUser:
    async def test_loads_user(self, user):
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=user)
        session = AsyncMock()

        result = await service.get_current_user(session, _encode_token(_valid_payload()))

        assert result is user
        dao.get_by_id.assert_awaited_once_with(session, USER_ID)

    async def test_unknown_user(self):
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=None)
        with pytest.raises(AuthenticationError, match="user not found"):
            await service.get_current_user(AsyncMock(), _encode_token(_valid_payload()))

    async def test_invalid_token_skips_lookup(self):
        service, dao = _make_service()
        dao.get_by_id = AsyncMock()
        with pytest.raises(AuthenticationError):
            await service.get_current_user(AsyncMock(), "bad")
        dao.get_by_id.assert_not_awaited()
