"""Shared fixtures for pubwon tests.

No database is required: DAOs and services are replaced with mocks and the
session factory hands out :class:`FakeSession` objects.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from pubwon.models.repository import Repository
from pubwon.models.user import User

NOW = datetime(2026, 3, 2, 9, 30, 0, tzinfo=timezone.utc)
USER_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests"


class FakeSession:
    """Stands in for ``AsyncSession`` as an async context manager."""

    def __init__(self) -> None:
        self.commits = 0

    async def __aenter__(self) -> FakeSession:
        return self

    async def __aexit__(self, *exc: object) -> bool:
        return False

    def begin(self) -> FakeSession:
        return self

    def begin_nested(self) -> FakeSession:
        return self

    async def commit(self) -> None:
        self.commits += 1


class FakeSessionFactory:
    def __init__(self) -> None:
        self.sessions: list[FakeSession] = []

    def __call__(self) -> FakeSession:
        session = FakeSession()
        self.sessions.append(session)
        return session


@pytest.fixture(autouse=True)
def _secrets(monkeypatch):
    monkeypatch.setenv("PUBWON_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("PUBWON_CURSOR_SECRET", "test-cursor-secret")
    monkeypatch.delenv("PUBWON_JWT_AUDIENCE", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


def make_user(**overrides) -> User:
    values = dict(
        id=USER_ID,
        email="ada@example.com",
        full_name="Ada Lovelace",
        github_username="ada",
        github_access_token=None,
        created_at=NOW,
        updated_at=NOW,
    )
    values.update(overrides)
    return User(**values)


def make_repository(**overrides) -> Repository:
    values = dict(
        id=uuid.uuid4(),
        user_id=USER_ID,
        github_id="1296269",
        name="hello-world",
        full_name="octocat/hello-world",
        description="My first repository",
        url="https://github.com/octocat/hello-world",
        default_branch="main",
        github_access_token=None,
        is_active=True,
        last_scanned_at=None,
        scan_error=None,
        created_at=NOW,
        updated_at=NOW,
    )
    values.update(overrides)
    return Repository(**values)


@pytest.fixture
def user() -> User:
    return make_user()


@pytest.fixture
def repo_factory():
    return make_repository


@pytest.fixture
def repository() -> Repository:
    return make_repository()
