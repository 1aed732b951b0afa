"""Dependency injection — session, auth, and service singletons."""

from __future__ import annotations

import hmac
import os
from collections.abc import AsyncGenerator, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pubwon.dao.activity_dao import ActivityDAO
from pubwon.dao.blog_post_dao import BlogPostDAO
from pubwon.dao.github_issue_dao import GitHubIssueDAO
from pubwon.dao.newsletter_dao import NewsletterDAO
from pubwon.dao.pain_point_dao import PainPointDAO
from pubwon.dao.repository_dao import RepositoryDAO
from pubwon.dao.subscriber_dao import SubscriberDAO
from pubwon.dao.user_dao import UserDAO
from pubwon.engines.activity_scanner.runner import ActivityScanRunner
from pubwon.engines.digest.runner import DigestRunner
from pubwon.engines.github.client import GitHubClient
from pubwon.engines.issue_creator.runner import IssueCreatorRunner
from pubwon.engines.notification.mailer import Mailer
from pubwon.engines.notification.runner import NewsletterRunner
from pubwon.models.user import User
from pubwon.services import AuthenticationError
from pubwon.services.activity_service import ActivityService
from pubwon.services.auth_service import AuthService
from pubwon.services.blog_service import BlogService
from pubwon.services.github_issue_service import GitHubIssueService
from pubwon.services.newsletter_service import NewsletterService
from pubwon.services.pain_point_service import PainPointService
from pubwon.services.profile_service import ProfileService
from pubwon.services.repository_service import RepositoryService
from pubwon.services.subscription_service import SubscriptionService

# ---------------------------------------------------------------------------
# DAO singletons
# ---------------------------------------------------------------------------
_user_dao = UserDAO()
_repository_dao = RepositoryDAO()
_activity_dao = ActivityDAO()
_pain_point_dao = PainPointDAO()
_github_issue_dao = GitHubIssueDAO()
_blog_post_dao = BlogPostDAO()
_subscriber_dao = SubscriberDAO()
_newsletter_dao = NewsletterDAO()

# ---------------------------------------------------------------------------
# Service singletons
# ---------------------------------------------------------------------------
_auth_service = AuthService(_user_dao)
_profile_service = ProfileService(_user_dao)
_repository_service = RepositoryService(_repository_dao)
_activity_service = ActivityService(_activity_dao)
_pain_point_service = PainPointService(_pain_point_dao, _repository_dao)
_github_issue_service = GitHubIssueService(_github_issue_dao)
_blog_service = BlogService(_blog_post_dao, _repository_dao)
_subscription_service = SubscriptionService(_subscriber_dao)
_newsletter_service = NewsletterService(_newsletter_dao)

# ---------------------------------------------------------------------------
# Engine runners
# ---------------------------------------------------------------------------
_scan_runner = ActivityScanRunner(_repository_service, _activity_service)
_issue_creator_runner = IssueCreatorRunner(
    _repository_service, _pain_point_service, _github_issue_service
)
_digest_runner = DigestRunner(_activity_service, _repository_service, _blog_service)
_newsletter_runner = NewsletterRunner(
    _blog_service, _newsletter_service, _subscription_service, Mailer()
)

# ---------------------------------------------------------------------------
# Engine / session factory (initialised by app lifespan)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create the async engine and session factory. Called once at startup."""
    global _engine, _session_factory  # noqa: PLW0603
    url = database_url or os.environ.get(
        "PUBWON_DATABASE_URL", "postgresql+asyncpg://localhost/pubwon"
    )
    _engine = create_async_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=1800,
    )
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    """Dispose the async engine, closing all pooled connections."""
    global _engine  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None


def set_session_factory(factory: async_sessionmaker[AsyncSession]) -> None:
    """Override session factory (for testing)."""
    global _session_factory  # noqa: PLW0603
    _session_factory = factory


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("call init_session_factory() before handling requests")
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session with automatic commit/rollback."""
    factory = get_session_factory()
    async with factory() as session:
        async with session.begin():
            yield session


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User:
    """Extract and validate Bearer token, return the authenticated User."""
    if credentials is None:
        raise AuthenticationError("missing authorization header")
    return await _auth_service.get_current_user(session, credentials.credentials)


async def require_cron_secret(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> None:
    """Guard for scheduled-job endpoints: ``Authorization: Bearer <PUBWON_CRON_SECRET>``."""
    secret = os.environ.get("PUBWON_CRON_SECRET")
    if not secret:
        raise AuthenticationError("cron endpoints are disabled")
    if credentials is None or not hmac.compare_digest(credentials.credentials, secret):
        raise AuthenticationError("invalid cron secret")


# ---------------------------------------------------------------------------
# Service getters (for Depends())
# ---------------------------------------------------------------------------


def get_auth_service() -> AuthService:
    return _auth_service


def get_profile_service() -> ProfileService:
    return _profile_service


def get_repository_service() -> RepositoryService:
    return _repository_service


def get_activity_service() -> ActivityService:
    return _activity_service


def get_pain_point_service() -> PainPointService:
    return _pain_point_service


def get_blog_service() -> BlogService:
    return _blog_service


def get_subscription_service() -> SubscriptionService:
    return _subscription_service


def get_scan_runner() -> ActivityScanRunner:
    return _scan_runner


def get_issue_creator_runner() -> IssueCreatorRunner:
    return _issue_creator_runner


def get_digest_runner() -> DigestRunner:
    return _digest_runner


def get_newsletter_runner() -> NewsletterRunner:
    return _newsletter_runner


def get_github_client_factory() -> Callable[[str | None], GitHubClient]:
    """Factory for per-request GitHub clients (overridden in tests)."""
    return GitHubClient
