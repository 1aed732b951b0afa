"""Service-layer tests with mocked DAOs."""

from __future__ import annotations

import uuid
from unittest.mock import ANY, AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from pubwon.models.blog_post import BlogPost
from pubwon.models.pain_point import PainPoint
from pubwon.models.subscriber import EmailSubscriber
from pubwon.services import ConflictError, NotFoundError, ValidationError
from pubwon.services.blog_service import BlogService
from pubwon.services.pain_point_service import PainPointService
from pubwon.services.profile_service import ProfileService
from pubwon.services.repository_service import RepositoryService
from pubwon.services.subscription_service import SubscriptionService


def _subscriber(status: str, **overrides) -> EmailSubscriber:
    values = dict(id=uuid.uuid4(), email="grace@example.com", status=status)
    values.update(overrides)
    return EmailSubscriber(**values)


# ── SubscriptionService ───────────────────────────────────────────────────


class TestSubscriptionService:
    @pytest.fixture
    def dao(self):
        dao = AsyncMock()
        dao.update.side_effect = lambda _s, pk, **values: _subscriber(
            values.get("status", "pending"), id=pk
        )
        return dao

    @pytest.mark.asyncio
    async def test_new_address_is_pending(self, dao, session_factory):
        dao.get_by_email.return_value = None
        dao.create.return_value = _subscriber("pending")
        svc = SubscriptionService(dao)

        await svc.subscribe(session_factory(), email="  Grace@Example.COM ", first_name="Grace")

        dao.get_by_email.assert_awaited_once()
        assert dao.get_by_email.await_args.args[1] == "grace@example.com"
        kwargs = dao.create.await_args.kwargs
        assert kwargs["status"] == "pending"
        assert kwargs["email"] == "grace@example.com"
        assert kwargs["subscription_source"] == "website"

    @pytest.mark.parametrize("status", ["pending", "active"])
    @pytest.mark.asyncio
    async def test_existing_address_is_idempotent(self, dao, session_factory, status):
        existing = _subscriber(status)
        dao.get_by_email.return_value = existing
        result = await SubscriptionService(dao).subscribe(session_factory(), email=existing.email)
        assert result is existing
        dao.create.assert_not_awaited()
        dao.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resubscribe_returns_to_pending(self, dao, session_factory):
        existing = _subscriber("unsubscribed")
        dao.get_by_email.return_value = existing
        result = await SubscriptionService(dao).subscribe(session_factory(), email=existing.email)
        assert result.status == "pending"
        assert dao.update.await_args.kwargs["unsubscribed_at"] is None

    @pytest.mark.asyncio
    async def test_confirm_pending(self, dao, session_factory):
        sub = _subscriber("pending")
        dao.get_by_id.return_value = sub
        result = await SubscriptionService(dao).confirm(session_factory(), sub.id)
        assert result.status == "active"
        assert dao.update.await_args.kwargs["confirmed_at"] is not None

    @pytest.mark.asyncio
    async def test_confirm_row_gone_is_not_found(self, dao, session_factory):
        sub = _subscriber("pending")
        dao.get_by_id.return_value = sub
        dao.update.side_effect = None
        dao.update.return_value = None
        with pytest.raises(NotFoundError, match="subscriber not found"):
            await SubscriptionService(dao).confirm(session_factory(), sub.id)

    @pytest.mark.asyncio
    async def test_confirm_unsubscribed_rejected(self, dao, session_factory):
        sub = _subscriber("unsubscribed")
        dao.get_by_id.return_value = sub
        with pytest.raises(ValidationError):
            await SubscriptionService(dao).confirm(session_factory(), sub.id)

    @pytest.mark.asyncio
    async def test_unsubscribe(self, dao, session_factory):
        sub = _subscriber("active")
        dao.get_by_id.return_value = sub
        result = await SubscriptionService(dao).unsubscribe(session_factory(), sub.id)
        assert result.status == "unsubscribed"

    @pytest.mark.asyncio
    async def test_unsubscribe_twice_is_noop(self, dao, session_factory):
        sub = _subscriber("unsubscribed")
        dao.get_by_id.return_value = sub
        assert await SubscriptionService(dao).unsubscribe(session_factory(), sub.id) is sub
        dao.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_subscriber(self, dao, session_factory):
        dao.get_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await SubscriptionService(dao).unsubscribe(session_factory(), uuid.uuid4())


# ── BlogService ───────────────────────────────────────────────────────────


def _blog_post(status: str, repository_id: uuid.UUID) -> BlogPost:
    return BlogPost(
        id=uuid.uuid4(),
        repository_id=repository_id,
        title="t",
        slug="t",
        content="c",
        status=status,
    )


class TestBlogService:
    @pytest.mark.asyncio
    async def test_create_draft_makes_slug_unique(self, session_factory, repository):
        post_dao = AsyncMock()
        post_dao.slugs_with_prefix.return_value = {"update", "update-2"}
        svc = BlogService(post_dao, AsyncMock())

        await svc.create_draft(
            session_factory(),
            repository_id=repository.id,
            activity_id=None,
            title="Update",
            slug="update",
            content="body",
            excerpt=None,
        )

        kwargs = post_dao.create.await_args.kwargs
        assert kwargs["slug"] == "update-3"
        assert kwargs["status"] == "draft"

    @pytest.mark.asyncio
    async def test_publish_draft(self, session_factory, user, repository):
        post = _blog_post("draft", repository.id)
        post_dao = AsyncMock()
        post_dao.get_by_id.return_value = post
        post_dao.update.return_value = post
        repo_dao = AsyncMock()
        repo_dao.get_owned.return_value = repository

        await BlogService(post_dao, repo_dao).publish(session_factory(), user.id, post.id)

        kwargs = post_dao.update.await_args.kwargs
        assert kwargs["status"] == "published"
        assert kwargs["published_at"] is not None

    @pytest.mark.asyncio
    async def test_publish_post_deleted_meanwhile(self, session_factory, user, repository):
        post_dao = AsyncMock()
        post_dao.get_by_id.return_value = _blog_post("draft", repository.id)
        post_dao.update.return_value = None
        repo_dao = AsyncMock()
        repo_dao.get_owned.return_value = repository
        with pytest.raises(NotFoundError, match="blog post not found"):
            await BlogService(post_dao, repo_dao).publish(session_factory(), user.id, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_publish_foreign_post_is_not_found(self, session_factory, user, repository):
        post_dao = AsyncMock()
        post_dao.get_by_id.return_value = _blog_post("draft", repository.id)
        repo_dao = AsyncMock()
        repo_dao.get_owned.return_value = None
        with pytest.raises(NotFoundError):
            await BlogService(post_dao, repo_dao).publish(session_factory(), user.id, uuid.uuid4())
        post_dao.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_archived_rejected(self, session_factory, user, repository):
        post_dao = AsyncMock()
        post_dao.get_by_id.return_value = _blog_post("archived", repository.id)
        repo_dao = AsyncMock()
        repo_dao.get_owned.return_value = repository
        with pytest.raises(ValidationError):
            await BlogService(post_dao, repo_dao).publish(session_factory(), user.id, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_draft_is_not_public(self, session_factory, repository):
        post_dao = AsyncMock()
        post_dao.get_by_slug.return_value = _blog_post("draft", repository.id)
        with pytest.raises(NotFoundError):
            await BlogService(post_dao, AsyncMock()).get_published_by_slug(session_factory(), "t")


# ── PainPointService ──────────────────────────────────────────────────────


class TestPainPointService:
    @pytest.mark.asyncio
    async def test_review_invalid_status(self, session_factory):
        svc = PainPointService(AsyncMock(), AsyncMock())
        with pytest.raises(ValidationError):
            await svc.review(session_factory(), uuid.uuid4(), uuid.uuid4(), "done")

    @pytest.mark.asyncio
    async def test_review_missing(self, session_factory, user):
        dao = AsyncMock()
        dao.get_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await PainPointService(dao, AsyncMock()).review(
                session_factory(), user.id, uuid.uuid4(), "approved"
            )
        dao.set_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_review_of_foreign_repository_pain_point(self, session_factory, user):
        dao = AsyncMock()
        dao.get_by_id.return_value = PainPoint(
            id=uuid.uuid4(), repository_id=uuid.uuid4(), title="t", description="d"
        )
        repo_dao = AsyncMock()
        repo_dao.get_owned.return_value = None
        with pytest.raises(NotFoundError, match="pain point not found"):
            await PainPointService(dao, repo_dao).review(
                session_factory(), user.id, dao.get_by_id.return_value.id, "approved"
            )
        dao.set_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_review_unattached_pain_point(self, session_factory, user):
        pain_point = PainPoint(id=uuid.uuid4(), repository_id=None, title="t", description="d")
        dao = AsyncMock()
        dao.get_by_id.return_value = pain_point
        dao.set_status.return_value = pain_point
        repo_dao = AsyncMock()

        result = await PainPointService(dao, repo_dao).review(
            session_factory(), user.id, pain_point.id, "approved"
        )

        assert result is pain_point
        dao.set_status.assert_awaited_once_with(ANY, pain_point.id, "approved")
        repo_dao.get_owned.assert_not_awaited()

    @pytest.mark.parametrize("status,visible", [("approved", True), ("pending", False), ("rejected", False)])
    @pytest.mark.asyncio
    async def test_get_approved(self, session_factory, status, visible):
        dao = AsyncMock()
        dao.get_by_id.return_value = PainPoint(id=uuid.uuid4(), title="t", description="d", status=status)
        result = await PainPointService(dao, AsyncMock()).get_approved(session_factory(), uuid.uuid4())
        assert (result is not None) is visible

    @pytest.mark.asyncio
    async def test_create_in_foreign_repository(self, session_factory, user):
        repo_dao = AsyncMock()
        repo_dao.get_owned.return_value = None
        with pytest.raises(NotFoundError):
            await PainPointService(AsyncMock(), repo_dao).create(
                session_factory(), user.id, title="t", description="d", repository_id=uuid.uuid4()
            )

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_status(self, session_factory):
        with pytest.raises(ValidationError):
            await PainPointService(AsyncMock(), AsyncMock()).list(
                session_factory(), uuid.uuid4(), status="x"
            )

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(self, session_factory, user):
        dao = AsyncMock()
        dao.list_paginated.return_value = MagicMock(data=[], next_cursor=None, has_more=False)
        dao.count_filtered.return_value = 0

        await PainPointService(dao, AsyncMock()).list(session_factory(), user.id, status="approved")

        assert dao.list_paginated.await_args.args[1] == user.id
        assert dao.count_filtered.await_args.args[1] == user.id

    @pytest.mark.asyncio
    async def test_list_foreign_repository_is_not_found(self, session_factory, user):
        dao = AsyncMock()
        repo_dao = AsyncMock()
        repo_dao.get_owned.return_value = None
        with pytest.raises(NotFoundError, match="repository not found"):
            await PainPointService(dao, repo_dao).list(
                session_factory(), user.id, repository_id=uuid.uuid4()
            )
        dao.list_paginated.assert_not_awaited()


# ── RepositoryService / ProfileService ────────────────────────────────────


class TestRepositoryService:
    @pytest.mark.asyncio
    async def test_get_owned_missing(self, session_factory, user):
        dao = AsyncMock()
        dao.get_owned.return_value = None
        with pytest.raises(NotFoundError):
            await RepositoryService(dao).get_owned(session_factory(), user.id, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_register_duplicate_is_conflict(self, session_factory, user):
        dao = AsyncMock()
        dao.create.side_effect = IntegrityError("insert", {}, Exception("duplicate key"))
        info = {
            "id": 1,
            "name": "hello-world",
            "full_name": "octocat/hello-world",
            "html_url": "https://github.com/octocat/hello-world",
        }
        with pytest.raises(ConflictError):
            await RepositoryService(dao).register(session_factory(), user.id, github_info=info)

    @pytest.mark.asyncio
    async def test_register_maps_github_payload(self, session_factory, user):
        dao = AsyncMock()
        info = {
            "id": 1296269,
            "name": "hello-world",
            "full_name": "octocat/hello-world",
            "html_url": "https://github.com/octocat/hello-world",
            "description": None,
            "default_branch": "trunk",
        }
        await RepositoryService(dao).register(
            session_factory(), user.id, github_info=info, access_token="tok"
        )
        kwargs = dao.create.await_args.kwargs
        assert kwargs["github_id"] == "1296269"
        assert kwargs["default_branch"] == "trunk"
        assert kwargs["github_access_token"] == "tok"


class TestProfileService:
    @pytest.mark.asyncio
    async def test_update_ignores_unknown_fields(self, session_factory, user):
        dao = AsyncMock()
        dao.update.return_value = user
        await ProfileService(dao).update(
            session_factory(), user, full_name="Ada King", email="evil@example.com"
        )
        assert dao.update.await_args.kwargs == {"full_name": "Ada King"}

    @pytest.mark.asyncio
    async def test_update_nothing(self, session_factory, user):
        dao = AsyncMock()
        assert await ProfileService(dao).update(session_factory(), user) is user
        dao.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete(self, session_factory, user):
        dao = AsyncMock()
        dao.delete.return_value = True
        await ProfileService(dao).delete(session_factory(), user)
        dao.delete.assert_awaited_once_with(dao.delete.await_args.args[0], user.id)
