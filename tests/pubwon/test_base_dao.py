"""Tests for BaseDAO — cursor codec, keyset paging and update guards."""

import base64
import json
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from pubwon.dao.base import (
    PAGE_SIZE_MAX,
    InvalidCursorError,
    _sign,
    decode_cursor,
    encode_cursor,
)
from pubwon.dao.pain_point_dao import PainPointDAO
from pubwon.models.pain_point import PainPoint


def _forge_cursor(payload: str) -> str:
    """Create a cursor with a valid HMAC signature but arbitrary payload."""
    sig = _sign(payload)
    return base64.urlsafe_b64encode(f"{payload}|{sig}".encode()).decode()


def _pain_points(n: int) -> list[PainPoint]:
    base = datetime(2026, 3, 1, tzinfo=timezone.utc)
    return [
        PainPoint(
            id=uuid.uuid4(),
            title=f"pain {i}",
            description="d",
            status="pending",
            created_at=base - timedelta(minutes=i),
        )
        for i in range(n)
    ]


def _session_returning(rows: list) -> AsyncMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    session = AsyncMock()
    session.execute = AsyncMock(return_value=result)
    return session


# ── cursor encode / decode ───────────────────────────────────────────────


class TestCursorCodec:
    def test_roundtrip(self):
        dt = datetime(2026, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
        uid = uuid.uuid4()
        decoded = decode_cursor(encode_cursor(dt, uid))
        assert decoded.created_at == dt
        assert decoded.id == uid

    def test_naive_datetime_gets_utc(self):
        decoded = decode_cursor(encode_cursor(datetime(2026, 1, 15, 10, 30), uuid.uuid4()))
        assert decoded.created_at.tzinfo is not None

    def test_garbage(self):
        with pytest.raises(InvalidCursorError):
            decode_cursor("garbage")

    def test_signed_but_missing_keys(self):
        with pytest.raises(InvalidCursorError, match="invalid cursor"):
            decode_cursor(_forge_cursor(json.dumps({"x": 1})))

    def test_tampered_cursor_rejected(self):
        uid = uuid.uuid4()
        encoded = encode_cursor(datetime(2026, 1, 15, tzinfo=timezone.utc), uid)
        raw = base64.urlsafe_b64decode(encoded.encode()).decode()
        payload, sig = raw.rsplit("|", 1)
        tampered = base64.urlsafe_b64encode(
            f"{payload.replace(str(uid), str(uuid.uuid4()))}|{sig}".encode()
        ).decode()
        with pytest.raises(InvalidCursorError, match="signature mismatch"):
            decode_cursor(tampered)

    def test_cursor_from_other_deployment_rejected(self, monkeypatch):
        encoded = encode_cursor(datetime(2026, 1, 15, tzinfo=timezone.utc), uuid.uuid4())
        monkeypatch.setenv("PUBWON_CURSOR_SECRET", "a-different-secret")
        with pytest.raises(InvalidCursorError, match="signature mismatch"):
            decode_cursor(encoded)


# ── paginate ─────────────────────────────────────────────────────────────


class TestPaginate:
    async def test_last_page(self):
        dao = PainPointDAO()
        rows = _pain_points(3)
        page = await dao.paginate(_session_returning(rows), select(PainPoint), page_size=5)
        assert page.data == rows
        assert page.has_more is False
        assert page.next_cursor is None

    async def test_extra_row_means_more(self):
        dao = PainPointDAO()
        rows = _pain_points(3)
        page = await dao.paginate(_session_returning(rows), select(PainPoint), page_size=2)

        assert page.data == rows[:2]
        assert page.has_more is True
        cursor = decode_cursor(page.next_cursor)
        assert cursor.id == rows[1].id
        assert cursor.created_at == rows[1].created_at

    async def test_page_size_is_clamped(self):
        dao = PainPointDAO()
        session = _session_returning([])
        await dao.paginate(session, select(PainPoint), page_size=10_000)
        stmt = session.execute.await_args.args[0]
        compiled = stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True})
        sql = str(compiled)
        assert f"LIMIT {PAGE_SIZE_MAX + 1}" in sql

    async def test_bad_cursor_fails_before_query(self):
        dao = PainPointDAO()
        session = _session_returning([])
        with pytest.raises(InvalidCursorError):
            await dao.paginate(session, select(PainPoint), cursor="nope")
        session.execute.assert_not_awaited()


# ── update guards ────────────────────────────────────────────────────────


class TestUpdateGuards:
    async def test_immutable_column(self):
        with pytest.raises(AttributeError, match="immutable"):
            await PainPointDAO().update(AsyncMock(), uuid.uuid4(), created_at=datetime.now())

    async def test_unknown_column(self):
        with pytest.raises(AttributeError, match="no column"):
            await PainPointDAO().update(AsyncMock(), uuid.uuid4(), colour="red")

    async def test_missing_row(self):
        session = AsyncMock()
        session.get = AsyncMock(return_value=None)
        assert await PainPointDAO().update(session, uuid.uuid4(), status="approved") is None

    async def test_none_pk(self):
        with pytest.raises(ValueError, match="pk must not be None"):
            await PainPointDAO().get_by_id(AsyncMock(), None)


# ── pain point visibility ────────────────────────────────────────────────


class TestPainPointVisibility:
    async def test_list_only_sees_own_or_unattached(self):
        session = _session_returning([])
        await PainPointDAO().list_paginated(session, uuid.uuid4(), status="approved")

        stmt = session.execute.await_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "pain_points.repository_id IS NULL" in sql
        assert "FROM repositories" in sql
        assert "repositories.user_id =" in sql
