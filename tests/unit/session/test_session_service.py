"""Tests for session creation, revocation and resolution."""

import asyncio
from datetime import timedelta

from zerah.core.modules.session.models import SessionPayload
from zerah.utils import now


class TestCreateSession:
    def test_token_resolves_to_user(self, core):
        """Test that a new session's token resolves to the same user."""
        token = asyncio.run(core.services.session.create_session("42", "user@example.com"))
        session = core.services.session.resolve(token)

        assert session is not None
        assert session.user_id == "42"
        assert session.email == "user@example.com"

    def test_expiry_follows_configured_ttl(self, core, config):
        """Test that the token and the stored record expire after session_ttl_days."""
        before = now()
        token = asyncio.run(core.services.session.create_session("42"))
        session = core.services.session.resolve(token)

        expected = before + timedelta(days=config.session_ttl_days)
        assert session is not None
        assert expected <= session.expires_at <= expected + timedelta(seconds=5)

    def test_record_persisted(self, core, database):
        """Test that each login stores a session record."""
        asyncio.run(core.services.session.create_session("42"))
        asyncio.run(core.services.session.create_session("42"))

        records = database.get_collection("sessions").documents
        assert len(records) == 2
        assert all(record["user_id"] == "42" for record in records)
        assert all(record["expires_at"] > record["created_at"] for record in records)


class TestRevokeAllSessions:
    def test_removes_every_session_of_user(self, core, database):
        """Test that logout deletes all of the user's sessions and only those."""
        for user_id in ("42", "42", "7"):
            asyncio.run(core.services.session.create_session(user_id))

        removed = asyncio.run(core.services.session.revoke_all_sessions("42"))

        assert removed == 2
        assert [r["user_id"] for r in database.get_collection("sessions").documents] == ["7"]

    def test_user_without_sessions_is_noop(self, core):
        """Test that revoking a user with zero sessions is not an error."""
        assert asyncio.run(core.services.session.revoke_all_sessions("nobody")) == 0

    def test_revoked_token_still_resolves_until_expiry(self, core):
        """Test that resolve trusts the token and does not consult the store."""
        token = asyncio.run(core.services.session.create_session("42"))
        asyncio.run(core.services.session.revoke_all_sessions("42"))

        session = core.services.session.resolve(token)
        assert session is not None
        assert session.user_id == "42"


class TestResolve:
    def test_expired_token(self, core):
        """Test that an expired token resolves to no session."""
        payload = SessionPayload(user_id="42", expires_at=now() - timedelta(seconds=1))
        token = core.services.session.codec.encrypt(payload)

        assert core.services.session.resolve(token) is None

    def test_tampered_token(self, core):
        """Test that a modified token resolves to no session instead of raising."""
        token = asyncio.run(core.services.session.create_session("42"))

        assert core.services.session.resolve(token[:-4] + "AAAA") is None
        assert core.services.session.resolve(token + "x") is None

    def test_missing_token(self, core):
        assert core.services.session.resolve(None) is None
