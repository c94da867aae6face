"""Tests for identity and session tracking."""

from __future__ import annotations

import pytest

from review_insights.errors import NotFoundError, UnauthorizedError, ValidationError
from review_insights.services import session_service
from review_insights.utils.identifiers import UuidIdGenerator


class SequentialIds:
    def __init__(self):
        self.counter = 0

    def _next(self, prefix):
        self.counter += 1
        return f"{prefix}_{self.counter}"

    def new_user_id(self):
        return self._next("user")

    def new_session_id(self):
        return self._next("session")

    def new_device_id(self):
        return self._next("device")


class TestSignup:
    def test_creates_identity(self, db_session):
        user, created = session_service.signup(db_session, "Dev@Example.com", SequentialIds())
        assert created is True
        assert user.email == "dev@example.com"
        assert (user.user_id, user.session_id, user.device_id) == ("user_1", "session_2", "device_3")
        assert user.is_active is True

    def test_is_idempotent_and_case_insensitive(self, db_session):
        first, _ = session_service.signup(db_session, "dev@example.com")
        second, created = session_service.signup(db_session, "  DEV@example.COM ")
        assert created is False
        assert (second.user_id, second.session_id) == (first.user_id, first.session_id)

    @pytest.mark.parametrize("email", [None, "", "no-at-sign", 42])
    def test_rejects_invalid_email(self, db_session, email):
        with pytest.raises(ValidationError):
            session_service.signup(db_session, email)


class TestLoginLogoutVerify:
    def test_login_unknown_email(self, db_session):
        with pytest.raises(NotFoundError):
            session_service.login(db_session, "ghost@example.com")

    def test_logout_then_verify_fails_then_login_restores(self, db_session):
        user, _ = session_service.signup(db_session, "dev@example.com")
        session_service.verify(db_session, user.user_id, user.session_id)

        session_service.logout(db_session, user.user_id)
        with pytest.raises(UnauthorizedError):
            session_service.verify(db_session, user.user_id, user.session_id)

        session_service.login(db_session, "DEV@example.com")
        assert session_service.verify(db_session, user.user_id, user.session_id).is_active is True

    def test_verify_refreshes_last_activity(self, db_session):
        user, _ = session_service.signup(db_session, "dev@example.com")
        before = user.last_activity
        verified = session_service.verify(db_session, user.user_id, user.session_id)
        assert verified.last_activity >= before

    def test_verify_mismatched_session(self, db_session):
        user, _ = session_service.signup(db_session, "dev@example.com")
        with pytest.raises(UnauthorizedError, match="Invalid session"):
            session_service.verify(db_session, user.user_id, "session_other")

    def test_verify_requires_both_ids(self, db_session):
        with pytest.raises(ValidationError):
            session_service.verify(db_session, "user_1", None)

    def test_logout_unknown_user(self, db_session):
        with pytest.raises(NotFoundError):
            session_service.logout(db_session, "user_missing")


class TestUuidIdGenerator:
    def test_prefixes_and_uniqueness(self):
        generator = UuidIdGenerator()
        ids = {generator.new_user_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(value.startswith("user_") for value in ids)
        assert generator.new_session_id().startswith("session_")
        assert generator.new_device_id().startswith("device_")
