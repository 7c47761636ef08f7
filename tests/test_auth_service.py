from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from blogapi.repositories.sql_repository import SQLRepository
from blogapi.services import session_service
from blogapi.services.auth_service import (
    AccountExistsError,
    AuthService,
    InvalidCredentialsError,
    RegistrationError,
)


def test_register_then_login_issues_session(db_env):
    svc = AuthService()
    user = svc.register(" Alice@Example.com ", "correct-horse", "Alice")
    assert user.email == "alice@example.com"
    assert user.password_hash.startswith("argon2$")

    result = svc.login("alice@example.com", "correct-horse")
    assert result.user.id == user.id
    assert session_service.user_id_for_token(result.session_token) == user.id

    svc.logout(result.session_token)
    assert session_service.user_id_for_token(result.session_token) is None


def test_register_rejects_duplicates_and_bad_input(db_env):
    svc = AuthService()
    svc.register("bob@example.com", "password1", "Bob")
    with pytest.raises(AccountExistsError):
        svc.register("BOB@example.com", "password2", "Bobby")
    with pytest.raises(RegistrationError):
        svc.register("carol@example.com", "short", "Carol")
    with pytest.raises(RegistrationError):
        svc.register("", "password1", "Nobody")
    with pytest.raises(RegistrationError):
        svc.register("dan@example.com", "password1", "   ")


def test_login_rejects_wrong_password(db_env):
    svc = AuthService()
    svc.register("erin@example.com", "password1", "Erin")
    with pytest.raises(InvalidCredentialsError):
        svc.login("erin@example.com", "password2")
    with pytest.raises(InvalidCredentialsError):
        svc.login("nobody@example.com", "password1")


def test_expired_session_is_dropped(db_env):
    repo = SQLRepository()
    user = repo.create_user("frank@example.com", password_hash="hash", full_name="Frank")
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    repo.create_session("expired-token", user.id, past)

    assert session_service.user_id_for_token("expired-token") is None
    assert repo.get_session("expired-token") is None


def test_unknown_token_resolves_to_nobody(db_env):
    assert session_service.user_id_for_token("does-not-exist") is None
    assert session_service.user_id_for_token(None) is None
