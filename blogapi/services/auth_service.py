"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from blogapi.core.security import hash_password, needs_rehash, verify_password
from blogapi.db.models import User
from blogapi.repositories.sql_repository import SQLRepository
from blogapi.services.session_service import delete_session, issue_session

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class RegistrationError(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


@dataclass
class LoginSuccess:
    user: User
    session_token: str


@dataclass
class AuthService:
    """Handles registration, login and logout flows."""

    def __post_init__(self):
        self.repository = SQLRepository()

    def _normalize_email(self, email: str | None) -> str:
        return (email or "").strip().lower()

    def register(self, email: str, password: str, full_name: str) -> User:
        raw_email = self._normalize_email(email)
        if not raw_email or "@" not in raw_email:
            raise RegistrationError("email is required")
        name = (full_name or "").strip()
        if not name:
            raise RegistrationError("full name is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise RegistrationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self.repository.get_user_by_email(raw_email):
            raise AccountExistsError("user already exists")
        user = self.repository.create_user(raw_email, hash_password(password), name)
        logger.info("Registered user %s", user.id)
        return user

    def login(self, email: str, password: str) -> LoginSuccess:
        raw_email = self._normalize_email(email)
        if not raw_email:
            raise InvalidCredentialsError("invalid credentials")
        user = self.repository.get_user_by_email(raw_email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Rejected login for %s", raw_email)
            raise InvalidCredentialsError("invalid credentials")
        if needs_rehash(user.password_hash):
            self.repository.update_user(user.id, password_hash=hash_password(password))
        token = issue_session(user.id)
        logger.info("User %s logged in", user.id)
        return LoginSuccess(user=user, session_token=token)

    def logout(self, session_token: Optional[str]) -> None:
        if not session_token:
            return
        delete_session(session_token)
