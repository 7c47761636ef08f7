"""User profile lookups and edits."""

from __future__ import annotations

from blogapi.core.utils import isoformat
from blogapi.db.models import User
from blogapi.domain.ids import is_valid_id
from blogapi.repositories.sql_repository import SQLRepository

MAX_NAME_LENGTH = 120
MAX_BIO_LENGTH = 1000


class UserError(Exception):
    """Base exception for user profile workflow."""


class InvalidUserIdError(UserError):
    pass


class UserNotFoundError(UserError):
    pass


class ProfileValidationError(UserError):
    pass


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "bio": user.bio,
        "created_at": isoformat(user.created_at),
    }


def serialize_author(user: User | None) -> dict | None:
    """Public author summary embedded in posts."""
    if user is None:
        return None
    return {"id": user.id, "full_name": user.full_name, "email": user.email}


class UserService:
    def __init__(self) -> None:
        self.repository = SQLRepository()

    def list_users(self) -> list[User]:
        return self.repository.list_users()

    def get_user(self, user_id: str) -> User:
        if not is_valid_id(user_id):
            raise InvalidUserIdError("id is invalid")
        user = self.repository.get_user(user_id)
        if not user:
            raise UserNotFoundError("user not found")
        return user

    def update_profile(self, user_id: str, *, full_name: str | None = None, bio: str | None = None) -> User:
        user = self.get_user(user_id)
        values: dict = {}
        if full_name is not None:
            name = full_name.strip()
            if not name:
                raise ProfileValidationError("full name cannot be empty")
            values["full_name"] = name[:MAX_NAME_LENGTH]
        if bio is not None:
            values["bio"] = bio.strip()[:MAX_BIO_LENGTH] or None
        if not values:
            return user
        return self.repository.update_user(user_id, **values) or user
