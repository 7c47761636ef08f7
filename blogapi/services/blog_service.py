"""Blog post use cases (CRUD, ownership checks, reactions)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from blogapi.core.utils import isoformat
from blogapi.db.models import Post, User
from blogapi.domain.ids import is_valid_id
from blogapi.domain.reactions import InvalidReactionError, apply_reaction, parse_reaction_kind
from blogapi.repositories.sql_repository import SQLRepository
from blogapi.services.storage_service import StorageClient, discard_object, store_image
from blogapi.services.user_service import serialize_author

logger = logging.getLogger(__name__)

AVATAR_FOLDER = "blogs"


class BlogError(Exception):
    """Base exception for blog workflow."""


class InvalidIdError(BlogError):
    pass


class PostNotFoundError(BlogError):
    pass


class PermissionDeniedError(BlogError):
    pass


class ContentRequiredError(BlogError):
    pass


@dataclass
class ImageUpload:
    """Raw bytes of an uploaded file plus its declared content type."""

    data: bytes
    content_type: str | None
    filename: str | None = None


def serialize_reactions(post: Post) -> dict:
    likes = list(post.likes or [])
    dislikes = list(post.dislikes or [])
    return {
        "likes": likes,
        "dislikes": dislikes,
        "like_count": len(likes),
        "dislike_count": len(dislikes),
    }


def serialize_post(post: Post, author: User | None = None) -> dict:
    return {
        "id": post.id,
        "content": post.content,
        "author": serialize_author(author) if author is not None else {"id": post.author_id},
        "avatar": post.avatar,
        "reactions": serialize_reactions(post),
        "created_at": isoformat(post.created_at),
        "updated_at": isoformat(post.updated_at),
    }


class BlogService:
    """Orchestrates the repository and the storage client for blog posts."""

    def __init__(self, storage: StorageClient) -> None:
        self.repository = SQLRepository()
        self.storage = storage

    # -------------------------------------- helpers --------------------------------------
    def _load(self, post_id: str) -> Post:
        if not is_valid_id(post_id):
            raise InvalidIdError("id is invalid")
        post = self.repository.get_post(post_id)
        if not post:
            raise PostNotFoundError("blog not found")
        return post

    def _load_owned(self, post_id: str, user_id: str) -> Post:
        post = self._load(post_id)
        if post.author_id != user_id:
            raise PermissionDeniedError("You don't have permission!")
        return post

    def _store(self, image: ImageUpload | None):
        if image is None or not image.filename:
            return None
        return store_image(self.storage, image.data, image.content_type, AVATAR_FOLDER)

    # -------------------------------------- reads --------------------------------------
    def list_posts(self, author_id: str | None = None) -> list[dict]:
        """Newest first, optionally limited to one author."""
        if author_id is None:
            return [serialize_post(post, author) for post, author in self.repository.list_posts_with_authors()]
        if not is_valid_id(author_id):
            raise InvalidIdError("id is invalid")
        author = self.repository.get_user(author_id)
        if author is None:
            return []
        return [serialize_post(post, author) for post in self.repository.list_posts_by_author(author_id)]

    def get_post(self, post_id: str) -> dict:
        if not is_valid_id(post_id):
            raise InvalidIdError("id is invalid")
        row = self.repository.get_post_with_author(post_id)
        if not row:
            raise PostNotFoundError("blog not found")
        post, author = row
        return serialize_post(post, author)

    # -------------------------------------- writes --------------------------------------
    def create_post(self, author_id: str, content: str | None, image: ImageUpload | None = None) -> dict:
        text = (content or "").strip()
        if not text:
            raise ContentRequiredError("content is required")
        stored = self._store(image)
        post = self.repository.create_post(
            author_id,
            text,
            avatar=stored.url if stored else None,
            avatar_key=stored.key if stored else None,
        )
        logger.info("User %s created blog %s", author_id, post.id)
        return self.get_post(post.id)

    def update_post(
        self,
        post_id: str,
        user_id: str,
        content: str | None = None,
        image: ImageUpload | None = None,
    ) -> dict:
        post = self._load_owned(post_id, user_id)
        values: dict = {}
        if content is not None:
            text = content.strip()
            if not text:
                raise ContentRequiredError("content is required")
            values["content"] = text
        stored = self._store(image)
        if stored:
            values["avatar"] = stored.url
            values["avatar_key"] = stored.key
        if values:
            updated = self.repository.update_post(post_id, **values)
            if updated is None:
                # Removed since it was loaded; the fresh upload has no owner.
                discard_object(self.storage, stored.key if stored else None)
                raise PostNotFoundError("blog not found")
            if stored:
                discard_object(self.storage, post.avatar_key)
            logger.info("User %s updated blog %s", user_id, post_id)
        return self.get_post(post_id)

    def delete_post(self, post_id: str, user_id: str) -> None:
        post = self._load_owned(post_id, user_id)
        self.repository.delete_post(post_id)
        discard_object(self.storage, post.avatar_key)
        logger.info("User %s deleted blog %s", user_id, post_id)

    def react(self, post_id: str, user_id: str, reaction_type: object) -> dict:
        if not is_valid_id(post_id):
            raise InvalidIdError("id is invalid")
        kind = parse_reaction_kind(reaction_type)
        post = self._load(post_id)
        likes, dislikes = apply_reaction(post.likes or [], post.dislikes or [], user_id, kind)
        updated = self.repository.set_post_reactions(post_id, likes, dislikes)
        if updated is None:
            raise PostNotFoundError("blog not found")
        logger.info("User %s toggled %s on blog %s", user_id, kind.value, post_id)
        return serialize_reactions(updated)


__all__ = [
    "BlogError",
    "BlogService",
    "ContentRequiredError",
    "ImageUpload",
    "InvalidIdError",
    "InvalidReactionError",
    "PermissionDeniedError",
    "PostNotFoundError",
    "serialize_post",
    "serialize_reactions",
]
