"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, delete

from blogapi.db.models import User, UserSession, Post
from blogapi.db.session import get_session
from blogapi.domain.ids import new_id


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def list_users(self) -> list[User]:
        with get_session() as session:
            stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
            return list(session.execute(stmt).scalars().all())

    def create_user(self, email: str, password_hash: str, full_name: str, bio: str | None = None) -> User:
        now = datetime.now(timezone.utc)
        entity = User(
            id=new_id(),
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            bio=bio,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_user(self, user_id: str, **values) -> Optional[User]:
        with get_session() as session:
            user = session.get(User, user_id)
            if not user:
                return None
            for name, value in values.items():
                setattr(user, name, value)
            user.updated_at = datetime.now(timezone.utc)
            session.commit()
            session.refresh(user)
            return user

    def delete_user(self, user_id: str) -> None:
        with get_session() as session:
            user = session.get(User, user_id)
            if user:
                session.delete(user)
                session.commit()

    # -------------------------- sessions --------------------------
    def create_session(self, token: str, user_id: str, expires_at: datetime) -> UserSession:
        entity = UserSession(
            token=token,
            user_id=user_id,
            expires_at=expires_at,
            created_at=datetime.now(timezone.utc),
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            return entity

    def get_session(self, token: str) -> Optional[UserSession]:
        with get_session() as session:
            return session.get(UserSession, token)

    def delete_session(self, token: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.token == token))
            session.commit()

    def delete_user_sessions(self, user_id: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.user_id == user_id))
            session.commit()

    # -------------------------- posts --------------------------
    def get_post(self, post_id: str) -> Optional[Post]:
        with get_session() as session:
            return session.get(Post, post_id)

    def get_post_with_author(self, post_id: str) -> Optional[tuple[Post, Optional[User]]]:
        with get_session() as session:
            stmt = (
                select(Post, User)
                .outerjoin(User, Post.author_id == User.id)
                .where(Post.id == post_id)
            )
            row = session.execute(stmt).first()
            return (row[0], row[1]) if row else None

    def list_posts_with_authors(self) -> list[tuple[Post, Optional[User]]]:
        with get_session() as session:
            stmt = (
                select(Post, User)
                .outerjoin(User, Post.author_id == User.id)
                .order_by(Post.created_at.desc(), Post.id.desc())
            )
            return [(post, author) for post, author in session.execute(stmt).all()]

    def list_posts_by_author(self, author_id: str) -> list[Post]:
        with get_session() as session:
            stmt = select(Post).where(Post.author_id == author_id).order_by(Post.created_at.desc(), Post.id.desc())
            return list(session.execute(stmt).scalars().all())

    def create_post(
        self,
        author_id: str,
        content: str,
        avatar: str | None = None,
        avatar_key: str | None = None,
    ) -> Post:
        now = datetime.now(timezone.utc)
        entity = Post(
            id=new_id(),
            content=content,
            author_id=author_id,
            avatar=avatar,
            avatar_key=avatar_key,
            likes=[],
            dislikes=[],
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_post(self, post_id: str, **values) -> Optional[Post]:
        with get_session() as session:
            post = session.get(Post, post_id)
            if not post:
                return None
            for name, value in values.items():
                setattr(post, name, value)
            post.updated_at = datetime.now(timezone.utc)
            session.commit()
            session.refresh(post)
            return post

    def set_post_reactions(self, post_id: str, likes: list[str], dislikes: list[str]) -> Optional[Post]:
        # JSON columns only track reassignment, so fresh lists are stored.
        return self.update_post(post_id, likes=list(likes), dislikes=list(dislikes))

    def delete_post(self, post_id: str) -> None:
        with get_session() as session:
            session.execute(delete(Post).where(Post.id == post_id))
            session.commit()
