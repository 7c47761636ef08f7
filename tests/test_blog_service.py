from __future__ import annotations

import pytest

from blogapi.repositories.sql_repository import SQLRepository
from blogapi.services.blog_service import (
    BlogService,
    ContentRequiredError,
    ImageUpload,
    InvalidIdError,
    InvalidReactionError,
    PermissionDeniedError,
    PostNotFoundError,
)
from blogapi.services.storage_service import InMemoryStorageClient, InvalidImageError


@pytest.fixture()
def storage():
    return InMemoryStorageClient()


@pytest.fixture()
def service(db_env, storage):
    return BlogService(storage)


@pytest.fixture()
def users(db_env):
    repo = SQLRepository()
    author = repo.create_user("author@example.com", password_hash="hash", full_name="Author")
    other = repo.create_user("other@example.com", password_hash="hash", full_name="Other")
    return author, other


def test_create_and_list_populates_author(service, users):
    author, _ = users
    service.create_post(author.id, "older")
    created = service.create_post(author.id, "  newer  ")
    assert created["content"] == "newer"
    assert created["author"] == {"id": author.id, "full_name": "Author", "email": "author@example.com"}
    assert created["reactions"]["likes"] == []

    listed = service.list_posts()
    assert [p["content"] for p in listed] == ["newer", "older"]


def test_list_filtered_by_author(service, users):
    author, other = users
    service.create_post(author.id, "by author")
    service.create_post(other.id, "by other")
    listed = service.list_posts(other.id)
    assert [p["content"] for p in listed] == ["by other"]
    assert listed[0]["author"]["full_name"] == "Other"
    assert service.list_posts("0" * 24) == []
    with pytest.raises(InvalidIdError):
        service.list_posts("bad")


def test_create_requires_content(service, users):
    author, _ = users
    with pytest.raises(ContentRequiredError):
        service.create_post(author.id, "   ")
    with pytest.raises(ContentRequiredError):
        service.create_post(author.id, None)


def test_create_with_image_stores_avatar(service, storage, users, png_bytes):
    author, _ = users
    post = service.create_post(author.id, "with image", ImageUpload(png_bytes, "image/png", "a.png"))
    assert post["avatar"].startswith(storage.base_url + "/blogs/")
    assert post["avatar"].endswith(".png")
    assert len(storage.stored_objects) == 1


def test_create_rejects_bogus_image(service, storage, users):
    author, _ = users
    with pytest.raises(InvalidImageError):
        service.create_post(author.id, "bad image", ImageUpload(b"not an image", "image/png", "a.png"))
    assert storage.stored_objects == {}
    assert service.list_posts() == []


def test_only_author_may_update_or_delete(service, users):
    author, other = users
    post = service.create_post(author.id, "mine")
    with pytest.raises(PermissionDeniedError):
        service.update_post(post["id"], other.id, content="hijacked")
    with pytest.raises(PermissionDeniedError):
        service.delete_post(post["id"], other.id)
    assert service.get_post(post["id"])["content"] == "mine"

    updated = service.update_post(post["id"], author.id, content="edited")
    assert updated["content"] == "edited"
    service.delete_post(post["id"], author.id)
    with pytest.raises(PostNotFoundError):
        service.get_post(post["id"])


def test_update_without_content_keeps_existing_text(service, users):
    author, _ = users
    post = service.create_post(author.id, "keep me")
    updated = service.update_post(post["id"], author.id)
    assert updated["content"] == "keep me"


def test_replacing_image_discards_previous_object(service, storage, users, png_bytes):
    author, _ = users
    post = service.create_post(author.id, "v1", ImageUpload(png_bytes, "image/png", "a.png"))
    first_key = next(iter(storage.stored_objects))

    updated = service.update_post(post["id"], author.id, image=ImageUpload(png_bytes, "image/png", "b.png"))
    assert updated["avatar"] != post["avatar"]
    assert first_key not in storage.stored_objects
    assert len(storage.stored_objects) == 1

    service.delete_post(post["id"], author.id)
    assert storage.stored_objects == {}


def test_bad_and_unknown_ids(service, users):
    author, _ = users
    with pytest.raises(InvalidIdError):
        service.get_post("nope")
    with pytest.raises(InvalidIdError):
        service.delete_post("nope", author.id)
    with pytest.raises(PostNotFoundError):
        service.update_post("0" * 24, author.id, content="x")


def test_react_toggles_and_switches(service, users):
    author, other = users
    post = service.create_post(author.id, "react")

    reactions = service.react(post["id"], other.id, "like")
    assert reactions["likes"] == [other.id]
    assert reactions["like_count"] == 1

    reactions = service.react(post["id"], other.id, "dislike")
    assert reactions["likes"] == []
    assert reactions["dislikes"] == [other.id]

    reactions = service.react(post["id"], other.id, "dislike")
    assert reactions["likes"] == []
    assert reactions["dislikes"] == []

    service.react(post["id"], author.id, "like")
    service.react(post["id"], other.id, "like")
    stored = service.get_post(post["id"])["reactions"]
    assert stored["likes"] == [author.id, other.id]


def test_react_rejects_unknown_type(service, users):
    author, _ = users
    post = service.create_post(author.id, "react")
    with pytest.raises(InvalidReactionError):
        service.react(post["id"], author.id, "love")
    with pytest.raises(PostNotFoundError):
        service.react("f" * 24, author.id, "like")


def test_update_rejects_blank_content(service, users):
    author, _ = users
    post = service.create_post(author.id, "original")
    with pytest.raises(ContentRequiredError):
        service.update_post(post["id"], author.id, content="   ")
    with pytest.raises(ContentRequiredError):
        service.update_post(post["id"], author.id, content="")
    assert service.get_post(post["id"])["content"] == "original"


def test_update_of_vanished_post_discards_new_image(service, storage, users, png_bytes, monkeypatch):
    author, _ = users
    post = service.create_post(author.id, "v1", ImageUpload(png_bytes, "image/png", "a.png"))
    original_keys = set(storage.stored_objects)

    monkeypatch.setattr(service.repository, "update_post", lambda post_id, **values: None)
    with pytest.raises(PostNotFoundError):
        service.update_post(post["id"], author.id, image=ImageUpload(png_bytes, "image/png", "b.png"))
    assert set(storage.stored_objects) == original_keys
