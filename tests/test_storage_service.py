from __future__ import annotations

import os

import pytest

from blogapi.services.storage_service import (
    ImageTooLargeError,
    InMemoryStorageClient,
    InvalidImageError,
    LocalStorageClient,
    StorageError,
    build_storage_client,
    discard_object,
    store_image,
    validate_image,
)
from blogapi.core.config import get_settings
from conftest import make_image


def test_validate_image_detects_format(png_bytes):
    assert validate_image(png_bytes, "image/png", max_bytes=0) == ("png", "image/png")
    assert validate_image(make_image("JPEG"), "image/jpeg", max_bytes=0) == ("jpg", "image/jpeg")


def test_validate_image_rejects_mismatch_and_garbage(png_bytes):
    with pytest.raises(InvalidImageError):
        validate_image(png_bytes, "image/jpeg", max_bytes=0)
    with pytest.raises(InvalidImageError):
        validate_image(b"definitely not an image", "image/gif", max_bytes=0)
    with pytest.raises(InvalidImageError):
        validate_image(png_bytes, "application/pdf", max_bytes=0)
    with pytest.raises(InvalidImageError):
        validate_image(b"", "image/png", max_bytes=0)


def test_validate_image_enforces_size(png_bytes):
    with pytest.raises(ImageTooLargeError):
        validate_image(png_bytes, "image/png", max_bytes=10)


def test_local_storage_writes_and_deletes(tmp_path, png_bytes, db_env):
    client = LocalStorageClient(root=str(tmp_path / "uploads"))
    stored = store_image(client, png_bytes, "image/png", "images")
    path = tmp_path / "uploads" / stored.key
    assert path.read_bytes() == png_bytes
    assert stored.url.endswith(f"/uploads/{stored.key}")

    discard_object(client, stored.key)
    assert not path.exists()


def test_local_storage_refuses_escaping_keys(tmp_path):
    client = LocalStorageClient(root=str(tmp_path / "uploads"))
    with pytest.raises(StorageError):
        client.upload("../outside.png", b"x", "image/png")
    assert not os.path.exists(tmp_path / "outside.png")


def test_discard_object_ignores_missing_keys():
    client = InMemoryStorageClient()
    discard_object(client, None)
    discard_object(client, "blogs/missing.png")
    assert client.stored_objects == {}


def test_build_storage_client_from_settings(db_env):
    assert isinstance(build_storage_client(get_settings()), InMemoryStorageClient)
