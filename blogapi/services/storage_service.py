"""
Object storage for uploaded images.

Local disk, S3-compatible buckets and an in-memory test double share the
StorageClient interface; services only ever see public URLs and keys.
"""

from __future__ import annotations

import io
import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from blogapi.core.config import Settings, get_settings
from blogapi.core.utils import absolute_url

logger = logging.getLogger(__name__)

LOCAL_URL_PREFIX = "/uploads"

# Pillow format name -> (file extension, accepted content types)
IMAGE_FORMATS = {
    "JPEG": ("jpg", {"image/jpeg", "image/jpg", "image/pjpeg"}),
    "PNG": ("png", {"image/png"}),
    "GIF": ("gif", {"image/gif"}),
    "WEBP": ("webp", {"image/webp"}),
}
ALLOWED_CONTENT_TYPES = set().union(*(types for _, types in IMAGE_FORMATS.values()))


class StorageError(Exception):
    """Base exception for upload handling."""


class InvalidImageError(StorageError):
    pass


class ImageTooLargeError(StorageError):
    pass


@dataclass
class StoredObject:
    key: str
    url: str
    content_type: str
    size: int

    def as_dict(self) -> dict:
        return {"key": self.key, "url": self.url, "content_type": self.content_type, "size": self.size}


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def upload(self, key: str, data: bytes, content_type: str) -> StoredObject:
        ...

    def delete(self, key: str) -> None:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://storage.example.test"
    stored_objects: dict = field(default_factory=dict)

    def upload(self, key: str, data: bytes, content_type: str) -> StoredObject:
        self.stored_objects[key] = data
        return StoredObject(key=key, url=f"{self.base_url}/{key}", content_type=content_type, size=len(data))

    def delete(self, key: str) -> None:
        self.stored_objects.pop(key, None)


@dataclass
class LocalStorageClient:
    """Stores files below a directory that the app serves at /uploads."""

    root: str

    def _path(self, key: str) -> str:
        root = os.path.abspath(self.root)
        path = os.path.abspath(os.path.join(root, key))
        if os.path.commonpath([root, path]) != root:
            raise StorageError(f"Key escapes upload directory: {key}")
        return path

    def upload(self, key: str, data: bytes, content_type: str) -> StoredObject:
        dest_path = self._path(key)
        os.makedirs(os.path.dirname(dest_path), exist_ok=True)
        with open(dest_path, "wb") as f:
            f.write(data)
        url = absolute_url(f"{LOCAL_URL_PREFIX}/{key}")
        return StoredObject(key=key, url=url, content_type=content_type, size=len(data))

    def delete(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client (AWS S3, R2, COS, MinIO).
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    public_base_url: str = ""

    def __post_init__(self):
        config = Config(signature_version="s3v4")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def _public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        region = self.region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{key}"

    def upload(self, key: str, data: bytes, content_type: str) -> StoredObject:
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return StoredObject(key=key, url=self._public_url(key), content_type=content_type, size=len(data))

    def delete(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=key)


_storage_client: StorageClient | None = None


def build_storage_client(settings: Settings) -> StorageClient:
    backend = settings.storage_backend
    if backend == "memory":
        return InMemoryStorageClient()
    if backend == "s3":
        if not settings.s3_bucket:
            raise RuntimeError("S3_BUCKET must be configured when STORAGE_BACKEND=s3.")
        return S3StorageClient(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            endpoint=settings.s3_endpoint,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            public_base_url=settings.s3_public_base_url,
        )
    if backend != "local":
        raise RuntimeError(f"Unknown STORAGE_BACKEND: {backend}")
    return LocalStorageClient(root=settings.uploads_dir)


def get_storage_client() -> StorageClient:
    """Return a process-wide storage client built from settings."""
    global _storage_client
    if _storage_client is None:
        _storage_client = build_storage_client(get_settings())
        logger.info("Storage client: %s", _storage_client.__class__.__name__)
    return _storage_client


def set_storage_client(client: StorageClient | None) -> None:
    global _storage_client
    _storage_client = client


def _detect_format(data: bytes) -> str:
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format or ""
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise InvalidImageError("invalid image file") from exc
    return image_format.upper()


def validate_image(data: bytes, content_type: str | None, *, max_bytes: int | None = None) -> tuple[str, str]:
    """Check an uploaded image and return its (extension, content type)."""
    ct = (content_type or "").lower()
    if ct not in ALLOWED_CONTENT_TYPES:
        raise InvalidImageError("unsupported image format (use JPEG, PNG, GIF or WEBP)")
    if not data:
        raise InvalidImageError("image is empty")
    limit = max_bytes if max_bytes is not None else get_settings().max_upload_bytes
    if limit and len(data) > limit:
        raise ImageTooLargeError(f"image exceeds {limit} bytes")
    image_format = _detect_format(data)
    if image_format not in IMAGE_FORMATS:
        raise InvalidImageError("unsupported image format (use JPEG, PNG, GIF or WEBP)")
    extension, content_types = IMAGE_FORMATS[image_format]
    if ct not in content_types:
        raise InvalidImageError("image content does not match its declared type")
    return extension, ct


def store_image(client: StorageClient, data: bytes, content_type: str | None, folder: str) -> StoredObject:
    extension, ct = validate_image(data, content_type)
    key = f"{folder.strip('/')}/{secrets.token_hex(16)}.{extension}"
    try:
        stored = client.upload(key, data, ct)
    except (BotoCoreError, ClientError, OSError) as exc:
        logger.exception("Upload of %s failed", key)
        raise StorageError("image upload failed") from exc
    logger.info("Stored image %s (%d bytes)", key, stored.size)
    return stored


def discard_object(client: StorageClient, key: str | None) -> None:
    """Delete a stored object; failures are logged and otherwise ignored."""
    if not key:
        return
    try:
        client.delete(key)
    except (BotoCoreError, ClientError, OSError, StorageError) as exc:
        logger.warning("Could not delete stored object %s: %s", key, exc)
