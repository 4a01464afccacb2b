"""Image asset storage: local media directory or a DigitalOcean Spaces bucket."""
from __future__ import annotations

import logging
import os
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Iterable, cast
from urllib.parse import urlparse

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from PIL import Image, UnidentifiedImageError

from ..config import get_settings
from ..security.secrets import MissingSecretError, is_placeholder, require_secret

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS: frozenset[str] = frozenset(
    {"jpg", "jpeg", "png", "gif", "bmp", "tiff", "tif", "ico", "svg", "webp", "heif", "heic"}
)
# Formats passed through untouched: vector, multi-resolution or animated.
_PASSTHROUGH_FORMATS = {"SVG", "ICO", "GIF"}

IMAGE_PROCESSING_FAILED = "Image could not be processed"


@dataclass(frozen=True)
class SpacesConfig:
    """Runtime configuration extracted from environment variables."""

    key: str
    secret: str
    region: str
    bucket: str
    api_endpoint: str
    public_endpoint: str


@dataclass(frozen=True)
class StoredAsset:
    """Reference returned after persisting an uploaded image."""

    url: str
    key: str
    content_type: str


class StorageConfigurationError(RuntimeError):
    """Raised when the selected storage backend is missing required settings."""


class StorageUploadError(RuntimeError):
    """Raised when an upload to the storage backend fails."""


class StorageDeletionError(RuntimeError):
    """Raised when removing a stored asset fails."""


class UnsupportedImageError(ValueError):
    """Raised when an upload does not carry an allowed image extension."""


@lru_cache(maxsize=1)
def load_spaces_config() -> SpacesConfig:
    """Read and validate DigitalOcean Spaces configuration from the environment."""

    required: dict[str, str | None] = {
        "DO_SPACES_KEY": os.getenv("DO_SPACES_KEY"),
        "DO_SPACES_SECRET": os.getenv("DO_SPACES_SECRET"),
        "DO_SPACES_REGION": os.getenv("DO_SPACES_REGION"),
        "DO_SPACES_NAME": os.getenv("DO_SPACES_NAME"),
        "DO_SPACES_ENDPOINT": os.getenv("DO_SPACES_ENDPOINT"),
    }

    missing = [name for name, value in required.items() if not value or not value.strip()]
    if missing:
        raise StorageConfigurationError(
            "Missing required DigitalOcean Spaces configuration: " + ", ".join(sorted(missing))
        )

    try:
        key = require_secret("DO_SPACES_KEY")
        secret = require_secret("DO_SPACES_SECRET")
    except MissingSecretError as exc:
        raise StorageConfigurationError(str(exc)) from exc

    region = cast(str, required["DO_SPACES_REGION"]).strip()
    bucket = cast(str, required["DO_SPACES_NAME"]).strip()
    endpoint_raw = cast(str, required["DO_SPACES_ENDPOINT"]).strip()

    if is_placeholder(region):
        raise StorageConfigurationError("DO_SPACES_REGION must be set to a valid region identifier")
    if is_placeholder(bucket):
        raise StorageConfigurationError("DO_SPACES_NAME must be set to the target bucket name")

    public_endpoint = endpoint_raw.rstrip("/")
    parsed = urlparse(public_endpoint)
    if not parsed.scheme:
        public_endpoint = f"https://{public_endpoint.lstrip(':/')}"
        parsed = urlparse(public_endpoint)

    if not (parsed.netloc or parsed.path):
        raise StorageConfigurationError("DO_SPACES_ENDPOINT must include a hostname.")

    return SpacesConfig(
        key=key,
        secret=secret,
        region=region,
        bucket=bucket,
        api_endpoint=f"https://{region}.digitaloceanspaces.com",
        public_endpoint=parsed.geturl().rstrip("/"),
    )


@lru_cache(maxsize=1)
def get_spaces_client() -> BaseClient:
    """Create a singleton boto3 client for Spaces interactions."""

    config = load_spaces_config()
    session = Session()
    return session.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.api_endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def _sanitize_segments(parts: Iterable[str]) -> list[str]:
    """Sanitize path segments to be safe for object keys."""

    sanitized: list[str] = []
    for part in parts:
        if part in {"", ".", ".."}:
            continue
        cleaned = re.sub(r"[^A-Za-z0-9._-]", "-", part.strip())
        cleaned = re.sub(r"-+", "-", cleaned).strip("-._")
        if cleaned:
            sanitized.append(cleaned)
    return sanitized


def image_extension(filename: str | None) -> str:
    """Return the lower-cased extension of ``filename`` or raise :class:`UnsupportedImageError`."""

    extension = Path(filename or "").suffix.lower().lstrip(".")
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise UnsupportedImageError(
            "Unsupported image type. Allowed: " + ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS))
        )
    return extension


def _object_key(extension: str, folder: str) -> str:
    """Generate a namespaced object key anchored within the requested folder."""

    folder_segments = _sanitize_segments((folder or "uploads").replace("\\", "/").split("/"))
    safe_folder = "/".join(folder_segments) or "uploads"
    return f"{safe_folder}/{uuid.uuid4().hex}.{extension}"


def constrain_image(data: bytes, *, max_dimension: int) -> bytes:
    """Downscale raster images so neither side exceeds ``max_dimension``.

    Data Pillow cannot identify is returned unchanged. Recognised images that
    fail to decode (truncated, corrupt or oversized) raise
    :class:`UnsupportedImageError`.
    """

    try:
        with Image.open(BytesIO(data)) as image:
            image_format = image.format or "PNG"
            if image_format in _PASSTHROUGH_FORMATS:
                return data
            if image.width <= max_dimension and image.height <= max_dimension:
                return data
            image.thumbnail((max_dimension, max_dimension))
            buffer = BytesIO()
            image.save(buffer, format=image_format)
            return buffer.getvalue()
    except UnidentifiedImageError:
        logger.info("Storing unrecognised image payload without resizing")
        return data
    except (OSError, SyntaxError, Image.DecompressionBombError) as exc:
        # Pillow reports broken PNG chunks as SyntaxError.
        logger.warning("Rejected undecodable image upload: %s", exc)
        raise UnsupportedImageError(IMAGE_PROCESSING_FAILED) from exc


def _store_local(data: bytes, key: str) -> str:
    settings = get_settings()
    target = Path(settings.media_root) / key
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        logger.exception("Failed to write media file %s", target)
        raise StorageUploadError("Unable to store image") from exc
    return f"{settings.media_url_prefix.rstrip('/')}/{key}"


def _store_spaces(data: bytes, key: str, content_type: str, client: BaseClient | None) -> str:
    config = load_spaces_config()
    s3_client = client or get_spaces_client()
    try:
        s3_client.upload_fileobj(
            BytesIO(data),
            config.bucket,
            key,
            ExtraArgs={"ACL": "public-read", "ContentType": content_type},
        )
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
        logger.exception("Upload to DigitalOcean Spaces failed: %s", exc)
        raise StorageUploadError("Upload to DigitalOcean Spaces failed") from exc
    return f"{config.public_endpoint}/{key}"


def _backend() -> str:
    backend = get_settings().storage_backend.strip().lower()
    if backend not in {"local", "spaces"}:
        raise StorageConfigurationError(f"Unknown STORAGE_BACKEND '{backend}'")
    return backend


async def store_image(
    file: UploadFile,
    *,
    folder: str = "uploads",
    client: BaseClient | None = None,
) -> StoredAsset:
    """Persist an uploaded image and return the reference to store on the owning row."""

    extension = image_extension(file.filename)
    backend = _backend()
    content_type = (file.content_type or "application/octet-stream").strip() or "application/octet-stream"
    raw = await file.read()
    if not raw:
        raise StorageUploadError("Uploaded file is empty")

    max_dimension = get_settings().image_max_dimension
    data = await run_in_threadpool(constrain_image, raw, max_dimension=max_dimension)
    key = _object_key(extension, folder)

    if backend == "spaces":
        url = await run_in_threadpool(_store_spaces, data, key, content_type, client)
    else:
        url = await run_in_threadpool(_store_local, data, key)

    logger.info("Stored image %s (%d bytes) via %s backend", key, len(data), backend)
    return StoredAsset(url=url, key=key, content_type=content_type)


def asset_key_from_url(url: str | None) -> str | None:
    """Return the object key behind ``url`` when the active backend stored it, else ``None``."""

    if not url:
        return None
    if _backend() == "local":
        prefix = get_settings().media_url_prefix.rstrip("/") + "/"
    else:
        prefix = load_spaces_config().public_endpoint + "/"
    if not url.startswith(prefix):
        return None
    return url[len(prefix):] or None


def delete_asset(key: str, *, client: BaseClient | None = None) -> None:
    """Remove a stored asset from the active backend."""

    if not key:
        return

    normalized_key = key.lstrip("/")
    if _backend() == "local":
        try:
            (Path(get_settings().media_root) / normalized_key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageDeletionError("Unable to delete media from storage") from exc
        return

    config = load_spaces_config()
    s3_client = client or get_spaces_client()
    try:
        s3_client.delete_object(Bucket=config.bucket, Key=normalized_key)
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
        logger.exception("Failed to delete Spaces object %s", normalized_key)
        raise StorageDeletionError("Unable to delete media from storage") from exc


def discard_asset(key: str | None) -> None:
    """Best-effort removal of an asset that is no longer referenced; failures are only logged."""

    if not key:
        return
    try:
        delete_asset(key)
    except (StorageDeletionError, StorageConfigurationError):
        logger.warning("Cleanup of orphaned asset %s failed", key, exc_info=True)


__all__ = [
    "asset_key_from_url",
    "discard_asset",
    "ALLOWED_IMAGE_EXTENSIONS",
    "SpacesConfig",
    "StoredAsset",
    "StorageConfigurationError",
    "StorageUploadError",
    "StorageDeletionError",
    "UnsupportedImageError",
    "constrain_image",
    "IMAGE_PROCESSING_FAILED",
    "delete_asset",
    "get_spaces_client",
    "image_extension",
    "load_spaces_config",
    "store_image",
]
