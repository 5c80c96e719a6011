"""Object storage helpers for uploaded event images."""

from __future__ import annotations

import io
import logging
import os
import re
from typing import Optional
from uuid import uuid4

from minio import Minio
from minio.error import S3Error

# purpose: persist event artwork in MinIO when configured, else the local upload dir
# status: active

logger = logging.getLogger(__name__)

_MINIO_CLIENT: Optional[Minio] = None


def _get_upload_dir() -> str:
    """Return the configured upload directory, creating it when needed."""

    upload_dir = os.getenv("UPLOAD_DIR", "uploaded_files")
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


def _bucket() -> str:
    return os.getenv("MINIO_BUCKET", "uploads")


def _ensure_minio_client() -> Optional[Minio]:
    """Return a MinIO client when endpoint and credentials are configured."""

    global _MINIO_CLIENT
    endpoint = os.getenv("MINIO_ENDPOINT", "").strip()
    access_key = os.getenv("MINIO_ACCESS_KEY")
    secret_key = os.getenv("MINIO_SECRET_KEY")
    if not endpoint or not access_key or not secret_key:
        return None
    if _MINIO_CLIENT is None:
        client = Minio(
            endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=endpoint.startswith("https"),
        )
        if not client.bucket_exists(_bucket()):
            client.make_bucket(_bucket())
        _MINIO_CLIENT = client
    return _MINIO_CLIENT


def build_object_key(namespace: str | None, filename: str) -> str:
    """Return ``namespace/<uuid>_<safe filename>`` usable as a path and S3 key."""

    safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", os.path.basename(filename or "")) or "image.bin"
    clean_namespace = re.sub(r"[^A-Za-z0-9_-]", "_", (namespace or "").strip("/"))
    if not clean_namespace:
        return f"{uuid4()}_{safe_name}"
    return f"{clean_namespace}/{uuid4()}_{safe_name}"


def _local_path(key: str) -> str:
    parts = [part for part in key.split("/") if part not in ("", ".", "..")]
    if not parts:
        raise FileNotFoundError("Empty storage key")
    return os.path.join(_get_upload_dir(), *parts)


def save_binary_payload(
    data: bytes,
    filename: str,
    *,
    content_type: str = "application/octet-stream",
    namespace: str | None = None,
) -> tuple[str, str, int]:
    """Store ``data`` and return ``(key, storage_path, size)``."""

    key = build_object_key(namespace, filename)
    client = _ensure_minio_client()
    if client:
        client.put_object(
            _bucket(),
            key,
            io.BytesIO(data),
            length=len(data),
            content_type=content_type,
        )
        logger.info("Stored %s in bucket %s (%d bytes)", key, _bucket(), len(data))
        return key, f"s3://{_bucket()}/{key}", len(data)

    path = _local_path(key)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as handle:
        handle.write(data)
    logger.info("Stored %s at %s (%d bytes)", key, path, len(data))
    return key, path, len(data)


def load_binary_payload(key: str) -> bytes:
    """Read a stored object by key, raising FileNotFoundError when absent."""

    client = _ensure_minio_client()
    if client:
        try:
            response = client.get_object(_bucket(), key)
        except S3Error as exc:
            raise FileNotFoundError(key) from exc
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    with open(_local_path(key), "rb") as handle:
        return handle.read()
