# app/storage/content_store.py
"""Blob storage keyed by path.

Two backends share one small interface (put/get/delete):
S3ContentStore for any S3-compatible bucket and LocalContentStore for a
directory on disk. Both raise BlobNotFound when a key is missing and
ContentStoreError for everything else.
"""
from pathlib import Path
from typing import Protocol

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings

logger = structlog.get_logger()

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class ContentStoreError(Exception):
    """The content store could not complete a call."""


class BlobNotFound(ContentStoreError):
    """No blob is stored under the requested path."""


class ContentStore(Protocol):
    def put(self, path: str, data: bytes, content_type: str) -> None: ...

    def get(self, path: str) -> bytes: ...

    def delete(self, path: str) -> None: ...


class S3ContentStore:
    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    def put(self, path: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ContentStoreError(f"put {path!r} failed: {exc}") from exc

    def get(self, path: str) -> bytes:
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=path)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES:
                raise BlobNotFound(path) from exc
            raise ContentStoreError(f"get {path!r} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise ContentStoreError(f"get {path!r} failed: {exc}") from exc

        body = obj["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def delete(self, path: str) -> None:
        # S3 deletes are idempotent: a missing key is not an error
        try:
            self.client.delete_object(Bucket=self.bucket, Key=path)
        except (BotoCoreError, ClientError) as exc:
            raise ContentStoreError(f"delete {path!r} failed: {exc}") from exc


class LocalContentStore:
    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root):
            raise ContentStoreError(f"path {path!r} escapes storage root")
        return target

    def put(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise ContentStoreError(f"put {path!r} failed: {exc}") from exc

    def get(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFound(path) from exc
        except OSError as exc:
            raise ContentStoreError(f"get {path!r} failed: {exc}") from exc

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise ContentStoreError(f"delete {path!r} failed: {exc}") from exc


def create_s3_client(settings: Settings):
    return boto3.client(
        "s3",
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
    )


def build_content_store(settings: Settings) -> ContentStore:
    if settings.storage_backend == "local":
        logger.info("content_store_configured", backend="local", root=settings.storage_dir)
        return LocalContentStore(settings.storage_dir)

    logger.info("content_store_configured", backend="s3", bucket=settings.aws_s3_bucket_name)
    return S3ContentStore(create_s3_client(settings), settings.aws_s3_bucket_name)
