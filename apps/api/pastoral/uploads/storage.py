"""Blob stores for uploaded files (local disk or S3/MinIO)."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from pastoral.core.config import settings

logger = logging.getLogger(__name__)


class BlobStore:
    """Stores file content under a key and returns its public URL."""

    def save(self, content: bytes, key: str, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Writes files to a directory served as static files by the API."""

    def __init__(self, root: str | Path, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def save(self, content: bytes, key: str, content_type: Optional[str] = None) -> str:
        path = self.root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return f"{self.public_base_url}/{key}"

    def delete(self, key: str) -> None:
        path = self.root / key
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Upload %s already gone from %s", key, self.root)


class S3BlobStore(BlobStore):
    """S3/MinIO client wrapper."""

    def __init__(self, client=None):
        self.client = client or boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
        )
        self.bucket = settings.s3_bucket

    def save(self, content: bytes, key: str, content_type: Optional[str] = None) -> str:
        """
        Upload file to S3/MinIO.

        Args:
            content: File content as bytes
            key: S3 object key (path)
            content_type: Optional content type

        Returns:
            Public URL of the object
        """
        try:
            extra_args = {}
            if content_type:
                extra_args["ContentType"] = content_type

            self.client.upload_fileobj(
                BytesIO(content),
                self.bucket,
                key,
                ExtraArgs=extra_args,
            )
        except (ClientError, NoCredentialsError) as e:
            logger.error(f"Failed to upload file to S3: {e}")
            raise

        return f"{settings.s3_endpoint.rstrip('/')}/{self.bucket}/{key}"

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            logger.error(f"Failed to delete file from S3: {e}")
            # Orphaned objects are tolerated


_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """FastAPI dependency returning the configured blob store."""
    global _store
    if _store is None:
        if settings.upload_backend == "s3":
            _store = S3BlobStore()
        else:
            _store = LocalBlobStore(settings.upload_dir, settings.upload_public_base_url)
    return _store
