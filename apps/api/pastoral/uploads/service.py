"""File uploads and the shared documents registry."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from pastoral.common.models import Upload
from pastoral.core.config import settings
from pastoral.core.errors import (
    NotFoundError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationAPIError,
)
from pastoral.core.metrics import emit_business_metric
from pastoral.uploads.storage import BlobStore

logger = logging.getLogger(__name__)


def build_key(original_name: str) -> str:
    """Server-controlled object key; only the extension of the client name survives."""
    ext = os.path.splitext(original_name or "")[1].lower()
    if not ext[1:].isalnum():
        ext = ""
    return f"file-{uuid4().hex}{ext}"


def _base_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


class UploadService:
    """Service for storing files and registering shared documents."""

    @staticmethod
    def store_file(
        store: BlobStore,
        content: bytes,
        original_name: str,
        content_type: Optional[str],
    ) -> dict[str, Any]:
        """Validate and store an uploaded file.

        Raises:
            UnsupportedMediaTypeError: Type is not PDF or a common image
            PayloadTooLargeError: Content exceeds ``upload_max_bytes``
            ValidationAPIError: Empty file
        """
        media_type = _base_type(content_type)
        if media_type not in settings.allowed_upload_types:
            raise UnsupportedMediaTypeError(content_type)
        if len(content) > settings.upload_max_bytes:
            raise PayloadTooLargeError(settings.upload_max_bytes)
        if not content:
            raise ValidationAPIError(
                "Arquivo vazio", errors=[{"field": "file", "message": "empty file"}]
            )

        key = build_key(original_name)
        url = store.save(content, key, media_type)
        logger.info("Stored upload %s (%s, %d bytes)", key, media_type, len(content))
        emit_business_metric("upload.stored", value=len(content), unit="Bytes")
        return {"url": url, "filename": key, "original_name": original_name}

    @staticmethod
    def list_uploads(db: Session) -> list[Upload]:
        stmt = select(Upload).order_by(Upload.created_at.desc(), Upload.id.desc())
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_upload(db: Session, upload_id: int) -> Upload:
        upload = db.get(Upload, upload_id)
        if not upload:
            raise NotFoundError("Upload", upload_id)
        return upload

    @staticmethod
    def create_upload(db: Session, **fields: Any) -> Upload:
        upload = Upload(**fields)
        db.add(upload)
        db.commit()
        db.refresh(upload)
        return upload

    @staticmethod
    def delete_upload(db: Session, upload_id: int) -> None:
        """Remove the registry entry; the stored blob is left in place."""
        upload = UploadService.get_upload(db, upload_id)
        filename = upload.filename
        db.delete(upload)
        db.commit()
        logger.info("Removed upload %s (%s) from registry", upload_id, filename)
