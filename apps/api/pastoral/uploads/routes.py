"""Upload API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from pastoral.auth.dependencies import get_current_user, require_staff
from pastoral.common.db import get_db
from pastoral.common.models import User
from pastoral.core.config import settings
from pastoral.core.errors import PayloadTooLargeError
from pastoral.uploads import schemas
from pastoral.uploads.service import UploadService
from pastoral.uploads.storage import BlobStore, get_blob_store

router = APIRouter(tags=["uploads"])


@router.post("/upload", response_model=schemas.FileUploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    """Store a PDF or image and return its URL."""
    # One byte past the limit is enough to reject
    content = await file.read(settings.upload_max_bytes + 1)
    if len(content) > settings.upload_max_bytes:
        raise PayloadTooLargeError(settings.upload_max_bytes)

    stored = UploadService.store_file(
        store,
        content=content,
        original_name=file.filename or "",
        content_type=file.content_type,
    )
    return schemas.FileUploadResponse(**stored)


@router.get("/uploads", response_model=list[schemas.UploadResponse])
async def list_uploads(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List shared documents, newest first."""
    return [schemas.UploadResponse.from_model(u) for u in UploadService.list_uploads(db)]


@router.post("/uploads", response_model=schemas.UploadResponse, status_code=status.HTTP_201_CREATED)
async def create_upload(
    request: schemas.UploadCreateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    upload = UploadService.create_upload(db, **request.model_dump())
    return schemas.UploadResponse.from_model(upload)


@router.delete("/uploads/{upload_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_upload(
    upload_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    UploadService.delete_upload(db, upload_id)
