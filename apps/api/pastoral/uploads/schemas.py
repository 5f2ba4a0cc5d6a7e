from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pastoral.common.models import Upload


class FileUploadResponse(BaseModel):
    """Where a freshly uploaded file can be fetched."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    filename: str
    original_name: str = Field(..., serialization_alias="originalName")


class UploadCreateRequest(BaseModel):
    """Register a stored file in the shared documents list."""

    name: str = Field(..., min_length=1, max_length=200)
    filename: str = Field(..., min_length=1, max_length=300)
    url: str = Field(..., min_length=1, max_length=1000)
    category: str = Field("Template", max_length=50)


class UploadResponse(BaseModel):
    id: int
    name: str
    filename: str
    url: str
    category: str
    created_at: Optional[datetime]

    @classmethod
    def from_model(cls, upload: Upload) -> "UploadResponse":
        return cls(
            id=upload.id,
            name=upload.name,
            filename=upload.filename,
            url=upload.url,
            category=upload.category,
            created_at=upload.created_at,
        )
