"""
Wire schemas for storage service responses.

The service speaks camelCase JSON. Unknown fields are kept so a newer
server doesn't break an older client.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileMetadata(BaseModel):
    """Metadata the service returns after an upload."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: Optional[str] = None
    size: Optional[int] = None
    bucket_id: Optional[str] = Field(default=None, alias="bucketId")
    etag: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    is_uploaded: Optional[bool] = Field(default=None, alias="isUploaded")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    uploaded_by_user_id: Optional[str] = Field(default=None, alias="uploadedByUserId")


class PresignedUrl(BaseModel):
    """Temporary download URL for a file."""

    model_config = ConfigDict(extra="allow")

    url: str
    expiration: Optional[int] = None


# Object metadata is whatever the backing store reports; no fixed shape.
ObjectMetadata = dict[str, Any]
