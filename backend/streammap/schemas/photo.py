"""Photo attachment schemas"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID


class PhotoAttachment(BaseModel):
    """Metadata for a photo stored by the attachment service"""

    filename: str = Field(..., min_length=1, max_length=255, description="Original file name")
    content_type: str = Field(..., description="MIME type of the file")
    byte_size: int = Field(..., ge=0, description="File size in bytes")
    storage_key: Optional[str] = Field(None, max_length=500, description="Key in attachment storage")


class PhotoResponse(BaseModel):
    """Response schema for photo attachment details"""

    id: UUID = Field(..., description="Photo ID")
    filename: str = Field(..., description="Original file name")
    content_type: str = Field(..., description="MIME type")
    byte_size: int = Field(..., description="File size in bytes")
    storage_key: Optional[str] = Field(None, description="Key in attachment storage")
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)
