"""
GhostNote Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between client and backend.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate OpenAPI documentation.

Design Decision:
    Request fields the business rules care about (content, the image bundle,
    the delete id) are Optional here. NoteService checks them and raises
    ValidationError with a specific message, so every rule violation comes
    back as a 400 with a machine-readable reason.
"""

import json
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SaveNoteRequest(BaseModel):
    """
    Body of POST /api/save.

    Flags accept true/false or 1/0. image_iv is normally a JSON-encoded string
    such as "[1,2,3]"; a raw integer array is accepted too and stored as its
    compact JSON text.
    """
    content: Optional[str] = Field(default=None, description="Opaque ciphertext (required)")
    public_id: Optional[str] = Field(default=None, description="Share identifier for share copies")
    is_share_copy: Optional[bool] = Field(default=False, description="True for burn-after-read copies")
    has_image: Optional[bool] = Field(default=False, description="True when an image bundle is attached")
    image_data: Optional[str] = Field(default=None, description="Opaque image ciphertext")
    image_type: Optional[str] = Field(default=None, description="Image MIME type from the allow-list")
    image_iv: Optional[str] = Field(default=None, description="JSON-encoded integer array")

    @field_validator("image_iv", mode="before")
    @classmethod
    def encode_iv_array(cls, v: Union[str, List[int], None]) -> Optional[str]:
        if isinstance(v, list):
            if any(isinstance(x, bool) or not isinstance(x, int) for x in v):
                raise ValueError("image_iv array must contain only integers")
            return json.dumps(v, separators=(",", ":"))
        return v


class DeleteNoteRequest(BaseModel):
    """Body of POST /api/delete."""
    id: Optional[int] = Field(default=None, description="Identifier of the note to delete")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SuccessResponse(BaseModel):
    """Acknowledgement for save and delete. Nothing from the note is echoed."""
    success: bool = True


class NoteItem(BaseModel):
    """
    What:  One durable note as returned by GET /api/list.
    Why:   Every image field is included so the client can decrypt and render
           without a second round trip.
    """
    id: int
    content: str
    public_id: Optional[str] = None
    is_share_copy: int = 0
    has_image: int = 0
    image_data: Optional[str] = None
    image_type: Optional[str] = None
    image_iv: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SharedNoteResponse(BaseModel):
    """
    Payload of a successful GET /api/share/{public_id}.

    Image keys are omitted from the JSON when the share carries no image
    (the route serializes with response_model_exclude_none).
    """
    content: str
    has_image: int = 0
    image_data: Optional[str] = None
    image_type: Optional[str] = None
    image_iv: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Shared note not found or already read",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response: overall status plus database connectivity."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
