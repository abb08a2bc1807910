"""
GhostNote Backend — Notes Route Handlers
==========================================

What:  The four note endpoints: save, list, share read, delete.
How:   Parses the JSON body, delegates to NoteService, returns JSON.
Who:   Called by the client after it has encrypted (or before it decrypts) data.

Caching:
    Every response carries Cache-Control: no-store. Share reads in particular
    must never be replayed from an intermediary cache after the row is burned.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ghostnote.auth import require_authorization
from ghostnote.database import get_db_session
from ghostnote.schemas.note import (
    DeleteNoteRequest,
    ErrorResponse,
    NoteItem,
    SaveNoteRequest,
    SharedNoteResponse,
    SuccessResponse,
)
from ghostnote.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Notes"],
    dependencies=[Depends(require_authorization)],
    responses={
        401: {"description": "Missing or invalid Authorization header", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
)


@router.post(
    "/save",
    response_model=SuccessResponse,
    responses={
        400: {"description": "Invalid note or image bundle", "model": ErrorResponse},
        409: {"description": "public_id already used by an unread share", "model": ErrorResponse},
    },
    summary="Store an encrypted note",
    description=(
        "Stores client-encrypted content and an optional encrypted image bundle. "
        "Set is_share_copy with a public_id to create a burn-after-read share."
    ),
)
async def save_note(
    payload: SaveNoteRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    response.headers["Cache-Control"] = "no-store"
    return await note_service.save_note(db=db, request=payload)


@router.get(
    "/list",
    response_model=List[NoteItem],
    summary="List durable notes",
    description=(
        "Returns every durable (non-share) note, newest first, including image "
        "fields so the client can decrypt and render them."
    ),
)
async def list_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteItem]:
    """
    Why X-Total-Count: matches the header clients already read for list
    endpoints, without wrapping the array.
    """
    notes = await note_service.list_notes(db=db)
    response.headers["X-Total-Count"] = str(len(notes))
    response.headers["Cache-Control"] = "no-store"
    return notes


@router.get(
    "/share/{public_id}",
    response_model=SharedNoteResponse,
    response_model_exclude_none=True,
    responses={
        404: {"description": "Share not found or already read", "model": ErrorResponse},
    },
    summary="Read a shared note once",
    description=(
        "Returns the shared note and deletes it in the same database statement. "
        "Every later request for the same public_id gets 404."
    ),
)
async def read_shared_note(
    public_id: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> SharedNoteResponse:
    response.headers["Cache-Control"] = "no-store"
    return await note_service.read_shared_note(db=db, public_id=public_id)


@router.post(
    "/delete",
    response_model=SuccessResponse,
    responses={
        400: {"description": "Missing id", "model": ErrorResponse},
    },
    summary="Delete a note",
    description="Deletes a note and its image data. Deleting a missing id still succeeds.",
)
async def delete_note(
    payload: DeleteNoteRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    response.headers["Cache-Control"] = "no-store"
    return await note_service.delete_note(db=db, note_id=payload.id)
