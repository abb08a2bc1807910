"""
GhostNote Backend — Note Service (Business Logic)
===================================================

What:  Validation and storage rules for save, list, share-read and delete.
How:   Stateless methods that receive the request's AsyncSession, run
       parameterized SQLAlchemy statements against the `notes` table, and
       return response schemas.
Who:   Called by route handlers in ghostnote.routes.notes.

Burn-After-Read (share read):
    ┌──────────────┐    ┌──────────────────────────────┐    ┌──────────┐
    │ GET /share/X │───▶│ DELETE ... WHERE public_id=X │───▶│  COMMIT  │──▶ payload
    └──────────────┘    │   AND is_share_copy=1        │    └──────────┘
                        │ RETURNING content, image_*   │
                        └──────────────────────────────┘

    Read and delete are one statement, so the database decides which caller
    wins. Every other caller's DELETE matches zero rows and gets a 404 that
    reads exactly like a link that never existed. The commit happens before the
    response is built: once a caller has the payload, the row is gone.

    No in-process lock is involved. Several server instances may share one
    database and the guarantee still holds.
"""

import logging
from typing import List

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ghostnote.config import settings
from ghostnote.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from ghostnote.models.note import Note
from ghostnote.schemas.note import (
    NoteItem,
    SaveNoteRequest,
    SharedNoteResponse,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

# Same text for "never existed" and "already read"
SHARE_NOT_FOUND_MESSAGE = "Shared note not found or already read"


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - save_note():        validate and insert one row
        - list_notes():       durable notes, newest first
        - read_shared_note(): atomic read-then-delete of a share copy
        - delete_note():      idempotent delete by id

    Error Handling Strategy:
        Our own exceptions propagate untouched. SQLAlchemy errors are wrapped
        in DatabaseError (generic message to the client, details in the log).
        Nothing is retried here.
    """

    # ── Validation ────────────────────────────────────────────────────────

    def _validate_content(self, request: SaveNoteRequest) -> None:
        if not request.content:
            raise ValidationError(message="content is required", field="content")

    def _validate_share_fields(self, request: SaveNoteRequest) -> None:
        # A share copy without a public_id could never be read back
        if request.is_share_copy and not request.public_id:
            raise ValidationError(
                message="public_id is required when is_share_copy is set",
                field="public_id",
            )

    def _validate_image_bundle(self, request: SaveNoteRequest) -> None:
        """
        Check the image fields.

        Order: bundle completeness (only when has_image is set), then payload
        length, then MIME type. Length and type are checked whenever the
        field is supplied, flag or not.
        """
        if request.has_image:
            missing = [
                name
                for name in ("image_data", "image_type", "image_iv")
                if not getattr(request, name)
            ]
            if missing:
                raise ValidationError(
                    message=(
                        "has_image is set but the image bundle is incomplete: "
                        f"missing {', '.join(missing)}"
                    ),
                    field=missing[0],
                    context={"missing_fields": missing},
                )

        if request.image_data and len(request.image_data) > settings.max_image_data_length:
            raise ValidationError(
                message=(
                    f"image_data is too large ({len(request.image_data)} characters). "
                    f"Maximum is {settings.max_image_data_length} characters."
                ),
                field="image_data",
                context={"max_length": settings.max_image_data_length},
            )

        if request.image_type:
            allowed = settings.allowed_image_types_set
            if request.image_type.lower() not in allowed:
                raise ValidationError(
                    message=f"image_type '{request.image_type}' is not allowed",
                    field="image_type",
                    context={"allowed_types": sorted(allowed)},
                )

    def validate_save_request(self, request: SaveNoteRequest) -> None:
        """
        Apply every save rule, raising ValidationError on the first failure.

        Raises:
            ValidationError: missing content, share copy without public_id,
                incomplete image bundle, oversized image, disallowed MIME type
        """
        self._validate_content(request)
        self._validate_share_fields(request)
        self._validate_image_bundle(request)

    # ── Operations ────────────────────────────────────────────────────────

    async def save_note(self, db: AsyncSession, request: SaveNoteRequest) -> SuccessResponse:
        """
        Validate and persist one note.

        The server stores content and image fields exactly as received.
        The transaction is committed before the acknowledgement is returned.

        Raises:
            ValidationError: the request breaks a save rule (→ 400)
            ConflictError: a share copy with this public_id is still unread (→ 409)
            DatabaseError: the insert failed (→ 500)
        """
        self.validate_save_request(request)

        note = Note(
            content=request.content,
            public_id=request.public_id,
            is_share_copy=1 if request.is_share_copy else 0,
            has_image=1 if request.has_image else 0,
            image_data=request.image_data,
            image_type=request.image_type,
            image_iv=request.image_iv,
        )

        try:
            db.add(note)
            await db.flush()
            # Read before commit: the session may expire attributes on commit
            note_id = note.id
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if request.is_share_copy and request.public_id:
                logger.warning("Rejected duplicate share copy for an active public_id")
                raise ConflictError(
                    message="A shared note with this public_id is still waiting to be read",
                    field="public_id",
                )
            logger.error("Integrity error saving note: %s", str(e))
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error saving note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Note %s saved (share_copy=%d, has_image=%d, content_len=%d)",
            note_id,
            1 if request.is_share_copy else 0,
            1 if request.has_image else 0,
            len(request.content),
        )
        return SuccessResponse()

    async def list_notes(self, db: AsyncSession) -> List[NoteItem]:
        """
        Return every durable note, newest first, with all image fields.

        Query plan:
            SELECT * FROM notes WHERE is_share_copy = 0
            ORDER BY created_at DESC, id DESC
            → id breaks ties between notes saved within the same timestamp

        Raises:
            DatabaseError: the query failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Note)
                .where(Note.is_share_copy == 0)
                .order_by(desc(Note.created_at), desc(Note.id))
            )
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [NoteItem.model_validate(note) for note in notes]

    async def read_shared_note(self, db: AsyncSession, public_id: str) -> SharedNoteResponse:
        """
        Burn-after-read retrieval of a share copy.

        How:
            One DELETE ... RETURNING statement selects and removes the row,
            then the transaction is committed. Only then is the response
            built from the returned columns.

        Raises:
            NotFoundError: no unread share copy has this public_id (→ 404).
                The message is identical whether it never existed or was
                already read.
            DatabaseError: the statement or the commit failed (→ 500). The
                row is untouched in that case and nobody received it.
        """
        stmt = (
            delete(Note)
            .where(Note.public_id == public_id, Note.is_share_copy == 1)
            .returning(
                Note.id,
                Note.content,
                Note.has_image,
                Note.image_data,
                Note.image_type,
                Note.image_iv,
            )
            .execution_options(synchronize_session=False)
        )

        try:
            result = await db.execute(stmt)
            row = result.one_or_none()
            if row is None:
                raise NotFoundError(resource="shared note", message=SHARE_NOT_FOUND_MESSAGE)
            await db.commit()
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error reading shared note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the shared note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Shared note %s read and burned", row.id)
        return SharedNoteResponse(
            content=row.content,
            has_image=row.has_image,
            image_data=row.image_data,
            image_type=row.image_type,
            image_iv=row.image_iv,
        )

    async def delete_note(self, db: AsyncSession, note_id: int | None) -> SuccessResponse:
        """
        Remove a note and all its columns, image data included.

        Idempotent: deleting an id that does not exist still succeeds.

        Raises:
            ValidationError: no id supplied (→ 400)
            DatabaseError: the delete failed (→ 500)
        """
        if note_id is None:
            raise ValidationError(message="id is required", field="id")

        try:
            result = await db.execute(
                delete(Note)
                .where(Note.id == note_id)
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": note_id},
            )

        if result.rowcount:
            logger.info("Note %s deleted", note_id)
        else:
            logger.debug("Delete of note %s matched no rows", note_id)
        return SuccessResponse()


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
