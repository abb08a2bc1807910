"""
GhostNote Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for all storage access and by Alembic.

Table Design Rationale:
    - Integer autoincrement primary key: server-assigned and monotonic.
      sqlite_autoincrement keeps SQLite from reusing ids of deleted rows.
    - content / image_data / image_iv: opaque client ciphertext, stored as-is
    - is_share_copy / has_image: 0/1 integers, exactly what the API returns
    - created_at: UTC with timezone

    Partial unique index on public_id for share copies:
        Two unread shares can never answer to the same public_id, so a share
        link always resolves to one row. Durable notes may keep a public_id
        without taking part in the constraint.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from ghostnote.database import Base


class Note(Base):
    """
    A stored note: either durable or a one-shot share copy.

    Lifecycle:
        Durable note:  created by save, destroyed only by explicit delete
        Share copy:    created by save as its own row, destroyed by the
                       first successful share read
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_share_copy: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    # ── Image Bundle ──────────────────────────────────────────────────────
    # has_image = 1 implies all three image columns are non-empty
    has_image: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    image_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image_iv: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Python-side default keeps microsecond precision for ordering on SQLite
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
        Index(
            "uq_notes_share_public_id",
            "public_id",
            unique=True,
            postgresql_where=text("is_share_copy = 1"),
            sqlite_where=text("is_share_copy = 1"),
        ),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        # Never include ciphertext in reprs; they end up in logs
        return (
            f"<Note(id={self.id}, is_share_copy={self.is_share_copy}, "
            f"has_image={self.has_image}, created_at='{self.created_at}')>"
        )
