"""Add image columns and share id uniqueness

Revision ID: 002
Revises: 001
Create Date: 2024-02-01 00:00:00.000000+00:00

What:  Adds the encrypted image bundle (has_image, image_data, image_type,
       image_iv) to existing notes, and a partial unique index so an unread
       share copy owns its public_id.
How:   has_image gets server_default 0, so every existing row becomes a
       text-only note; the other three columns are nullable. No row is touched.

Note: the unique index fails to build if the old schema holds two unread
share copies with the same public_id. Burn or delete one of them first.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # SQLite may rebuild the table here; AUTOINCREMENT must survive so deleted
    # ids are never handed out again
    with op.batch_alter_table(
        "notes", table_kwargs={"sqlite_autoincrement": True}
    ) as batch_op:
        batch_op.add_column(
            sa.Column(
                "has_image",
                sa.Integer(),
                nullable=False,
                server_default=sa.text("0"),
            )
        )
        batch_op.add_column(sa.Column("image_data", sa.Text(), nullable=True))
        batch_op.add_column(sa.Column("image_type", sa.String(100), nullable=True))
        batch_op.add_column(sa.Column("image_iv", sa.Text(), nullable=True))

    op.create_index(
        "uq_notes_share_public_id",
        "notes",
        ["public_id"],
        unique=True,
        postgresql_where=sa.text("is_share_copy = 1"),
        sqlite_where=sa.text("is_share_copy = 1"),
    )


def downgrade() -> None:
    """Drops the image columns; any stored image ciphertext is lost."""
    op.drop_index("uq_notes_share_public_id", table_name="notes")
    with op.batch_alter_table(
        "notes", table_kwargs={"sqlite_autoincrement": True}
    ) as batch_op:
        batch_op.drop_column("image_iv")
        batch_op.drop_column("image_type")
        batch_op.drop_column("image_data")
        batch_op.drop_column("has_image")
