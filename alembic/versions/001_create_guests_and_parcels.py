"""Create guests and parcels tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: `guests` (stays) and `parcels` (deliveries held at the desk).
How:   At most one checked-in guest per room is enforced by a partial unique
       index; tracking numbers are unique across all parcels.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "guests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("room_number", sa.String(20), nullable=False),
        sa.Column(
            "check_in_time",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="When the guest checked in (UTC)",
        ),
        sa.Column(
            "check_out_time",
            sa.TIMESTAMP(timezone=True),
            nullable=True,
            comment="When the guest checked out (UTC); NULL while checked in",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_guests_room_number", "guests", ["room_number"])

    # One occupant per room at a time; checked-out rows are exempt
    op.create_index(
        "uq_guests_room_checked_in",
        "guests",
        ["room_number"],
        unique=True,
        postgresql_where=sa.text("check_out_time IS NULL"),
        sqlite_where=sa.text("check_out_time IS NULL"),
    )

    op.create_table(
        "parcels",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tracking_number", sa.String(100), nullable=False),
        sa.Column("sender", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "arrival_time",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="When the parcel was accepted at the desk (UTC)",
        ),
        sa.Column("collection_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "is_collected",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tracking_number", name="uq_parcels_tracking_number"),
    )
    op.create_index("ix_parcels_is_collected", "parcels", ["is_collected"])
    op.create_index("ix_parcels_guest_id", "parcels", ["guest_id"])


def downgrade() -> None:
    """Drop both tables. All guest and parcel history is lost."""
    op.drop_index("ix_parcels_guest_id", table_name="parcels")
    op.drop_index("ix_parcels_is_collected", table_name="parcels")
    op.drop_table("parcels")
    op.drop_index("uq_guests_room_checked_in", table_name="guests")
    op.drop_index("ix_guests_room_number", table_name="guests")
    op.drop_table("guests")
