"""
Hotel Parcel Tracking — Guest SQLAlchemy Model
================================================

What:  ORM model representing the `guests` table.
Who:   Used by GuestRepository / GuestService, and by Alembic for schema management.

Table Design:
    - Integer identity primary key
    - room_number: free-form string ("101", "12B"); a room is occupied while
      a guest row for it has check_out_time IS NULL
    - check_in_time / check_out_time: UTC with timezone

    Partial unique index on room_number WHERE check_out_time IS NULL:
        The service checks occupancy before inserting, but two concurrent
        check-ins can both pass that check. The index makes the second
        INSERT fail, and GuestService reports it as a conflict.
"""

from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from parcel_tracking.database import Base, UTCDateTime

if TYPE_CHECKING:
    from parcel_tracking.models.parcel import Parcel


class Guest(Base):
    """
    A hotel guest.

    Lifecycle:
        1. Created on check-in (check_out_time = NULL)
        2. Checked out once (check_out_time set); there is no way back
        3. Never deleted in normal flow
    """

    __tablename__ = "guests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    room_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    check_in_time: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the guest checked in (UTC)",
    )

    # NULL means the guest is still in the hotel
    check_out_time: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(),
        nullable=True,
        default=None,
        comment="When the guest checked out (UTC); NULL while checked in",
    )

    # Loaded with a second SELECT keyed on guest id; async sessions cannot lazy-load.
    parcels: Mapped[List["Parcel"]] = relationship(
        back_populates="guest",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Parcel.id",
    )

    __table_args__ = (
        Index(
            "uq_guests_room_checked_in",
            "room_number",
            unique=True,
            postgresql_where=text("check_out_time IS NULL"),
            sqlite_where=text("check_out_time IS NULL"),
        ),
    )

    @property
    def is_checked_in(self) -> bool:
        return self.check_out_time is None

    def check_out(self, at: Optional[datetime] = None) -> None:
        """Moves the guest to the terminal checked-out state."""
        self.check_out_time = at or datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return (
            f"<Guest(id={self.id}, name='{self.name}', room='{self.room_number}', "
            f"checked_in={self.is_checked_in})>"
        )
