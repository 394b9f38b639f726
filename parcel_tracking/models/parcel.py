"""
Hotel Parcel Tracking — Parcel SQLAlchemy Model
=================================================

What:  ORM model representing the `parcels` table.
Who:   Used by ParcelRepository / ParcelService, and by Alembic.

Table Design:
    - tracking_number: carrier-issued identifier, unique across all parcels
      (collected or not)
    - guest_id: owning guest, required and never reassigned
    - is_collected + collection_time: flipped together, exactly once
"""

from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from parcel_tracking.database import Base, UTCDateTime

if TYPE_CHECKING:
    from parcel_tracking.models.guest import Guest


class Parcel(Base):
    """
    A parcel received at the front desk for a checked-in guest.

    Lifecycle:
        1. Accepted for a checked-in guest (collected = False)
        2. Collected once (collected = True, collection_time set)
        3. Never deleted in normal flow

    Collection does not depend on the guest still being checked in.
    """

    __tablename__ = "parcels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    tracking_number: Mapped[str] = mapped_column(String(100), nullable=False)

    sender: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    arrival_time: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the parcel was accepted at the desk (UTC)",
    )

    collection_time: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(),
        nullable=True,
        default=None,
    )

    collected: Mapped[bool] = mapped_column(
        "is_collected",
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        index=True,
    )

    guest_id: Mapped[int] = mapped_column(
        ForeignKey("guests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Joined in the same SELECT: every parcel response carries the guest's name and room.
    guest: Mapped["Guest"] = relationship(
        back_populates="parcels",
        lazy="joined",
        innerjoin=True,
    )

    __table_args__ = (
        UniqueConstraint("tracking_number", name="uq_parcels_tracking_number"),
    )

    @property
    def is_available_for_pickup(self) -> bool:
        return not self.collected

    def mark_as_collected(self, at: Optional[datetime] = None) -> None:
        """Moves the parcel to the terminal collected state."""
        self.collected = True
        self.collection_time = at or datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return (
            f"<Parcel(id={self.id}, tracking_number='{self.tracking_number}', "
            f"guest_id={self.guest_id}, collected={self.collected})>"
        )
