from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class ReservationModel(Base):
    __tablename__ = 'reservation'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)  # UUID7
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    movie_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    hall_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    showtime: Mapped[str] = mapped_column(String(5), nullable=False)
    showtime_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    seats: Mapped[list] = mapped_column(JSONB, nullable=False)  # [{"row": "A", "number": 1}]
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='pending', index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default='usd')
    payment_reference: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, unique=True
    )
    refund_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    refund_amount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    refunded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    hold_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class ReservationSeatModel(Base):
    """One row per seat held by an active reservation; the unique key forbids double booking"""

    __tablename__ = 'reservation_seat'
    __table_args__ = (
        UniqueConstraint(
            'hall_id',
            'showtime',
            'show_date',
            'seat_row',
            'seat_number',
            name='uq_reservation_seat_screening',
        ),
    )

    reservation_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey('reservation.id', ondelete='CASCADE'),
        primary_key=True,
    )
    seat_row: Mapped[str] = mapped_column(String(5), primary_key=True)
    seat_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    hall_id: Mapped[int] = mapped_column(Integer, nullable=False)
    showtime: Mapped[str] = mapped_column(String(5), nullable=False)
    show_date: Mapped[date] = mapped_column(Date, nullable=False)
