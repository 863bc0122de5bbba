from datetime import datetime
from typing import List

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class HallModel(Base):
    __tablename__ = 'hall'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    total_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    seats: Mapped[List['HallSeatModel']] = relationship(
        'HallSeatModel',
        back_populates='hall',
        cascade='all, delete-orphan',
        order_by='HallSeatModel.id',  # Insertion follows the hall layout
        lazy='selectin',
    )


class HallSeatModel(Base):
    __tablename__ = 'hall_seat'
    __table_args__ = (UniqueConstraint('hall_id', 'seat_row', 'seat_number', name='uq_hall_seat'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hall_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('hall.id', ondelete='CASCADE'), nullable=False, index=True
    )
    seat_row: Mapped[str] = mapped_column(String(5), nullable=False)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=20)

    hall: Mapped['HallModel'] = relationship('HallModel', back_populates='seats')
