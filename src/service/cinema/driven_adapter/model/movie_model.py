from datetime import datetime
from typing import Optional

from sqlalchemy import ARRAY, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class MovieModel(Base):
    __tablename__ = 'movie'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    genres: Mapped[list] = mapped_column(ARRAY(String), nullable=False, default=list)
    hall_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    showtimes: Mapped[list] = mapped_column(
        ARRAY(DateTime(timezone=True)), nullable=False, default=list
    )
    in_theaters: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
