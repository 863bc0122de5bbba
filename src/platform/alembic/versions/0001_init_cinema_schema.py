"""init_cinema_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- hall / hall_seat: Hall layouts, one row per seat with its price
- movie: Movies with genres, optional hall and absolute showtime instants
- reservation: Reservation lifecycle records with UUID7 primary key
- reservation_seat: Seats held by active reservations; the unique key per
  (hall, showtime, show_date, seat) forbids double booking
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== Halls ==========
    op.create_table(
        'hall',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('total_seats', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'hall_seat',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('hall_id', sa.Integer(), nullable=False),
        sa.Column('seat_row', sa.String(length=5), nullable=False),
        sa.Column('seat_number', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False, server_default='20'),
        sa.ForeignKeyConstraint(['hall_id'], ['hall.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('hall_id', 'seat_row', 'seat_number', name='uq_hall_seat'),
    )
    op.create_index(op.f('ix_hall_seat_hall_id'), 'hall_seat', ['hall_id'])

    # ========== Movies ==========
    op.create_table(
        'movie',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('genres', sa.ARRAY(sa.String()), nullable=False, server_default='{}'),
        sa.Column('hall_id', sa.Integer(), nullable=True),
        sa.Column(
            'showtimes',
            sa.ARRAY(sa.DateTime(timezone=True)),
            nullable=False,
            server_default='{}',
        ),
        sa.Column('in_theaters', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_movie_title'), 'movie', ['title'])
    op.create_index(op.f('ix_movie_hall_id'), 'movie', ['hall_id'])

    # ========== Reservations ==========
    op.create_table(
        'reservation',
        sa.Column('id', UUID(as_uuid=True), nullable=False),  # UUID7
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('movie_id', sa.Integer(), nullable=False),
        sa.Column('hall_id', sa.Integer(), nullable=False),
        sa.Column('showtime', sa.String(length=5), nullable=False),
        sa.Column('showtime_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('seats', JSONB, nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='usd'),
        sa.Column('payment_reference', sa.String(length=255), nullable=True),
        sa.Column('refund_reference', sa.String(length=255), nullable=True),
        sa.Column('refund_amount', sa.Integer(), nullable=True),
        sa.Column('refunded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hold_expires_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('payment_reference'),
    )
    op.create_index(op.f('ix_reservation_user_id'), 'reservation', ['user_id'])
    op.create_index(op.f('ix_reservation_movie_id'), 'reservation', ['movie_id'])
    op.create_index(op.f('ix_reservation_hall_id'), 'reservation', ['hall_id'])
    op.create_index(op.f('ix_reservation_showtime_date'), 'reservation', ['showtime_date'])
    op.create_index(op.f('ix_reservation_status'), 'reservation', ['status'])
    op.create_index(op.f('ix_reservation_hold_expires_at'), 'reservation', ['hold_expires_at'])

    op.create_table(
        'reservation_seat',
        sa.Column('reservation_id', UUID(as_uuid=True), nullable=False),
        sa.Column('seat_row', sa.String(length=5), nullable=False),
        sa.Column('seat_number', sa.Integer(), nullable=False),
        sa.Column('hall_id', sa.Integer(), nullable=False),
        sa.Column('showtime', sa.String(length=5), nullable=False),
        sa.Column('show_date', sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservation.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('reservation_id', 'seat_row', 'seat_number'),
        sa.UniqueConstraint(
            'hall_id',
            'showtime',
            'show_date',
            'seat_row',
            'seat_number',
            name='uq_reservation_seat_screening',
        ),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('reservation_seat')
    op.drop_table('reservation')
    op.drop_table('movie')
    op.drop_table('hall_seat')
    op.drop_table('hall')
