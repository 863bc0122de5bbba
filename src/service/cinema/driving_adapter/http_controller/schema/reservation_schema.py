from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SeatSchema(BaseModel):
    model_config = {'from_attributes': True}

    row: str = Field(min_length=1, max_length=5)
    number: int = Field(gt=0)


class ReservationCreateRequest(BaseModel):
    movie_id: int
    hall_id: int
    showtime: str  # H:MM or HH:MM, cinema local time
    date: date
    seats: List[SeatSchema] = Field(min_length=1)

    model_config = {
        'json_schema_extra': {
            'example': {
                'movie_id': 1,
                'hall_id': 1,
                'showtime': '18:00',
                'date': '2025-11-20',
                'seats': [{'row': 'A', 'number': 1}, {'row': 'A', 'number': 2}],
            }
        }
    }


class ReservationCreateResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'reservation_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'payment_reference': 'pi_3PqX2bLkdIwHu7ix0abc1234',
                'client_secret': 'pi_3PqX2bLkdIwHu7ix0abc1234_secret_xyz',
                'amount': 4000,
                'currency': 'usd',
                'status': 'pending',
                'hold_expires_at': '2025-11-18T10:15:00Z',
            }
        }
    }

    reservation_id: UUID
    payment_reference: str
    client_secret: str
    amount: int
    currency: str
    status: str
    hold_expires_at: Optional[datetime] = None


class ConfirmReservationRequest(BaseModel):
    payment_reference: str = Field(min_length=1)

    model_config = {
        'json_schema_extra': {'example': {'payment_reference': 'pi_3PqX2bLkdIwHu7ix0abc1234'}}
    }


class ReservationResponse(BaseModel):
    model_config = {'from_attributes': True}

    id: UUID
    user_id: int
    movie_id: int
    hall_id: int
    showtime: str
    showtime_date: datetime
    seats: List[SeatSchema]
    status: str
    amount: int
    currency: str
    payment_reference: Optional[str] = None
    refund_reference: Optional[str] = None
    refund_amount: Optional[int] = None
    refunded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReservationWithDetailsResponse(ReservationResponse):
    movie_title: str
    hall_name: str
    hold_expires_at: Optional[datetime] = None


class CancelReservationResponse(BaseModel):
    model_config = {
        'from_attributes': True,
        'json_schema_extra': {
            'example': {
                'reservation_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'status': 'cancelled',
                'original_amount': 4000,
                'refund_amount': 3600,
                'fee': 400,
                'refund_id': 're_3PqX2bLkdIwHu7ix1def5678',
                'refund_status': 'succeeded',
                'currency': 'usd',
            }
        },
    }

    reservation_id: UUID
    status: str = 'cancelled'
    original_amount: int
    refund_amount: int
    fee: int
    refund_id: str
    refund_status: str
    currency: str


class DeleteReservationResponse(BaseModel):
    reservation_id: UUID
    message: str = 'Reservation deleted'
