from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.cancel_reservation_use_case import CancelReservationUseCase
from src.service.cinema.app.command.confirm_reservation_use_case import (
    ConfirmReservationUseCase,
)
from src.service.cinema.app.command.create_reservation_use_case import CreateReservationUseCase
from src.service.cinema.app.command.delete_reservation_use_case import DeleteReservationUseCase
from src.service.cinema.app.query.list_my_reservations_use_case import (
    ListMyReservationsUseCase,
)
from src.service.cinema.app.query.list_reservations_use_case import ListReservationsUseCase
from src.service.cinema.domain.entity.user_entity import UserEntity
from src.service.cinema.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)
from src.service.cinema.driving_adapter.http_controller.schema.reservation_schema import (
    CancelReservationResponse,
    ConfirmReservationRequest,
    DeleteReservationResponse,
    ReservationCreateRequest,
    ReservationCreateResponse,
    ReservationWithDetailsResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: ReservationCreateRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CreateReservationUseCase = Depends(CreateReservationUseCase.depends),
) -> ReservationCreateResponse:
    checkout = await use_case.execute(
        user_id=current_user.id,
        movie_id=request.movie_id,
        hall_id=request.hall_id,
        showtime=request.showtime,
        show_date=request.date,
        seats=request.seats,
    )
    reservation = checkout.reservation
    return ReservationCreateResponse(
        reservation_id=reservation.id,
        payment_reference=checkout.payment_reference,
        client_secret=checkout.client_secret,
        amount=reservation.amount,
        currency=reservation.currency,
        status=reservation.status.value,
        hold_expires_at=reservation.hold_expires_at,
    )


@router.post('/confirm')
@Logger.io
async def confirm_reservation(
    request: ConfirmReservationRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: ConfirmReservationUseCase = Depends(ConfirmReservationUseCase.depends),
) -> ReservationWithDetailsResponse:
    reservation = await use_case.execute(
        payment_reference=request.payment_reference, user_id=current_user.id
    )
    return ReservationWithDetailsResponse.model_validate(reservation)


@router.patch('/{reservation_id}/cancel')
@Logger.io
async def cancel_reservation(
    reservation_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> CancelReservationResponse:
    summary = await use_case.execute(reservation_id=reservation_id, requester=current_user)
    return CancelReservationResponse.model_validate(summary)


@router.get('/my', response_model=List[ReservationWithDetailsResponse])
@Logger.io
async def list_my_reservations(
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListMyReservationsUseCase = Depends(ListMyReservationsUseCase.depends),
) -> list[dict]:
    return await use_case.execute(user_id=current_user.id)


@router.get('', response_model=List[ReservationWithDetailsResponse])
@Logger.io
async def list_reservations(
    movie_id: Optional[int] = None,
    hall_id: Optional[int] = None,
    showtime: Optional[str] = None,
    current_user: UserEntity = Depends(require_admin),
    use_case: ListReservationsUseCase = Depends(ListReservationsUseCase.depends),
) -> list[dict]:
    return await use_case.execute(movie_id=movie_id, hall_id=hall_id, showtime=showtime)


@router.delete('/{reservation_id}')
@Logger.io
async def delete_reservation(
    reservation_id: UUID,
    current_user: UserEntity = Depends(require_admin),
    use_case: DeleteReservationUseCase = Depends(DeleteReservationUseCase.depends),
) -> DeleteReservationResponse:
    await use_case.execute(reservation_id=reservation_id)
    return DeleteReservationResponse(reservation_id=reservation_id)
