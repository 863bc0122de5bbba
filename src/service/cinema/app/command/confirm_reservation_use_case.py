from datetime import datetime
from typing import Any, Callable, Dict, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError, PaymentNotSucceededError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.dto.payment import PAYMENT_SUCCEEDED
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.domain.value_object.reservation_policy import utc_now


class ConfirmReservationUseCase:
    """
    pending -> reserved once the payment processor reports the intent as succeeded.

    The pending row is selected FOR UPDATE by (payment reference, owner), so a
    repeated confirm finds nothing and reports it instead of transitioning twice.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        payment_gateway: IPaymentGateway,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
    ) -> Self:
        return cls(uow=uow, payment_gateway=payment_gateway)

    @Logger.io
    async def execute(self, *, payment_reference: str, user_id: int) -> Dict[str, Any]:
        """Returns the confirmed reservation with movie title and hall name"""
        payment_status = await self.payment_gateway.retrieve_payment_status(
            payment_reference=payment_reference
        )
        if payment_status != PAYMENT_SUCCEEDED:
            raise PaymentNotSucceededError(f'Payment has not succeeded (status: {payment_status})')

        async with self.uow:
            reservation = (
                await self.uow.reservation_command_repo.get_pending_by_payment_reference_for_update(
                    payment_reference=payment_reference, user_id=user_id
                )
            )
            if not reservation:
                raise NotFoundError(
                    'No pending reservation found for this payment (it may already be confirmed)'
                )

            reservation = reservation.confirm(now=self.clock())
            await self.uow.reservation_command_repo.update(reservation=reservation)
            details = await self.uow.reservation_query_repo.get_with_details(
                reservation_id=reservation.id
            )
            assert details is not None, 'Confirmed reservation must be readable in its own transaction'
            await self.uow.commit()

        metrics.record_transition(
            from_status=ReservationStatus.PENDING,
            to_status=ReservationStatus.RESERVED,
            trigger='payment',
        )
        Logger.base.info(f'💳 [CONFIRM] Reservation {reservation.id} is now reserved')
        return details
