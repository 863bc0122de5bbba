from datetime import datetime
from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.dto.reservation_result import RefundSummary
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.entity.user_entity import UserEntity
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.domain.value_object.reservation_policy import (
    ReservationPolicy,
    utc_now,
)


class CancelReservationUseCase:
    """
    reserved -> cancelled with a refund.

    Flow:
    1. Lock the reservation row (SELECT ... FOR UPDATE)
    2. Check ownership, status and the cancellation deadline against the clock at that moment
    3. Refund through the payment processor (10% fee inside the last 24h)
    4. Store the refund and commit

    A failed refund raises before anything is written, so the reservation stays
    reserved and the request can be retried with the same idempotency key.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        payment_gateway: IPaymentGateway,
        policy: ReservationPolicy,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.policy = policy
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        policy: ReservationPolicy = Depends(Provide[Container.reservation_policy]),
    ) -> Self:
        return cls(uow=uow, payment_gateway=payment_gateway, policy=policy)

    @Logger.io
    async def execute(self, *, reservation_id: UUID, requester: UserEntity) -> RefundSummary:
        async with self.uow:
            reservation = await self.uow.reservation_command_repo.get_by_id_for_update(
                reservation_id=reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')
            if not requester.can_manage(owner_id=reservation.user_id):
                raise ForbiddenError('Only the owner or an admin can cancel this reservation')

            now = self.clock()
            quote = reservation.quote_refund(now=now, policy=self.policy)

            assert reservation.payment_reference is not None
            receipt = await self.payment_gateway.refund(
                payment_reference=reservation.payment_reference,
                amount=quote.refund_amount,
                reservation_id=str(reservation.id),
                metadata={
                    'reason': 'requested_by_customer',
                    'requested_by': str(requester.id),
                    'fee': str(quote.fee),
                },
            )

            reservation = reservation.cancel_with_refund(
                refund_reference=receipt.refund_id,
                refund_amount=quote.refund_amount,
                now=now,
            )
            await self.uow.reservation_command_repo.update(reservation=reservation)
            await self.uow.commit()

        metrics.record_transition(
            from_status=ReservationStatus.RESERVED,
            to_status=ReservationStatus.CANCELLED,
            trigger='user',
        )
        metrics.record_refund(
            currency=reservation.currency, refund_amount=quote.refund_amount, fee=quote.fee
        )
        Logger.base.info(
            f'↩️ [CANCEL] Reservation {reservation.id} refunded {quote.refund_amount} '
            f'(fee {quote.fee}) via {receipt.refund_id}'
        )
        return RefundSummary(
            reservation_id=reservation.id,
            original_amount=quote.original_amount,
            refund_amount=quote.refund_amount,
            fee=quote.fee,
            refund_id=receipt.refund_id,
            refund_status=receipt.status,
            currency=reservation.currency,
        )
