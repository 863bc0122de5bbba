from abc import ABC, abstractmethod
from typing import Mapping

from src.service.cinema.app.dto.payment import PaymentIntentHandle, RefundReceipt


class IPaymentGateway(ABC):
    """External payment processor. Amounts are integer minor units of one currency."""

    @abstractmethod
    async def open_payment(
        self,
        *,
        reservation_id: str,
        amount: int,
        currency: str,
        metadata: Mapping[str, str],
    ) -> PaymentIntentHandle:
        pass

    @abstractmethod
    async def retrieve_payment_status(self, *, payment_reference: str) -> str:
        pass

    @abstractmethod
    async def refund(
        self,
        *,
        payment_reference: str,
        amount: int,
        reservation_id: str,
        metadata: Mapping[str, str],
    ) -> RefundReceipt:
        pass
