"""
Stripe payment gateway

Wraps the synchronous Stripe SDK. Every call runs in a worker thread so the
event loop keeps serving other requests while Stripe answers, and carries an
idempotency key derived from the reservation so retries never double-charge
or double-refund.

The gateway owns its `StripeClient`; the key and retry policy never touch the
`stripe` module globals.
"""

from functools import partial
from typing import Any, Callable, Mapping, Optional

from anyio import to_thread
import stripe

from src.platform.exception.exceptions import PaymentFailedError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.dto.payment import PaymentIntentHandle, RefundReceipt
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway


class StripePaymentGatewayImpl(IPaymentGateway):
    def __init__(
        self,
        *,
        api_key: str,
        max_network_retries: int = 2,
        client: Optional[stripe.StripeClient] = None,
    ) -> None:
        self._client = client or stripe.StripeClient(
            api_key, max_network_retries=max_network_retries
        )

    async def _call(
        self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> Any:
        try:
            result = await to_thread.run_sync(partial(func, *args, **kwargs))
        except stripe.StripeError as e:
            metrics.record_payment_operation(operation=operation, result='error')
            message = getattr(e, 'user_message', None) or str(e)
            raise PaymentFailedError(f'Payment processor error during {operation}: {message}') from e
        metrics.record_payment_operation(operation=operation, result='ok')
        return result

    @Logger.io
    async def open_payment(
        self,
        *,
        reservation_id: str,
        amount: int,
        currency: str,
        metadata: Mapping[str, str],
    ) -> PaymentIntentHandle:
        intent = await self._call(
            'open',
            self._client.v1.payment_intents.create,
            params={
                'amount': amount,
                'currency': currency,
                'automatic_payment_methods': {'enabled': True},
                'metadata': {'reservation_id': reservation_id, **metadata},
            },
            options={'idempotency_key': f'reservation-{reservation_id}'},
        )
        return PaymentIntentHandle(
            reference=intent.id, client_secret=intent.client_secret, status=intent.status
        )

    @Logger.io
    async def retrieve_payment_status(self, *, payment_reference: str) -> str:
        intent = await self._call(
            'retrieve', self._client.v1.payment_intents.retrieve, payment_reference
        )
        return str(intent.status)

    @Logger.io
    async def refund(
        self,
        *,
        payment_reference: str,
        amount: int,
        reservation_id: str,
        metadata: Mapping[str, str],
    ) -> RefundReceipt:
        refund = await self._call(
            'refund',
            self._client.v1.refunds.create,
            params={
                'payment_intent': payment_reference,
                'amount': amount,
                'metadata': {'reservation_id': reservation_id, **metadata},
            },
            options={'idempotency_key': f'refund-{reservation_id}'},
        )
        if refund.status in ('failed', 'canceled'):
            metrics.record_payment_operation(operation='refund', result='rejected')
            raise PaymentFailedError(f'Refund {refund.id} was {refund.status}')
        return RefundReceipt(refund_id=refund.id, status=refund.status, amount=refund.amount)
