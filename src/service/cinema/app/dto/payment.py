"""Payment processor DTOs."""

from typing import Final

import attrs


PAYMENT_SUCCEEDED: Final[str] = 'succeeded'


@attrs.define(frozen=True)
class PaymentIntentHandle:
    reference: str
    client_secret: str = attrs.field(repr=False)
    status: str = 'requires_payment_method'


@attrs.define(frozen=True)
class RefundReceipt:
    refund_id: str
    status: str
    amount: int
