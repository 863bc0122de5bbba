from prometheus_client import Counter, Histogram


class ReservationMetrics:
    """
    Reservation lifecycle metrics

    Tracks seat holds, payment confirmations, cancellations with refunds
    and hold expiry so conflicts and payment failures show up on dashboards.
    """

    def __init__(self):
        # ========== Reservation Lifecycle ==========
        self.reservation_requests = Counter(
            'reservation_requests_total',
            'Total create-reservation requests',
            ['hall_id', 'result'],  # result: created/conflict/payment_failed
        )

        self.reservation_create_duration = Histogram(
            'reservation_create_duration_seconds',
            'Create-reservation processing time including payment intent',
            ['hall_id'],
            buckets=[0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        self.reservation_transitions = Counter(
            'reservation_transitions_total',
            'Reservation status transitions',
            ['from_status', 'to_status', 'trigger'],  # trigger: payment/user/hold_timeout/showtime_passed
        )

        # ========== Payment Processor ==========
        self.refund_amount = Counter(
            'reservation_refund_amount_minor_total',
            'Refunded amount in minor currency units',
            ['currency'],
        )

        self.cancellation_fee_amount = Counter(
            'reservation_cancellation_fee_minor_total',
            'Retained cancellation fees in minor currency units',
            ['currency'],
        )

        self.payment_operations = Counter(
            'payment_operations_total',
            'Calls to the payment processor',
            ['operation', 'result'],  # operation: open/retrieve/refund
        )

    # ========== Helper Methods ==========

    def record_reservation_request(self, *, hall_id: int, result: str, duration: float) -> None:
        self.reservation_requests.labels(hall_id=hall_id, result=result).inc()
        self.reservation_create_duration.labels(hall_id=hall_id).observe(duration)

    def record_transition(
        self, *, from_status: str, to_status: str, trigger: str, count: int = 1
    ) -> None:
        if count:
            self.reservation_transitions.labels(
                from_status=from_status, to_status=to_status, trigger=trigger
            ).inc(count)

    def record_refund(self, *, currency: str, refund_amount: int, fee: int) -> None:
        self.refund_amount.labels(currency=currency).inc(refund_amount)
        self.cancellation_fee_amount.labels(currency=currency).inc(fee)

    def record_payment_operation(self, *, operation: str, result: str) -> None:
        self.payment_operations.labels(operation=operation, result=result).inc()


# Global metrics instance
metrics = ReservationMetrics()
