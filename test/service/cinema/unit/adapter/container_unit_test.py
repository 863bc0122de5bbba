"""Unit tests for the DI container wiring"""

import pytest
import stripe

from src.platform.config import di
from src.platform.database import orm_db_setting
from src.service.cinema.driven_adapter.payment.stripe_payment_gateway_impl import (
    StripePaymentGatewayImpl,
)


@pytest.mark.unit
class TestContainer:
    def test_exposes_only_wired_providers(self) -> None:
        """
        Given: The application container
        When: Listing its providers
        Then: Only providers that routes, use cases or the lifespan resolve are declared
        """
        assert set(di.Container.providers) == {
            'database',
            'unit_of_work',
            'reservation_policy',
            'reservation_query_repo',
            'hall_query_repo',
            'hall_command_repo',
            'movie_query_repo',
            'payment_gateway',
            'hold_expiry_scheduler',
            'expiry_sweeper',
            'jwt_auth',
        }

    def test_no_module_level_lifecycle_helpers(self) -> None:
        assert not hasattr(di, 'setup')
        assert not hasattr(di, 'cleanup')
        assert not hasattr(orm_db_setting, 'get_async_session')

    def test_payment_gateway_built_from_settings(self) -> None:
        retries_before = stripe.max_network_retries
        container = di.Container()

        gateway = container.payment_gateway()

        assert isinstance(gateway, StripePaymentGatewayImpl)
        assert isinstance(gateway._client, stripe.StripeClient)
        assert stripe.max_network_retries == retries_before
