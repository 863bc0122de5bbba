"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.cinema.domain.value_object.reservation_policy import ReservationPolicy
from src.service.cinema.driven_adapter.payment.stripe_payment_gateway_impl import (
    StripePaymentGatewayImpl,
)
from src.service.cinema.driven_adapter.repo.hall_repo_impl import (
    HallCommandRepoImpl,
    HallQueryRepoImpl,
)
from src.service.cinema.driven_adapter.repo.movie_query_repo_impl import MovieQueryRepoImpl
from src.service.cinema.driven_adapter.repo.reservation_query_repo_impl import (
    ReservationQueryRepoImpl,
)
from src.service.cinema.driven_adapter.scheduler.hold_expiry_scheduler_impl import (
    HoldExpirySchedulerImpl,
)
from src.service.cinema.driving_adapter.background.expiry_sweeper import ExpirySweeper
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Database (AsyncEngineManager bound to settings.DATABASE_URL_ASYNC)
    database = providers.Singleton(Database)

    # Unit of work: a fresh one per use case (one transaction each)
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Reservation rules (hold, cancellation cutoff, fee window)
    reservation_policy = providers.Singleton(ReservationPolicy.from_settings)

    # Repositories (stateless - use session_factory per-request)
    reservation_query_repo = providers.Singleton(
        ReservationQueryRepoImpl, session_factory=database.provided.session
    )
    hall_query_repo = providers.Singleton(
        HallQueryRepoImpl, session_factory=database.provided.session
    )
    hall_command_repo = providers.Singleton(
        HallCommandRepoImpl, session_factory=database.provided.session
    )
    movie_query_repo = providers.Singleton(
        MovieQueryRepoImpl, session_factory=database.provided.session
    )

    # Payment processor (Stripe)
    payment_gateway = providers.Singleton(
        StripePaymentGatewayImpl,
        api_key=settings.STRIPE_SECRET_KEY.get_secret_value(),
        max_network_retries=settings.STRIPE_MAX_NETWORK_RETRIES,
    )

    # Hold expiry: per-reservation timers (task group bound in main.py lifespan) + durable sweep
    hold_expiry_scheduler = providers.Singleton(
        HoldExpirySchedulerImpl, uow_factory=unit_of_work.provider
    )
    expiry_sweeper = providers.Singleton(
        ExpirySweeper,
        uow_factory=unit_of_work.provider,
        interval_seconds=settings.HOLD_SWEEP_INTERVAL_SECONDS,
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()
