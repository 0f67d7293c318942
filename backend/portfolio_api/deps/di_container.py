"""
Dependency injection container using dependency-injector.
Wires the database handle, long-lived services and controllers.
"""

from dependency_injector import containers, providers

from portfolio_api.controllers.health_controller import HealthController
from portfolio_api.db.session import Database
from portfolio_api.services.health_service import HealthService
from portfolio_api.services.token_sweeper import TokenSweeper


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    config = providers.Configuration()

    # One engine and session factory per process
    database = providers.Singleton(
        Database,
        url=config.database_url,
        echo=config.database_echo,
    )

    # Services
    health_service = providers.Singleton(
        HealthService,
        database=database,
    )

    token_sweeper = providers.Singleton(
        TokenSweeper,
        database=database,
        interval_seconds=config.refresh_token_sweep_interval_seconds,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


def build_container(settings) -> Container:
    """Create a container configured from application settings."""
    container = Container()
    container.config.from_dict({
        "database_url": settings.DATABASE_URL,
        "database_echo": settings.DATABASE_ECHO,
        "refresh_token_sweep_interval_seconds": settings.REFRESH_TOKEN_SWEEP_INTERVAL_SECONDS,
    })
    return container
