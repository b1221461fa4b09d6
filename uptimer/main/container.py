"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from dependency_injector import containers, providers

from uptimer.application.use_cases.realm_use_cases import (
    DescribeRealmUseCase,
    LoadRealmUseCase,
    RunChecksUseCase,
)
from uptimer.infrastructure.checkers.registry import build_default_registry
from uptimer.infrastructure.services.execution_engine import ExecutionEngine
from uptimer.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    # Settings
    config = providers.Configuration()

    # Infrastructure
    checker_registry = providers.Singleton(
        build_default_registry,
        http_timeout=config.checkers.http_timeout,
        http_verify_tls=config.checkers.http_verify_tls,
    )

    execution_engine = providers.Factory(
        ExecutionEngine,
        resolver=checker_registry,
        max_concurrency=config.engine.max_concurrency,
        check_timeout=config.engine.check_timeout,
        retries=config.engine.retries,
        retry_backoff=config.engine.retry_backoff,
    )

    # Application (use cases)
    load_realm_use_case = providers.Factory(LoadRealmUseCase)

    run_checks_use_case = providers.Factory(
        RunChecksUseCase,
        engine=execution_engine,
    )

    describe_realm_use_case = providers.Factory(
        DescribeRealmUseCase,
        engine=execution_engine,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    logger.debug(
        "container.initialized",
        max_concurrency=settings.engine.max_concurrency,
        check_timeout=settings.engine.check_timeout,
    )
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container
