"""Shared pytest fixtures and configuration."""

from collections.abc import Iterator

import pytest

from mapsketch.config import Settings
from mapsketch.drawing.machine import DrawingStateMachine
from mapsketch.store.features import CapacityLimits, FeatureStore
from mapsketch.utils.logging import clear_correlation_context, configure_logging


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


@pytest.fixture
def store() -> FeatureStore:
    """Create an empty store with the default capacity limits."""
    return FeatureStore(limits=CapacityLimits())


@pytest.fixture
def machine(store: FeatureStore) -> DrawingStateMachine:
    """Create a drawing machine bound to the `store` fixture."""
    return DrawingStateMachine(store)

