"""Shared test fixtures and configuration for scenario engine tests."""
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from scenario_engine.cache import CacheConfig, TTLCache
from scenario_engine.scenarios.cache_manager import ScenarioCacheManager
from scenario_engine.scenarios.schemas import ScenarioParameters


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


GENERATED_AT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    """Stand-in for an APScheduler scheduler."""
    return MagicMock()


@pytest.fixture
def cache(clock):
    """Small cache with the sweep disabled."""
    cache = TTLCache(
        CacheConfig(default_ttl=60, max_size=3, cleanup_interval=30),
        clock=clock,
        sweep=False,
    )
    yield cache
    cache.destroy()


@pytest.fixture
def manager(clock):
    """Scenario cache manager on a fake clock, sweep disabled."""
    manager = ScenarioCacheManager(
        CacheConfig(default_ttl=60 * 60 * 24, max_size=10, cleanup_interval=60),
        clock=clock,
        sweep=False,
        now=lambda: GENERATED_AT,
    )
    yield manager
    manager.destroy()


@pytest.fixture
def base_params():
    """The worked example: 50k initial, 2k monthly, 7% over 25 years."""
    return ScenarioParameters(
        initial_amount=50000,
        monthly_contribution=2000,
        annual_return_percent=7,
        time_horizon_years=25,
    )
