"""FastAPI dependencies for scenario routes."""
from fastapi import Request

from scenario_engine.scenarios.cache_manager import ScenarioCacheManager


def get_cache_manager(request: Request) -> ScenarioCacheManager:
    """Return the scenario cache created in the application lifespan."""
    return request.app.state.scenario_cache
