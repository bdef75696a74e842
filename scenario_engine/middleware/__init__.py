"""Middleware package."""
from scenario_engine.middleware.rate_limit import limiter, scenario_limit, setup_rate_limiting

__all__ = ["limiter", "scenario_limit", "setup_rate_limiting"]
