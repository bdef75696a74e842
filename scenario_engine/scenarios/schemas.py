"""Scenario data structures shared by the codec, cache manager and similarity engine."""
from enum import Enum
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


class InvestmentGoal(str, Enum):
    """Goal categories inferred from scenario parameters."""
    RETIREMENT = "retirement"
    WEALTH = "wealth"
    EMERGENCY = "emergency"
    HOUSE = "house"
    EDUCATION = "education"
    VACATION = "vacation"
    STARTER = "starter"
    INVESTMENT = "investment"  # Default fallback


class ScenarioParameters(BaseModel):
    """
    Investment parameters for one scenario.

    No range constraints are enforced here: untrusted input is checked by
    validate_params() so that out-of-range values can be rejected without
    raising.
    """
    model_config = ConfigDict(frozen=True)

    initial_amount: float
    monthly_contribution: float
    annual_return_percent: float
    time_horizon_years: int
    goal: str = ""

    @field_validator("goal", mode="before")
    @classmethod
    def _goal_value(cls, value):
        # Accept InvestmentGoal members as well as plain strings
        if isinstance(value, Enum):
            return value.value
        return value


class ScenarioMetadata(BaseModel):
    """Bookkeeping stored alongside cached scenario content."""
    slug: str
    params: ScenarioParameters
    generated_at: datetime
    locale: str


class CachedScenario(BaseModel):
    """Generated content plus metadata, as held by the scenario cache."""
    content: Any
    metadata: ScenarioMetadata


class RelatedScenario(BaseModel):
    """A scored variation of a base scenario."""
    slug: str
    params: ScenarioParameters
    similarity: float = Field(..., ge=0.0, le=1.0)
    reason: str
    name: str
    description: str


# =============================================================================
# API RESPONSE MODELS
# =============================================================================

class ScenarioCheckResponse(BaseModel):
    """Whether a slug is cached, and whether it can be generated."""
    slug: str
    locale: str
    exists: bool
    cached: bool
    can_generate: bool
    params: Optional[ScenarioParameters] = None


class InvalidationResponse(BaseModel):
    slug: str
    locale: Optional[str] = None
    removed: int


class TrendingResponse(BaseModel):
    keys: List[str] = Field(default_factory=list)


class CacheStatsResponse(BaseModel):
    total: int
    valid: int
    expired: int
    max_size: int
    hit_rate: float
    hits: int
    misses: int
    evictions: int

    @classmethod
    def from_dict(cls, stats: Dict[str, Any]) -> "CacheStatsResponse":
        return cls(**stats)
