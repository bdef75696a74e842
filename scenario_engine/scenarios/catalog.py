"""
Predefined scenarios.

A small fixed catalog of common planning scenarios. They are offered as
related scenarios when they share the base scenario's goal, and seed the
list of scenarios worth warming at startup.
"""

from typing import Dict, List, Optional, Sequence
from pydantic import BaseModel, Field

from scenario_engine.scenarios.codec import encode_slug
from scenario_engine.scenarios.schemas import ScenarioParameters

DEFAULT_LOCALES = ["en", "es", "pl"]


class PredefinedScenario(BaseModel):
    """A named scenario from the static catalog."""
    id: str
    name: str
    description: str
    params: ScenarioParameters
    tags: List[str] = Field(default_factory=list)


def _params(initial: float, monthly: float, rate: float, years: int) -> ScenarioParameters:
    return ScenarioParameters(
        initial_amount=initial,
        monthly_contribution=monthly,
        annual_return_percent=rate,
        time_horizon_years=years,
    )


PREDEFINED_SCENARIOS: List[PredefinedScenario] = [
    PredefinedScenario(
        id="starter-10k-500-7-10",
        name="Beginner Investor",
        description="Conservative start with moderate monthly contributions",
        params=_params(10000, 500, 7, 10),
        tags=["beginner", "conservative", "starter"],
    ),
    PredefinedScenario(
        id="retirement-50k-2k-6-30",
        name="Retirement Planning",
        description="Long-term retirement strategy with steady contributions",
        params=_params(50000, 2000, 6, 30),
        tags=["retirement", "long-term", "conservative"],
    ),
    PredefinedScenario(
        id="aggressive-25k-1k-12-20",
        name="Growth Investor",
        description="Higher risk, higher reward investment strategy",
        params=_params(25000, 1000, 12, 20),
        tags=["aggressive", "growth", "high-risk"],
    ),
    PredefinedScenario(
        id="young-5k-300-8-15",
        name="Young Professional",
        description="Starting early with modest contributions",
        params=_params(5000, 300, 8, 15),
        tags=["young", "early-start", "moderate"],
    ),
    PredefinedScenario(
        id="wealth-100k-5k-10-25",
        name="Wealth Building",
        description="High-value investments for serious wealth accumulation",
        params=_params(100000, 5000, 10, 25),
        tags=["wealth", "high-value", "aggressive"],
    ),
    PredefinedScenario(
        id="emergency-1k-200-4-5",
        name="Emergency Fund",
        description="Building a safety net with conservative returns",
        params=_params(1000, 200, 4, 5),
        tags=["emergency", "safety", "conservative"],
    ),
]

PREDEFINED_SCENARIOS_MAP: Dict[str, PredefinedScenario] = {s.id: s for s in PREDEFINED_SCENARIOS}


def get_predefined_scenario(scenario_id: str) -> Optional[PredefinedScenario]:
    return PREDEFINED_SCENARIOS_MAP.get(scenario_id)


def warm_list(locales: Sequence[str] = DEFAULT_LOCALES) -> List[Dict[str, str]]:
    """Every (slug, locale) pair for the catalog, in catalog order per locale."""
    return [
        {"slug": encode_slug(scenario.params), "locale": locale}
        for locale in locales
        for scenario in PREDEFINED_SCENARIOS
    ]
