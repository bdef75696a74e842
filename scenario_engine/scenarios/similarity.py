"""
Similarity Engine - related scenario scoring.

Similarity between two parameter sets:
- similarity = 1 - (amount_diff × 0.30 + monthly_diff × 0.25 + time_diff × 0.25 + return_diff × 0.20)

Each diff is |a - b| / max(a, b, floor), with a per-dimension floor so small
values do not blow the ratio up. The result is clamped to [0, 1] and is
symmetric by construction.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from scenario_engine.scenarios.catalog import PredefinedScenario
from scenario_engine.scenarios.codec import detect_goal, encode_slug, round_half_up
from scenario_engine.scenarios.schemas import RelatedScenario, ScenarioParameters

logger = logging.getLogger(__name__)

# Dimension weights (sum to 1.0)
AMOUNT_WEIGHT = 0.30
MONTHLY_WEIGHT = 0.25
TIME_WEIGHT = 0.25
RETURN_WEIGHT = 0.20

# Denominator floors
AMOUNT_FLOOR = 1000
MONTHLY_FLOOR = 100
TIME_FLOOR = 1
RETURN_FLOOR = 1

# Variation strategies
AMOUNT_FACTORS = (0.75, 1.25, 1.5)
MONTHLY_FACTORS = (0.5, 1.5, 2)
TIME_ADJUSTMENTS = (-5, 5, 10)
RETURN_ADJUSTMENTS = (-2, 2, 3)
MIN_TIME_HORIZON_YEARS = 1
MIN_RETURN_PERCENT = 1

# Acceptance band: excludes near-duplicates and unrelated scenarios
MIN_SIMILARITY = 0.2
MAX_SIMILARITY = 0.8
DEFAULT_MAX_RESULTS = 6

REASON_AMOUNT = "Similar initial amount"
REASON_MONTHLY = "Different monthly contribution"
REASON_TIME = "Different time horizon"
REASON_RETURN = "Different return rate"
REASON_SAME_GOAL = "Same goal category"


def _normalized_diff(a: float, b: float, floor: float) -> float:
    return abs(a - b) / max(a, b, floor)


def calculate_similarity(a: ScenarioParameters, b: ScenarioParameters) -> float:
    """
    Score how alike two parameter sets are.

    Returns:
        Similarity 0-1, where 1.0 means identical numeric parameters
    """
    amount_diff = _normalized_diff(a.initial_amount, b.initial_amount, AMOUNT_FLOOR)
    monthly_diff = _normalized_diff(a.monthly_contribution, b.monthly_contribution, MONTHLY_FLOOR)
    time_diff = _normalized_diff(a.time_horizon_years, b.time_horizon_years, TIME_FLOOR)
    return_diff = _normalized_diff(a.annual_return_percent, b.annual_return_percent, RETURN_FLOOR)

    similarity = 1 - (
        (amount_diff * AMOUNT_WEIGHT) +
        (monthly_diff * MONTHLY_WEIGHT) +
        (time_diff * TIME_WEIGHT) +
        (return_diff * RETURN_WEIGHT)
    )

    return max(0.0, min(1.0, similarity))


def _with_goal(params: ScenarioParameters, **changes) -> ScenarioParameters:
    varied = params.model_copy(update=changes)
    return varied.model_copy(update={"goal": detect_goal(varied).value})


def generate_variations(base: ScenarioParameters) -> List[Tuple[str, ScenarioParameters]]:
    """
    Single-dimension perturbations of a base scenario, in a fixed order.

    Returns:
        (reason, params) pairs; each variation's goal is re-detected
    """
    variations: List[Tuple[str, ScenarioParameters]] = []

    for factor in AMOUNT_FACTORS:
        amount = float(round_half_up(base.initial_amount * factor))
        variations.append((REASON_AMOUNT, _with_goal(base, initial_amount=amount)))

    for factor in MONTHLY_FACTORS:
        monthly = float(round_half_up(base.monthly_contribution * factor))
        variations.append((REASON_MONTHLY, _with_goal(base, monthly_contribution=monthly)))

    for adjustment in TIME_ADJUSTMENTS:
        years = max(MIN_TIME_HORIZON_YEARS, base.time_horizon_years + adjustment)
        variations.append((REASON_TIME, _with_goal(base, time_horizon_years=years)))

    for adjustment in RETURN_ADJUSTMENTS:
        rate = max(MIN_RETURN_PERCENT, base.annual_return_percent + adjustment)
        variations.append((REASON_RETURN, _with_goal(base, annual_return_percent=rate)))

    return variations


def _same_numbers(a: ScenarioParameters, b: ScenarioParameters) -> bool:
    return (
        a.initial_amount == b.initial_amount
        and a.monthly_contribution == b.monthly_contribution
        and a.annual_return_percent == b.annual_return_percent
        and a.time_horizon_years == b.time_horizon_years
    )


def scenario_name(params: ScenarioParameters) -> str:
    return f"Invest ${params.initial_amount:,.0f} + ${params.monthly_contribution:,.0f}/month"


def scenario_description(params: ScenarioParameters) -> str:
    return f"{params.time_horizon_years}-year plan with {params.annual_return_percent:g}% annual return"


def find_related_scenarios(
    base: ScenarioParameters,
    max_results: int = DEFAULT_MAX_RESULTS,
    min_similarity: float = MIN_SIMILARITY,
    max_similarity: float = MAX_SIMILARITY,
    predefined: Sequence[PredefinedScenario] = (),
) -> List[RelatedScenario]:
    """
    Rank related scenarios for a base parameter set.

    Candidates are the generated variations plus any predefined scenarios
    sharing the base goal. Candidates identical to the base or outside the
    similarity band are dropped, duplicates (by slug) keep their first
    occurrence, and the rest are sorted by similarity, highest first.

    Args:
        base: Parameters of the scenario being viewed
        max_results: Cap on returned scenarios
        min_similarity: Lower bound of the acceptance band (inclusive)
        max_similarity: Upper bound of the acceptance band (inclusive)
        predefined: Catalog scenarios to consider alongside the variations

    Returns:
        Related scenarios in descending similarity order
    """
    base_goal = detect_goal(base)

    candidates: List[Tuple[str, ScenarioParameters, Optional[PredefinedScenario]]] = [
        (reason, params, None) for reason, params in generate_variations(base)
    ]
    for scenario in predefined:
        if detect_goal(scenario.params) == base_goal:
            params = _with_goal(scenario.params)
            candidates.append((REASON_SAME_GOAL, params, scenario))

    related: List[RelatedScenario] = []
    seen_slugs = set()

    for reason, params, scenario in candidates:
        if _same_numbers(params, base):
            continue

        similarity = calculate_similarity(base, params)
        if similarity < min_similarity or similarity > max_similarity:
            continue

        try:
            slug = encode_slug(params)
        except ValueError as e:
            logger.debug(f"Skipping related scenario that cannot be encoded: {e}")
            continue

        if slug in seen_slugs:
            continue
        seen_slugs.add(slug)

        related.append(RelatedScenario(
            slug=slug,
            params=params,
            similarity=similarity,
            reason=reason,
            name=scenario.name if scenario else scenario_name(params),
            description=scenario.description if scenario else scenario_description(params),
        ))

    # sorted() is stable, so ties keep candidate order
    related = sorted(related, key=lambda r: r.similarity, reverse=True)
    return related[:max_results]
