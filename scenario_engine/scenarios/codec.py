"""
Scenario Key Codec.

Translates investment parameters to and from the canonical scenario slug:

    invest-{initial}-monthly-{monthly}-{rate}percent-{years}years-{goal}

A one-decimal rate is written with a "point" token (7.5 -> 7point5) so the
slug only contains lowercase alphanumerics and hyphens. The slug is both a
cache key component and a public URL segment, so decoding is strict and
returns None for anything that is not in canonical form.
"""

import logging
import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from scenario_engine.scenarios.schemas import InvestmentGoal, ScenarioParameters

logger = logging.getLogger(__name__)

DECIMAL_TOKEN = "point"

# Integers are written without leading zeros; the fractional rate digit is never 0
_NUMBER = r"(0|[1-9][0-9]*)"
SLUG_PATTERN = re.compile(
    rf"invest-{_NUMBER}-monthly-{_NUMBER}-{_NUMBER}(?:{DECIMAL_TOKEN}([1-9]))?percent-{_NUMBER}years-([a-z0-9]+)"
)
GOAL_PATTERN = re.compile(r"[a-z0-9]+")

# Upper bounds for parameters that may trigger content generation
MAX_INITIAL_AMOUNT = 10_000_000
MAX_MONTHLY_CONTRIBUTION = 100_000
MAX_ANNUAL_RETURN_PERCENT = 50
MAX_TIME_HORIZON_YEARS = 100


def round_half_up(value: float, places: int = 0) -> Decimal:
    """
    Round the way the calculator displays values (0.5 rounds away from zero).

    Raises:
        ValueError: if the value is infinite or has too many digits to round
    """
    exponent = Decimal(1).scaleb(-places)
    try:
        return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Cannot round {value!r} to {places} places") from e


def detect_goal(params: ScenarioParameters) -> InvestmentGoal:
    """
    Classify parameters into a goal.

    Rules are evaluated in order and the first match wins, so reordering
    them changes classification.
    """
    initial = params.initial_amount
    monthly = params.monthly_contribution
    years = params.time_horizon_years

    # Retirement planning: long-term with substantial monthly contributions
    if years >= 20 and monthly >= 1000:
        return InvestmentGoal.RETIREMENT

    # Wealth building: high initial amount or aggressive long-term saving
    if years >= 15 and (initial >= 50000 or monthly >= 2000):
        return InvestmentGoal.WEALTH

    # Emergency fund: short-term with lower amounts
    if years <= 5 and initial <= 20000 and monthly <= 1000:
        return InvestmentGoal.EMERGENCY

    # House down payment: medium-term substantial savings
    if 5 <= years <= 15 and (initial >= 10000 or monthly >= 1500):
        return InvestmentGoal.HOUSE

    # Education fund: medium to long-term planning
    if 10 <= years <= 18 and monthly >= 500:
        return InvestmentGoal.EDUCATION

    # Vacation fund: short to medium-term with moderate amounts
    if years <= 10 and initial <= 50000 and monthly <= 1000:
        return InvestmentGoal.VACATION

    # Starter investment: small amounts
    if initial <= 10000 and monthly <= 500:
        return InvestmentGoal.STARTER

    return InvestmentGoal.INVESTMENT


def normalize_params(params: ScenarioParameters) -> ScenarioParameters:
    """
    Round parameters to the precision a slug can carry.

    Amounts and years become whole numbers and the rate keeps one decimal
    (half-up). A missing goal is filled in by detect_goal().
    """
    rounded = ScenarioParameters(
        initial_amount=float(round_half_up(params.initial_amount)),
        monthly_contribution=float(round_half_up(params.monthly_contribution)),
        annual_return_percent=float(round_half_up(params.annual_return_percent, 1)),
        time_horizon_years=int(round_half_up(params.time_horizon_years)),
        goal=params.goal,
    )
    if not rounded.goal:
        rounded = rounded.model_copy(update={"goal": detect_goal(rounded).value})
    return rounded


def _format_rate(rate: float) -> str:
    value = round_half_up(rate, 1)
    whole = int(value)
    tenths = int((value - whole) * 10)
    if tenths == 0:
        return str(whole)
    return f"{whole}{DECIMAL_TOKEN}{tenths}"


def encode_slug(params: ScenarioParameters) -> str:
    """
    Build the canonical slug for a parameter set.

    Raises:
        ValueError: if a value cannot be represented in a slug (negative or
            non-finite numbers, or a goal that is not a lowercase token)
    """
    numbers = (
        params.initial_amount,
        params.monthly_contribution,
        params.annual_return_percent,
        params.time_horizon_years,
    )
    if any(not math.isfinite(n) or n < 0 for n in numbers):
        raise ValueError(f"Cannot encode negative or non-finite parameters: {params}")

    normalized = normalize_params(params)
    if not GOAL_PATTERN.fullmatch(normalized.goal):
        raise ValueError(f"Goal must be a lowercase alphanumeric token, got {normalized.goal!r}")

    return (
        f"invest-{int(normalized.initial_amount)}"
        f"-monthly-{int(normalized.monthly_contribution)}"
        f"-{_format_rate(normalized.annual_return_percent)}percent"
        f"-{normalized.time_horizon_years}years"
        f"-{normalized.goal}"
    )


def decode_slug(slug: str) -> Optional[ScenarioParameters]:
    """Parse a canonical slug. Returns None for any malformed input."""
    if not isinstance(slug, str):
        return None

    match = SLUG_PATTERN.fullmatch(slug)
    if match is None:
        return None

    initial, monthly, rate_whole, rate_tenths, years, goal = match.groups()
    rate = f"{rate_whole}.{rate_tenths}" if rate_tenths else rate_whole

    if int(years) < 1:
        return None

    return ScenarioParameters(
        initial_amount=float(initial),
        monthly_contribution=float(monthly),
        annual_return_percent=float(rate),
        time_horizon_years=int(years),
        goal=goal,
    )


def validate_params(params: ScenarioParameters) -> bool:
    """Check that parameters are within the range allowed for generation."""
    numbers = (
        params.initial_amount,
        params.monthly_contribution,
        params.annual_return_percent,
        params.time_horizon_years,
    )
    if any(not math.isfinite(n) for n in numbers):
        return False

    # Basic validation
    if (
        params.initial_amount < 0
        or params.monthly_contribution < 0
        or params.annual_return_percent < 0
        or params.time_horizon_years < 1
    ):
        return False

    # Reasonable upper bounds
    if (
        params.initial_amount > MAX_INITIAL_AMOUNT
        or params.monthly_contribution > MAX_MONTHLY_CONTRIBUTION
        or params.annual_return_percent > MAX_ANNUAL_RETURN_PERCENT
        or params.time_horizon_years > MAX_TIME_HORIZON_YEARS
    ):
        return False

    return True


def parse_request_slug(slug: str) -> Optional[ScenarioParameters]:
    """Decode and validate an untrusted slug; None means it cannot be generated."""
    params = decode_slug(slug)
    if params is None:
        logger.debug(f"Rejected malformed slug {slug!r}")
        return None
    if not validate_params(params):
        logger.debug(f"Rejected out-of-range slug {slug!r}")
        return None
    return params
