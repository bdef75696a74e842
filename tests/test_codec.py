"""
Tests for the scenario slug codec.

Covers encoding, strict decoding, validation and goal detection.
"""

import math
import random
import pytest

from scenario_engine.scenarios.codec import (
    decode_slug,
    detect_goal,
    encode_slug,
    normalize_params,
    parse_request_slug,
    round_half_up,
    validate_params,
)
from scenario_engine.scenarios.schemas import InvestmentGoal, ScenarioParameters


def make_params(initial=10000, monthly=500, rate=7, years=20, goal=""):
    return ScenarioParameters(
        initial_amount=initial,
        monthly_contribution=monthly,
        annual_return_percent=rate,
        time_horizon_years=years,
        goal=goal,
    )


# =============================================================================
# Encoding
# =============================================================================

class TestEncode:
    """Tests for encode_slug."""

    def test_integer_rate(self):
        params = make_params(goal="retirement")
        assert encode_slug(params) == "invest-10000-monthly-500-7percent-20years-retirement"

    def test_decimal_rate_uses_point_token(self):
        params = make_params(rate=7.5, goal="house")
        assert encode_slug(params) == "invest-10000-monthly-500-7point5percent-20years-house"

    def test_rounds_amounts_and_rate(self):
        params = make_params(initial=10000.5, monthly=499.4, rate=7.45, goal="house")
        assert encode_slug(params) == "invest-10001-monthly-499-7point5percent-20years-house"

    def test_rate_rounding_to_whole(self):
        params = make_params(rate=6.96, goal="house")
        assert encode_slug(params) == "invest-10000-monthly-500-7percent-20years-house"

    def test_missing_goal_is_detected(self):
        # 10k / 500 over 20 years falls through to the starter rule
        assert encode_slug(make_params()) == "invest-10000-monthly-500-7percent-20years-starter"

    def test_accepts_goal_enum(self):
        params = make_params(goal=InvestmentGoal.WEALTH)
        assert encode_slug(params).endswith("-wealth")

    def test_slug_is_url_safe(self):
        slug = encode_slug(make_params(initial=12345, monthly=678, rate=9.9, years=33))
        assert all(c.isalnum() or c == "-" for c in slug)
        assert slug == slug.lower()

    @pytest.mark.parametrize("params", [
        make_params(initial=-1),
        make_params(rate=-0.5),
        make_params(initial=math.inf),
        make_params(initial=1e30),
        make_params(monthly=1e40),
        make_params(goal="Not A Token"),
    ])
    def test_unrepresentable_params_raise(self, params):
        with pytest.raises(ValueError):
            encode_slug(params)


# =============================================================================
# Decoding
# =============================================================================

class TestDecode:
    """Tests for decode_slug."""

    def test_example_slug(self):
        params = decode_slug("invest-10000-monthly-500-7percent-20years-retirement")

        assert params == ScenarioParameters(
            initial_amount=10000,
            monthly_contribution=500,
            annual_return_percent=7,
            time_horizon_years=20,
            goal="retirement",
        )

    def test_point_token(self):
        params = decode_slug("invest-25000-monthly-1000-12point5percent-15years-wealth")
        assert params.annual_return_percent == 12.5

    def test_zero_amounts(self):
        params = decode_slug("invest-0-monthly-0-0percent-1years-starter")
        assert params.initial_amount == 0
        assert params.monthly_contribution == 0
        assert params.annual_return_percent == 0

    @pytest.mark.parametrize("slug", [
        "",
        "invest",
        "invest-10000-monthly-500-7percent-20years",
        "invest-10000-monthly-500-7percent-20years-retirement-plan",
        "save-10000-monthly-500-7percent-20years-retirement",
        "invest-10000-weekly-500-7percent-20years-retirement",
        "invest-abc-monthly-500-7percent-20years-retirement",
        "invest-10000-monthly-500-7-20years-retirement",
        "invest-10000-monthly-500-7percent-20-retirement",
        "invest-10000-monthly-500-7.5percent-20years-retirement",
        "invest-10000-monthly-500-7point50percent-20years-retirement",
        "invest-10000-monthly-500-7point0percent-20years-retirement",
        "invest-010000-monthly-500-7percent-20years-retirement",
        "invest-10000-monthly-500-7percent-0years-retirement",
        "invest--10000-monthly-500-7percent-20years-retirement",
        "invest-10000-monthly-500-7percent-20years-Retirement",
        "invest-10000-monthly-500-7percent-20years-retirement ",
    ])
    def test_malformed_slugs_return_none(self, slug):
        assert decode_slug(slug) is None

    def test_non_string_returns_none(self):
        assert decode_slug(None) is None
        assert decode_slug(12345) is None


# =============================================================================
# Round trip
# =============================================================================

class TestRoundTrip:
    """decode(encode(p)) == normalize(p) across the supported domain."""

    @pytest.mark.parametrize("params", [
        make_params(),
        make_params(initial=0, monthly=0, rate=0, years=1),
        make_params(initial=50000, monthly=2000, rate=7, years=25),
        make_params(initial=1234.56, monthly=78.9, rate=4.25, years=7),
        make_params(initial=10_000_000, monthly=100_000, rate=50, years=100),
        make_params(rate=0.1, goal="vacation"),
        make_params(rate=12.34, years=3, goal="custom1"),
    ])
    def test_round_trip(self, params):
        assert decode_slug(encode_slug(params)) == normalize_params(params)

    def test_decoded_slug_reencodes_identically(self):
        slug = "invest-5000-monthly-300-8point5percent-15years-education"
        assert encode_slug(decode_slug(slug)) == slug

    def test_normalize_fills_goal(self):
        normalized = normalize_params(make_params(initial=1000, monthly=200, rate=4, years=5))
        assert normalized.goal == "emergency"

    def test_random_params_round_trip(self):
        rng = random.Random(1729)
        for _ in range(500):
            params = make_params(
                initial=rng.randint(0, 10_000_000),
                monthly=rng.randint(0, 100_000),
                rate=rng.randint(0, 500) / 10,
                years=rng.randint(1, 100),
            )
            slug = encode_slug(params)

            assert decode_slug(slug) == normalize_params(params), slug
            assert encode_slug(decode_slug(slug)) == slug


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize("value,places,expected", [
        (2.5, 0, "3"),
        (7.25, 1, "7.3"),
        (7.24, 1, "7.2"),
        (0, 0, "0"),
    ])
    def test_rounds_half_away_from_zero(self, value, places, expected):
        assert str(round_half_up(value, places)) == expected

    @pytest.mark.parametrize("value", [1e30, math.inf])
    def test_unroundable_values_raise_value_error(self, value):
        with pytest.raises(ValueError):
            round_half_up(value)


# =============================================================================
# Validation
# =============================================================================

class TestValidate:
    """Tests for validate_params and parse_request_slug."""

    def test_valid_params(self):
        assert validate_params(make_params()) is True

    def test_bounds_are_inclusive(self):
        assert validate_params(make_params(initial=10_000_000, monthly=100_000, rate=50, years=100))
        assert validate_params(make_params(initial=0, monthly=0, rate=0, years=1))

    @pytest.mark.parametrize("params", [
        make_params(initial=-1),
        make_params(monthly=-1),
        make_params(rate=-0.1),
        make_params(years=0),
        make_params(initial=10_000_001),
        make_params(monthly=100_001),
        make_params(rate=50.1),
        make_params(years=101),
        make_params(rate=math.nan),
    ])
    def test_invalid_params(self, params):
        assert validate_params(params) is False

    def test_parse_request_slug_valid(self):
        params = parse_request_slug("invest-10000-monthly-500-7percent-20years-retirement")
        assert params is not None
        assert params.time_horizon_years == 20

    def test_parse_request_slug_out_of_range(self):
        assert parse_request_slug("invest-99999999-monthly-500-7percent-20years-wealth") is None
        assert parse_request_slug("invest-10000-monthly-500-75percent-20years-wealth") is None

    def test_parse_request_slug_malformed(self):
        assert parse_request_slug("not-a-scenario") is None


# =============================================================================
# Goal detection
# =============================================================================

class TestDetectGoal:
    """Tests for ordered goal rules."""

    @pytest.mark.parametrize("initial,monthly,years,expected", [
        (50000, 1000, 20, InvestmentGoal.RETIREMENT),
        (60000, 300, 15, InvestmentGoal.WEALTH),
        (5000, 2500, 16, InvestmentGoal.WEALTH),
        (5000, 200, 3, InvestmentGoal.EMERGENCY),
        (30000, 300, 10, InvestmentGoal.HOUSE),
        (5000, 1600, 8, InvestmentGoal.HOUSE),
        (5000, 800, 12, InvestmentGoal.EDUCATION),
        (5000, 300, 8, InvestmentGoal.VACATION),
        (5000, 300, 30, InvestmentGoal.STARTER),
        (20000, 800, 30, InvestmentGoal.INVESTMENT),
    ])
    def test_rules(self, initial, monthly, years, expected):
        params = make_params(initial=initial, monthly=monthly, years=years)
        assert detect_goal(params) == expected

    def test_first_matching_rule_wins(self):
        """Matches both retirement and wealth; retirement is checked first."""
        params = make_params(initial=60000, monthly=2500, years=25)
        assert detect_goal(params) == InvestmentGoal.RETIREMENT

    def test_emergency_before_house_at_five_years(self):
        """Five years with 15k matches emergency and house; emergency comes first."""
        params = make_params(initial=15000, monthly=500, years=5)
        assert detect_goal(params) == InvestmentGoal.EMERGENCY
