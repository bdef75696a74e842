# Scenarios Module
# Slug codec, scenario cache and related-scenario scoring
#
# Components:
# - codec.py: Parameters <-> slug translation, validation, goal detection
# - cache_manager.py: ScenarioCacheManager over TTLCache
# - similarity.py: Similarity score and related-scenario ranking
# - catalog.py: Predefined scenarios
# - routes.py: HTTP endpoints

from .schemas import (
    InvestmentGoal,
    ScenarioParameters,
    CachedScenario,
    ScenarioMetadata,
    RelatedScenario,
)
from .codec import (
    encode_slug,
    decode_slug,
    normalize_params,
    validate_params,
    detect_goal,
    parse_request_slug,
)
from .cache_manager import ScenarioCacheManager
from .similarity import (
    calculate_similarity,
    generate_variations,
    find_related_scenarios,
)
from .catalog import PREDEFINED_SCENARIOS, PredefinedScenario

__all__ = [
    "InvestmentGoal",
    "ScenarioParameters",
    "CachedScenario",
    "ScenarioMetadata",
    "RelatedScenario",
    "encode_slug",
    "decode_slug",
    "normalize_params",
    "validate_params",
    "detect_goal",
    "parse_request_slug",
    "ScenarioCacheManager",
    "calculate_similarity",
    "generate_variations",
    "find_related_scenarios",
    "PREDEFINED_SCENARIOS",
    "PredefinedScenario",
]
