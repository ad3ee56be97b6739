"""
Risk Tier Classification.

Maps a numeric score onto the five risk tiers using the model's own
declared score range.
"""

from typing import Tuple

from risk_service.domain.entities import RiskTier


def normalize_score(score: float, score_range: Tuple[float, float]) -> float:
    """
    Normalize a score into [0, 1] using a (min, max) range.

    Scores outside the range clamp to the nearest end.
    """
    low, high = score_range
    normalized = (score - low) / (high - low)
    return min(1.0, max(0.0, normalized))


def classify_tier(score: float, score_range: Tuple[float, float]) -> RiskTier:
    """
    Classify a score into a risk tier.

    Thresholds in normalized space:
        < 0.2 Very Low, < 0.4 Low, < 0.6 Moderate, < 0.8 High, else Very High

    Lower bounds are inclusive, so for a (0, 1000) range a score of exactly
    200.0 is Low. Out-of-range scores clamp rather than fail.

    Args:
        score: Raw model score
        score_range: The model's declared (min, max)

    Returns:
        The risk tier
    """
    return RiskTier.from_normalized(normalize_score(score, score_range))
