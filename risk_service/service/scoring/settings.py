"""
Scoring Settings for the Risk Scoring & Explainability Engine.

This module contains the tunable parameters of factor analysis and
explanation building. Model parameters (weights, trees) are never
configured here; they travel with each RiskModel.

Environment variables use the SCORING_ prefix:
    SCORING_SENSITIVITY_SAMPLES=10
    SCORING_ANALYSIS_MAX_WORKERS=4
    SCORING_MIN_ACTION_IMPACT=0.02

Usage:
    from risk_service.service.scoring.settings import scoring_settings

    # Use default settings (loaded from env)
    samples = scoring_settings.sensitivity_samples

    # Or create custom settings for testing
    custom = ScoringSettings(sensitivity_samples=5)
"""

import json
from functools import lru_cache
from typing import Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScoringSettings(BaseSettings):
    """
    Configurable parameters for factor analysis and explanations.

    All settings can be overridden via environment variables with SCORING_ prefix.
    Fractions are expressed relative to a model's score range.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Factor Analysis ===
    sensitivity_samples: int = Field(
        default=10,
        ge=2,
        le=200,
        description="Evenly spaced points sampled across a numeric feature's range",
    )
    neutral_epsilon: float = Field(
        default=1e-6,
        ge=0.0,
        lt=1.0,
        description="Impacts within +/- this fraction of the score range are Neutral",
    )
    analysis_max_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Threads used for counterfactual evaluations (1 = sequential)",
    )

    # === Assessment ===
    key_factor_count: int = Field(
        default=5,
        ge=1,
        description="Number of top factors stored on an assessment",
    )

    # === Explanations ===
    top_explanation_factors: int = Field(
        default=3,
        ge=1,
        le=3,
        description="Factors named in the overall explanation",
    )
    min_action_impact: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Minimum score improvement (fraction of range) worth suggesting",
    )
    default_action_difficulty: int = Field(
        default=3,
        ge=1,
        le=5,
        description="Difficulty for categories without an explicit entry",
    )
    action_difficulty_json: str = Field(
        default='{"personal": 1, "contact": 1, "credit": 3, "employment": 4, "financial": 4, "debt": 5}',
        description="Action difficulty (1=easy, 5=hard) by factor category as a JSON object",
    )

    @field_validator("action_difficulty_json")
    @classmethod
    def validate_difficulty_json(cls, v: str) -> str:
        """Validate that the difficulty map is a JSON object of 1-5 integers."""
        try:
            mapping = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")
        if not isinstance(mapping, dict):
            raise ValueError("Difficulty map must be a JSON object")
        for category, difficulty in mapping.items():
            if not isinstance(difficulty, int) or not 1 <= difficulty <= 5:
                raise ValueError(
                    f"Difficulty for '{category}' must be an integer 1-5, got {difficulty!r}"
                )
        return v

    @property
    def action_difficulty(self) -> Dict[str, int]:
        """Difficulty scale keyed by factor category."""
        return json.loads(self.action_difficulty_json)

    def difficulty_for(self, category: str) -> int:
        return self.action_difficulty.get(category, self.default_action_difficulty)


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


scoring_settings = get_scoring_settings()
