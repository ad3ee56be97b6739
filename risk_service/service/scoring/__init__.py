"""
Risk Scoring & Explainability Engine

Entry points used by the orchestrating layer:
    extract(applicant, model) -> InputVector
    execute(model, input) -> ModelOutput
    classify_tier(score, score_range) -> RiskTier
    analyze(model, input, output, baseline) -> FactorAnalysis
    explain(analysis) -> Explanations
    visualize(analysis) -> Visualization

All entry points are synchronous and stateless.
"""

from .settings import ScoringSettings, scoring_settings
from .features import extract, derive_fields, calculate_age
from .strategies import (
    ModelStrategy,
    CompiledModel,
    EvaluationResult,
    LinearScorecardStrategy,
    LogisticScorecardStrategy,
    TreeEnsembleStrategy,
)
from .executor import StrategyRegistry, default_registry, compile_model, execute
from .tiers import classify_tier, normalize_score
from .factors import analyze, derive_baseline, resolve_baseline, sample_points
from .explanations import explain, visualize, suggest_actions

__all__ = [
    # Settings
    "ScoringSettings",
    "scoring_settings",
    # Feature Extraction
    "extract",
    "derive_fields",
    "calculate_age",
    # Strategies
    "ModelStrategy",
    "CompiledModel",
    "EvaluationResult",
    "LinearScorecardStrategy",
    "LogisticScorecardStrategy",
    "TreeEnsembleStrategy",
    # Execution
    "StrategyRegistry",
    "default_registry",
    "compile_model",
    "execute",
    # Tiers
    "classify_tier",
    "normalize_score",
    # Factor Analysis
    "analyze",
    "derive_baseline",
    "resolve_baseline",
    "sample_points",
    # Explanations
    "explain",
    "visualize",
    "suggest_actions",
]
