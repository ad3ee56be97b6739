"""
Model Execution for the Risk Scoring Engine.

Selects an evaluation strategy by `model_type`, evaluates the model against
an input vector, and assembles the ModelOutput. Strategies are looked up in a
StrategyRegistry, so adding a model family never touches the call sites here.
"""

import time
from typing import Dict, Iterable, List, Optional

import structlog

from risk_service.domain.entities import InputVector, ModelOutput, RiskModel
from risk_service.domain.exceptions import (
    InvalidModelParametersError,
    UnsupportedModelTypeError,
)

from .strategies import (
    CompiledModel,
    LinearScorecardStrategy,
    LogisticScorecardStrategy,
    ModelStrategy,
    TreeEnsembleStrategy,
)
from .tiers import classify_tier, normalize_score

logger = structlog.get_logger(__name__)


class StrategyRegistry:
    """Evaluation strategies keyed by model_type."""

    def __init__(self, strategies: Optional[Iterable[ModelStrategy]] = None):
        self._strategies: Dict[str, ModelStrategy] = {}
        for strategy in strategies or ():
            self.register(strategy.name, strategy)

    def register(self, model_type: str, strategy: ModelStrategy) -> None:
        self._strategies[model_type] = strategy

    def get(self, model_type: str) -> ModelStrategy:
        """
        Look up the strategy for a model type.

        Raises:
            UnsupportedModelTypeError: If nothing is registered for it
        """
        strategy = self._strategies.get(model_type)
        if strategy is None:
            raise UnsupportedModelTypeError(model_type)
        return strategy

    def __contains__(self, model_type: object) -> bool:
        return model_type in self._strategies

    @property
    def model_types(self) -> List[str]:
        return sorted(self._strategies)


def default_registry() -> StrategyRegistry:
    """A fresh registry holding the built-in strategies."""
    return StrategyRegistry([
        LinearScorecardStrategy(),
        LogisticScorecardStrategy(),
        TreeEnsembleStrategy(),
    ])


def compile_model(
    model: RiskModel,
    registry: Optional[StrategyRegistry] = None,
) -> CompiledModel:
    """
    Validate a model and bind it to its evaluation strategy.

    Raises:
        InvalidModelDefinitionError: If the model is structurally invalid
        UnsupportedModelTypeError: If no strategy handles model_type
        InvalidModelParametersError: If the parameters are malformed
    """
    model.validate()
    registry = registry or default_registry()
    return registry.get(model.model_type).compile(model)


def build_output(
    model: RiskModel,
    compiled: CompiledModel,
    vector: InputVector,
) -> ModelOutput:
    """
    Evaluate a compiled model and assemble the full ModelOutput.

    Raises:
        InvalidModelParametersError: If a declared output can't be produced
    """
    start = time.perf_counter()
    result = compiled.evaluate(vector)

    tier = classify_tier(result.score, model.score_range)
    available = dict(result.raw_outputs)
    available.setdefault("risk_score", result.score)
    available.setdefault("confidence", result.confidence)
    available.setdefault("risk_tier", tier.value)
    available.setdefault("normalized_score", normalize_score(result.score, model.score_range))

    raw_outputs = {}
    for output in model.outputs:
        if output.name not in available:
            raise InvalidModelParametersError(
                f"Model {model.model_id} ({model.model_type}) produces no value "
                f"for declared output '{output.name}'"
            )
        raw_outputs[output.name] = available[output.name]

    model_output = ModelOutput(
        score=result.score,
        tier=tier.value,
        confidence=result.confidence,
        raw_outputs=raw_outputs,
    )
    for warning in vector.warnings:
        model_output.add_warning(warning)

    model_output.set_execution_time((time.perf_counter() - start) * 1000)
    return model_output


def execute(
    model: RiskModel,
    vector: InputVector,
    registry: Optional[StrategyRegistry] = None,
) -> ModelOutput:
    """
    Execute a risk model against an extracted input vector.

    Deterministic: the same (model, vector) always yields the same score
    and confidence. Execution time is stamped on the output in milliseconds.

    Args:
        model: The model to evaluate
        vector: Input vector produced by extract()
        registry: Strategy registry (built-ins if not provided)

    Returns:
        ModelOutput with score, tier, confidence, raw outputs and warnings

    Raises:
        InvalidModelDefinitionError: If the model is structurally invalid
        UnsupportedModelTypeError: If no strategy handles model_type
        InvalidModelParametersError: If parameters are malformed
    """
    compiled = compile_model(model, registry)
    output = build_output(model, compiled, vector)

    logger.debug(
        "model_executed",
        model_id=model.model_id,
        model_type=model.model_type,
        score=output.score,
        tier=output.tier,
        warnings=len(output.warnings),
        execution_time_ms=round(output.execution_time, 3),
    )
    return output
