"""
Model Evaluation Strategies.

Each strategy knows how to interpret the opaque `parameters` of one family
of risk models. A strategy compiles a model once into a CompiledModel, which
is then evaluated against any number of input vectors; factor analysis
relies on this to re-score counterfactual vectors cheaply.

Supported families:
- linear_scorecard:   score = offset + factor * (intercept + sum(weight * x))
- logistic_scorecard: score = min + sigmoid(intercept + sum(weight * x)) * (max - min)
- tree_ensemble:      score = min + sigmoid(base + lr * sum(leaf values)) * (max - min)

Convention: HIGHER score = HIGHER risk.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from risk_service.domain.entities import FeatureType, InputVector, RiskModel
from risk_service.domain.exceptions import InvalidModelParametersError

from .tiers import normalize_score

P = TypeVar("P", bound=BaseModel)


@dataclass
class EvaluationResult:
    """Score, confidence and raw outputs of one evaluation."""
    score: float
    confidence: float
    raw_outputs: Dict[str, Any] = field(default_factory=dict)


def sigmoid(z: float) -> float:
    """Numerically stable logistic function."""
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    e = math.exp(z)
    return e / (1.0 + e)


def logit(p: float) -> float:
    return math.log(p / (1.0 - p))


def threshold_margin(normalized: float, threshold: float) -> float:
    """
    Confidence from distance to the decision threshold.

    0.0 exactly at the threshold, 1.0 at either end of the score range.
    """
    return min(1.0, abs(normalized - threshold) / max(threshold, 1.0 - threshold))


def parse_parameters(schema: Type[P], model: RiskModel) -> P:
    """
    Validate a model's opaque parameters against a strategy's schema.

    Raises:
        InvalidModelParametersError: If parameters are missing or malformed
    """
    try:
        return schema.model_validate(model.parameters)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'parameters'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidModelParametersError(
            f"Invalid parameters for model {model.model_id}: {problems}"
        )


class CompiledModel(ABC):
    """A model bound to its parsed parameters, ready to evaluate."""

    def __init__(self, model: RiskModel):
        self.model = model

    @abstractmethod
    def evaluate(self, vector: InputVector) -> EvaluationResult:
        """Score one input vector. Must be a pure function of the vector."""
        ...


class ModelStrategy(ABC):
    """Evaluation strategy for one model family."""

    name: str = ""

    @abstractmethod
    def compile(self, model: RiskModel) -> CompiledModel:
        """
        Parse and check the model's parameters.

        Raises:
            InvalidModelParametersError: If the parameters don't fit the strategy
        """
        ...


# =============================================================================
# Scorecards
# =============================================================================

class ScalingSpec(BaseModel):
    """Standardization applied to a numeric feature before weighting."""
    mean: float = 0.0
    std: float = Field(default=1.0, gt=0.0)


class ScorecardParameters(BaseModel):
    """Parameters shared by linear and logistic scorecards."""

    model_config = ConfigDict(extra="ignore")

    intercept: float = 0.0
    weights: Dict[str, float] = Field(default_factory=dict)
    category_weights: Dict[str, Dict[str, float]] = Field(default_factory=dict)
    scaling: Dict[str, ScalingSpec] = Field(default_factory=dict)
    offset: float = 0.0
    factor: float = 1.0
    decision_threshold: float = Field(default=0.5, gt=0.0, lt=1.0)

    @model_validator(mode="after")
    def check_has_terms(self) -> "ScorecardParameters":
        if not self.weights and not self.category_weights:
            raise ValueError("at least one of 'weights' or 'category_weights' is required")
        return self


class ScorecardModel(CompiledModel):
    """A weighted-sum scorecard with a linear or logistic link."""

    def __init__(
        self,
        model: RiskModel,
        params: ScorecardParameters,
        link: Literal["linear", "logistic"],
    ):
        super().__init__(model)
        self.params = params
        self.link = link
        self._types = {f.name: f.data_type for f in model.features}

    def _term(self, name: str, value: Any) -> float:
        data_type = self._types[name]
        if value is None:
            return 0.0

        if data_type in (FeatureType.CATEGORICAL, FeatureType.TEXT):
            return self.params.category_weights.get(name, {}).get(value, 0.0)

        weight = self.params.weights.get(name)
        if weight is None:
            return 0.0
        if data_type == FeatureType.BOOLEAN:
            return weight * (1.0 if value else 0.0)

        x = float(value)
        scaling = self.params.scaling.get(name)
        if scaling is not None:
            x = (x - scaling.mean) / scaling.std
        return weight * x

    def linear_predictor(self, vector: InputVector) -> float:
        z = self.params.intercept
        for name in self._types:
            z += self._term(name, vector.get(name))
        return z

    def evaluate(self, vector: InputVector) -> EvaluationResult:
        z = self.linear_predictor(vector)
        raw: Dict[str, Any] = {"linear_predictor": z}

        if self.link == "logistic":
            p = sigmoid(z)
            score = self.model.score_min + p * self.model.score_span
            raw["probability_of_default"] = p
        else:
            score = self.params.offset + self.params.factor * z

        normalized = normalize_score(score, self.model.score_range)
        raw["risk_score"] = score
        return EvaluationResult(
            score=score,
            confidence=threshold_margin(normalized, self.params.decision_threshold),
            raw_outputs=raw,
        )


class LinearScorecardStrategy(ModelStrategy):
    """Points-based scorecard: score = offset + factor * weighted sum."""

    name = "linear_scorecard"
    link: Literal["linear", "logistic"] = "linear"

    def compile(self, model: RiskModel) -> CompiledModel:
        params = parse_parameters(ScorecardParameters, model)
        types = {f.name: f.data_type for f in model.features}

        for name in list(params.weights) + list(params.scaling):
            if name not in types:
                raise InvalidModelParametersError(
                    f"Weight references undeclared feature: {name}"
                )
            if types[name] not in (FeatureType.NUMERIC, FeatureType.BOOLEAN):
                raise InvalidModelParametersError(
                    f"Feature '{name}' is {types[name].value}; use category_weights"
                )
        for name in params.category_weights:
            if types.get(name) not in (FeatureType.CATEGORICAL, FeatureType.TEXT):
                raise InvalidModelParametersError(
                    f"category_weights entry '{name}' is not a declared categorical feature"
                )

        return ScorecardModel(model, params, self.link)


class LogisticScorecardStrategy(LinearScorecardStrategy):
    """Logistic regression scorecard mapped onto the score range."""

    name = "logistic_scorecard"
    link = "logistic"


# =============================================================================
# Tree ensembles
# =============================================================================

class TreeNode(BaseModel):
    """
    A node of a regression tree.

    Leaves carry `value`. Splits carry `feature` and either a numeric
    `threshold` (value < threshold goes left) or a `categories` list
    (membership goes left). Missing values follow `missing_left`.
    """

    feature: Optional[str] = None
    threshold: Optional[float] = None
    categories: Optional[List[str]] = None
    left: Optional["TreeNode"] = None
    right: Optional["TreeNode"] = None
    value: Optional[float] = None
    missing_left: bool = True

    @model_validator(mode="after")
    def check_shape(self) -> "TreeNode":
        if self.feature is None:
            if self.value is None:
                raise ValueError("leaf nodes require 'value'")
            return self
        if (self.threshold is None) == (self.categories is None):
            raise ValueError(
                f"split on '{self.feature}' needs exactly one of 'threshold' or 'categories'"
            )
        if self.left is None or self.right is None:
            raise ValueError(f"split on '{self.feature}' needs both 'left' and 'right'")
        return self

    @property
    def is_leaf(self) -> bool:
        return self.feature is None

    def splits(self) -> List["TreeNode"]:
        """All split nodes of the subtree, depth first."""
        if self.is_leaf:
            return []
        return [self] + self.left.splits() + self.right.splits()


TreeNode.model_rebuild()


class TreeEnsembleParameters(BaseModel):
    """Gradient-boosted tree ensemble with a logistic link."""

    model_config = ConfigDict(extra="ignore")

    base_score: float = 0.0
    learning_rate: float = Field(default=1.0, gt=0.0)
    trees: List[TreeNode] = Field(min_length=1)
    decision_threshold: float = Field(default=0.5, gt=0.0, lt=1.0)


class TreeEnsembleModel(CompiledModel):
    """Sum of tree leaves through a logistic link."""

    def __init__(self, model: RiskModel, params: TreeEnsembleParameters):
        super().__init__(model)
        self.params = params

    @staticmethod
    def _leaf(node: TreeNode, vector: InputVector) -> float:
        while not node.is_leaf:
            value = vector.get(node.feature)
            if value is None:
                go_left = node.missing_left
            elif node.categories is not None:
                go_left = value in node.categories
            else:
                x = (1.0 if value else 0.0) if isinstance(value, bool) else float(value)
                go_left = x < node.threshold
            node = node.left if go_left else node.right
        return node.value

    def evaluate(self, vector: InputVector) -> EvaluationResult:
        leaves = [self._leaf(tree, vector) for tree in self.params.trees]
        z = self.params.base_score + self.params.learning_rate * sum(leaves)
        p = sigmoid(z)
        score = self.model.score_min + p * self.model.score_span

        # Share of trees pushing the same way as the overall decision
        decision = z - logit(self.params.decision_threshold)
        if decision == 0:
            agreement = 0.0
        else:
            agreeing = sum(1 for leaf in leaves if leaf * decision > 0)
            agreement = agreeing / len(leaves)

        return EvaluationResult(
            score=score,
            confidence=agreement,
            raw_outputs={
                "risk_score": score,
                "probability_of_default": p,
                "linear_predictor": z,
            },
        )


class TreeEnsembleStrategy(ModelStrategy):
    """Boosted regression trees."""

    name = "tree_ensemble"

    def compile(self, model: RiskModel) -> CompiledModel:
        params = parse_parameters(TreeEnsembleParameters, model)
        types = {f.name: f.data_type for f in model.features}
        for tree in params.trees:
            for node in tree.splits():
                data_type = types.get(node.feature)
                if data_type is None:
                    raise InvalidModelParametersError(
                        f"Tree splits on undeclared feature: {node.feature}"
                    )
                if node.threshold is not None and data_type not in (
                    FeatureType.NUMERIC, FeatureType.BOOLEAN
                ):
                    raise InvalidModelParametersError(
                        f"Threshold split on '{node.feature}', which is {data_type.value}"
                    )
                if node.categories is not None and data_type not in (
                    FeatureType.CATEGORICAL, FeatureType.TEXT
                ):
                    raise InvalidModelParametersError(
                        f"Category split on '{node.feature}', which is {data_type.value}"
                    )
        return TreeEnsembleModel(model, params)
