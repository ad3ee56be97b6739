"""Domain Entities - Core business objects."""

from .values import AttributeValue, ValueKind
from .applicant import (
    ApplicantData,
    PersonalInfo,
    FinancialInfo,
    CreditInfo,
    EmploymentInfo,
)
from .risk_model import (
    RISK_SCORE_OUTPUT,
    ModelStatus,
    FeatureType,
    FeatureDefinition,
    OutputDefinition,
    RiskModel,
)
from .model_output import ASSESSMENT_SCALE_MAX, RiskTier, InputVector, ModelOutput
from .risk_assessment import ImpactDirection, Factor, RiskAssessment
from .factor_analysis import (
    FactorAnalysis,
    CategoricalFactorAnalysis,
    ContinuousFactorAnalysis,
    Explanations,
    FactorExplanation,
    SuggestedAction,
    Visualization,
    ChartData,
    DataSeries,
    DataPoint,
)

__all__ = [
    "AttributeValue",
    "ValueKind",
    "ApplicantData",
    "PersonalInfo",
    "FinancialInfo",
    "CreditInfo",
    "EmploymentInfo",
    "RISK_SCORE_OUTPUT",
    "ModelStatus",
    "FeatureType",
    "FeatureDefinition",
    "OutputDefinition",
    "RiskModel",
    "ASSESSMENT_SCALE_MAX",
    "RiskTier",
    "InputVector",
    "ModelOutput",
    "ImpactDirection",
    "Factor",
    "RiskAssessment",
    "FactorAnalysis",
    "CategoricalFactorAnalysis",
    "ContinuousFactorAnalysis",
    "Explanations",
    "FactorExplanation",
    "SuggestedAction",
    "Visualization",
    "ChartData",
    "DataSeries",
    "DataPoint",
]
