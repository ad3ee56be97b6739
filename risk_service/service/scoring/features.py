"""
Feature Extraction for the Risk Scoring Engine.

This module maps a raw applicant record onto the flat, typed input vector
a model expects:
- One entry per declared feature, in declaration order
- Derived quantities (age, credit history in years, debt-to-income)
- Defaults for absent optional features
- Clamping of out-of-range numbers

Data quality problems that should not block scoring are reported as
warnings on the vector; structural problems raise.
"""

from dataclasses import fields
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from risk_service.domain.entities import (
    ApplicantData,
    AttributeValue,
    FeatureDefinition,
    FeatureType,
    InputVector,
    RiskModel,
    ValueKind,
)
from risk_service.domain.exceptions import (
    FeatureTypeMismatchError,
    MissingRequiredFeatureError,
)

_MISSING = object()

NEUTRAL_VALUES = {
    FeatureType.NUMERIC: 0.0,
    FeatureType.BOOLEAN: False,
    FeatureType.CATEGORICAL: "",
    FeatureType.TEXT: "",
    FeatureType.DATETIME: None,
}


def calculate_age(date_of_birth: date, as_of: datetime) -> float:
    """
    Age in whole years at as_of.

    Birthdays later in the calendar year than as_of don't count yet.
    """
    today = as_of.date()
    years = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return float(years)


def derive_fields(applicant: ApplicantData, as_of: datetime) -> Dict[str, Any]:
    """
    Compute derived quantities that are not stored on the applicant.

    Returns:
        Mapping of derived feature name -> value (only the derivable ones)
    """
    derived: Dict[str, Any] = {}

    if applicant.personal.date_of_birth is not None:
        derived["age"] = calculate_age(applicant.personal.date_of_birth, as_of)

    months = applicant.credit.credit_history_months
    if months is not None:
        derived["credit_history_years"] = months / 12.0

    financial = applicant.financial
    if (
        financial.debt_to_income_ratio is None
        and financial.total_debt is not None
        and financial.annual_income
    ):
        derived["debt_to_income_ratio"] = financial.total_debt / financial.annual_income

    if (
        financial.loan_amount_requested is not None
        and financial.annual_income
    ):
        derived["loan_to_income_ratio"] = financial.loan_amount_requested / financial.annual_income

    return derived


def _lookup(applicant: ApplicantData, derived: Dict[str, Any], name: str) -> Any:
    """
    Find a raw value for a feature name.

    Lookup order: derived fields, then the personal, financial, credit and
    employment records, then additional attributes. A None field counts
    as absent.
    """
    if name in derived:
        return derived[name]

    for record in (
        applicant.personal,
        applicant.financial,
        applicant.credit,
        applicant.employment,
    ):
        if name in {f.name for f in fields(record)}:
            value = getattr(record, name)
            if value is not None:
                return value

    attribute = applicant.additional_attributes.get(name)
    if attribute is not None and not attribute.is_null:
        return attribute

    return _MISSING


def _describe(raw: Any) -> str:
    if isinstance(raw, AttributeValue):
        return raw.kind.value
    return type(raw).__name__


def coerce_value(feature: FeatureDefinition, raw: Any) -> Any:
    """
    Convert a raw value to the feature's declared type.

    Tagged attribute values are branched on by kind. Only lossless
    conversions are made (ints become floats, dates become datetimes);
    anything else raises.

    Raises:
        FeatureTypeMismatchError: If the value doesn't fit the declared type
    """
    if isinstance(raw, AttributeValue):
        kind = raw.kind
        payload = raw.value
    elif isinstance(raw, bool):
        kind, payload = ValueKind.BOOLEAN, raw
    elif isinstance(raw, (int, float)):
        kind, payload = ValueKind.NUMBER, float(raw)
    elif isinstance(raw, str):
        kind, payload = ValueKind.STRING, raw
    elif isinstance(raw, datetime):
        kind, payload = ValueKind.DATETIME, raw
    elif isinstance(raw, date):
        kind, payload = ValueKind.DATETIME, datetime(raw.year, raw.month, raw.day)
    else:
        raise FeatureTypeMismatchError(feature.name, feature.data_type.value, _describe(raw))

    expected = {
        FeatureType.NUMERIC: ValueKind.NUMBER,
        FeatureType.BOOLEAN: ValueKind.BOOLEAN,
        FeatureType.CATEGORICAL: ValueKind.STRING,
        FeatureType.TEXT: ValueKind.STRING,
        FeatureType.DATETIME: ValueKind.DATETIME,
    }[feature.data_type]

    if kind != expected:
        raise FeatureTypeMismatchError(feature.name, feature.data_type.value, kind.value)

    return payload


def _default_for(feature: FeatureDefinition, warnings: List[str]) -> Any:
    if feature.default_value is not None:
        return coerce_value(feature, feature.default_value)

    warnings.append(
        f"Feature '{feature.name}' missing with no default; using neutral value"
    )
    return NEUTRAL_VALUES[feature.data_type]


def _apply_constraints(
    feature: FeatureDefinition,
    value: Any,
    warnings: List[str],
) -> Any:
    """Clamp numerics to their range and flag off-catalog categories."""
    if feature.data_type == FeatureType.NUMERIC and feature.range is not None:
        low, high = feature.range
        if value < low:
            warnings.append(
                f"Feature '{feature.name}' value {value} below range; clamped to {low}"
            )
            return float(low)
        if value > high:
            warnings.append(
                f"Feature '{feature.name}' value {value} above range; clamped to {high}"
            )
            return float(high)

    if (
        feature.data_type == FeatureType.CATEGORICAL
        and feature.valid_values
        and value not in feature.valid_values
    ):
        warnings.append(
            f"Feature '{feature.name}' has unknown category '{value}'"
        )

    return value


def extract_feature(
    feature: FeatureDefinition,
    raw: Any,
    warnings: List[str],
) -> Any:
    """
    Produce the typed value for one feature from its raw lookup result.

    Raises:
        MissingRequiredFeatureError: If required and absent
        FeatureTypeMismatchError: If the raw value has the wrong type
    """
    if raw is _MISSING:
        if feature.required:
            if feature.default_value is None:
                raise MissingRequiredFeatureError(feature.name)
            warnings.append(
                f"Required feature '{feature.name}' missing; using declared default"
            )
            value = coerce_value(feature, feature.default_value)
        else:
            value = _default_for(feature, warnings)
    else:
        value = coerce_value(feature, raw)

    if value is None:
        return value
    return _apply_constraints(feature, value, warnings)


def extract(
    applicant: ApplicantData,
    model: RiskModel,
    evaluation_time: Optional[datetime] = None,
) -> InputVector:
    """
    Build the input vector for a model from an applicant record.

    Args:
        applicant: The applicant snapshot (never mutated)
        model: The model whose features should be extracted
        evaluation_time: Reference time for derived fields (defaults to now)

    Returns:
        InputVector with one entry per declared feature and any warnings

    Raises:
        InvalidModelDefinitionError: If the model is structurally invalid
        MissingRequiredFeatureError: If a required feature is absent
        FeatureTypeMismatchError: If a value has the wrong type
    """
    model.validate()

    as_of = evaluation_time or datetime.utcnow()
    derived = derive_fields(applicant, as_of)

    values: Dict[str, Any] = {}
    warnings: List[str] = []

    for feature in model.features:
        raw = _lookup(applicant, derived, feature.name)
        values[feature.name] = extract_feature(feature, raw, warnings)

    return InputVector.of(values, warnings)

