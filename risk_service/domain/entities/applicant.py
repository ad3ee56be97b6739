"""Applicant data snapshot consumed by the scoring engine."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from .values import AttributeValue


@dataclass(frozen=True)
class PersonalInfo:
    """Personal details of the applicant."""
    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[date] = None
    residential_status: Optional[str] = None  # own, rent, family, other
    years_at_address: Optional[float] = None
    dependents: Optional[int] = None
    postal_code: Optional[str] = None


@dataclass(frozen=True)
class FinancialInfo:
    """
    Income, expenses and debt.

    Attributes:
        annual_income: Gross annual income
        monthly_expenses: Recurring monthly expenses
        total_debt: Outstanding debt balance
        debt_to_income_ratio: Debt payments over income (0.0-1.0+).
            Derived from total_debt / annual_income when not supplied.
        savings_balance: Liquid savings
        loan_amount_requested: Amount the applicant is applying for
    """
    annual_income: Optional[float] = None
    monthly_expenses: Optional[float] = None
    total_debt: Optional[float] = None
    debt_to_income_ratio: Optional[float] = None
    savings_balance: Optional[float] = None
    loan_amount_requested: Optional[float] = None


@dataclass(frozen=True)
class CreditInfo:
    """Credit bureau attributes."""
    credit_score: Optional[float] = None
    open_accounts: Optional[int] = None
    credit_utilization: Optional[float] = None
    delinquencies_last_24m: Optional[int] = None
    credit_history_months: Optional[int] = None
    bankruptcies: Optional[int] = None
    recent_inquiries: Optional[int] = None


@dataclass(frozen=True)
class EmploymentInfo:
    """Employment details."""
    employment_status: Optional[str] = None  # employed, self_employed, unemployed, retired, student
    employer_name: Optional[str] = None
    years_employed: Optional[float] = None
    industry: Optional[str] = None
    monthly_income: Optional[float] = None


@dataclass(frozen=True)
class ApplicantData:
    """
    Immutable snapshot of one applicant.

    Created once per assessment request by the applicant data provider.
    The scoring engine reads it and never mutates it.
    """
    applicant_id: str
    personal: PersonalInfo = field(default_factory=PersonalInfo)
    financial: FinancialInfo = field(default_factory=FinancialInfo)
    credit: CreditInfo = field(default_factory=CreditInfo)
    employment: EmploymentInfo = field(default_factory=EmploymentInfo)
    additional_attributes: Dict[str, AttributeValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplicantData":
        """Build an applicant from a JSON-like payload."""
        personal = dict(data.get("personal") or {})
        dob = personal.get("date_of_birth")
        if isinstance(dob, str):
            personal["date_of_birth"] = date.fromisoformat(dob[:10])

        return cls(
            applicant_id=str(data["applicant_id"]),
            personal=PersonalInfo(**personal),
            financial=FinancialInfo(**(data.get("financial") or {})),
            credit=CreditInfo(**(data.get("credit") or {})),
            employment=EmploymentInfo(**(data.get("employment") or {})),
            additional_attributes={
                str(k): AttributeValue.of(v)
                for k, v in (data.get("additional_attributes") or {}).items()
            },
        )
