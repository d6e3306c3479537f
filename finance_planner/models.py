"""
Persisted record shapes.

Each user owns at most one income, assets and retirement plan record, and any
number of expense records.  Monetary and percentage values are stored as
decimal strings (``"1250.00"``, ``"7.0"``) exactly as they were entered;
``as_inputs()`` converts a record to the plain floats the calculators take.

Required fields that are not numbers raise ``pydantic.ValidationError``.
Optional fields (side income, inheritance, asset values) fall back to ``"0"``.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def parse_amount(value: Any, default: float = 0.0) -> float:
    """Parse a decimal string (or number) to float, ``default`` when invalid."""
    if value is None or isinstance(value, bool):
        return default
    try:
        num = float(str(value).strip())
    except ValueError:
        return default
    if not math.isfinite(num):
        return default
    return num


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_text(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


def _required_number(v: Any, low: float = 0.0, high: Optional[float] = None) -> str:
    text = _to_text(v)
    if not text:
        raise ValueError("Value is required")
    try:
        num = float(text)
    except ValueError:
        raise ValueError("Must be a valid positive number") from None
    if not math.isfinite(num) or num < low or (high is not None and num > high):
        if high is not None:
            raise ValueError(f"Must be between {low:g} and {high:g}")
        raise ValueError("Must be a valid positive number")
    return text


def _optional_number(v: Any) -> str:
    text = _to_text(v)
    num = parse_amount(text, default=-1.0)
    if num < 0:
        return "0"
    return text


# =============================================================================
# ENUMS
# =============================================================================

class ExpenseCategory(str, Enum):
    """Expense categories offered by the expense manager."""
    RENT = "Rent"
    GROCERIES = "Groceries"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    HEALTHCARE = "Healthcare"
    UTILITIES = "Utilities"
    INSURANCE = "Insurance"
    STUDENT_DEBT = "Student Debt"
    SHOPPING = "Shopping"
    DINING_OUT = "Dining Out"
    ROTH_IRA = "Roth IRA"
    OTHER = "Other"


class Frequency(str, Enum):
    """How often an expense recurs."""
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    YEARLY = "yearly"
    ONE_TIME = "one-time"


# =============================================================================
# RECORDS
# =============================================================================

class IncomeRecord(BaseModel):
    """
    Salary and retirement contribution settings.

    ``contribution_401k`` and ``company_match`` are percentages of salary.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: int
    annual_salary: str = Field(..., description="Gross annual salary")
    contribution_401k: str = Field(default="0", description="Employee 401k percent")
    company_match: str = Field(default="0", description="Employer match percent")
    roth_ira: str = Field(default="0", description="Annual Roth IRA contribution")
    dependents: int = Field(default=0, ge=0)
    state: str = Field(default="California", min_length=1)
    side_hustle_income: str = Field(default="0")
    inheritance: str = Field(default="0")
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("annual_salary", mode="before")
    @classmethod
    def validate_salary(cls, v: Any) -> str:
        return _required_number(v)

    # Blank contribution fields mean "none", the salary may not be blank.
    @field_validator("roth_ira", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> str:
        return _required_number(_to_text(v) or "0")

    @field_validator("contribution_401k", "company_match", mode="before")
    @classmethod
    def validate_percent(cls, v: Any) -> str:
        return _required_number(_to_text(v) or "0", 0.0, 100.0)

    @field_validator("side_hustle_income", "inheritance", mode="before")
    @classmethod
    def validate_optional(cls, v: Any) -> str:
        return _optional_number(v)

    def as_inputs(self) -> dict:
        return {
            "salary": float(self.annual_salary),
            "contribution_401k_pct": float(self.contribution_401k),
            "company_match_pct": float(self.company_match),
            "roth_ira": float(self.roth_ira),
            "side_hustle_income": parse_amount(self.side_hustle_income),
            "inheritance": parse_amount(self.inheritance),
            "dependents": self.dependents,
            "state": self.state,
        }


class ExpenseRecord(BaseModel):
    """A recurring or one-off expense."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    user_id: int
    category: ExpenseCategory
    description: str = Field(..., min_length=1, max_length=200)
    amount: str
    frequency: Frequency
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> str:
        return _required_number(v)

    def as_inputs(self) -> dict:
        return {
            "category": self.category.value,
            "amount": float(self.amount),
            "frequency": self.frequency.value,
        }


class BudgetGoalRecord(BaseModel):
    """A user-chosen monthly spending limit for one category."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    user_id: int
    category: ExpenseCategory
    monthly_limit: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("monthly_limit", mode="before")
    @classmethod
    def validate_limit(cls, v: Any) -> str:
        return _required_number(v)

    def as_inputs(self) -> dict:
        return {
            "category": self.category.value,
            "monthly_limit": float(self.monthly_limit),
        }


class AssetsRecord(BaseModel):
    """Current asset values; anything unparseable counts as zero."""
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: int
    current_cash: str = "0"
    current_401k: str = "0"
    current_roth_ira: str = "0"
    home_value: str = "0"
    car_value: str = "0"
    personal_investments: str = "0"
    other_assets: str = "0"
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator(
        "current_cash",
        "current_401k",
        "current_roth_ira",
        "home_value",
        "car_value",
        "personal_investments",
        "other_assets",
        mode="before",
    )
    @classmethod
    def validate_optional(cls, v: Any) -> str:
        return _optional_number(v)

    def as_inputs(self) -> dict:
        return {
            "current_cash": parse_amount(self.current_cash),
            "current_401k": parse_amount(self.current_401k),
            "current_roth_ira": parse_amount(self.current_roth_ira),
            "home_value": parse_amount(self.home_value),
            "car_value": parse_amount(self.car_value),
            "personal_investments": parse_amount(self.personal_investments),
            "other_assets": parse_amount(self.other_assets),
        }


class RetirementPlanRecord(BaseModel):
    """
    Retirement assumptions.

    Rates are stored as percent strings (``"7.0"`` means 7%).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: int
    current_age: int = Field(default=30, ge=0, le=120)
    target_retirement_age: int = Field(default=65, ge=0, le=120)
    expected_return: str = "7.0"
    inflation_rate: str = "3.0"
    withdrawal_rate: str = "4.0"
    promotion_percentage: str = "3.0"
    target_net_worth: Optional[str] = None
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator(
        "expected_return",
        "inflation_rate",
        "withdrawal_rate",
        "promotion_percentage",
        mode="before",
    )
    @classmethod
    def validate_rate(cls, v: Any) -> str:
        return _required_number(v, 0.0, 100.0)

    @field_validator("target_net_worth", mode="before")
    @classmethod
    def validate_target(cls, v: Any) -> Optional[str]:
        text = _to_text(v)
        if not text:
            return None
        return _required_number(text)

    @model_validator(mode="after")
    def validate_ages(self) -> "RetirementPlanRecord":
        if self.target_retirement_age < self.current_age:
            raise ValueError("Target retirement age cannot be before current age")
        return self

    def as_inputs(self) -> dict:
        return {
            "current_age": self.current_age,
            "retire_age": self.target_retirement_age,
            "expected_return": float(self.expected_return) / 100.0,
            "inflation_rate": float(self.inflation_rate) / 100.0,
            "withdrawal_rate": float(self.withdrawal_rate) / 100.0,
            "promotion_pct": float(self.promotion_percentage),
            "target_net_worth": (
                float(self.target_net_worth) if self.target_net_worth is not None else None
            ),
        }
