"""Monthly cash flow and budget analysis.

Income is turned into a monthly net figure by removing the pre-tax 401k
contribution and the estimated taxes.  Expenses are stored with a frequency and
normalised to a monthly equivalent before they are summed; one-time expenses
are spread evenly over a year rather than charged once.

The budget analysis compares each category's monthly spend with a fixed share
of net monthly income.

Example
-------

>>> monthly_expense_total([{"amount": 100, "frequency": "weekly"},
...                        {"amount": 1200, "frequency": "yearly"}])
533.0
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping

from . import taxes as tax_calc

FREQUENCY_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    "monthly": 1.0,
    "weekly": 4.33,
    "bi-weekly": 2.17,
})
# Frequencies divided by 12 rather than multiplied.
ANNUALISED_FREQUENCIES = ("yearly", "one-time")

CATEGORY_BUDGETS: Mapping[str, float] = MappingProxyType({
    "Rent": 0.30,
    "Groceries": 0.10,
    "Transportation": 0.15,
    "Entertainment": 0.05,
    "Healthcare": 0.08,
    "Utilities": 0.06,
    "Insurance": 0.10,
    "Student Debt": 0.10,
    "Shopping": 0.06,
    "Dining Out": 0.08,
    "Roth IRA": 0.10,
    "Other": 0.05,
})
DEFAULT_CATEGORY_BUDGET = 0.05

OVER_BUDGET_PCT = 100.0
WARNING_BUDGET_PCT = 85.0
EMERGENCY_FUND_MONTHS = 6

ASSET_FIELDS = (
    "current_cash",
    "current_401k",
    "current_roth_ira",
    "home_value",
    "car_value",
    "personal_investments",
    "other_assets",
)


def income_breakdown(income: Mapping[str, float], state: str) -> Dict[str, float]:
    """Break annual income down into contributions, taxes and net pay.

    ``income`` carries ``salary``, ``contribution_401k_pct`` (0–100) and
    optionally ``side_hustle_income``.  The 401k percentage applies to salary
    only, side income is taxed in full.
    """
    salary = float(income.get("salary", 0.0))
    side_hustle = float(income.get("side_hustle_income", 0.0))
    contribution_pct = float(income.get("contribution_401k_pct", 0.0))

    gross_annual = salary + side_hustle
    contribution_401k = salary * contribution_pct / 100.0
    taxable_income = gross_annual - contribution_401k
    if gross_annual > 0:
        tx = tax_calc.estimate_tax(taxable_income, state)
    else:
        tx = {"federal": 0.0, "state": 0.0, "fica": 0.0}
    net_annual = taxable_income - tx["federal"] - tx["state"] - tx["fica"]
    return {
        "gross_annual": gross_annual,
        "contribution_401k": contribution_401k,
        "taxable_income": taxable_income,
        "federal": tx["federal"],
        "state": tx["state"],
        "fica": tx["fica"],
        "net_annual": net_annual,
        "net_monthly": net_annual / 12.0,
    }


def monthly_net_income(income: Mapping[str, float], state: str) -> float:
    """Net monthly take-home pay after 401k contribution and taxes."""
    return income_breakdown(income, state)["net_monthly"]


def to_monthly(amount: float, frequency: str) -> float:
    """Convert an expense amount to its monthly equivalent.

    Unknown frequencies are taken as already monthly.
    """
    if frequency in ANNUALISED_FREQUENCIES:
        return amount / 12.0
    return amount * FREQUENCY_MULTIPLIERS.get(frequency, 1.0)


def monthly_expense_total(expenses: Iterable[Mapping]) -> float:
    total = 0.0
    for exp in expenses:
        total += to_monthly(float(exp["amount"]), exp["frequency"])
    return total


def cash_flow(net_income: float, total_expenses: float) -> Dict:
    """Monthly surplus or deficit and its share of net income."""
    amount = net_income - total_expenses
    percentage = (amount / net_income) * 100.0 if net_income > 0 else 0.0
    if amount > 0:
        status = "positive"
    elif amount < 0:
        status = "negative"
    else:
        status = "break-even"
    return {"amount": amount, "percentage": percentage, "status": status}


def savings_rate(net_income: float, total_expenses: float) -> float:
    """Percentage of net income left over each month; 0 without income."""
    if net_income <= 0:
        return 0.0
    return (net_income - total_expenses) / net_income * 100.0


def category_totals(expenses: Iterable[Mapping]) -> Dict[str, float]:
    """Monthly spend per category, in first-seen order."""
    totals: Dict[str, float] = {}
    for exp in expenses:
        monthly = to_monthly(float(exp["amount"]), exp["frequency"])
        totals[exp["category"]] = totals.get(exp["category"], 0.0) + monthly
    return totals


def budget_status(percentage: float) -> str:
    if percentage > OVER_BUDGET_PCT:
        return "over"
    if percentage > WARNING_BUDGET_PCT:
        return "warning"
    return "good"


def category_analysis(expenses: Iterable[Mapping], net_income: float) -> List[Dict]:
    """Compare each category's monthly spend against its budget share.

    Returns one row per category present in ``expenses`` with ``category``,
    ``amount``, ``budget``, ``percentage`` (of budget used) and ``status``
    (``good``, ``warning`` or ``over``), sorted by amount, largest first.
    """
    rows = []
    for category, amount in category_totals(expenses).items():
        budget = net_income * CATEGORY_BUDGETS.get(category, DEFAULT_CATEGORY_BUDGET)
        percentage = (amount / budget) * 100.0 if budget > 0 else 0.0
        rows.append({
            "category": category,
            "amount": amount,
            "budget": budget,
            "percentage": percentage,
            "status": budget_status(percentage),
        })
    rows.sort(key=lambda r: r["amount"], reverse=True)
    return rows


def goal_progress(goals: Iterable[Mapping], expenses: Iterable[Mapping]) -> List[Dict]:
    """Compare user budget goals with the monthly spend in their category.

    Each goal carries ``category`` and ``monthly_limit``; other keys (such as
    ``id``) are passed through.  Adds ``spent``, ``percentage`` of the limit
    used and the same ``good``/``warning``/``over`` status as the budget table.
    """
    totals = category_totals(expenses)
    rows = []
    for goal in goals:
        limit = float(goal["monthly_limit"])
        spent = totals.get(goal["category"], 0.0)
        percentage = (spent / limit) * 100.0 if limit > 0 else 0.0
        row = dict(goal)
        row.update({
            "monthly_limit": limit,
            "spent": spent,
            "percentage": percentage,
            "status": budget_status(percentage),
        })
        rows.append(row)
    return rows


def net_worth(assets: Mapping[str, float]) -> float:
    """Sum of all tracked asset values; missing fields count as zero."""
    return sum(float(assets.get(k, 0.0)) for k in ASSET_FIELDS)


def emergency_fund_target(total_expenses: float) -> float:
    return total_expenses * EMERGENCY_FUND_MONTHS


__all__ = [
    "FREQUENCY_MULTIPLIERS",
    "CATEGORY_BUDGETS",
    "DEFAULT_CATEGORY_BUDGET",
    "ASSET_FIELDS",
    "income_breakdown",
    "monthly_net_income",
    "to_monthly",
    "monthly_expense_total",
    "cash_flow",
    "savings_rate",
    "category_totals",
    "budget_status",
    "category_analysis",
    "goal_progress",
    "net_worth",
    "emergency_fund_target",
]
