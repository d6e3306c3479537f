"""Deterministic retirement projection.

The projector walks year by year from the current age to the target
retirement age, compounding three accounts at a single inflation-adjusted
("real") rate:

* **401k** – employee contribution plus company match, both a percentage of the
  current salary.  The match is a flat percentage of salary and is not capped
  at the employee contribution.
* **Roth IRA** – a fixed $7,000 contribution every year.
* **Other investments** – whatever is left of the annual savings after the
  retirement contributions above, never negative.

Salary and the monthly savings baseline both grow by the annual raise
percentage before the year's contributions are computed.  Contributions are
added before the growth factor is applied, for every account and every year.

At retirement the 4% rule turns the projected total into a monthly income.

Example
-------

>>> res = project({"current_age": 30, "retire_age": 31})
>>> round(res["projected_savings"], 2)
7271.84
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd

ROTH_IRA_ANNUAL_CONTRIBUTION = 7000.0
DEFAULT_EXPECTED_RETURN = 0.07
DEFAULT_INFLATION_RATE = 0.03
DEFAULT_WITHDRAWAL_RATE = 0.04

# Years written out in full in the calculation trace (plus the final year).
TRACE_LEADING_YEARS = 5
# Career length used for the progress bar.
CAREER_YEARS = 40

LEDGER_COLUMNS = [
    "year",
    "age",
    "salary",
    "contribution_401k",
    "company_match",
    "roth_contribution",
    "other_contribution",
    "balance_401k",
    "balance_roth_ira",
    "balance_other",
    "net_worth",
]


def real_growth_rate(nominal_return: float, inflation_rate: float) -> float:
    """Inflation-adjusted return: ``(1 + nominal) / (1 + inflation) - 1``."""
    return (1.0 + nominal_return) / (1.0 + inflation_rate) - 1.0


def years_to_retirement(current_age: int, retire_age: int) -> int:
    """Whole years left to work; never negative."""
    return max(0, int(retire_age) - int(current_age))


def progress_percentage(years_left: int) -> float:
    """Share of a 40 year career already behind the user, clamped to 0–100."""
    if years_left <= 0:
        return 0.0
    pct = (CAREER_YEARS - years_left) / CAREER_YEARS * 100.0
    return max(0.0, min(100.0, pct))


def project(plan: dict) -> dict:
    """Project account balances until retirement.

    Parameters
    ----------
    plan : dict
        ``current_age`` and ``retire_age`` are required.  Optional keys:
        ``salary``, ``current_401k``, ``current_roth_ira``, ``current_other``,
        ``contribution_401k_pct``, ``company_match_pct``, ``promotion_pct``
        (percentages, 0–100), ``monthly_savings``, ``expected_return``,
        ``inflation_rate``, ``withdrawal_rate`` (fractions) and
        ``target_net_worth``.

    Returns
    -------
    dict
        ``real_return``, ``years``, ``ages``, ``starting`` balances, the
        per-year ``ledger`` (column lists, see ``LEDGER_COLUMNS``),
        ``projected_savings``, ``monthly_income``, ``target_gap`` and the
        textual ``calculation_steps``.
    """
    curr = int(plan["current_age"])
    retire = int(plan["retire_age"])

    nominal = float(plan.get("expected_return", DEFAULT_EXPECTED_RETURN))
    inflation = float(plan.get("inflation_rate", DEFAULT_INFLATION_RATE))
    withdrawal_rate = float(plan.get("withdrawal_rate", DEFAULT_WITHDRAWAL_RATE))
    real = real_growth_rate(nominal, inflation)
    growth = 1.0 + real

    contribution_pct = float(plan.get("contribution_401k_pct", 0.0))
    match_pct = float(plan.get("company_match_pct", 0.0))
    raise_factor = 1.0 + float(plan.get("promotion_pct", 0.0)) / 100.0

    salary = float(plan.get("salary", 0.0))
    balance_401k = float(plan.get("current_401k", 0.0))
    balance_roth = float(plan.get("current_roth_ira", 0.0))
    balance_other = float(plan.get("current_other", 0.0))
    monthly_savings = float(plan.get("monthly_savings", 0.0))

    starting = {
        "salary": salary,
        "balance_401k": balance_401k,
        "balance_roth_ira": balance_roth,
        "balance_other": balance_other,
        "monthly_savings": monthly_savings,
    }

    years = years_to_retirement(curr, retire)
    ledger: Dict[str, List[float]] = {k: [] for k in LEDGER_COLUMNS}

    for year in range(1, years + 1):
        salary *= raise_factor

        employee = salary * contribution_pct / 100.0
        match = salary * match_pct / 100.0
        balance_401k = (balance_401k + employee + match) * growth

        balance_roth = (balance_roth + ROTH_IRA_ANNUAL_CONTRIBUTION) * growth

        retirement_contribs = employee + match + ROTH_IRA_ANNUAL_CONTRIBUTION
        remaining = max(0.0, monthly_savings * 12.0 - retirement_contribs)
        balance_other = (balance_other + remaining) * growth

        monthly_savings *= raise_factor

        ledger["year"].append(year)
        ledger["age"].append(curr + year)
        ledger["salary"].append(salary)
        ledger["contribution_401k"].append(employee)
        ledger["company_match"].append(match)
        ledger["roth_contribution"].append(ROTH_IRA_ANNUAL_CONTRIBUTION)
        ledger["other_contribution"].append(remaining)
        ledger["balance_401k"].append(balance_401k)
        ledger["balance_roth_ira"].append(balance_roth)
        ledger["balance_other"].append(balance_other)
        ledger["net_worth"].append(balance_401k + balance_roth + balance_other)

    projected_savings = balance_401k + balance_roth + balance_other
    monthly_income = projected_savings * withdrawal_rate / 12.0

    target = plan.get("target_net_worth")
    target_gap: Optional[float] = None
    if target is not None:
        target_gap = projected_savings - float(target)

    result = {
        "current_age": curr,
        "retire_age": retire,
        "real_return": real,
        "withdrawal_rate": withdrawal_rate,
        "years": years,
        "ages": list(ledger["age"]),
        "starting": starting,
        "ledger": ledger,
        "balances": {
            "401k": balance_401k,
            "roth_ira": balance_roth,
            "other": balance_other,
        },
        "projected_savings": projected_savings,
        "monthly_income": monthly_income,
        "target_gap": target_gap,
    }
    result["calculation_steps"] = format_calculation_steps(result)
    return result


def _money(x: float) -> str:
    return f"${x:,.2f}"


def _year_line(ledger: Dict[str, List[float]], i: int) -> str:
    return (
        f"Year {ledger['year'][i]} (age {ledger['age'][i]}): "
        f"salary {_money(ledger['salary'][i])}; "
        f"401k +{_money(ledger['contribution_401k'][i])} employee "
        f"+{_money(ledger['company_match'][i])} match = {_money(ledger['balance_401k'][i])}; "
        f"Roth IRA +{_money(ledger['roth_contribution'][i])} = {_money(ledger['balance_roth_ira'][i])}; "
        f"other +{_money(ledger['other_contribution'][i])} = {_money(ledger['balance_other'][i])}"
    )


def format_calculation_steps(result: dict) -> List[str]:
    """Render the step-by-step arithmetic of a :func:`project` result.

    Years 1–5 and the final year are written out; any years in between are
    collapsed into a single line.  Rounding here is cosmetic only.
    """
    start = result["starting"]
    ledger = result["ledger"]
    years = result["years"]
    real = result["real_return"]

    steps = [
        f"Real return = (1 + nominal) / (1 + inflation) - 1 = {real * 100:.4f}%",
        (
            f"Starting balances: 401k {_money(start['balance_401k'])}, "
            f"Roth IRA {_money(start['balance_roth_ira'])}, "
            f"other {_money(start['balance_other'])}; "
            f"salary {_money(start['salary'])}, "
            f"monthly savings {_money(start['monthly_savings'])}"
        ),
    ]

    if years == 0:
        steps.append("No years until retirement: balances are not grown")

    for i in range(min(years, TRACE_LEADING_YEARS)):
        steps.append(_year_line(ledger, i))
    if years > TRACE_LEADING_YEARS + 1:
        steps.append(
            f"Years {TRACE_LEADING_YEARS + 1}-{years - 1}: same calculation repeated each year"
        )
    if years > TRACE_LEADING_YEARS:
        steps.append(_year_line(ledger, years - 1))

    steps.append(
        f"Projected savings at age {result['current_age'] + years}: "
        f"{_money(result['projected_savings'])}"
    )
    steps.append(
        f"Monthly income at {result['withdrawal_rate'] * 100:.1f}% withdrawal: "
        f"{_money(result['projected_savings'])} x {result['withdrawal_rate']:g} / 12 = "
        f"{_money(result['monthly_income'])}"
    )
    return steps


def ledger_frame(result: dict) -> pd.DataFrame:
    """Return the projection ledger as a DataFrame, one row per year."""
    return pd.DataFrame(result["ledger"], columns=LEDGER_COLUMNS)


__all__ = [
    "ROTH_IRA_ANNUAL_CONTRIBUTION",
    "DEFAULT_EXPECTED_RETURN",
    "DEFAULT_INFLATION_RATE",
    "DEFAULT_WITHDRAWAL_RATE",
    "LEDGER_COLUMNS",
    "real_growth_rate",
    "years_to_retirement",
    "progress_percentage",
    "project",
    "format_calculation_steps",
    "ledger_frame",
]
