"""
Glue between stored records and the calculators.

Every function takes a ``FinanceStore`` and a user id, reads that user's
records, converts the decimal strings to floats and calls the pure
calculators.  Results are plain dicts ready for display or JSON export.

Missing records are treated as empty: no income means zero income, no assets
means zero balances, and a missing retirement plan falls back to the defaults
from ``Settings``.
"""

from typing import Optional

import structlog

from finance_planner.calculators import cash_flow, forecast as forecast_calc, retirement
from finance_planner.components.insights import budget_recommendations
from finance_planner.config import Settings, get_settings
from finance_planner.models import RetirementPlanRecord
from finance_planner.storage import FinanceStore

logger = structlog.get_logger(__name__)

# metric -> (annual return, label)
FORECAST_METRICS = {
    "networth": (0.07, "Net Worth"),
    "401k": (0.08, "401k Balance"),
    "rothira": (0.07, "Roth IRA"),
}


def load_snapshot(store: FinanceStore, user_id: int, settings: Optional[Settings] = None) -> dict:
    """
    Read all of a user's records and convert them to calculator inputs.

    Returns a dict with ``income`` (or None), ``expenses`` (list), ``assets``
    (zeros when missing) and ``plan``.
    """
    settings = settings or get_settings()

    income = store.get_income(user_id)
    assets = store.get_assets(user_id)
    plan = store.get_retirement_plan(user_id)
    if plan is None:
        logger.info("retirement_plan_defaulted", user_id=user_id)
        plan = RetirementPlanRecord(
            user_id=user_id,
            current_age=settings.default_current_age,
            target_retirement_age=max(settings.default_retire_age, settings.default_current_age),
        )

    return {
        "income": income.as_inputs() if income is not None else None,
        "expenses": [e.as_inputs() for e in store.get_expenses(user_id)],
        "assets": (
            assets.as_inputs() if assets is not None
            else {k: 0.0 for k in cash_flow.ASSET_FIELDS}
        ),
        "plan": plan.as_inputs(),
    }


def _monthly_figures(snapshot: dict) -> tuple[float, float]:
    income = snapshot["income"]
    net_income = cash_flow.monthly_net_income(income, income["state"]) if income else 0.0
    total_expenses = cash_flow.monthly_expense_total(snapshot["expenses"])
    return net_income, total_expenses


def income_summary(store: FinanceStore, user_id: int) -> Optional[dict]:
    """
    Tax and take-home breakdown of the user's income.

    Returns None when no income is stored or the salary is not positive.
    """
    income = store.get_income(user_id)
    if income is None:
        return None
    inputs = income.as_inputs()
    if inputs["salary"] <= 0:
        return None
    breakdown = cash_flow.income_breakdown(inputs, inputs["state"])
    breakdown["state_name"] = inputs["state"]
    return breakdown


def budget_summary(store: FinanceStore, user_id: int) -> dict:
    """Cash flow, per-category budget use and recommendations."""
    snapshot = load_snapshot(store, user_id)
    net_income, total_expenses = _monthly_figures(snapshot)
    flow = cash_flow.cash_flow(net_income, total_expenses)
    categories = cash_flow.category_analysis(snapshot["expenses"], net_income)
    salary = snapshot["income"]["salary"] if snapshot["income"] else 0.0

    logger.debug(
        "budget_summarised",
        user_id=user_id,
        categories=len(categories),
        status=flow["status"],
    )
    return {
        "net_income": net_income,
        "total_expenses": total_expenses,
        "cash_flow": flow,
        "categories": categories,
        "emergency_fund_target": cash_flow.emergency_fund_target(total_expenses),
        "recommendations": budget_recommendations(
            flow["amount"], categories, net_income, total_expenses, salary
        ),
    }


def quick_stats(store: FinanceStore, user_id: int) -> dict:
    """The four dashboard headline numbers."""
    snapshot = load_snapshot(store, user_id)
    net_income, total_expenses = _monthly_figures(snapshot)
    return {
        "net_monthly_income": net_income,
        "monthly_expenses": total_expenses,
        "net_worth": cash_flow.net_worth(snapshot["assets"]),
        "savings_rate": cash_flow.savings_rate(net_income, total_expenses),
    }


def retirement_inputs(snapshot: dict) -> dict:
    """
    Build the projector plan from a snapshot.

    Side income counts toward the salary that grows each year.  Everything
    that isn't a 401k or Roth IRA balance is pooled as other investments, and
    monthly savings is whatever net income is left after expenses.
    """
    income = snapshot["income"] or {}
    assets = snapshot["assets"]
    plan = snapshot["plan"]
    net_income, total_expenses = _monthly_figures(snapshot)

    other = (
        assets["current_cash"]
        + assets["personal_investments"]
        + assets["home_value"]
        + assets["car_value"]
        + assets["other_assets"]
    )
    return {
        "current_age": plan["current_age"],
        "retire_age": plan["retire_age"],
        "salary": income.get("salary", 0.0) + income.get("side_hustle_income", 0.0),
        "current_401k": assets["current_401k"],
        "current_roth_ira": assets["current_roth_ira"],
        "current_other": other,
        "contribution_401k_pct": income.get("contribution_401k_pct", 0.0),
        "company_match_pct": income.get("company_match_pct", 0.0),
        "promotion_pct": plan["promotion_pct"],
        "monthly_savings": max(0.0, net_income - total_expenses),
        "expected_return": plan["expected_return"],
        "inflation_rate": plan["inflation_rate"],
        "withdrawal_rate": plan["withdrawal_rate"],
        "target_net_worth": plan["target_net_worth"],
    }


def retirement_summary(store: FinanceStore, user_id: int) -> dict:
    """Run the retirement projection for a user."""
    snapshot = load_snapshot(store, user_id)
    inputs = retirement_inputs(snapshot)
    projection = retirement.project(inputs)
    years = projection["years"]

    logger.info(
        "retirement_projected",
        user_id=user_id,
        years=years,
        projected_savings=round(projection["projected_savings"], 2),
    )
    return {
        "inputs": inputs,
        "projection": projection,
        "years_to_retirement": years,
        "progress_percentage": retirement.progress_percentage(years),
        "current_net_worth": cash_flow.net_worth(snapshot["assets"]),
    }


def forecast(store: FinanceStore, user_id: int, metric: str = "networth", years: int = 5,
             start_year: Optional[int] = None) -> dict:
    """
    Yearly forecast of net worth, 401k or Roth IRA value.

    Raises:
        ValueError: If ``metric`` is not one of ``FORECAST_METRICS``
    """
    if metric not in FORECAST_METRICS:
        raise ValueError(f"Unknown forecast metric: {metric}")
    annual_return, label = FORECAST_METRICS[metric]

    snapshot = load_snapshot(store, user_id)
    income = snapshot["income"] or {}
    assets = snapshot["assets"]

    if metric == "networth":
        net_income, total_expenses = _monthly_figures(snapshot)
        start = cash_flow.net_worth(assets)
        monthly = max(0.0, net_income - total_expenses)
    elif metric == "401k":
        start = assets["current_401k"]
        monthly = income.get("salary", 0.0) * income.get("contribution_401k_pct", 0.0) / 100.0 / 12.0
    else:
        start = assets["current_roth_ira"]
        monthly = income.get("roth_ira", 0.0) / 12.0

    return {
        "metric": metric,
        "label": label,
        "annual_return": annual_return,
        "monthly_contribution": monthly,
        "points": forecast_calc.generate_projection_data(
            start, monthly, annual_return, years, start_year=start_year
        ),
    }


def budget_goal_summary(store: FinanceStore, user_id: int) -> list:
    """The user's active budget goals with this month's spend against each."""
    goals = [{**g.as_inputs(), "id": g.id} for g in store.get_budget_goals(user_id)]
    expenses = [e.as_inputs() for e in store.get_expenses(user_id)]
    return cash_flow.goal_progress(goals, expenses)
