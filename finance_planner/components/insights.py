from typing import Dict, List, Sequence

# Cash flow above which part of the surplus is suggested as extra savings.
SURPLUS_THRESHOLD = 1000.0
HEALTHY_SPENDING_SHARE = 0.5


def format_currency(amount: float) -> str:
    """US dollar formatting with cents, e.g. ``-$1,234.50``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def budget_recommendations(
    cash_flow_amount: float,
    categories: Sequence[Dict],
    net_income: float,
    total_expenses: float,
    annual_salary: float,
) -> List[str]:
    """Return the rule-based tips shown under the budget analysis.

    ``categories`` are rows from ``cash_flow.category_analysis`` (largest
    first), so the first over-budget row is the biggest offender.
    """
    tips = []
    if cash_flow_amount > SURPLUS_THRESHOLD:
        tips.append(
            f"You could save an additional {format_currency(cash_flow_amount * 0.5)}/month"
        )
    over = next((c for c in categories if c["status"] == "over"), None)
    if over is not None:
        tips.append(f"Consider reducing spending in {over['category']}")
    if net_income > 0 and total_expenses / net_income < HEALTHY_SPENDING_SHARE:
        tips.append("Your spending is well within healthy ranges")
    if annual_salary > 0:
        tips.append(f"Your emergency fund target: {format_currency(total_expenses * 6)}")
    return tips


def retirement_insight(summary: Dict) -> str:
    """One or two sentences about a retirement projection summary."""
    projection = summary["projection"]
    years = projection["years"]
    projected = float(projection["projected_savings"])
    monthly = float(projection["monthly_income"])

    if years == 0:
        return (
            f"You are at your target retirement age. Your current savings of "
            f"{format_currency(projected)} support about {format_currency(monthly)}/month."
        )

    text = (
        f"In {years} years you are projected to have {format_currency(projected)} "
        f"in today's dollars, about {format_currency(monthly)}/month in retirement."
    )
    gap = projection.get("target_gap")
    if gap is not None:
        if gap >= 0:
            text += f" That beats your target by {format_currency(gap)}."
        else:
            text += f" That is {format_currency(-gap)} short of your target."
    return text
