"""Tests for expense normalisation, cash flow and the budget analysis."""

import math

import pytest

from finance_planner.calculators import cash_flow


@pytest.mark.parametrize(
    "amount, frequency, monthly",
    [
        (100, "monthly", 100.0),
        (100, "weekly", 433.0),
        (100, "bi-weekly", 217.0),
        (1200, "yearly", 100.0),
        (600, "one-time", 50.0),
        (300, "quarterly", 300.0),  # unknown frequencies count as monthly
    ],
)
def test_to_monthly(amount, frequency, monthly):
    assert cash_flow.to_monthly(amount, frequency) == pytest.approx(monthly)


def test_monthly_expense_total():
    expenses = [
        {"amount": 100, "frequency": "weekly"},
        {"amount": 1200, "frequency": "yearly"},
    ]
    assert cash_flow.monthly_expense_total(expenses) == pytest.approx(533.0)
    assert cash_flow.monthly_expense_total([]) == 0.0


def test_monthly_expense_total_is_linear():
    a = [{"amount": 250, "frequency": "bi-weekly"}]
    b = [{"amount": 40, "frequency": "weekly"}, {"amount": 900, "frequency": "one-time"}]
    total = cash_flow.monthly_expense_total(a + b)
    assert math.isclose(
        total, cash_flow.monthly_expense_total(a) + cash_flow.monthly_expense_total(b)
    )


def test_cash_flow_statuses():
    assert cash_flow.cash_flow(4000, 3000) == {
        "amount": 1000, "percentage": 25.0, "status": "positive"
    }
    assert cash_flow.cash_flow(3000, 3500)["status"] == "negative"
    even = cash_flow.cash_flow(2500, 2500)
    assert even["status"] == "break-even"
    assert even["amount"] == 0


def test_cash_flow_percentage_without_income():
    flow = cash_flow.cash_flow(0, 200)
    assert flow["percentage"] == 0.0
    assert flow["status"] == "negative"
    assert cash_flow.cash_flow(-100, 50)["percentage"] == 0.0


def test_savings_rate():
    assert cash_flow.savings_rate(4000, 1000) == pytest.approx(75.0)
    assert cash_flow.savings_rate(0, 1000) == 0.0
    assert cash_flow.savings_rate(2000, 3000) == pytest.approx(-50.0)


def test_category_totals_keep_first_seen_order():
    expenses = [
        {"category": "Groceries", "amount": 100, "frequency": "weekly"},
        {"category": "Rent", "amount": 1500, "frequency": "monthly"},
        {"category": "Groceries", "amount": 50, "frequency": "monthly"},
    ]
    totals = cash_flow.category_totals(expenses)
    assert list(totals) == ["Groceries", "Rent"]
    assert totals["Groceries"] == pytest.approx(483.0)


def test_category_analysis_statuses_and_order():
    expenses = [
        {"category": "Groceries", "amount": 900, "frequency": "monthly"},
        {"category": "Rent", "amount": 2000, "frequency": "monthly"},
        {"category": "Pets", "amount": 600, "frequency": "monthly"},
        {"category": "Dining Out", "amount": 1000, "frequency": "monthly"},
    ]
    rows = cash_flow.category_analysis(expenses, 10000)
    assert [r["category"] for r in rows] == ["Rent", "Dining Out", "Groceries", "Pets"]

    by_name = {r["category"]: r for r in rows}
    assert by_name["Rent"]["budget"] == pytest.approx(3000)
    assert by_name["Rent"]["status"] == "good"
    assert by_name["Groceries"]["percentage"] == pytest.approx(90.0)
    assert by_name["Groceries"]["status"] == "warning"
    assert by_name["Dining Out"]["percentage"] == pytest.approx(125.0)
    assert by_name["Dining Out"]["status"] == "over"
    # Categories without a budget share get 5% of income.
    assert by_name["Pets"]["budget"] == pytest.approx(500)
    assert by_name["Pets"]["status"] == "over"


def test_category_analysis_without_income():
    rows = cash_flow.category_analysis(
        [{"category": "Rent", "amount": 1000, "frequency": "monthly"}], 0
    )
    assert rows == [
        {"category": "Rent", "amount": 1000.0, "budget": 0.0, "percentage": 0.0, "status": "good"}
    ]


@pytest.mark.parametrize("pct, status", [(85, "good"), (85.1, "warning"), (100, "warning"), (100.1, "over")])
def test_budget_status_thresholds(pct, status):
    assert cash_flow.budget_status(pct) == status


def test_income_breakdown():
    b = cash_flow.income_breakdown(
        {"salary": 100000, "contribution_401k_pct": 10, "side_hustle_income": 0}, "Texas"
    )
    assert b["gross_annual"] == 100000
    assert b["contribution_401k"] == pytest.approx(10000)
    assert b["taxable_income"] == pytest.approx(90000)
    assert b["federal"] == pytest.approx(19800)
    assert b["state"] == 0.0
    assert b["fica"] == pytest.approx(6885)
    assert b["net_annual"] == pytest.approx(63315)
    assert b["net_monthly"] == pytest.approx(5276.25)
    assert cash_flow.monthly_net_income(
        {"salary": 100000, "contribution_401k_pct": 10}, "Texas"
    ) == pytest.approx(5276.25)


def test_side_income_is_taxed_but_not_contributed():
    b = cash_flow.income_breakdown(
        {"salary": 40000, "contribution_401k_pct": 10, "side_hustle_income": 20000}, "Florida"
    )
    assert b["gross_annual"] == 60000
    assert b["contribution_401k"] == pytest.approx(4000)
    assert b["taxable_income"] == pytest.approx(56000)
    assert b["federal"] == pytest.approx(56000 * 0.22)


def test_income_breakdown_without_income():
    b = cash_flow.income_breakdown({"salary": 0}, "California")
    assert b["net_monthly"] == 0.0
    assert b["federal"] == b["state"] == b["fica"] == 0.0


def test_net_worth_and_emergency_fund():
    assert cash_flow.net_worth({"current_cash": 5000, "home_value": 250000}) == 255000
    assert cash_flow.net_worth({}) == 0
    assert cash_flow.emergency_fund_target(2500) == 15000


def test_repeated_calls_give_identical_results():
    expenses = [
        {"category": "Rent", "amount": 1500, "frequency": "monthly"},
        {"category": "Groceries", "amount": 95.5, "frequency": "weekly"},
        {"category": "Insurance", "amount": 1300, "frequency": "yearly"},
    ]
    first = cash_flow.monthly_expense_total(expenses)
    assert all(cash_flow.monthly_expense_total(expenses) == first for _ in range(5))
    assert cash_flow.cash_flow(4200.0, first) == cash_flow.cash_flow(4200.0, first)
    assert cash_flow.category_analysis(expenses, 4200.0) == cash_flow.category_analysis(expenses, 4200.0)


def test_goal_progress():
    expenses = [
        {"category": "Groceries", "amount": 100, "frequency": "weekly"},
        {"category": "Rent", "amount": 1500, "frequency": "monthly"},
    ]
    goals = [
        {"id": 1, "category": "Groceries", "monthly_limit": 500},
        {"id": 2, "category": "Rent", "monthly_limit": 1400},
        {"id": 3, "category": "Shopping", "monthly_limit": 200},
        {"id": 4, "category": "Other", "monthly_limit": 0},
    ]
    rows = cash_flow.goal_progress(goals, expenses)
    assert [r["id"] for r in rows] == [1, 2, 3, 4]
    groceries, rent, shopping, other = rows
    assert groceries["spent"] == pytest.approx(433.0)
    assert groceries["percentage"] == pytest.approx(86.6)
    assert groceries["status"] == "warning"
    assert rent["status"] == "over"
    assert shopping["spent"] == 0.0
    assert shopping["status"] == "good"
    assert other["percentage"] == 0.0
