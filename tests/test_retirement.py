"""Tests for the deterministic retirement projector."""

import math

import pytest

from finance_planner.calculators import retirement


def _flat(**overrides):
    """A plan with zero returns so balances are plain sums of contributions."""
    plan = {
        "current_age": 40,
        "retire_age": 41,
        "expected_return": 0.0,
        "inflation_rate": 0.0,
    }
    plan.update(overrides)
    return plan


def test_real_growth_rate():
    assert math.isclose(retirement.real_growth_rate(0.07, 0.03), 1.07 / 1.03 - 1)
    assert retirement.real_growth_rate(0.03, 0.03) == 0.0


def test_one_year_roth_only_with_defaults():
    res = retirement.project({"current_age": 30, "retire_age": 31})
    assert math.isclose(res["real_return"], 0.0388349515, rel_tol=1e-8)
    assert res["years"] == 1
    assert res["projected_savings"] == pytest.approx(7271.84, abs=0.01)
    assert res["monthly_income"] == pytest.approx(7271.84 * 0.04 / 12, abs=0.01)
    assert res["balances"]["401k"] == 0.0
    assert res["balances"]["other"] == 0.0


def test_zero_years_returns_starting_balances():
    res = retirement.project({
        "current_age": 65,
        "retire_age": 65,
        "current_401k": 100000,
        "current_roth_ira": 50000,
        "current_other": 25000,
    })
    assert res["years"] == 0
    assert res["ages"] == []
    assert res["projected_savings"] == 175000
    assert math.isclose(res["monthly_income"], 175000 * 0.04 / 12)
    assert "No years until retirement: balances are not grown" in res["calculation_steps"]


def test_retire_age_before_current_age_runs_no_years():
    res = retirement.project({"current_age": 70, "retire_age": 60, "current_other": 1000})
    assert res["years"] == 0
    assert res["projected_savings"] == 1000


def test_contributions_in_a_flat_year():
    res = retirement.project(_flat(
        salary=100000,
        contribution_401k_pct=10,
        company_match_pct=5,
        monthly_savings=2000,
    ))
    ledger = res["ledger"]
    assert ledger["contribution_401k"] == [10000]
    assert ledger["company_match"] == [5000]
    assert ledger["roth_contribution"] == [7000]
    # 24,000 saved a year minus 22,000 already in the 401k and Roth IRA.
    assert ledger["other_contribution"] == [2000]
    assert res["balances"] == {"401k": 15000, "roth_ira": 7000, "other": 2000}
    assert res["projected_savings"] == 24000


def test_company_match_is_not_capped_by_employee_contribution():
    res = retirement.project(_flat(salary=100000, contribution_401k_pct=0, company_match_pct=10))
    assert res["ledger"]["company_match"] == [10000]
    assert res["balances"]["401k"] == 10000


def test_other_contribution_never_negative():
    res = retirement.project(_flat(salary=100000, contribution_401k_pct=20, monthly_savings=500))
    assert res["ledger"]["other_contribution"] == [0.0]
    assert res["balances"]["other"] == 0.0


def test_raise_is_applied_before_contributions():
    res = retirement.project(_flat(
        retire_age=42, salary=100000, contribution_401k_pct=10, promotion_pct=10
    ))
    assert res["ledger"]["salary"] == pytest.approx([110000, 121000])
    assert res["ledger"]["contribution_401k"] == pytest.approx([11000, 12100])


def test_monthly_savings_grows_with_raises():
    res = retirement.project(_flat(retire_age=42, monthly_savings=1000, promotion_pct=10))
    assert res["ledger"]["other_contribution"] == pytest.approx([5000, 6200])


def test_contribution_is_added_before_growth():
    res = retirement.project({
        "current_age": 30,
        "retire_age": 31,
        "expected_return": 0.10,
        "inflation_rate": 0.0,
        "current_roth_ira": 1000,
    })
    assert res["balances"]["roth_ira"] == pytest.approx((1000 + 7000) * 1.10)


def test_ledger_rows_line_up_with_ages():
    res = retirement.project({"current_age": 30, "retire_age": 40, "salary": 50000})
    assert res["years"] == 10
    assert res["ages"] == list(range(31, 41))
    for column in retirement.LEDGER_COLUMNS:
        assert len(res["ledger"][column]) == 10
    last = res["ledger"]
    assert math.isclose(
        last["net_worth"][-1],
        last["balance_401k"][-1] + last["balance_roth_ira"][-1] + last["balance_other"][-1],
    )
    assert math.isclose(last["net_worth"][-1], res["projected_savings"])


def test_projection_is_deterministic():
    plan = {
        "current_age": 25,
        "retire_age": 60,
        "salary": 80000,
        "contribution_401k_pct": 6,
        "company_match_pct": 3,
        "promotion_pct": 3,
        "monthly_savings": 1500,
        "current_401k": 20000,
    }
    assert retirement.project(plan) == retirement.project(dict(plan))


def test_target_gap():
    res = retirement.project({"current_age": 30, "retire_age": 31, "target_net_worth": 10000})
    assert res["target_gap"] == pytest.approx(7271.84 - 10000, abs=0.01)
    assert retirement.project({"current_age": 30, "retire_age": 31})["target_gap"] is None


@pytest.mark.parametrize(
    "years, expected_lines, collapsed",
    [(0, 5, False), (5, 9, False), (6, 10, False), (7, 11, True), (30, 11, True)],
)
def test_calculation_steps_are_truncated(years, expected_lines, collapsed):
    res = retirement.project({"current_age": 30, "retire_age": 30 + years})
    steps = res["calculation_steps"]
    assert len(steps) == expected_lines
    assert steps[0].startswith("Real return")
    assert steps[1].startswith("Starting balances")
    assert steps[-2].startswith(f"Projected savings at age {30 + years}")
    assert steps[-1].startswith("Monthly income at 4.0% withdrawal")
    assert any("same calculation repeated" in s for s in steps) is collapsed


def test_calculation_steps_for_long_projection():
    steps = retirement.project({"current_age": 30, "retire_age": 60})["calculation_steps"]
    assert steps[2].startswith("Year 1 (age 31)")
    assert steps[6].startswith("Year 5 (age 35)")
    assert steps[7] == "Years 6-29: same calculation repeated each year"
    assert steps[8].startswith("Year 30 (age 60)")


def test_years_to_retirement():
    assert retirement.years_to_retirement(30, 65) == 35
    assert retirement.years_to_retirement(70, 65) == 0


@pytest.mark.parametrize(
    "years_left, pct",
    [(0, 0.0), (-3, 0.0), (10, 75.0), (35, 12.5), (40, 0.0), (50, 0.0)],
)
def test_progress_percentage(years_left, pct):
    assert retirement.progress_percentage(years_left) == pytest.approx(pct)


def test_ledger_frame():
    res = retirement.project({"current_age": 50, "retire_age": 53, "salary": 60000})
    df = retirement.ledger_frame(res)
    assert list(df.columns) == retirement.LEDGER_COLUMNS
    assert len(df) == 3
    assert df["age"].tolist() == [51, 52, 53]

    empty = retirement.ledger_frame(retirement.project({"current_age": 65, "retire_age": 65}))
    assert empty.empty
    assert list(empty.columns) == retirement.LEDGER_COLUMNS
