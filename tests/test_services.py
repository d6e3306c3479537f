"""End-to-end checks of the service layer against an in-memory store."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from finance_planner import services
from finance_planner.config import Settings
from finance_planner.models import (
    AssetsRecord,
    BudgetGoalRecord,
    ExpenseRecord,
    IncomeRecord,
    RetirementPlanRecord,
)
from finance_planner.storage import InMemoryStore


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def filled_store(store):
    store.upsert_income(IncomeRecord(
        user_id=1,
        annual_salary="100000",
        contribution_401k="10",
        company_match="5",
        roth_ira="6000",
        state="Texas",
    ))
    store.create_expense(ExpenseRecord(
        user_id=1, category="Rent", description="Apartment", amount="1000", frequency="monthly",
    ))
    store.upsert_assets(AssetsRecord(
        user_id=1,
        current_cash="1000",
        current_401k="20000",
        current_roth_ira="10000",
        home_value="300000",
        car_value="10000",
        personal_investments="2000",
        other_assets="500",
    ))
    return store


def test_empty_user(store):
    stats = services.quick_stats(store, 1)
    assert stats == {
        "net_monthly_income": 0.0,
        "monthly_expenses": 0.0,
        "net_worth": 0.0,
        "savings_rate": 0.0,
    }
    budget = services.budget_summary(store, 1)
    assert budget["cash_flow"]["status"] == "break-even"
    assert budget["categories"] == []
    assert budget["recommendations"] == []
    assert services.income_summary(store, 1) is None


def test_snapshot_defaults_plan_from_settings(store):
    snap = services.load_snapshot(
        store, 1, Settings(default_current_age=40, default_retire_age=60)
    )
    assert snap["income"] is None
    assert snap["plan"]["current_age"] == 40
    assert snap["plan"]["retire_age"] == 60
    assert snap["assets"]["current_cash"] == 0.0


def test_income_summary(filled_store):
    summary = services.income_summary(filled_store, 1)
    assert summary["state_name"] == "Texas"
    assert summary["net_monthly"] == pytest.approx(5276.25)
    assert summary["contribution_401k"] == pytest.approx(10000)


def test_income_summary_zero_salary(store):
    store.upsert_income(IncomeRecord(user_id=1, annual_salary="0"))
    assert services.income_summary(store, 1) is None


def test_budget_summary(filled_store):
    budget = services.budget_summary(filled_store, 1)
    assert budget["net_income"] == pytest.approx(5276.25)
    assert budget["total_expenses"] == pytest.approx(1000)
    assert budget["cash_flow"]["status"] == "positive"
    assert budget["cash_flow"]["amount"] == pytest.approx(4276.25)
    assert budget["emergency_fund_target"] == pytest.approx(6000)

    (rent,) = budget["categories"]
    assert rent["category"] == "Rent"
    assert rent["status"] == "good"

    tips = budget["recommendations"]
    assert tips[0].startswith("You could save an additional $2,138.1")
    assert "Your spending is well within healthy ranges" in tips
    assert tips[-1] == "Your emergency fund target: $6,000.00"


def test_quick_stats(filled_store):
    stats = services.quick_stats(filled_store, 1)
    assert stats["net_worth"] == pytest.approx(343500)
    assert stats["savings_rate"] == pytest.approx(4276.25 / 5276.25 * 100)


def test_retirement_inputs(filled_store):
    snap = services.load_snapshot(filled_store, 1)
    inputs = services.retirement_inputs(snap)
    assert inputs["salary"] == 100000
    assert inputs["current_401k"] == 20000
    assert inputs["current_roth_ira"] == 10000
    assert inputs["current_other"] == pytest.approx(313500)
    assert inputs["monthly_savings"] == pytest.approx(4276.25)
    assert inputs["contribution_401k_pct"] == 10
    assert inputs["company_match_pct"] == 5
    assert inputs["expected_return"] == pytest.approx(0.07)


def test_retirement_inputs_never_negative_savings(store):
    store.create_expense(ExpenseRecord(
        user_id=1, category="Rent", description="Apartment", amount="1000", frequency="monthly",
    ))
    inputs = services.retirement_inputs(services.load_snapshot(store, 1))
    assert inputs["monthly_savings"] == 0.0
    assert inputs["salary"] == 0.0


def test_retirement_summary_with_default_plan(filled_store):
    summary = services.retirement_summary(filled_store, 1)
    assert summary["years_to_retirement"] == 35
    assert summary["progress_percentage"] == pytest.approx(12.5)
    assert summary["current_net_worth"] == pytest.approx(343500)
    projection = summary["projection"]
    assert projection["years"] == 35
    assert projection["projected_savings"] > summary["current_net_worth"]


def test_retirement_summary_with_stored_plan(filled_store):
    filled_store.upsert_retirement_plan(RetirementPlanRecord(
        user_id=1,
        current_age=64,
        target_retirement_age=65,
        expected_return="0",
        inflation_rate="0",
        promotion_percentage="0",
        target_net_worth="400000",
    ))
    projection = services.retirement_summary(filled_store, 1)["projection"]
    assert projection["years"] == 1
    # 401k: 20,000 + 10,000 + 5,000; Roth: 10,000 + 7,000;
    # other: 313,500 + (4,276.25 * 12 - 22,000)
    expected = 35000 + 17000 + 313500 + (4276.25 * 12 - 22000)
    assert projection["projected_savings"] == pytest.approx(expected)
    assert projection["target_gap"] == pytest.approx(expected - 400000)


def test_forecast_metrics(filled_store):
    roth = services.forecast(filled_store, 1, metric="rothira", years=1, start_year=2030)
    assert roth["label"] == "Roth IRA"
    assert roth["monthly_contribution"] == pytest.approx(500)
    assert roth["points"][0] == {"year": 2030, "value": 10000}
    assert len(roth["points"]) == 2

    k401 = services.forecast(filled_store, 1, metric="401k", years=3, start_year=2030)
    assert k401["annual_return"] == 0.08
    assert k401["monthly_contribution"] == pytest.approx(10000 / 12)
    assert k401["points"][0]["value"] == 20000

    worth = services.forecast(filled_store, 1, years=5, start_year=2030)
    assert worth["metric"] == "networth"
    assert worth["points"][0]["value"] == 343500
    assert worth["monthly_contribution"] == pytest.approx(4276.25)
    assert len(worth["points"]) == 6


def test_forecast_unknown_metric(store):
    with pytest.raises(ValueError):
        services.forecast(store, 1, metric="crypto")


def test_budget_goal_summary(filled_store):
    filled_store.create_budget_goal(
        BudgetGoalRecord(user_id=1, category="Rent", monthly_limit="900")
    )
    filled_store.create_budget_goal(
        BudgetGoalRecord(user_id=1, category="Dining Out", monthly_limit="250")
    )
    rent, dining = services.budget_goal_summary(filled_store, 1)
    assert rent["id"] == 1
    assert rent["spent"] == pytest.approx(1000)
    assert rent["status"] == "over"
    assert dining["spent"] == 0.0
    assert dining["status"] == "good"


def test_service_and_report_layers_do_not_load_streamlit():
    code = (
        "import sys\n"
        "import finance_planner.services, finance_planner.reports\n"
        "print('streamlit' in sys.modules)\n"
    )
    root = str(Path(__file__).resolve().parents[1])
    env = dict(os.environ, PYTHONPATH=os.pathsep.join(filter(None, [root, os.environ.get("PYTHONPATH")])))
    out = subprocess.run(
        [sys.executable, "-c", code], capture_output=True, text=True, check=True, env=env
    )
    assert out.stdout.strip() == "False"
