from typing import Optional

import streamlit as st

from finance_planner.calculators.taxes import SUPPORTED_STATES
from finance_planner.models import ExpenseCategory, Frequency

# Stable widget keys so values survive reruns and can be reset programmatically
WIDGET_KEYS = {
    "annual_salary": "in_annual_salary",
    "contribution_401k": "in_contribution_401k",
    "company_match": "in_company_match",
    "roth_ira": "in_roth_ira",
    "dependents": "in_dependents",
    "state": "in_state",
    "side_hustle_income": "in_side_hustle_income",
    "inheritance": "in_inheritance",

    "expense_category": "in_expense_category",
    "expense_description": "in_expense_description",
    "expense_amount": "in_expense_amount",
    "expense_frequency": "in_expense_frequency",

    "goal_category": "in_goal_category",
    "goal_monthly_limit": "in_goal_monthly_limit",

    "current_cash": "in_current_cash",
    "current_401k": "in_current_401k",
    "current_roth_ira": "in_current_roth_ira",
    "home_value": "in_home_value",
    "car_value": "in_car_value",
    "personal_investments": "in_personal_investments",
    "other_assets": "in_other_assets",

    "current_age": "in_current_age",
    "target_retirement_age": "in_target_retirement_age",
    "expected_return": "in_expected_return",
    "inflation_rate": "in_inflation_rate",
    "withdrawal_rate": "in_withdrawal_rate",
    "promotion_percentage": "in_promotion_percentage",
    "target_net_worth": "in_target_net_worth",
}

FREQUENCY_LABELS = {
    Frequency.MONTHLY.value: "Monthly",
    Frequency.WEEKLY.value: "Weekly",
    Frequency.BI_WEEKLY.value: "Bi-weekly",
    Frequency.YEARLY.value: "Yearly",
    Frequency.ONE_TIME.value: "One-time (spread over 12 months)",
}

ASSET_LABELS = {
    "current_cash": "Cash & savings",
    "current_401k": "401k balance",
    "current_roth_ira": "Roth IRA balance",
    "home_value": "Home value",
    "car_value": "Car value",
    "personal_investments": "Personal investments",
    "other_assets": "Other assets",
}


def _text(label, field, current, fallback="", help=None):
    value = current.get(field)
    return st.text_input(
        label, value=str(value) if value is not None else fallback,
        key=WIDGET_KEYS[field], help=help,
    )


def income_form(current: Optional[dict], default_state: str = "California") -> Optional[dict]:
    """Render the income form; returns the record payload once submitted."""
    current = current or {}
    with st.form("income_form"):
        st.subheader("Income")
        annual_salary = _text("Annual salary", "annual_salary", current,
                              help="Gross salary before taxes and 401k contributions.")
        c1, c2 = st.columns(2)
        with c1:
            contribution_401k = _text("401k contribution (%)", "contribution_401k", current, "0",
                                      help="Percent of salary you contribute pre-tax (0–100).")
        with c2:
            company_match = _text("Company match (%)", "company_match", current, "0",
                                  help="Employer contribution as a percent of salary.")
        roth_ira = _text("Annual Roth IRA contribution", "roth_ira", current, "0")
        state_default = current.get("state") or default_state
        state = st.selectbox(
            "State", SUPPORTED_STATES,
            index=SUPPORTED_STATES.index(state_default) if state_default in SUPPORTED_STATES else 0,
            key=WIDGET_KEYS["state"], help="Used for a flat-rate state tax estimate.",
        )
        dependents = st.number_input(
            "Dependents", min_value=0, max_value=20, step=1,
            value=int(current.get("dependents", 0)), key=WIDGET_KEYS["dependents"],
        )
        side_hustle_income = _text("Side income (annual, optional)", "side_hustle_income", current, "0")
        inheritance = _text("Inheritance (optional)", "inheritance", current, "0",
                            help="Recorded only; not part of taxable income.")
        submitted = st.form_submit_button("Save income", type="primary")

    if not submitted:
        return None
    return {
        "annual_salary": annual_salary,
        "contribution_401k": contribution_401k,
        "company_match": company_match,
        "roth_ira": roth_ira,
        "dependents": int(dependents),
        "state": state,
        "side_hustle_income": side_hustle_income,
        "inheritance": inheritance,
    }


def _index(options, value) -> int:
    return options.index(value) if value in options else 0


def expense_form(current: Optional[dict] = None, form_key: str = "expense_form") -> Optional[dict]:
    """Form for adding an expense, or editing ``current`` when given.

    Adding clears the form after submit; editing keeps its own widget keys so
    it can sit next to the add form.
    """
    current = current or {}
    editing = bool(current)
    suffix = f"_{form_key}" if editing else ""
    categories = [c.value for c in ExpenseCategory]
    frequencies = [f.value for f in Frequency]
    with st.form(form_key, clear_on_submit=not editing):
        st.subheader("Edit expense" if editing else "Add expense")
        c1, c2 = st.columns(2)
        with c1:
            category = st.selectbox(
                "Category", categories, index=_index(categories, current.get("category")),
                key=WIDGET_KEYS["expense_category"] + suffix,
            )
            amount = st.text_input(
                "Amount", value=str(current.get("amount", "")),
                key=WIDGET_KEYS["expense_amount"] + suffix,
            )
        with c2:
            description = st.text_input(
                "Description", value=current.get("description", ""),
                key=WIDGET_KEYS["expense_description"] + suffix,
            )
            frequency = st.selectbox(
                "Frequency", frequencies, index=_index(frequencies, current.get("frequency")),
                format_func=lambda f: FREQUENCY_LABELS.get(f, f),
                key=WIDGET_KEYS["expense_frequency"] + suffix,
            )
        submitted = st.form_submit_button("Save changes" if editing else "Add expense")

    if not submitted:
        return None
    return {
        "category": category,
        "description": description,
        "amount": amount,
        "frequency": frequency,
    }


def budget_goal_form() -> Optional[dict]:
    """Form for a monthly spending limit on one category."""
    categories = [c.value for c in ExpenseCategory]
    with st.form("budget_goal_form", clear_on_submit=True):
        st.subheader("Add budget goal")
        c1, c2 = st.columns(2)
        with c1:
            category = st.selectbox("Category", categories, key=WIDGET_KEYS["goal_category"])
        with c2:
            monthly_limit = st.text_input("Monthly limit", key=WIDGET_KEYS["goal_monthly_limit"])
        submitted = st.form_submit_button("Add goal")
    if not submitted:
        return None
    return {"category": category, "monthly_limit": monthly_limit}

def assets_form(current: Optional[dict]) -> Optional[dict]:
    current = current or {}
    with st.form("assets_form"):
        st.subheader("Assets")
        values = {}
        cols = st.columns(2)
        for i, (field, label) in enumerate(ASSET_LABELS.items()):
            with cols[i % 2]:
                values[field] = _text(label, field, current, "0")
        submitted = st.form_submit_button("Save assets", type="primary")
    return values if submitted else None


def retirement_plan_form(current: Optional[dict], default_current_age: int = 30,
                         default_retire_age: int = 65) -> Optional[dict]:
    current = current or {}
    with st.form("retirement_form"):
        st.subheader("Retirement plan")
        c1, c2 = st.columns(2)
        with c1:
            current_age = st.number_input(
                "Current age", min_value=0, max_value=120, step=1,
                value=int(current.get("current_age", default_current_age)),
                key=WIDGET_KEYS["current_age"],
            )
            expected_return = _text("Expected return (%)", "expected_return", current, "7.0",
                                    help="Nominal annual investment return.")
            withdrawal_rate = _text("Withdrawal rate (%)", "withdrawal_rate", current, "4.0",
                                    help="Share of savings withdrawn each year in retirement (4% rule).")
        with c2:
            target_age = st.number_input(
                "Target retirement age", min_value=0, max_value=120, step=1,
                value=int(current.get("target_retirement_age", default_retire_age)),
                key=WIDGET_KEYS["target_retirement_age"],
            )
            inflation_rate = _text("Inflation (%)", "inflation_rate", current, "3.0")
            promotion_percentage = _text("Annual raise (%)", "promotion_percentage", current, "3.0",
                                         help="Yearly salary growth from raises and promotions.")
        target_net_worth = _text("Target net worth (optional)", "target_net_worth", current, "")
        submitted = st.form_submit_button("Save plan", type="primary")

    if not submitted:
        return None
    return {
        "current_age": int(current_age),
        "target_retirement_age": int(target_age),
        "expected_return": expected_return,
        "inflation_rate": inflation_rate,
        "withdrawal_rate": withdrawal_rate,
        "promotion_percentage": promotion_percentage,
        "target_net_worth": target_net_worth,
    }
