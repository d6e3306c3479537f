# app.py
import json

import streamlit as st
import structlog
from pydantic import ValidationError

from finance_planner.calculators.retirement import ledger_frame
from finance_planner.components.charts import (
    account_area_chart,
    budget_chart,
    forecast_chart,
    progress_gauge,
    tax_breakdown_chart,
)
from finance_planner.components.forms import (
    assets_form,
    budget_goal_form,
    expense_form,
    income_form,
    retirement_plan_form,
    FREQUENCY_LABELS,
)
from finance_planner.components.insights import format_currency, retirement_insight
from finance_planner import services
from finance_planner.config import get_settings
from finance_planner.logging_config import configure_logging
from finance_planner.models import (
    AssetsRecord,
    BudgetGoalRecord,
    ExpenseCategory,
    ExpenseRecord,
    IncomeRecord,
    RetirementPlanRecord,
)
from finance_planner.reports import build_pdf
from finance_planner.storage import NotFoundError, create_store


# ---------- Page config ----------
st.set_page_config(
    page_title="Finance Planner",
    layout="wide",
    initial_sidebar_state="auto",
)

# Hide Streamlit's default menu and footer
HIDE_STREAMLIT_STYLE = """
    <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}
        div[data-testid="stMetric"] {
            background: #FFFFFF;
            border: 1px solid #D1D9D6;
            border-radius: 8px;
            padding: 0.75rem 1rem;
        }
    </style>
"""
st.markdown(HIDE_STREAMLIT_STYLE, unsafe_allow_html=True)

settings = get_settings()


@st.cache_resource
def _init():
    configure_logging()
    return create_store(settings)


store = _init()
logger = structlog.get_logger("app")


def _show_errors(err: ValidationError):
    for e in err.errors():
        field = ".".join(str(p) for p in e["loc"]) or "form"
        st.error(f"{field.replace('_', ' ')}: {e['msg']}")


def _record_dict(record):
    return record.model_dump() if record is not None else None


# ====== SIDEBAR: PROFILE ======
st.sidebar.header("Profile")
user_id = int(st.sidebar.number_input(
    "User id", min_value=1, step=1, value=1,
    help="Records are stored per user id.",
))
st.sidebar.caption(f"Storage: **{settings.storage_backend}**")

st.title("Finance Planner")
st.caption("Income, expenses, budget and a year-by-year retirement projection.")

# ====== QUICK STATS ======
stats = services.quick_stats(store, user_id)
k1, k2, k3, k4 = st.columns(4)
k1.metric("Net Monthly Income", format_currency(stats["net_monthly_income"]))
k2.metric("Monthly Expenses", format_currency(stats["monthly_expenses"]))
k3.metric("Net Worth", format_currency(stats["net_worth"]))
rate = stats["savings_rate"]
k4.metric("Savings Rate", f"{rate:.1f}%", "Above target" if rate > 20 else "Below target",
          delta_color="normal" if rate > 20 else "inverse")

tab_income, tab_expenses, tab_assets, tab_budget, tab_retire, tab_forecast = st.tabs(
    ["Income", "Expenses", "Assets", "Budget", "Retirement", "Forecast"]
)

# ====== INCOME ======
with tab_income:
    left, right = st.columns(2)
    with left:
        payload = income_form(_record_dict(store.get_income(user_id)), settings.default_state)
        if payload is not None:
            try:
                store.upsert_income(IncomeRecord(user_id=user_id, **payload))
                st.success("Income saved.")
                st.rerun()
            except ValidationError as e:
                _show_errors(e)
    with right:
        breakdown = services.income_summary(store, user_id)
        if breakdown is None:
            st.info("Enter a salary to see your tax estimate.")
        else:
            st.subheader("Tax estimate")
            c1, c2 = st.columns(2)
            c1.metric("Gross annual", format_currency(breakdown["gross_annual"]))
            c2.metric("Net monthly", format_currency(breakdown["net_monthly"]))
            st.markdown(
                f"- Federal: {format_currency(breakdown['federal'])}\n"
                f"- State ({breakdown['state_name']}): {format_currency(breakdown['state'])}\n"
                f"- FICA: {format_currency(breakdown['fica'])}\n"
                f"- 401k (pre-tax): {format_currency(breakdown['contribution_401k'])}\n"
                f"- Net annual: {format_currency(breakdown['net_annual'])}"
            )
            st.plotly_chart(tax_breakdown_chart(breakdown), use_container_width=True)

# ====== EXPENSES ======
with tab_expenses:
    payload = expense_form()
    if payload is not None:
        try:
            store.create_expense(ExpenseRecord(user_id=user_id, **payload))
            st.success("Expense added.")
            st.rerun()
        except ValidationError as e:
            _show_errors(e)

    category_filter = st.selectbox(
        "Show category", ["All"] + [c.value for c in ExpenseCategory], key="expense_filter"
    )
    expenses = store.get_expenses(user_id)
    if category_filter != "All":
        expenses = [e for e in expenses if e.category.value == category_filter]
    if not expenses:
        st.info("No expenses yet." if category_filter == "All" else "No expenses in this category.")
    editing_id = st.session_state.get("editing_expense")
    for exp in expenses:
        c1, c2, c3, c4, c5 = st.columns([2, 3, 2, 0.5, 0.5], gap="small")
        c1.markdown(f"**{exp.category.value}**")
        c2.write(exp.description)
        c3.write(f"{format_currency(float(exp.amount))} {FREQUENCY_LABELS[exp.frequency.value].lower()}")
        if c4.button("✎", key=f"edit_exp_{exp.id}"):
            st.session_state["editing_expense"] = exp.id
            st.rerun()
        if c5.button("✖", key=f"del_exp_{exp.id}"):
            store.delete_expense(exp.id, user_id)
            st.rerun()

        if exp.id == editing_id:
            changes = expense_form(exp.model_dump(mode="json"), form_key=f"edit_expense_{exp.id}")
            if st.button("Cancel", key=f"cancel_exp_{exp.id}"):
                st.session_state.pop("editing_expense", None)
                st.rerun()
            if changes is not None:
                try:
                    store.update_expense(exp.id, user_id, changes)
                    st.session_state.pop("editing_expense", None)
                    st.success("Expense updated.")
                    st.rerun()
                except ValidationError as e:
                    _show_errors(e)
                except NotFoundError:
                    st.session_state.pop("editing_expense", None)
                    st.error("That expense no longer exists.")

# ====== ASSETS ======
with tab_assets:
    payload = assets_form(_record_dict(store.get_assets(user_id)))
    if payload is not None:
        store.upsert_assets(AssetsRecord(user_id=user_id, **payload))
        st.success("Assets saved.")
        st.rerun()

# ====== BUDGET ======
with tab_budget:
    budget = services.budget_summary(store, user_id)
    flow = budget["cash_flow"]
    c1, c2, c3 = st.columns(3)
    c1.metric("Monthly cash flow", format_currency(flow["amount"]), flow["status"])
    c2.metric("Share of income", f"{flow['percentage']:.1f}%")
    c3.metric("Emergency fund target", format_currency(budget["emergency_fund_target"]))
    if budget["categories"]:
        st.plotly_chart(budget_chart(budget["categories"]), use_container_width=True)
        for row in budget["categories"]:
            note = {
                "good": "Within budget",
                "warning": "Close to limit",
                "over": f"{format_currency(row['amount'] - row['budget'])} over budget",
            }[row["status"]]
            st.progress(min(100, int(row["percentage"])) / 100.0,
                        text=f"{row['category']}: {format_currency(row['amount'])} / "
                             f"{format_currency(row['budget'])} ({row['percentage']:.0f}%) · {note}")
    else:
        st.info("Add some expenses to see your budget analysis.")
    for tip in budget["recommendations"]:
        st.markdown(f"- {tip}")

    st.markdown("### Budget goals")
    payload = budget_goal_form()
    if payload is not None:
        try:
            store.create_budget_goal(BudgetGoalRecord(user_id=user_id, **payload))
            st.success("Budget goal added.")
            st.rerun()
        except ValidationError as e:
            _show_errors(e)
    for goal in services.budget_goal_summary(store, user_id):
        c1, c2 = st.columns([6, 0.5], gap="small")
        c1.progress(
            min(100, int(goal["percentage"])) / 100.0,
            text=f"{goal['category']}: {format_currency(goal['spent'])} of "
                 f"{format_currency(goal['monthly_limit'])} ({goal['percentage']:.0f}%)",
        )
        if c2.button("✖", key=f"del_goal_{goal['id']}"):
            store.delete_budget_goal(goal["id"], user_id)
            st.rerun()

# ====== RETIREMENT ======
with tab_retire:
    plan_record = store.get_retirement_plan(user_id)
    with st.expander("Adjust plan", expanded=plan_record is None):
        payload = retirement_plan_form(
            _record_dict(plan_record), settings.default_current_age, settings.default_retire_age
        )
        if payload is not None:
            try:
                store.upsert_retirement_plan(RetirementPlanRecord(user_id=user_id, **payload))
                st.success("Retirement plan updated.")
                st.rerun()
            except ValidationError as e:
                _show_errors(e)

    summary = services.retirement_summary(store, user_id)
    projection = summary["projection"]

    c1, c2 = st.columns([2, 1])
    with c1:
        m1, m2 = st.columns(2)
        m1.metric("Projected savings", format_currency(projection["projected_savings"]))
        m2.metric("Monthly retirement income", format_currency(projection["monthly_income"]))
        st.caption(
            f"Real return {projection['real_return'] * 100:.2f}% a year; "
            f"{summary['years_to_retirement']} years to retirement."
        )
        st.info(retirement_insight(summary))
    with c2:
        st.plotly_chart(progress_gauge(summary["progress_percentage"]), use_container_width=True)
        st.caption("Career progress")

    if projection["years"]:
        st.plotly_chart(account_area_chart(projection["ages"], projection["ledger"]),
                        use_container_width=True)

    with st.expander("Calculation steps"):
        for step in projection["calculation_steps"]:
            st.text(step)

    df = ledger_frame(projection)
    st.markdown("### Ledger")
    st.dataframe(df, use_container_width=True, height=350)

    d1, d2, d3 = st.columns(3)
    d1.download_button(
        "⬇️ CSV (ledger)",
        data=df.to_csv(index=False).encode("utf-8"),
        file_name="retirement_ledger.csv",
        mime="text/csv",
    )
    d2.download_button(
        "⬇️ JSON",
        data=json.dumps(summary, indent=2, default=str),
        file_name="retirement_projection.json",
        mime="application/json",
    )
    if d3.button("Build PDF"):
        st.session_state["export_pdf_bytes"] = build_pdf(summary)
        logger.info("pdf_built", user_id=user_id)
    if st.session_state.get("export_pdf_bytes"):
        d3.download_button(
            "⬇️ PDF",
            data=st.session_state["export_pdf_bytes"],
            file_name="retirement_projection.pdf",
            mime="application/pdf",
        )

# ====== FORECAST ======
with tab_forecast:
    c1, c2 = st.columns(2)
    with c1:
        metric = st.selectbox(
            "Metric", list(services.FORECAST_METRICS),
            format_func=lambda m: services.FORECAST_METRICS[m][1],
        )
    with c2:
        years = st.selectbox("Timeframe (years)", [1, 5, 10, 20], index=1)
    fc = services.forecast(store, user_id, metric=metric, years=years)
    st.plotly_chart(forecast_chart(fc["points"], title=fc["label"]), use_container_width=True)
    st.caption(
        f"{format_currency(fc['monthly_contribution'])}/month at "
        f"{fc['annual_return'] * 100:.0f}% a year, compounded monthly."
    )
