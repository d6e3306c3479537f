from finance_planner import services
from finance_planner.models import IncomeRecord, RetirementPlanRecord
from finance_planner.reports import build_pdf
from finance_planner.storage import InMemoryStore


def test_build_pdf_returns_pdf_bytes():
    store = InMemoryStore()
    store.upsert_income(IncomeRecord(user_id=1, annual_salary="90000", contribution_401k="8"))
    store.upsert_retirement_plan(
        RetirementPlanRecord(user_id=1, current_age=45, target_retirement_age=60,
                             target_net_worth="750000")
    )
    pdf = build_pdf(services.retirement_summary(store, 1))
    assert isinstance(pdf, bytes)
    assert pdf.startswith(b"%PDF")


def test_build_pdf_without_years_left():
    store = InMemoryStore()
    store.upsert_retirement_plan(
        RetirementPlanRecord(user_id=1, current_age=65, target_retirement_age=65)
    )
    pdf = build_pdf(services.retirement_summary(store, 1))
    assert pdf.startswith(b"%PDF")
