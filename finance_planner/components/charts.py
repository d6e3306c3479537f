# components/charts.py
# Plotly chart helpers used across the dashboard.
# All functions return a Plotly Figure that Streamlit can display with st.plotly_chart(...).

from typing import List, Mapping, Sequence
import plotly.graph_objects as go

import plotly.io as pio
pio.templates.default = "plotly_white"

STATUS_COLORS = {
    "good": "#22c55e",     # green-500
    "warning": "#f59e0b",  # amber-500
    "over": "#ef4444",     # red-500
}


def _fit(series, n):
    arr = list(series)
    if len(arr) < n: arr += [0.0] * (n - len(arr))
    return arr[:n]


# ---------- Retirement account balances (stacked) ----------
def account_area_chart(ages: Sequence[int],
                       ledger: Mapping[str, Sequence[float]],
                       title: str = "Projected Account Balances") -> go.Figure:
    """Stacked balances per account from a retirement projection ledger."""
    n = len(ages)
    order = [
        ("balance_401k", "401k"),
        ("balance_roth_ira", "Roth IRA"),
        ("balance_other", "Other Investments"),
    ]
    fig = go.Figure()
    for key, name in order:
        if key in ledger:
            fig.add_trace(go.Scatter(
                x=list(ages), y=_fit(ledger[key], n), mode="lines", name=name,
                stackgroup="one",
                hovertemplate="Age %{x}<br>$%{y:,.0f}<extra></extra>"
            ))
    fig.update_layout(
        title=title, template="plotly_white", height=380,
        margin=dict(l=10, r=10, t=40, b=10),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        xaxis_title="Age", yaxis_title="Dollars (today's)"
    )
    return fig


# ---------- Forecast line ----------
def forecast_chart(points: Sequence[Mapping[str, float]],
                   title: str = "Forecast") -> go.Figure:
    """Line chart of ``{"year", "value"}`` points."""
    fig = go.Figure(go.Scatter(
        x=[str(p["year"]) for p in points],
        y=[p["value"] for p in points],
        mode="lines+markers", name=title, fill="tozeroy",
        hovertemplate="%{x}<br>$%{y:,.0f}<extra></extra>"
    ))
    fig.update_layout(
        title=title, template="plotly_white", height=340,
        margin=dict(l=10, r=10, t=40, b=10),
        xaxis_title="Year", yaxis_title="Dollars (nominal)"
    )
    return fig


# ---------- Budget use per category ----------
def budget_chart(categories: Sequence[Mapping],
                 title: str = "Spending vs Budget") -> go.Figure:
    """
    Grouped bars of actual monthly spend against budget.
    Actual bars are colored by status (good / warning / over).
    """
    names = [c["category"] for c in categories]
    fig = go.Figure()
    fig.add_bar(
        x=names, y=[c["budget"] for c in categories], name="Budget",
        marker_color="#cbd5e1",
        hovertemplate="%{x}<br>Budget $%{y:,.2f}<extra></extra>"
    )
    fig.add_bar(
        x=names, y=[c["amount"] for c in categories], name="Actual",
        marker_color=[STATUS_COLORS.get(c["status"], "#64748b") for c in categories],
        hovertemplate="%{x}<br>Spent $%{y:,.2f}<extra></extra>"
    )
    fig.update_layout(
        barmode="group", title=title, template="plotly_white", height=360,
        margin=dict(l=10, r=10, t=40, b=10),
        yaxis_title="Dollars per month",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1)
    )
    return fig


# ---------- Where the gross income goes ----------
def tax_breakdown_chart(breakdown: Mapping[str, float],
                        title: str = "Annual Income Breakdown") -> go.Figure:
    """Donut of federal, state, FICA, 401k and take-home shares."""
    parts: List[tuple] = [
        ("Federal", breakdown.get("federal", 0.0)),
        ("State", breakdown.get("state", 0.0)),
        ("FICA", breakdown.get("fica", 0.0)),
        ("401k", breakdown.get("contribution_401k", 0.0)),
        ("Take-home", max(0.0, breakdown.get("net_annual", 0.0))),
    ]
    fig = go.Figure(go.Pie(
        labels=[p[0] for p in parts],
        values=[p[1] for p in parts],
        hole=0.5, sort=False,
        hovertemplate="%{label}<br>$%{value:,.0f} (%{percent})<extra></extra>"
    ))
    fig.update_layout(title=title, template="plotly_white", height=340,
                      margin=dict(l=10, r=10, t=40, b=10))
    return fig


# ---------- Career progress gauge ----------
def progress_gauge(progress_pct: float) -> go.Figure:
    pct = max(0.0, min(100.0, float(progress_pct)))  # clamp 0–100
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=round(pct, 1),
        number={"suffix": "%"},
        gauge={
            "axis": {"range": [0, 100]},
            "bar": {"thickness": 0.35},
            "steps": [
                {"range": [0, 60],  "color": "#e2e8f0"},
                {"range": [60, 100], "color": "#cbd5e1"},
            ],
        }
    ))
    fig.update_layout(template="plotly_white", height=220, margin=dict(l=10, r=10, t=10, b=10))
    return fig


__all__ = [
    "account_area_chart",
    "forecast_chart",
    "budget_chart",
    "tax_breakdown_chart",
    "progress_gauge",
]
