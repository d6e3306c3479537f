"""Expose chart and insight helpers for convenience.

The Streamlit forms are imported from ``components.forms`` directly so that
importing the services or the PDF report does not load Streamlit.
"""

from .charts import account_area_chart, forecast_chart, budget_chart, tax_breakdown_chart, progress_gauge
from .insights import budget_recommendations, retirement_insight

__all__ = [
    "account_area_chart",
    "forecast_chart",
    "budget_chart",
    "tax_breakdown_chart",
    "progress_gauge",
    "budget_recommendations",
    "retirement_insight",
]
