"""Personal finance planner.

The ``finance_planner`` package groups the pieces of the application:

* ``calculators`` – pure tax, cash-flow, forecast and retirement projection
  functions.
* ``components`` – Streamlit forms, Plotly charts and rule-based insights.
* ``models`` / ``storage`` / ``services`` – persisted record shapes, the per-user
  store and the glue that feeds stored records into the calculators.
"""

__version__ = "0.1.0"
