"""Helper package that exposes core financial calculators.

The `calculators` package contains small, focused modules that each implement
specific pieces of the personal finance logic:

* ``taxes`` – simplified flat-rate federal, state and FICA tax estimate.
* ``cash_flow`` – monthly net income, expense normalisation and budget analysis.
* ``retirement`` – deterministic year-by-year projection of 401k, Roth IRA and
  other investment balances.
* ``forecast`` – monthly-compounding value series used by the forecast chart.

Every function is pure: it only reads its arguments and returns fresh values.
See individual docstrings for details.
"""

from . import taxes, cash_flow, retirement, forecast  # noqa: F401

__all__ = ["taxes", "cash_flow", "retirement", "forecast"]
