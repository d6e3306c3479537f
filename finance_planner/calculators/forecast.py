"""Simple value forecast with monthly compounding.

Used by the dashboard's forecast chart.  Unlike the retirement projector this
works in nominal terms and compounds monthly at ``annual_return / 12``.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Dict, List, Optional


def generate_projection_data(
    start_value: float,
    monthly_contribution: float,
    annual_return: float,
    years: int,
    start_year: Optional[int] = None,
) -> List[Dict[str, float]]:
    """Return ``years + 1`` yearly points ``{"year", "value"}``.

    Each point holds the value at the start of that year rounded to whole
    dollars (halves round up); twelve monthly contributions and growth steps
    follow before the next point.
    """
    first_year = start_year if start_year is not None else date.today().year
    monthly_return = annual_return / 12.0
    value = float(start_value)
    data = []
    for i in range(int(years) + 1):
        data.append({"year": first_year + i, "value": math.floor(value + 0.5)})
        for _ in range(12):
            value = (value + monthly_contribution) * (1.0 + monthly_return)
    return data


__all__ = ["generate_projection_data"]
