"""Tax estimation utilities.

This module implements a deliberately simplified estimate of U.S. federal,
state and FICA taxes.  It is an educational model rather than tax law:

* the federal rate is chosen from three income tiers and applied *flat* to the
  entire taxable income (no marginal brackets);
* each state is approximated by a single flat rate, with 5% for any state that
  is not in the table;
* FICA is a flat 7.65% with no wage base cap.

Pre-tax deductions such as 401k contributions must be subtracted by the caller
before calling :func:`estimate_tax`.

Example
-------

>>> est = estimate_tax(100001, "Texas")
>>> round(est["federal"], 2), est["state"], round(est["fica"], 2)
(24000.24, 0.0, 7650.08)
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

# (threshold, rate) pairs checked from the top; income must strictly exceed the threshold.
FEDERAL_TIERS = ((100000.0, 0.24), (50000.0, 0.22))
FEDERAL_BASE_RATE = 0.12

STATE_RATES: Mapping[str, float] = MappingProxyType({
    "California": 0.093,
    "Texas": 0.0,
    "New York": 0.0685,
    "Florida": 0.0,
    "Maryland": 0.0575,
    "Illinois": 0.0495,
})
DEFAULT_STATE_RATE = 0.05

FICA_RATE = 0.0765  # Social Security + Medicare

SUPPORTED_STATES = (
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii", "Idaho",
    "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana", "Maine",
    "Maryland", "Massachusetts", "Michigan", "Minnesota", "Mississippi",
    "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire", "New Jersey",
    "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio",
    "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island", "South Carolina",
    "South Dakota", "Tennessee", "Texas", "Utah", "Vermont", "Virginia",
    "Washington", "West Virginia", "Wisconsin", "Wyoming",
)


def federal_tax_rate(taxable_income: float) -> float:
    """Return the flat federal rate for the tier ``taxable_income`` falls in."""
    for threshold, rate in FEDERAL_TIERS:
        if taxable_income > threshold:
            return rate
    return FEDERAL_BASE_RATE


def state_tax_rate(state: str) -> float:
    """Return the flat state rate, falling back to 5% for unlisted states."""
    return STATE_RATES.get(state, DEFAULT_STATE_RATE)


def estimate_tax(taxable_income: float, state: str) -> Dict[str, float]:
    """Estimate federal, state and FICA tax on ``taxable_income``.

    Parameters
    ----------
    taxable_income : float
        Income after pre-tax deductions.  Zero or negative income yields zero
        tax for every component.
    state : str
        Full U.S. state name, e.g. ``"New York"``.

    Returns
    -------
    dict
        ``{"federal": ..., "state": ..., "fica": ...}`` in the same currency
        unit as ``taxable_income``.
    """
    if taxable_income <= 0:
        return {"federal": 0.0, "state": 0.0, "fica": 0.0}
    return {
        "federal": taxable_income * federal_tax_rate(taxable_income),
        "state": taxable_income * state_tax_rate(state),
        "fica": taxable_income * FICA_RATE,
    }


def total_tax(estimate: Mapping[str, float]) -> float:
    """Sum the components of an :func:`estimate_tax` result."""
    return estimate["federal"] + estimate["state"] + estimate["fica"]


__all__ = [
    "FEDERAL_TIERS",
    "FEDERAL_BASE_RATE",
    "STATE_RATES",
    "DEFAULT_STATE_RATE",
    "FICA_RATE",
    "SUPPORTED_STATES",
    "federal_tax_rate",
    "state_tax_rate",
    "estimate_tax",
    "total_tax",
]
