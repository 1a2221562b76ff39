"""
Damage unit suffixes.

PROPDMGEXP / CROPDMGEXP hold a magnitude code for the paired amount. Only
B, M and K are meaningful; everything else in the source is treated as invalid.
"""

from __future__ import annotations

import pandas as pd

from storm_impact.errors import InvalidUnitError

UNIT_MULTIPLIERS = {
    "B": 10 ** 9,
    "M": 10 ** 6,
    "K": 10 ** 3,
}


def is_valid_unit(unit) -> bool:
    if not isinstance(unit, str):
        return False
    return unit.strip().upper() in UNIT_MULTIPLIERS


def valid_unit_mask(units: pd.Series) -> pd.Series:
    """Boolean mask of rows whose unit suffix is B, M or K (any case)."""
    return units.fillna("").astype(str).str.strip().str.upper().isin(UNIT_MULTIPLIERS.keys())


def scale(amount, unit: str):
    """Convert (amount, unit suffix) to an absolute dollar value.

    >>> scale(5, "K")
    5000
    """
    if not is_valid_unit(unit):
        raise InvalidUnitError(f"Unrecognized damage unit: {unit!r}")
    return amount * UNIT_MULTIPLIERS[unit.strip().upper()]


def scale_series(amounts: pd.Series, units: pd.Series) -> pd.Series:
    """Vectorized scale(); every unit must already be valid."""
    invalid = ~valid_unit_mask(units)
    if invalid.any():
        bad = sorted(set(units[invalid].fillna("").astype(str)))
        raise InvalidUnitError(f"Unrecognized damage units: {bad}")
    multipliers = units.astype(str).str.strip().str.upper().map(UNIT_MULTIPLIERS)
    return amounts.astype("float64") * multipliers.astype("float64")
