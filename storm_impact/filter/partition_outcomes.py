"""
Partition Outcomes
==================

Splits normalized storm records into the two analytical subsets:

* health   - any fatalities or injuries
* economic - any property or crop damage, with BOTH unit suffixes in {B, M, K}

The economic rule requires a valid crop unit even when only property damage
is positive (and vice versa). Records failing it are excluded outright, never
partially credited. A record may land in both subsets, one, or neither.
"""

from __future__ import annotations

from typing import NamedTuple

import pandas as pd

from storm_impact.clean.clean_units import scale_series, valid_unit_mask
from storm_impact.logging_config import setup_logger

logger = setup_logger("filter.partition_outcomes")


class Partition(NamedTuple):
    health: pd.DataFrame
    economic: pd.DataFrame


def health_subset(df: pd.DataFrame) -> pd.DataFrame:
    """Rows with at least one fatality or injury."""
    mask = (df["fatalities"] > 0) | (df["injuries"] > 0)
    return df.loc[mask].copy()


def economic_subset(df: pd.DataFrame) -> pd.DataFrame:
    """Rows with damage and valid units on both fields, amounts scaled to dollars."""
    has_damage = (df["property_damage"] > 0) | (df["crop_damage"] > 0)
    units_ok = valid_unit_mask(df["property_damage_unit"]) & valid_unit_mask(df["crop_damage_unit"])

    subset = df.loc[has_damage & units_ok].copy()
    subset["property_damage"] = scale_series(subset["property_damage"], subset["property_damage_unit"])
    subset["crop_damage"] = scale_series(subset["crop_damage"], subset["crop_damage_unit"])
    return subset


def partition(df: pd.DataFrame) -> Partition:
    logger.info("=" * 60)
    logger.info("PARTITION OUTCOMES")
    logger.info("=" * 60)

    health = health_subset(df)
    economic = economic_subset(df)

    logger.info("  Health subset:   %d of %d records", len(health), len(df))
    logger.info("  Economic subset: %d of %d records", len(economic), len(df))
    return Partition(health=health, economic=economic)
