"""
Rank Outcomes
=============

Sums an outcome measure per canonical event type and returns the top N.
Ties on the summed measure are ordered by event type name, ascending, so
repeated runs produce identical rankings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pandas as pd

from storm_impact.clean.clean_event_types import CANONICAL_COLUMN
from storm_impact.config_paths import TOP_N
from storm_impact.logging_config import setup_logger

logger = setup_logger("build.rank_outcomes")

HEALTH_COMPONENTS = ["fatalities", "injuries"]
ECONOMIC_COMPONENTS = ["property_damage", "crop_damage"]


@dataclass(frozen=True)
class OutcomeAggregate:
    category: str
    measure: float


def casualties(df: pd.DataFrame) -> pd.Series:
    return df["fatalities"] + df["injuries"]


def damages(df: pd.DataFrame) -> pd.Series:
    """Property + crop damage per record. Expects amounts already scaled."""
    return df["property_damage"] + df["crop_damage"]


def aggregate_and_rank(
    subset: pd.DataFrame,
    measure: Callable[[pd.DataFrame], pd.Series],
    top_n: int = TOP_N,
) -> list[OutcomeAggregate]:
    """Group by canonical category, sum the measure, return the top_n largest."""
    if top_n <= 0:
        raise ValueError(f"top_n must be positive, got {top_n}")
    if subset.empty:
        return []

    totals = (
        pd.DataFrame({
            "category": subset[CANONICAL_COLUMN].astype(str).to_numpy(),
            "measure": measure(subset).to_numpy(),
        })
        .groupby("category", as_index=False)["measure"]
        .sum()
        .sort_values(["measure", "category"], ascending=[False, True], kind="mergesort")
        .head(top_n)
    )

    return [
        OutcomeAggregate(category=category, measure=measure)
        for category, measure in zip(totals["category"].tolist(), totals["measure"].tolist())
    ]


def ranking_to_frame(ranking: list[OutcomeAggregate]) -> pd.DataFrame:
    """Tabular form of a ranking: rank (1-based), category, measure."""
    df = pd.DataFrame(
        [(agg.category, agg.measure) for agg in ranking],
        columns=["category", "measure"],
    )
    df.insert(0, "rank", range(1, len(df) + 1))
    return df


def component_breakdown(
    subset: pd.DataFrame,
    ranking: list[OutcomeAggregate],
    columns: list[str],
) -> pd.DataFrame:
    """Per-component sums for the ranked categories, in ranking order.

    e.g. fatalities vs injuries for the health ranking, for stacked
    presentation downstream.
    """
    order = [agg.category for agg in ranking]
    if not order:
        return pd.DataFrame(columns=["category", *columns])

    sums = subset.groupby(subset[CANONICAL_COLUMN].astype(str))[columns].sum()
    sums = sums.reindex(order).fillna(0)
    sums.index.name = "category"
    return sums.reset_index()
