"""
Clean Event Types
=================

Harmonizes the free-text EVTYPE field against the permitted vocabulary:
trim + upper-case, drop "SUMMARY" artifacts, map through the external
table, drop unclassifiable rows. Each step returns a new frame.
"""

from __future__ import annotations

import pandas as pd

from storm_impact.clean.event_types import CategoryMapping, EventType
from storm_impact.errors import UnmappedCategoryError
from storm_impact.logging_config import setup_logger

logger = setup_logger("clean.event_types")

CANONICAL_COLUMN = "canonical_category"

_SUMMARY_MARKER = "SUMMARY"


def normalize_category_text(categories: pd.Series) -> pd.Series:
    """Trim and upper-case category labels. Idempotent."""
    return categories.fillna("").astype(str).str.strip().str.upper()


def drop_summary_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Remove monthly/state summary entries, which are not real events."""
    is_summary = df["category"].str.contains(_SUMMARY_MARKER, case=False, regex=False, na=False)
    if is_summary.any():
        logger.info("  Dropped %d summary rows", int(is_summary.sum()))
    return df.loc[~is_summary].copy()


def apply_mapping(df: pd.DataFrame, mapping: CategoryMapping, strict: bool = True) -> pd.DataFrame:
    """Attach the canonical event type for every row.

    With strict=True any category absent from the mapping raises
    UnmappedCategoryError. With strict=False those rows are dropped and the
    missing categories are logged.
    """
    df = df.copy()
    missing = mapping.missing(df["category"])
    if missing:
        if strict:
            raise UnmappedCategoryError(missing[0], missing)
        logger.warning(
            "  %d categories have no mapping, dropping their rows: %s",
            len(missing), ", ".join(repr(c) for c in missing[:10]),
        )
        df = df.loc[df["category"].isin(list(mapping.entries))].copy()

    labels = {original: event_type.value for original, event_type in mapping.entries.items()}
    df[CANONICAL_COLUMN] = df["category"].map(labels)
    return df


def drop_unclassifiable(df: pd.DataFrame) -> pd.DataFrame:
    keep = df[CANONICAL_COLUMN] != EventType.UNCLASSIFIABLE.value
    n_dropped = int((~keep).sum())
    if n_dropped:
        logger.info("  Dropped %d unclassifiable rows", n_dropped)
    return df.loc[keep].copy()


def normalize(df: pd.DataFrame, mapping: CategoryMapping, strict: bool = True) -> pd.DataFrame:
    """Run the full category normalization chain over a loaded frame.

    Parameters
    ----------
    df : Frame of raw event records (needs a ``category`` column).
    mapping : Normalized original category -> EventType table.
    strict : Raise on unmapped categories (default) instead of dropping them.

    Returns a new frame with ``category`` normalized and a
    ``canonical_category`` column holding the event type label. Row order is
    preserved.
    """
    logger.info("=" * 60)
    logger.info("CLEAN EVENT TYPES")
    logger.info("=" * 60)
    rows_before = len(df)

    df = df.copy()
    df["category"] = normalize_category_text(df["category"])
    df = drop_summary_rows(df)
    df = apply_mapping(df, mapping, strict=strict)
    df = drop_unclassifiable(df)

    logger.info("  Event types: rows: %d→%d (-%d)", rows_before, len(df), rows_before - len(df))
    return df
