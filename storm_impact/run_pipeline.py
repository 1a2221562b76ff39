#!/usr/bin/env python3
"""
Run the storm impact analysis: load -> clean -> partition -> rank.

Usage:
    python -m storm_impact.run_pipeline
    python -m storm_impact.run_pipeline --download --top 10
    python -m storm_impact.run_pipeline --source data/raw/StormData.csv.bz2 \
        --mapping config/event_type_mapping.csv --no-save
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from storm_impact.build.rank_outcomes import (
    ECONOMIC_COMPONENTS,
    HEALTH_COMPONENTS,
    OutcomeAggregate,
    aggregate_and_rank,
    casualties,
    component_breakdown,
    damages,
    ranking_to_frame,
)
from storm_impact.clean.clean_event_types import normalize
from storm_impact.clean.event_types import load_event_type_mapping
from storm_impact.config_paths import (
    EVENT_TYPE_MAPPING_FILE,
    RAW_DATA_DIR,
    STORM_DATA_FILE,
    TABLES_DIR,
    TOP_N,
    ensure_directories,
)
from storm_impact.errors import StormImpactError
from storm_impact.fetch.fetch_storm_data import fetch_storm_data
from storm_impact.filter.partition_outcomes import partition
from storm_impact.load.load_storm_data import LoadStats, load_storm_data
from storm_impact.logging_config import setup_logger

logger = setup_logger("pipeline.run")


@dataclass
class AnalysisResult:
    health: list[OutcomeAggregate]
    economic: list[OutcomeAggregate]
    health_breakdown: pd.DataFrame
    economic_breakdown: pd.DataFrame
    load_stats: LoadStats = field(default_factory=LoadStats)
    health_records: int = 0
    economic_records: int = 0


def run(
    source: Path | str,
    mapping_path: Path | str,
    top_n: int = TOP_N,
    strict: bool = True,
) -> AnalysisResult:
    """Execute every stage once and return both rankings."""
    mapping = load_event_type_mapping(mapping_path)

    stats = LoadStats()
    records = load_storm_data(source, stats=stats)
    records = normalize(records, mapping, strict=strict)
    subsets = partition(records)

    logger.info("=" * 60)
    logger.info("RANK OUTCOMES")
    logger.info("=" * 60)
    health = aggregate_and_rank(subsets.health, casualties, top_n)
    economic = aggregate_and_rank(subsets.economic, damages, top_n)

    return AnalysisResult(
        health=health,
        economic=economic,
        health_breakdown=component_breakdown(subsets.health, health, HEALTH_COMPONENTS),
        economic_breakdown=component_breakdown(subsets.economic, economic, ECONOMIC_COMPONENTS),
        load_stats=stats,
        health_records=len(subsets.health),
        economic_records=len(subsets.economic),
    )


def save_rankings(result: AnalysisResult, out_dir: Path = TABLES_DIR) -> list[Path]:
    """Write each ranking, joined with its component sums, as CSV."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, ranking, breakdown in (
        ("health", result.health, result.health_breakdown),
        ("economic", result.economic, result.economic_breakdown),
    ):
        table = ranking_to_frame(ranking).merge(breakdown, on="category", how="left")
        out_path = out_dir / f"top_{name}_impact.csv"
        table.to_csv(out_path, index=False)
        logger.info("  Saved → %s", out_path.name)
        written.append(out_path)
    return written


def _render(console: Console, title: str, ranking: list[OutcomeAggregate], unit: str) -> None:
    table = Table(title=title, show_header=True)
    table.add_column("#", justify="right", style="yellow")
    table.add_column("Event type", style="cyan")
    table.add_column(unit, justify="right", style="green")
    for i, agg in enumerate(ranking, 1):
        table.add_row(str(i), agg.category, f"{agg.measure:,.0f}")
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Rank storm event types by health and economic impact")
    ap.add_argument("--source", type=Path, default=RAW_DATA_DIR / STORM_DATA_FILE,
                    help="Compressed Storm Data CSV (default data/raw/%s)" % STORM_DATA_FILE)
    ap.add_argument("--mapping", type=Path, default=EVENT_TYPE_MAPPING_FILE,
                    help="originalType/modifiedType mapping CSV")
    ap.add_argument("--top", type=int, default=TOP_N,
                    help="Number of event types per ranking (default %d)" % TOP_N)
    ap.add_argument("--download", action="store_true",
                    help="Fetch the source first if it is not cached")
    ap.add_argument("--no-save", action="store_true",
                    help="Print rankings without writing CSVs to results/tables/")
    ap.add_argument("--lenient", action="store_true",
                    help="Drop rows with unmapped categories instead of failing")
    args = ap.parse_args(argv)

    ensure_directories()

    if args.download and fetch_storm_data() is None:
        return 1

    try:
        result = run(args.source, args.mapping, top_n=args.top, strict=not args.lenient)
    except StormImpactError as exc:
        logger.error("Pipeline failed: %s", exc)
        return 1

    console = Console()
    _render(console, "Most harmful to population health", result.health, "Casualties")
    _render(console, "Greatest economic consequences", result.economic, "Damages (USD)")

    if not args.no_save:
        save_rankings(result)

    logger.info("Pipeline complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
