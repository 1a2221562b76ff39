from __future__ import annotations

import pytest

from conftest import make_frame
from storm_impact.build.rank_outcomes import (
    HEALTH_COMPONENTS,
    OutcomeAggregate,
    aggregate_and_rank,
    casualties,
    component_breakdown,
    damages,
    ranking_to_frame,
)


def test_health_ranking_sums_casualties_per_category():
    df = make_frame(
        {"canonical_category": "A", "fatalities": 2, "injuries": 1},
        {"canonical_category": "A", "fatalities": 0, "injuries": 3},
        {"canonical_category": "B", "fatalities": 5, "injuries": 0},
    )

    ranking = aggregate_and_rank(df, casualties, top_n=10)

    assert ranking == [OutcomeAggregate("A", 6), OutcomeAggregate("B", 5)]


def test_economic_ranking_sums_damages():
    df = make_frame(
        {"canonical_category": "Flood", "property_damage": 1e9, "crop_damage": 5e6},
        {"canonical_category": "Hail", "property_damage": 2e6, "crop_damage": 4e6},
        {"canonical_category": "Flood", "property_damage": 0.0, "crop_damage": 1e6},
    )

    ranking = aggregate_and_rank(df, damages)

    assert [(a.category, a.measure) for a in ranking] == [
        ("Flood", 1_006_000_000.0),
        ("Hail", 6_000_000.0),
    ]


def test_top_n_truncation_keeps_largest():
    rows = [{"canonical_category": f"Type {i:02d}", "fatalities": i} for i in range(1, 16)]
    df = make_frame(*rows)

    ranking = aggregate_and_rank(df, casualties, top_n=10)

    assert len(ranking) == 10
    assert [a.measure for a in ranking] == list(range(15, 5, -1))
    assert ranking[0].category == "Type 15"


def test_fewer_categories_than_top_n():
    df = make_frame({"canonical_category": "Heat", "injuries": 2})

    assert aggregate_and_rank(df, casualties, top_n=10) == [OutcomeAggregate("Heat", 2)]


def test_ties_break_by_category_ascending():
    df = make_frame(
        {"canonical_category": "Tornado", "fatalities": 4},
        {"canonical_category": "Heat", "fatalities": 4},
        {"canonical_category": "Lightning", "fatalities": 9},
        {"canonical_category": "Flood", "fatalities": 4},
    )

    ranking = aggregate_and_rank(df, casualties, top_n=3)

    assert [a.category for a in ranking] == ["Lightning", "Flood", "Heat"]


def test_empty_subset_ranks_nothing():
    df = make_frame({"canonical_category": "Heat"}).iloc[0:0]

    assert aggregate_and_rank(df, casualties) == []


@pytest.mark.parametrize("top_n", [0, -1])
def test_top_n_must_be_positive(top_n):
    df = make_frame({"canonical_category": "Heat", "injuries": 1})

    with pytest.raises(ValueError):
        aggregate_and_rank(df, casualties, top_n=top_n)


def test_ranking_to_frame():
    table = ranking_to_frame([OutcomeAggregate("A", 6), OutcomeAggregate("B", 5)])

    assert list(table.columns) == ["rank", "category", "measure"]
    assert table["rank"].tolist() == [1, 2]
    assert table["category"].tolist() == ["A", "B"]


def test_component_breakdown_follows_ranking_order():
    df = make_frame(
        {"canonical_category": "A", "fatalities": 2, "injuries": 1},
        {"canonical_category": "A", "fatalities": 0, "injuries": 3},
        {"canonical_category": "B", "fatalities": 5, "injuries": 0},
        {"canonical_category": "C", "fatalities": 1, "injuries": 0},
    )
    ranking = aggregate_and_rank(df, casualties, top_n=2)

    breakdown = component_breakdown(df, ranking, HEALTH_COMPONENTS)

    assert breakdown["category"].tolist() == ["A", "B"]
    assert breakdown["fatalities"].tolist() == [2, 5]
    assert breakdown["injuries"].tolist() == [4, 0]


def test_component_breakdown_of_empty_ranking():
    df = make_frame({"canonical_category": "A"})

    breakdown = component_breakdown(df, [], HEALTH_COMPONENTS)

    assert breakdown.empty
    assert list(breakdown.columns) == ["category", "fatalities", "injuries"]
