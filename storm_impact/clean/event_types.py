"""
Permitted event type vocabulary and the original -> canonical mapping table.

The 48 event types are those of NWS Directive 10-1605 (Storm Data
Preparation). A mapping artifact may only target one of these, or the
"OTHER" sentinel for categories that cannot be confidently classified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import pandas as pd

from storm_impact.errors import MappingFileError, UnmappedCategoryError
from storm_impact.logging_config import setup_logger

logger = setup_logger("clean.mapping")

ORIGINAL_COLUMN = "originalType"
MODIFIED_COLUMN = "modifiedType"

UNCLASSIFIABLE_ALIASES = {"OTHER", "UNCLASSIFIABLE"}


class EventType(str, Enum):
    ASTRONOMICAL_LOW_TIDE = "Astronomical Low Tide"
    AVALANCHE = "Avalanche"
    BLIZZARD = "Blizzard"
    COASTAL_FLOOD = "Coastal Flood"
    COLD_WIND_CHILL = "Cold/Wind Chill"
    DEBRIS_FLOW = "Debris Flow"
    DENSE_FOG = "Dense Fog"
    DENSE_SMOKE = "Dense Smoke"
    DROUGHT = "Drought"
    DUST_DEVIL = "Dust Devil"
    DUST_STORM = "Dust Storm"
    EXCESSIVE_HEAT = "Excessive Heat"
    EXTREME_COLD_WIND_CHILL = "Extreme Cold/Wind Chill"
    FLASH_FLOOD = "Flash Flood"
    FLOOD = "Flood"
    FROST_FREEZE = "Frost/Freeze"
    FUNNEL_CLOUD = "Funnel Cloud"
    FREEZING_FOG = "Freezing Fog"
    HAIL = "Hail"
    HEAT = "Heat"
    HEAVY_RAIN = "Heavy Rain"
    HEAVY_SNOW = "Heavy Snow"
    HIGH_SURF = "High Surf"
    HIGH_WIND = "High Wind"
    HURRICANE_TYPHOON = "Hurricane (Typhoon)"
    ICE_STORM = "Ice Storm"
    LAKE_EFFECT_SNOW = "Lake-Effect Snow"
    LAKESHORE_FLOOD = "Lakeshore Flood"
    LIGHTNING = "Lightning"
    MARINE_HAIL = "Marine Hail"
    MARINE_HIGH_WIND = "Marine High Wind"
    MARINE_STRONG_WIND = "Marine Strong Wind"
    MARINE_THUNDERSTORM_WIND = "Marine Thunderstorm Wind"
    RIP_CURRENT = "Rip Current"
    SEICHE = "Seiche"
    SLEET = "Sleet"
    STORM_SURGE_TIDE = "Storm Surge/Tide"
    STRONG_WIND = "Strong Wind"
    THUNDERSTORM_WIND = "Thunderstorm Wind"
    TORNADO = "Tornado"
    TROPICAL_DEPRESSION = "Tropical Depression"
    TROPICAL_STORM = "Tropical Storm"
    TSUNAMI = "Tsunami"
    VOLCANIC_ASH = "Volcanic Ash"
    WATERSPOUT = "Waterspout"
    WILDFIRE = "Wildfire"
    WINTER_STORM = "Winter Storm"
    WINTER_WEATHER = "Winter Weather"

    UNCLASSIFIABLE = "Unclassifiable"

    @classmethod
    def parse(cls, text: str) -> "EventType":
        """Case-insensitive lookup by label. "OTHER" means UNCLASSIFIABLE."""
        key = str(text).strip().upper()
        if key in UNCLASSIFIABLE_ALIASES:
            return cls.UNCLASSIFIABLE
        member = _BY_LABEL.get(key)
        if member is None:
            raise ValueError(f"Not a permitted event type: {text!r}")
        return member

    @property
    def is_classified(self) -> bool:
        return self is not EventType.UNCLASSIFIABLE


_BY_LABEL = {m.value.upper(): m for m in EventType}

PERMITTED_EVENT_TYPES = [m for m in EventType if m.is_classified]


@dataclass(frozen=True)
class CategoryMapping:
    """Read-only lookup from normalized category text to EventType."""
    entries: Mapping[str, EventType] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __contains__(self, category: str) -> bool:
        return category in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, category: str) -> EventType:
        try:
            return self.entries[category]
        except KeyError:
            raise UnmappedCategoryError(category) from None

    def missing(self, categories) -> list[str]:
        """Return the distinct categories with no entry, in first-seen order."""
        return [c for c in dict.fromkeys(categories) if c not in self.entries]

    @classmethod
    def from_pairs(cls, pairs) -> "CategoryMapping":
        """Build from (original, canonical) pairs; canonical may be text or EventType."""
        entries: dict[str, EventType] = {}
        for original, canonical in pairs:
            key = str(original).strip().upper()
            try:
                target = canonical if isinstance(canonical, EventType) else EventType.parse(canonical)
            except ValueError as exc:
                raise MappingFileError(f"{key!r} maps to unknown event type: {exc}") from exc
            previous = entries.get(key)
            if previous is not None and previous is not target:
                raise MappingFileError(
                    f"Conflicting mappings for {key!r}: {previous.value!r} vs {target.value!r}"
                )
            entries[key] = target
        return cls(entries)


def load_event_type_mapping(path: Path | str, sep: str = ",") -> CategoryMapping:
    """Read the originalType/modifiedType table into a CategoryMapping."""
    path = Path(path)
    logger.info("Loading event type mapping from %s", path.name)

    try:
        df = pd.read_csv(path, sep=sep, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as exc:
        raise MappingFileError(f"Cannot read mapping file {path}: {exc}") from exc

    df.columns = [str(c).strip() for c in df.columns]
    missing_cols = [c for c in (ORIGINAL_COLUMN, MODIFIED_COLUMN) if c not in df.columns]
    if missing_cols:
        raise MappingFileError(f"{path.name} is missing columns: {', '.join(missing_cols)}")

    mapping = CategoryMapping.from_pairs(zip(df[ORIGINAL_COLUMN], df[MODIFIED_COLUMN]))

    n_other = sum(1 for t in mapping.entries.values() if not t.is_classified)
    logger.info("  %d mapped categories (%d unclassifiable)", len(mapping), n_other)
    return mapping
