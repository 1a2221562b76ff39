from __future__ import annotations

import os
import tempfile

# Keep logs and results of the test run out of the working tree.
os.environ.setdefault("STORM_IMPACT_ROOT", tempfile.mkdtemp(prefix="storm_impact_"))

import pandas as pd
import pytest

from storm_impact.clean.event_types import CategoryMapping
from storm_impact.load.load_storm_data import RECORD_FIELDS

_DEFAULTS = {
    "category": "TORNADO",
    "occurred_at": pd.Timestamp("1995-06-01"),
    "fatalities": 0,
    "injuries": 0,
    "property_damage": 0.0,
    "property_damage_unit": "",
    "crop_damage": 0.0,
    "crop_damage_unit": "",
}


def make_frame(*rows: dict) -> pd.DataFrame:
    """Build a record frame; unspecified fields take harmless defaults."""
    records = [{**_DEFAULTS, **row} for row in rows]
    columns = list(RECORD_FIELDS)
    if any("canonical_category" in row for row in rows):
        columns.append("canonical_category")
    df = pd.DataFrame(records, columns=columns)
    df["fatalities"] = df["fatalities"].astype("int64")
    df["injuries"] = df["injuries"].astype("int64")
    df["property_damage"] = df["property_damage"].astype("float64")
    df["crop_damage"] = df["crop_damage"].astype("float64")
    return df


@pytest.fixture
def mapping() -> CategoryMapping:
    return CategoryMapping.from_pairs([
        ("TORNADO", "Tornado"),
        ("TSTM WIND", "Thunderstorm Wind"),
        ("THUNDERSTORM WINDS", "Thunderstorm Wind"),
        ("HURRICANE/TYPHOON", "Hurricane (Typhoon)"),
        ("EXCESSIVE HEAT", "Excessive Heat"),
        ("?", "OTHER"),
    ])


@pytest.fixture
def mapping_csv(tmp_path):
    path = tmp_path / "event_type_mapping.csv"
    path.write_text(
        "originalType,modifiedType\n"
        "TORNADO,Tornado\n"
        "TSTM WIND,Thunderstorm Wind\n"
        "HURRICANE/TYPHOON,Hurricane (Typhoon)\n"
        "?,OTHER\n",
        encoding="utf-8",
    )
    return path


SOURCE_ROWS = [
    # STATE__ and REMARKS are not part of the projection
    {"STATE__": 1, "EVTYPE": "TORNADO", "BGN_DATE": "4/18/1950 0:00:00",
     "FATALITIES": 5, "INJURIES": 10, "PROPDMG": 25, "PROPDMGEXP": "K",
     "CROPDMG": 0, "CROPDMGEXP": "", "REMARKS": ""},
    {"STATE__": 2, "EVTYPE": " tstm wind", "BGN_DATE": "1/1/1995 0:00:00",
     "FATALITIES": 0, "INJURIES": 2, "PROPDMG": 10, "PROPDMGEXP": "M",
     "CROPDMG": 5, "CROPDMGEXP": "k", "REMARKS": "gusts"},
    {"STATE__": 3, "EVTYPE": "Summary of July 1993", "BGN_DATE": "7/31/1993 0:00:00",
     "FATALITIES": 3, "INJURIES": 3, "PROPDMG": 0, "PROPDMGEXP": "",
     "CROPDMG": 0, "CROPDMGEXP": "", "REMARKS": ""},
    {"STATE__": 4, "EVTYPE": "HURRICANE/TYPHOON", "BGN_DATE": "8/29/2005 0:00:00",
     "FATALITIES": 10, "INJURIES": 0, "PROPDMG": 1, "PROPDMGEXP": "B",
     "CROPDMG": 2, "CROPDMGEXP": "M", "REMARKS": ""},
    {"STATE__": 5, "EVTYPE": "?", "BGN_DATE": "1/1/2000 0:00:00",
     "FATALITIES": 1, "INJURIES": 1, "PROPDMG": 5, "PROPDMGEXP": "K",
     "CROPDMG": 5, "CROPDMGEXP": "K", "REMARKS": ""},
    {"STATE__": 6, "EVTYPE": "TORNADO", "BGN_DATE": "not a date",
     "FATALITIES": 100, "INJURIES": 0, "PROPDMG": 0, "PROPDMGEXP": "",
     "CROPDMG": 0, "CROPDMGEXP": "", "REMARKS": ""},
]


@pytest.fixture
def storm_csv(tmp_path):
    path = tmp_path / "StormData.csv.bz2"
    pd.DataFrame(SOURCE_ROWS).to_csv(path, index=False, compression="bz2")
    return path
