"""
Load NOAA Storm Data
====================

Reads the compressed Storm Data CSV in chunks and projects it down to the
eight fields the impact analysis needs. Rows with an unparseable begin date or
non-numeric outcome fields are skipped and counted.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from storm_impact.config_paths import READ_CHUNKSIZE
from storm_impact.errors import MalformedRowError, SourceReadError
from storm_impact.logging_config import setup_logger

logger = setup_logger("load.storm_data")

# Source header -> record field
SOURCE_COLUMNS = {
    "EVTYPE": "category",
    "BGN_DATE": "occurred_at",
    "FATALITIES": "fatalities",
    "INJURIES": "injuries",
    "PROPDMG": "property_damage",
    "PROPDMGEXP": "property_damage_unit",
    "CROPDMG": "crop_damage",
    "CROPDMGEXP": "crop_damage_unit",
}
RECORD_FIELDS = list(SOURCE_COLUMNS.values())

COUNT_FIELDS = ["fatalities", "injuries"]
AMOUNT_FIELDS = ["property_damage", "crop_damage"]
UNIT_FIELDS = ["property_damage_unit", "crop_damage_unit"]

# e.g. "4/18/1950 0:00:00"
BEGIN_DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

# Errors pandas raises for unreadable, truncated or corrupt compressed input
_READ_ERRORS = (OSError, EOFError, ValueError)


@dataclass(frozen=True)
class RawEventRecord:
    """One observed weather event, restricted to the analysed fields."""
    category: str
    occurred_at: dt.datetime
    fatalities: int
    injuries: int
    property_damage: float
    property_damage_unit: str
    crop_damage: float
    crop_damage_unit: str


@dataclass
class LoadStats:
    rows_read: int = 0
    rows_skipped: int = 0

    @property
    def rows_kept(self) -> int:
        return self.rows_read - self.rows_skipped


def parse_begin_date(value) -> dt.datetime:
    """Parse a single BGN_DATE value, raising MalformedRowError on failure."""
    try:
        return dt.datetime.strptime(str(value).strip(), BEGIN_DATE_FORMAT)
    except ValueError as exc:
        raise MalformedRowError(f"Unparseable begin date: {value!r}") from exc


def empty_frame() -> pd.DataFrame:
    """Return a zero-row frame with the record columns and dtypes."""
    df = pd.DataFrame({
        "category": pd.Series([], dtype=object),
        "occurred_at": pd.Series([], dtype="datetime64[ns]"),
        "fatalities": pd.Series([], dtype="int64"),
        "injuries": pd.Series([], dtype="int64"),
        "property_damage": pd.Series([], dtype="float64"),
        "property_damage_unit": pd.Series([], dtype=object),
        "crop_damage": pd.Series([], dtype="float64"),
        "crop_damage_unit": pd.Series([], dtype=object),
    })
    return df[RECORD_FIELDS]


def _read_header(path: Path) -> list[str]:
    try:
        header = pd.read_csv(path, nrows=0, compression="infer")
    except _READ_ERRORS as exc:
        raise SourceReadError(f"Cannot read storm data source {path}: {exc}") from exc
    return [str(c).strip() for c in header.columns]


def _coerce_chunk(chunk: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """Type one raw chunk. Returns (clean rows, number of malformed rows)."""
    df = chunk.rename(columns=lambda c: SOURCE_COLUMNS.get(str(c).strip(), c))
    df = df[RECORD_FIELDS].copy()

    df["category"] = df["category"].fillna("").astype(str)
    df["occurred_at"] = pd.to_datetime(
        df["occurred_at"].astype(str).str.strip(), format=BEGIN_DATE_FORMAT, errors="coerce"
    )
    for col in COUNT_FIELDS + AMOUNT_FIELDS:
        df[col] = pd.to_numeric(df[col].astype(str).str.strip(), errors="coerce")
    for col in UNIT_FIELDS:
        df[col] = df[col].fillna("").astype(str).str.strip()

    numeric = df[COUNT_FIELDS + AMOUNT_FIELDS]
    malformed = (
        df["occurred_at"].isna()
        | numeric.isna().any(axis=1)
        | (numeric < 0).any(axis=1)
        | (np.mod(df[COUNT_FIELDS].fillna(0), 1) != 0).any(axis=1)
    )

    df = df.loc[~malformed].copy()
    df[COUNT_FIELDS] = df[COUNT_FIELDS].astype("int64")
    df[AMOUNT_FIELDS] = df[AMOUNT_FIELDS].astype("float64")
    return df, int(malformed.sum())


def _iter_chunks(reader, path: Path, stats: LoadStats) -> Iterator[pd.DataFrame]:
    chunks = iter(reader)
    while True:
        try:
            chunk = next(chunks)
        except StopIteration:
            return
        except _READ_ERRORS as exc:
            raise SourceReadError(f"Failed reading {path.name}: {exc}") from exc

        clean, skipped = _coerce_chunk(chunk)
        stats.rows_read += len(chunk)
        stats.rows_skipped += skipped
        if skipped:
            logger.debug("  Skipped %d malformed rows in chunk", skipped)
        yield clean


@contextmanager
def open_storm_data(
    path: Path | str,
    chunksize: int = READ_CHUNKSIZE,
    stats: LoadStats | None = None,
) -> Iterator[Iterator[pd.DataFrame]]:
    """Open the source and yield a lazy iterator of typed record chunks.

    The underlying reader is closed when the ``with`` block exits, whether or
    not the chunks were fully consumed. Pass a LoadStats to collect row counts.
    """
    path = Path(path)
    if not path.exists():
        raise SourceReadError(f"Storm data source not found: {path}")

    columns = _read_header(path)
    missing = [c for c in SOURCE_COLUMNS if c not in columns]
    if missing:
        raise SourceReadError(f"{path.name} is missing required columns: {', '.join(missing)}")

    try:
        reader = pd.read_csv(
            path,
            usecols=lambda c: str(c).strip() in SOURCE_COLUMNS,
            dtype=str,
            compression="infer",
            chunksize=chunksize,
        )
    except _READ_ERRORS as exc:
        raise SourceReadError(f"Cannot open storm data source {path}: {exc}") from exc

    with reader:
        yield _iter_chunks(reader, path, stats if stats is not None else LoadStats())


def load_storm_data(
    path: Path | str,
    chunksize: int = READ_CHUNKSIZE,
    stats: LoadStats | None = None,
) -> pd.DataFrame:
    """Read the whole source into one frame of RECORD_FIELDS columns."""
    stats = stats if stats is not None else LoadStats()
    logger.info("Reading %s", Path(path).name)

    with open_storm_data(path, chunksize=chunksize, stats=stats) as chunks:
        frames = [chunk for chunk in chunks if not chunk.empty]

    df = pd.concat(frames, ignore_index=True) if frames else empty_frame()

    if stats.rows_skipped:
        logger.warning("  Skipped %d malformed rows (of %d read)", stats.rows_skipped, stats.rows_read)
    logger.info("  Loaded %d records", len(df))
    return df


def iter_records(df: pd.DataFrame) -> Iterator[RawEventRecord]:
    """Yield each row of a loaded frame as a RawEventRecord."""
    for row in df[RECORD_FIELDS].itertuples(index=False):
        yield RawEventRecord(
            category=row.category,
            occurred_at=pd.Timestamp(row.occurred_at).to_pydatetime(),
            fatalities=int(row.fatalities),
            injuries=int(row.injuries),
            property_damage=float(row.property_damage),
            property_damage_unit=row.property_damage_unit,
            crop_damage=float(row.crop_damage),
            crop_damage_unit=row.crop_damage_unit,
        )
