"""
Fetch the NOAA Storm Data corpus (1950-2011, bzip2 CSV).
Downloads to data/raw/.
"""
from __future__ import annotations

import sys
from pathlib import Path

from storm_impact.config_paths import RAW_DATA_DIR, STORM_DATA_FILE, STORM_DATA_URL
from storm_impact.fetch._fetch_utils import download_file, logger


def fetch_storm_data(force: bool = False, dest_dir: Path | None = None) -> Path | None:
    return download_file(
        STORM_DATA_URL,
        dest_dir=dest_dir or RAW_DATA_DIR,
        filename=STORM_DATA_FILE,
        force=force,
    )


def main() -> None:
    logger.info("Fetching NOAA Storm Data...")
    result = fetch_storm_data()
    if result:
        logger.info("Success: %s", result)
    else:
        logger.error("Failed to fetch NOAA Storm Data")
        sys.exit(1)

if __name__ == "__main__":
    main()
