"""
Storm Impact - Centralized Path Configuration
==============================================

Path management and run constants for the storm impact pipeline.

Usage:
    from storm_impact.config_paths import RAW_DATA_DIR, STORM_DATA_FILE, TOP_N

    source = RAW_DATA_DIR / STORM_DATA_FILE

Set STORM_IMPACT_ROOT to point the pipeline at a different working tree.
"""

import os
from pathlib import Path

# ==============================================================================
# PROJECT ROOT DETECTION
# ==============================================================================

_ROOT_INDICATORS = ['pyproject.toml', 'README.md', '.git']


def find_project_root():
    """
    Find project root by looking for key indicators.
    Searches upward from current file location.
    """
    override = os.environ.get('STORM_IMPACT_ROOT')
    if override:
        return Path(override).resolve()

    current = Path(__file__).resolve().parent

    # Search up to 3 parent levels
    for parent in current.parents[:3]:
        for indicator in _ROOT_INDICATORS:
            if (parent / indicator).exists():
                return parent

    # Fallback: parent of the package directory
    return current.parent

PROJECT_ROOT = find_project_root()

# ==============================================================================
# DIRECTORY PATHS
# ==============================================================================

CONFIG_DIR = PROJECT_ROOT / 'config'

DATA_DIR = PROJECT_ROOT / 'data'
RAW_DATA_DIR = DATA_DIR / 'raw'

RESULTS_DIR = PROJECT_ROOT / 'results'
TABLES_DIR = RESULTS_DIR / 'tables'

LOGS_DIR = PROJECT_ROOT / 'logs'

# ==============================================================================
# RUN CONSTANTS
# ==============================================================================

STORM_DATA_URL = 'https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2'
STORM_DATA_FILE = 'repdata-data-StormData.csv.bz2'

# Two columns: originalType, modifiedType
EVENT_TYPE_MAPPING_FILE = CONFIG_DIR / 'event_type_mapping.csv'

TOP_N = 10
READ_CHUNKSIZE = 100_000

# ==============================================================================
# DIRECTORY CREATION
# ==============================================================================

def ensure_directories():
    """Create all necessary directories if they don't exist."""
    directories = [
        CONFIG_DIR,
        RAW_DATA_DIR,
        TABLES_DIR,
        LOGS_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)

# ==============================================================================
# VERIFICATION
# ==============================================================================

if __name__ == "__main__":
    """Run this module to verify path configuration."""
    from rich.console import Console
    from rich.table import Table

    ensure_directories()
    console = Console()
    table = Table(title="Storm Impact Path Configuration", show_header=True)
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Path", style="green")
    table.add_column("Exists?", style="yellow")

    paths = {
        'PROJECT_ROOT': PROJECT_ROOT,
        'CONFIG_DIR': CONFIG_DIR,
        'DATA_DIR': DATA_DIR,
        'RAW_DATA_DIR': RAW_DATA_DIR,
        'RESULTS_DIR': RESULTS_DIR,
        'TABLES_DIR': TABLES_DIR,
        'LOGS_DIR': LOGS_DIR,
        'EVENT_TYPE_MAPPING_FILE': EVENT_TYPE_MAPPING_FILE,
    }

    for name, path in paths.items():
        exists = "✓" if path.exists() else "✗"
        table.add_row(name, str(path), exists)

    console.print(table)
    console.print("\n[bold green]All paths verified![/bold green]")
