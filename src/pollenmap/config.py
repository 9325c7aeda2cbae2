"""
Configuration and path management for pollenmap.

This module provides centralized access to project paths and resources,
ensuring robustness across different execution environments.
"""

from pathlib import Path
import logging
import os

logger = logging.getLogger("POLLENMAP")

# This file is in src/pollenmap/config.py, so the project root is 3 levels up
PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent

# Define standard paths
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DATASET = "pollen_sample.csv"

# Environment override for the dataset path
DATA_ENV_VAR = "POLLENMAP_DATA"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_data_file(filename: str) -> Path:
    """Resolve a path to a data file, checking existence."""
    path = DATA_DIR / filename
    if not path.exists():
        logger.warning(f"Data file not found: {path}")
    return path


def get_dataset_path() -> Path:
    """Dataset path from $POLLENMAP_DATA, else the bundled sample."""
    override = os.environ.get(DATA_ENV_VAR)
    if override:
        return Path(override)
    return get_data_file(DEFAULT_DATASET)
