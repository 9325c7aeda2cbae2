"""
Pollen dataset loader.

Reads the pollen CSV export with pandas, coerces numeric columns and drops
rows that cannot become observations before they reach the record store.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union, IO

import numpy as np
import pandas as pd

from pollenmap.config import get_dataset_path
from pollenmap.data.record_store import RecordStore
from pollenmap.exceptions import DataIntegrityError
from pollenmap.parameters import ExplorerParameters
from pollenmap.parameters.constants import ExplorerConstants as C

logger = logging.getLogger("POLLENMAP")


def read_pollen_csv(source: Union[str, Path, IO]) -> pd.DataFrame:
    """
    Read and clean a pollen CSV.

    Args:
        source: Path or file-like object

    Returns:
        DataFrame with the required columns, numeric columns coerced
        and rows lacking coordinates or a usable Age, Pct or Taxon removed

    Raises:
        DataIntegrityError: If the file cannot be parsed or columns are missing
    """
    try:
        df = pd.read_csv(source)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataIntegrityError(f"Could not read pollen dataset: {e}") from e

    missing = [c for c in C.REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataIntegrityError(f"Dataset is missing columns: {', '.join(missing)}")

    df = df.loc[:, list(C.REQUIRED_COLUMNS)].copy()
    for column in C.NUMERIC_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors="coerce")
    df[C.COL_TAXON] = df[C.COL_TAXON].astype("string").str.strip()

    before = len(df)
    df = df.dropna(subset=[C.COL_LATITUDE, C.COL_LONGITUDE]).reset_index(drop=True)
    dropped = before - len(df)
    if dropped:
        logger.warning(f"Dropped {dropped} of {before} rows without coordinates")

    before = len(df)
    usable = (
        np.isfinite(df[C.COL_LATITUDE])
        & np.isfinite(df[C.COL_LONGITUDE])
        & np.isfinite(df[C.COL_AGE])
        & df[C.COL_PCT].between(C.PCT_MIN, C.PCT_MAX)
        & df[C.COL_TAXON].fillna("").ne("")
    )
    df = df.loc[usable.fillna(False).astype(bool)].reset_index(drop=True)
    dropped = before - len(df)
    if dropped:
        logger.warning(f"Dropped {dropped} of {before} rows with unusable Age, Pct or Taxon")

    return df


def load_record_store(path: Optional[Union[str, Path]] = None,
                      params: Optional[ExplorerParameters] = None) -> RecordStore:
    """
    Read the dataset and build a RecordStore.

    Args:
        path: CSV path; defaults to $POLLENMAP_DATA or the bundled sample
        params: Explorer parameters (abundance threshold)
    """
    params = params or ExplorerParameters()
    path = Path(path) if path is not None else get_dataset_path()
    logger.info(f"Loading pollen dataset from {path}")
    df = read_pollen_csv(path)
    return RecordStore.load(df, abundance_threshold=params.abundance_threshold)


@lru_cache(maxsize=1)
def get_default_store() -> RecordStore:
    """Process-wide store for the app; built on first use and shared read-only."""
    return load_record_store()
