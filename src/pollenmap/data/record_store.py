"""
Record store for parsed pollen observations.

Builds the immutable, indexed dataset once at session start. Rows are
validated into Observation records, the selectable taxon whitelist is
computed, and a per-taxon age index is prepared for the filter engine.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from pollenmap.data.observation import Observation
from pollenmap.exceptions import DataIntegrityError
from pollenmap.parameters.constants import ExplorerConstants as C

logger = logging.getLogger("POLLENMAP")


@dataclass(frozen=True)
class TaxonIndex:
    """
    Age index for one taxon. Both arrays are read-only.

    Attributes:
        ages: Ages sorted ascending
        positions: Observation positions matching ``ages`` element-wise
    """
    ages: np.ndarray
    positions: np.ndarray

    def __len__(self) -> int:
        return len(self.ages)


def _coerce_float(value: Any, column: str, row_number: int) -> float:
    """Convert a raw cell to a finite float, raising DataIntegrityError if unusable."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        result = math.nan
    if math.isnan(result):
        raise DataIntegrityError(f"Row {row_number}: missing or non-numeric {column} ({value!r})")
    if math.isinf(result):
        raise DataIntegrityError(f"Row {row_number}: {column} must be finite ({value!r})")
    return result


def _row_to_observation(index: int, row: Mapping[str, Any], row_number: int) -> Observation:
    """Validate one raw row into an Observation."""
    latitude = _coerce_float(row.get(C.COL_LATITUDE), C.COL_LATITUDE, row_number)
    longitude = _coerce_float(row.get(C.COL_LONGITUDE), C.COL_LONGITUDE, row_number)
    age = _coerce_float(row.get(C.COL_AGE), C.COL_AGE, row_number)
    pct = _coerce_float(row.get(C.COL_PCT), C.COL_PCT, row_number)
    if not C.PCT_MIN <= pct <= C.PCT_MAX:
        raise DataIntegrityError(f"Row {row_number}: {C.COL_PCT} {pct} outside [0, 100]")

    taxon = row.get(C.COL_TAXON)
    if taxon is None or pd.isna(taxon) or not str(taxon).strip():
        raise DataIntegrityError(f"Row {row_number}: missing {C.COL_TAXON}")

    site = row.get(C.COL_SITE)
    return Observation(
        index=index,
        site_id="" if site is None or pd.isna(site) else str(site),
        latitude=latitude,
        longitude=longitude,
        age=age,
        taxon=str(taxon).strip(),
        percentage=pct,
    )


def _iter_rows(raw_rows: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(raw_rows, pd.DataFrame):
        return raw_rows.to_dict("records")
    return raw_rows


class RecordStore:
    """
    Immutable, in-memory store of pollen observations.

    Only observations of whitelisted taxa (maximum percentage above the
    abundance threshold) are retained. Use ``RecordStore.load`` to build one.
    """

    def __init__(self, observations: Tuple[Observation, ...], taxa: Tuple[str, ...],
                 index: Dict[str, TaxonIndex], abundance_threshold: float):
        self._observations = observations
        self._taxa = taxa
        self._index = index
        self._abundance_threshold = abundance_threshold

    @classmethod
    def load(cls, raw_rows: Any,
             abundance_threshold: float = C.ABUNDANCE_THRESHOLD) -> "RecordStore":
        """
        Build a store from parsed rows.

        Args:
            raw_rows: Iterable of mappings (or a DataFrame) with SiteName,
                Latitude, Longitude, Age, Taxon and Pct
            abundance_threshold: A taxon is kept only if its maximum
                percentage is strictly greater than this

        Returns:
            A read-only RecordStore

        Raises:
            DataIntegrityError: On a malformed row, an empty dataset, or when
                no taxon passes the abundance threshold
        """
        parsed: List[Observation] = []
        for row_number, row in enumerate(_iter_rows(raw_rows), 1):
            parsed.append(_row_to_observation(len(parsed), row, row_number))

        if not parsed:
            raise DataIntegrityError("Dataset contains no observations")

        # Whitelist: scans the full dataset, done once here
        max_pct: Dict[str, float] = {}
        for obs in parsed:
            if obs.percentage > max_pct.get(obs.taxon, -1.0):
                max_pct[obs.taxon] = obs.percentage
        taxa = tuple(sorted(t for t, pct in max_pct.items() if pct > abundance_threshold))
        if not taxa:
            raise DataIntegrityError(
                f"No taxon exceeds the abundance threshold of {abundance_threshold}%"
            )

        allowed = set(taxa)
        kept = [obs for obs in parsed if obs.taxon in allowed]
        # Re-number so index == position in the store
        observations = tuple(
            Observation(i, o.site_id, o.latitude, o.longitude, o.age, o.taxon, o.percentage)
            for i, o in enumerate(kept)
        )

        index = cls._build_index(observations, taxa)
        logger.info(
            f"Record store loaded: {len(observations)} of {len(parsed)} observations, "
            f"{len(taxa)} of {len(max_pct)} taxa above {abundance_threshold}%"
        )
        return cls(observations, taxa, index, abundance_threshold)

    @staticmethod
    def _build_index(observations: Tuple[Observation, ...],
                     taxa: Tuple[str, ...]) -> Dict[str, TaxonIndex]:
        positions_by_taxon: Dict[str, List[int]] = {t: [] for t in taxa}
        for obs in observations:
            positions_by_taxon[obs.taxon].append(obs.index)

        index = {}
        for taxon, positions in positions_by_taxon.items():
            pos = np.asarray(positions, dtype=np.int64)
            ages = np.fromiter((observations[p].age for p in positions), dtype=np.float64, count=len(positions))
            # Stable sort keeps ties in store order
            order = np.argsort(ages, kind="stable")
            sorted_ages, sorted_pos = ages[order], pos[order]
            sorted_ages.setflags(write=False)
            sorted_pos.setflags(write=False)
            index[taxon] = TaxonIndex(ages=sorted_ages, positions=sorted_pos)
        return index

    # =========================================================================
    # Read-only accessors
    # =========================================================================

    def observations(self) -> Tuple[Observation, ...]:
        """All retained observations in store order."""
        return self._observations

    def known_taxa(self) -> Tuple[str, ...]:
        """Selectable taxa, sorted for deterministic display."""
        return self._taxa

    def taxon_index(self, taxon: str) -> Optional[TaxonIndex]:
        """Sorted age index for a taxon, or None if the taxon is unknown."""
        return self._index.get(taxon)

    def age_range(self) -> Tuple[float, float]:
        """(min, max) age across all retained observations."""
        lows = [ix.ages[0] for ix in self._index.values() if len(ix)]
        highs = [ix.ages[-1] for ix in self._index.values() if len(ix)]
        return float(min(lows)), float(max(highs))

    @property
    def abundance_threshold(self) -> float:
        return self._abundance_threshold

    def __len__(self) -> int:
        return len(self._observations)

    def __repr__(self) -> str:
        return f"RecordStore({len(self)} observations, {len(self._taxa)} taxa)"
