"""
Observation record type.

One immutable spatio-temporal abundance record, created once at load time.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Observation:
    """
    A single taxon abundance record at a site and age.

    Attributes:
        index: Position in the record store (stable per-observation key)
        site_id: Site name; many rows share one site
        latitude: Decimal degrees
        longitude: Decimal degrees
        age: Years before present (may be negative for post-1950 samples)
        taxon: Taxon label
        percentage: Relative abundance in [0, 100]
    """
    index: int
    site_id: str
    latitude: float
    longitude: float
    age: float
    taxon: str
    percentage: float

    @property
    def intensity(self) -> float:
        """Display intensity in [0, 1] derived from percentage."""
        return min(1.0, max(0.0, self.percentage / 100.0))
