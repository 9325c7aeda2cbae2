"""Dataset loading and the read-only record store."""

from pollenmap.data.observation import Observation
from pollenmap.data.record_store import RecordStore, TaxonIndex
from pollenmap.data.loader import read_pollen_csv, load_record_store, get_default_store

__all__ = [
    "Observation",
    "RecordStore",
    "TaxonIndex",
    "read_pollen_csv",
    "load_record_store",
    "get_default_store",
]
