"""
Tests for the pandas CSV loader.
"""

import io

import pandas as pd
import pytest

from pollenmap.config import DATA_DIR, DEFAULT_DATASET
from pollenmap.data.loader import load_record_store, read_pollen_csv
from pollenmap.exceptions import DataIntegrityError
from pollenmap.parameters import ExplorerParameters


CSV = """SiteName,Latitude,Longitude,Age,Taxon,Pct,Extra
Marion Lake,49.0,-123.0,0,Pinus,20,x
Devils Lake,50.0,-100.0,10000, Pinus ,5,y
Nowhere,,-90.0,5000,Pinus,12,z
Somewhere,45.0,n/a,5000,Pinus,12,z
Silver Lake,40.0,-80.0,5000,Quercus,40,w
"""

PARTIAL_CSV = """SiteName,Latitude,Longitude,Age,Taxon,Pct
Marion Lake,49.0,-123.0,0,Pinus,20
Blank Pct,50.0,-100.0,500,Pinus,
Blank Age,50.0,-100.0,,Pinus,30
Blank Taxon,50.0,-100.0,500,,30
Bad Pct,50.0,-100.0,500,Pinus,140
Silver Lake,40.0,-80.0,5000,Quercus,40
"""


class TestReadPollenCsv:
    """Reading, column selection and row cleaning."""

    def test_rows_without_coordinates_dropped(self, caplog):
        """Rows missing Latitude or Longitude are dropped with a warning."""
        with caplog.at_level("WARNING", logger="POLLENMAP"):
            df = read_pollen_csv(io.StringIO(CSV))
        assert len(df) == 3
        assert "Dropped 2 of 5 rows" in caplog.text

    def test_rows_with_unusable_values_dropped(self, caplog):
        """Blank Pct, Age or Taxon and out-of-range Pct rows are dropped, not fatal."""
        with caplog.at_level("WARNING", logger="POLLENMAP"):
            df = read_pollen_csv(io.StringIO(PARTIAL_CSV))
        assert list(df["SiteName"]) == ["Marion Lake", "Silver Lake"]
        assert "Dropped 4 of 6 rows with unusable Age, Pct or Taxon" in caplog.text

    def test_store_builds_despite_blank_cells(self, tmp_path):
        """One blank cell no longer stops the dataset from loading."""
        path = tmp_path / "pollen.csv"
        path.write_text(PARTIAL_CSV)
        store = load_record_store(path)
        assert store.known_taxa() == ("Pinus", "Quercus")
        assert len(store) == 2

    def test_columns_selected_and_coerced(self):
        """Only the required columns are kept and coordinates are floats."""
        df = read_pollen_csv(io.StringIO(CSV))
        assert list(df.columns) == ["SiteName", "Latitude", "Longitude", "Age", "Taxon", "Pct"]
        assert pd.api.types.is_float_dtype(df["Longitude"])

    def test_taxon_stripped(self):
        """Surrounding whitespace is removed from taxon labels."""
        df = read_pollen_csv(io.StringIO(CSV))
        assert list(df["Taxon"]) == ["Pinus", "Pinus", "Quercus"]

    def test_missing_column(self):
        """A missing required column is a DataIntegrityError naming it."""
        with pytest.raises(DataIntegrityError, match="Pct"):
            read_pollen_csv(io.StringIO("SiteName,Latitude,Longitude,Age,Taxon\nA,1,2,3,Pinus\n"))

    def test_missing_file(self, tmp_path):
        """An unreadable path is reported as a DataIntegrityError."""
        with pytest.raises(DataIntegrityError):
            read_pollen_csv(tmp_path / "absent.csv")


class TestLoadRecordStore:
    """Building the RecordStore from a CSV path."""

    def test_from_path(self, tmp_path):
        """Explicit path loads and whitelists taxa."""
        path = tmp_path / "pollen.csv"
        path.write_text(CSV)
        store = load_record_store(path)
        assert store.known_taxa() == ("Pinus", "Quercus")
        assert len(store) == 3

    def test_threshold_from_params(self, tmp_path):
        """The abundance threshold comes from ExplorerParameters."""
        path = tmp_path / "pollen.csv"
        path.write_text(CSV)
        store = load_record_store(path, ExplorerParameters(abundance_threshold=30))
        assert store.known_taxa() == ("Quercus",)

    def test_env_override(self, tmp_path, monkeypatch):
        """POLLENMAP_DATA points the loader at another file."""
        path = tmp_path / "pollen.csv"
        path.write_text(CSV)
        monkeypatch.setenv("POLLENMAP_DATA", str(path))
        assert len(load_record_store()) == 3

    def test_bundled_sample_loads(self, monkeypatch):
        """The bundled sample loads and drops the rare Ilex taxon."""
        monkeypatch.delenv("POLLENMAP_DATA", raising=False)
        store = load_record_store(DATA_DIR / DEFAULT_DATASET)
        assert "Pinus" in store.known_taxa()
        assert "Ilex" not in store.known_taxa()
