"""
Tests for brainstats.data.loader module.
"""

import json
import math

import pytest

from brainstats.data.loader import (
    ReferenceDataError,
    ReferenceEntry,
    MORPHOMETRY_METRICS,
    CURVATURE_METRICS,
    get_morphometry_reference,
    get_curvature_reference,
    read_reference_table,
    validate_reference_table,
)
from brainstats.data.regions import Region, PROXY_REGIONS


def _table(**regions):
    return {"regions": regions}


class TestBundledTables:
    """Tests for the packaged reference tables."""

    def test_morphometry_covers_every_measured_region(self):
        table = get_morphometry_reference()
        for region in Region:
            if region in PROXY_REGIONS:
                continue
            assert str(region) in table, region

    def test_curvature_covers_subregions(self):
        table = get_curvature_reference()
        subregions = {str(r) for r in Region if r.is_subregion}
        assert set(table) == subregions

    def test_entries_are_valid(self):
        for table, metrics in (
            (get_morphometry_reference(), MORPHOMETRY_METRICS),
            (get_curvature_reference(), CURVATURE_METRICS),
        ):
            for region, entries in table.items():
                for metric in metrics:
                    entry = entries[metric]
                    assert isinstance(entry, ReferenceEntry)
                    assert math.isfinite(entry.mean)
                    assert entry.std > 0

    def test_tables_are_read_only(self):
        table = get_morphometry_reference()
        with pytest.raises(TypeError):
            table["precentral"] = {}

    def test_loaded_once(self):
        assert get_morphometry_reference() is get_morphometry_reference()


class TestValidation:
    """Tests for validate_reference_table()."""

    def test_valid_table(self):
        raw = _table(insula={"mean_curvature": {"mean": 0.1, "std": 0.01},
                             "folding_index": {"mean": 20, "std": 5}})
        table = validate_reference_table(raw, CURVATURE_METRICS)
        assert table["insula"]["folding_index"] == ReferenceEntry(mean=20.0, std=5.0)

    @pytest.mark.parametrize("std", [0, -1.0, float("nan"), float("inf")])
    def test_invalid_std(self, std):
        raw = _table(insula={"mean_curvature": {"mean": 0.1, "std": std},
                             "folding_index": {"mean": 20, "std": 5}})
        with pytest.raises(ReferenceDataError):
            validate_reference_table(raw, CURVATURE_METRICS)

    def test_missing_metric(self):
        raw = _table(insula={"mean_curvature": {"mean": 0.1, "std": 0.01}})
        with pytest.raises(ReferenceDataError, match="folding_index"):
            validate_reference_table(raw, CURVATURE_METRICS)

    def test_malformed_entry(self):
        raw = _table(insula={"mean_curvature": [0.1, 0.01],
                             "folding_index": {"mean": 20, "std": 5}})
        with pytest.raises(ReferenceDataError):
            validate_reference_table(raw, CURVATURE_METRICS)

    def test_empty_regions(self):
        with pytest.raises(ReferenceDataError):
            validate_reference_table({"regions": {}}, CURVATURE_METRICS)


def test_read_reference_table(tmp_path):
    path = tmp_path / "norms.json"
    path.write_text(json.dumps(_table(
        insula={"mean_curvature": {"mean": 0.1, "std": 0.01},
                "folding_index": {"mean": 20, "std": 5}},
    )))
    assert "insula" in read_reference_table(path, CURVATURE_METRICS)


def test_read_reference_table_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_reference_table(tmp_path / "nope.json", CURVATURE_METRICS)


def test_region_names_match_report_keys():
    assert str(Region.BA44) == "BA44_exvivo"
    assert PROXY_REGIONS[Region.PIRIFORM] is Region.ENTORHINAL
