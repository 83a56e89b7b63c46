"""
Tests for stats file detection, subject discovery and dataset assembly.
"""
import pytest

from brainstats.ingest import (
    StatsNotFoundError,
    detect_file_type,
    find_stats_files,
    discover_subjects,
    load_hemisphere_dataset,
    load_from_files,
)


@pytest.mark.parametrize("name,expected", [
    ("lh.aparc.DKTatlas.stats", "lh_dkt"),
    ("rh.aparc.DKTatlas.stats", "rh_dkt"),
    ("lh.aparc.stats", "lh_aparc"),
    ("rh.BA_exvivo.stats", "rh_ba"),
    ("aseg.stats", "aseg"),
    ("lh.aparc.a2009s.stats", None),
    ("notes.txt", None),
])
def test_detect_file_type(name, expected):
    assert detect_file_type(name) == expected


def test_find_stats_files(stats_dir):
    found = find_stats_files(stats_dir)
    assert set(found) == {"lh_dkt", "rh_dkt", "lh_ba", "rh_ba", "aseg"}


def test_find_stats_files_missing_dir(tmp_path):
    with pytest.raises(StatsNotFoundError):
        find_stats_files(tmp_path / "nope")


def _make_subject(root, name, files=("lh.aparc.DKTatlas.stats", "rh.aparc.DKTatlas.stats")):
    stats = root / name / "stats"
    stats.mkdir(parents=True)
    for f in files:
        (stats / f).write_text("# ColHeaders StructName NumVert SurfArea GrayVol ThickAvg ThickStd\n")
    return stats


class TestDiscoverSubjects:
    """Tests for SUBJECTS_DIR discovery."""

    def test_discovers_complete_subjects(self, tmp_path):
        _make_subject(tmp_path, "sub-01")
        _make_subject(tmp_path, "sub-02")
        (tmp_path / "fsaverage").mkdir()

        subjects = discover_subjects(tmp_path)

        assert [s["id"] for s in subjects] == ["sub-01", "sub-02"]
        assert subjects[0]["stats_dir"] == tmp_path / "sub-01" / "stats"

    def test_skips_subject_missing_right_dkt(self, tmp_path):
        _make_subject(tmp_path, "sub-01", files=("lh.aparc.DKTatlas.stats",))
        assert discover_subjects(tmp_path) == []

    def test_include_and_exclude(self, tmp_path):
        for name in ("sub-01", "sub-02", "pilot-01"):
            _make_subject(tmp_path, name)

        included = discover_subjects(tmp_path, include_subjects=["sub-"])
        assert [s["id"] for s in included] == ["sub-01", "sub-02"]

        excluded = discover_subjects(tmp_path, exclude_subjects=["sub-02"])
        assert [s["id"] for s in excluded] == ["pilot-01", "sub-01"]

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(ValueError):
            discover_subjects(tmp_path / "nope")


class TestLoadDataset:
    """Tests for HemisphereDataset assembly."""

    def test_load_hemisphere_dataset(self, stats_dir):
        dataset, basic_info, subject_name = load_hemisphere_dataset(stats_dir)

        assert subject_name == "bert"
        assert dataset.has_subregions
        assert "superiortemporal" in dataset.left
        assert "BA44_exvivo" in dataset.right_sub
        assert dataset.left_sub["BA44_exvivo"].has_curvature
        assert basic_info.brain_volume == pytest.approx(1250000.0)
        assert basic_info.cortex_volume == pytest.approx(530000.0)
        assert basic_info.white_matter_volume is None

    def test_single_ba_hemisphere_is_ignored(self, stats_dir):
        files = {
            "lh_dkt": stats_dir / "lh.aparc.DKTatlas.stats",
            "rh_dkt": stats_dir / "rh.aparc.DKTatlas.stats",
            "lh_ba": stats_dir / "lh.BA_exvivo.stats",
        }
        dataset, _, _ = load_from_files(files)
        assert not dataset.has_subregions

    def test_missing_required_file_raises(self, stats_dir):
        with pytest.raises(StatsNotFoundError):
            load_from_files({"lh_dkt": stats_dir / "lh.aparc.DKTatlas.stats"})
