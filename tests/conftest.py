import pytest

from brainstats.data.loader import get_morphometry_reference, get_curvature_reference
from brainstats.ingest import RegionMeasurement, HemisphereDataset


def _measurement_at(reference, region, thickness_sd=0.0, area_sd=0.0, volume_sd=0.0,
                    folding_index=None):
    ref = reference[region]
    kwargs = {}
    if folding_index is not None:
        kwargs = {
            "mean_curvature": 0.1,
            "gaussian_curvature": 0.02,
            "folding_index": folding_index,
            "curvature_index": 2.0,
        }
    return RegionMeasurement(
        thickness=ref["thickness"].mean + thickness_sd * ref["thickness"].std,
        surf_area=ref["surf_area"].mean + area_sd * ref["surf_area"].std,
        volume=ref["volume"].mean + volume_sd * ref["volume"].std,
        **kwargs,
    )


@pytest.fixture
def reference():
    """Bundled morphometry reference table."""
    return get_morphometry_reference()


@pytest.fixture
def curvature_reference():
    """Bundled BA_exvivo curvature reference table."""
    return get_curvature_reference()


@pytest.fixture
def make_measurement(reference):
    """Factory: RegionMeasurement offset from the reference mean by SD units."""
    def factory(region, **offsets):
        return _measurement_at(reference, str(region), **offsets)
    return factory


@pytest.fixture
def mean_hemisphere(reference):
    """Every DKT region exactly at its reference mean."""
    return {
        name: _measurement_at(reference, name)
        for name in reference
        if not name.endswith("_exvivo")
    }


@pytest.fixture
def mean_subregions(reference):
    """Every BA_exvivo subregion at its reference mean, without curvature."""
    return {
        name: _measurement_at(reference, name)
        for name in reference
        if name.endswith("_exvivo")
    }


@pytest.fixture
def mean_dataset(mean_hemisphere, mean_subregions):
    """Both hemispheres at the reference mean, with subregions."""
    return HemisphereDataset(
        left=dict(mean_hemisphere),
        right=dict(mean_hemisphere),
        left_sub=dict(mean_subregions),
        right_sub=dict(mean_subregions),
    )


@pytest.fixture
def dkt_only_dataset(mean_hemisphere):
    """Both hemispheres at the reference mean, no BA_exvivo data."""
    return HemisphereDataset(left=dict(mean_hemisphere), right=dict(mean_hemisphere))


@pytest.fixture
def stats_text():
    """
    Factory building the text of a FreeSurfer stats report.

    ``rows`` maps region name -> tuple of column values after StructName.
    Six-column tables are written unless ``curvature`` is set.
    """
    def factory(rows, subject="bert", curvature=False, measures=()):
        columns = "StructName NumVert SurfArea GrayVol ThickAvg ThickStd"
        if curvature:
            columns += " MeanCurv GausCurv FoldInd CurvInd"
        lines = [
            "# Title Cortical Parcellation Statistics",
            f"# subjectname {subject}",
        ]
        for name, key, description, value, unit in measures:
            lines.append(f"# Measure {name}, {key}, {description}, {value}, {unit}")
        lines.append(f"# ColHeaders {columns}")
        for region, values in rows.items():
            lines.append(" ".join([region] + [str(v) for v in values]))
        return "\n".join(lines) + "\n"
    return factory


@pytest.fixture
def dkt_rows(reference):
    """Six-column rows for every DKT region at its reference mean."""
    rows = {}
    for name, metrics in reference.items():
        if name.endswith("_exvivo"):
            continue
        rows[name] = (
            3000,
            metrics["surf_area"].mean,
            metrics["volume"].mean,
            metrics["thickness"].mean,
            0.5,
        )
    return rows


@pytest.fixture
def ba_rows(reference, curvature_reference):
    """Ten-column rows for every BA_exvivo subregion at its reference mean."""
    rows = {}
    for name, metrics in reference.items():
        if not name.endswith("_exvivo"):
            continue
        rows[name] = (
            4000,
            metrics["surf_area"].mean,
            metrics["volume"].mean,
            metrics["thickness"].mean,
            0.5,
            curvature_reference[name]["mean_curvature"].mean,
            0.02,
            curvature_reference[name]["folding_index"].mean,
            2.0,
        )
    return rows


@pytest.fixture
def stats_dir(tmp_path, stats_text, dkt_rows, ba_rows):
    """A FreeSurfer stats/ directory with DKT, BA_exvivo and aseg files."""
    directory = tmp_path / "bert" / "stats"
    directory.mkdir(parents=True)
    for hemi in ("lh", "rh"):
        (directory / f"{hemi}.aparc.DKTatlas.stats").write_text(stats_text(dkt_rows))
        (directory / f"{hemi}.BA_exvivo.stats").write_text(stats_text(ba_rows, curvature=True))
    (directory / "aseg.stats").write_text(stats_text({}, measures=(
        ("BrainSeg", "BrainSegVol", "Brain Segmentation Volume", 1250000.0, "mm^3"),
        ("Cortex", "CortexVol", "Total cortical gray matter volume", 530000.0, "mm^3"),
        ("EstimatedTotalIntraCranialVol", "eTIV", "Estimated Total Intracranial Volume", 1550000.0, "mm^3"),
    )))
    return directory
