"""
Tests for report generation functions.
"""
import csv
import json

import pytest

from brainstats import __version__
from brainstats.ingest import BasicInfo
from brainstats.metrics import (
    run_analysis,
    english_interpreter,
    save_json_report,
    save_csv_summary,
    save_html_report,
    generate_complete_report,
    plot_region_contributions,
)
from brainstats.metrics.modules.reports import index_z


@pytest.fixture
def analysis(mean_dataset):
    """Analysis of a subject at the reference means."""
    return run_analysis(mean_dataset, interpreter=english_interpreter)


@pytest.fixture
def basic_info():
    return BasicInfo(brain_volume=1250000.0, cortex_volume=530000.0, etiv=1550000.0)


class TestSaveJsonReport:
    """Tests for save_json_report function."""

    def test_json_report_contents(self, analysis, basic_info, tmp_path):
        """JSON report carries version, provenance, summary and every index."""
        json_path = save_json_report(analysis, tmp_path, "sub-01", basic_info)

        assert json_path.name == "sub-01_brain_indices.json"
        with open(json_path) as f:
            report = json.load(f)

        assert report["subject_id"] == "sub-01"
        assert report["brainstats_version"] == __version__
        assert "dependencies" in report["provenance"]
        assert set(report["provenance"]["reference_tables"]) == {"morphometry_male.json", "curvature_ba.json"}
        assert report["basic_info"]["brain_volume"] == 1250000.0
        assert report["summary"]["overall_score"] == 75
        assert len(report["indices"]) == 14

        olfactory = report["indices"][0]
        assert olfactory["key"] == "olfactory"
        assert olfactory["value"] == 0.0
        assert olfactory["percentile"] == 50
        assert olfactory["details"][0]["region"] == "entorhinal"
        assert olfactory["interpretation"]

    def test_json_report_without_basic_info(self, analysis, tmp_path):
        json_path = save_json_report(analysis, tmp_path, "sub-01")
        with open(json_path) as f:
            report = json.load(f)
        assert report["basic_info"] == {}
        assert report["summary"]["brain_tags"] == []

    def test_creates_output_dir(self, analysis, tmp_path):
        out = tmp_path / "nested" / "dir"
        save_json_report(analysis, out, "sub-01")
        assert out.is_dir()


class TestSaveCsvSummary:
    """Tests for the one-row CSV summary."""

    def test_csv_columns(self, analysis, tmp_path):
        csv_path = save_csv_summary(analysis, tmp_path, "sub-01")

        with open(csv_path, newline="") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 1
        row = rows[0]
        assert row["subject_id"] == "sub-01"
        assert float(row["olfactory_value"]) == 0.0
        assert row["olfactory_percentile"] == "50"
        assert float(row["parietal_iq_value"]) == 100
        assert float(row["parietal_iq_z"]) == 0.0
        # Ratio indices carry no z-score
        assert row["language_output_z"] == ""

    def test_index_z(self, analysis):
        assert index_z(analysis.get("olfactory")) == 0.0
        assert index_z(analysis.get("language_lateralization")) is None
        assert index_z(analysis.get("language_input")) == 0.0


class TestSaveHtmlReport:
    """Tests for the HTML report."""

    def test_html_without_figures(self, analysis, basic_info, tmp_path):
        html_path = save_html_report(analysis, {}, tmp_path, "sub-01", basic_info)

        html = html_path.read_text(encoding="utf-8")
        assert html_path.name == "sub-01_report.html"
        assert "Brain Index Report" in html
        assert "Olfactory Function Index" in html
        assert "Language Lateralization Index" in html
        assert f"v{__version__}" in html
        assert "<img" not in html

    def test_subject_id_is_escaped(self, analysis, tmp_path):
        html_path = save_html_report(analysis, {}, tmp_path, "a&b")
        assert "a&amp;b" in html_path.read_text(encoding="utf-8")


def test_generate_complete_report(analysis, basic_info, tmp_path):
    paths = generate_complete_report(analysis, tmp_path, "sub-01", basic_info, html=True)

    assert paths["json"].exists()
    assert paths["csv"].exists()
    assert paths["html"].exists()
    assert paths["visualizations"]["percentiles"].exists()
    assert paths["visualizations"]["lateralization"].exists()
    assert "data:image/png;base64," in paths["html"].read_text(encoding="utf-8")


def test_complete_report_embeds_region_charts(analysis, tmp_path):
    paths = generate_complete_report(analysis, tmp_path, "sub-01", html=True)

    regions = paths["visualizations"]["regions"]
    assert set(regions) == {r.key for r in analysis.indices if r.details}
    assert regions["language"].name == "sub-01_language_regions.png"
    assert regions["language"].exists()
    assert 'alt="Language Composite Index regions"' in paths["html"].read_text(encoding="utf-8")


def test_generate_report_without_html(analysis, tmp_path):
    paths = generate_complete_report(analysis, tmp_path, "sub-01", html=False)

    assert set(paths) == {"json", "csv"}
    assert not (tmp_path / "visualizations").exists()


def test_plot_region_contributions(analysis, tmp_path):
    fig_path = plot_region_contributions(analysis.get("language"), tmp_path, "sub-01")
    assert fig_path.name == "sub-01_language_regions.png"
    assert fig_path.exists()


def test_plot_region_contributions_without_details(dkt_only_dataset, tmp_path):
    handedness = run_analysis(dkt_only_dataset).get("handedness")
    assert plot_region_contributions(handedness, tmp_path, "sub-01") is None
