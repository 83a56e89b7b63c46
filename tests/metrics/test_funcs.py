"""
Tests for the scoring primitives.
"""
import math

import pytest

from brainstats.data.loader import ReferenceEntry
from brainstats.ingest import RegionMeasurement
from brainstats.metrics.funcs import (
    z_score,
    composite_z_score,
    round_half_up,
    z_to_percentile,
    PercentileBand,
    banded_percentile,
    normalized_ratio,
)

REFERENCE = {
    "thickness": ReferenceEntry(mean=2.5, std=0.2),
    "surf_area": ReferenceEntry(mean=1000, std=100),
    "volume": ReferenceEntry(mean=3000, std=300),
}


def test_z_score_is_linear():
    assert z_score(2.5, 2.5, 0.2) == 0
    assert z_score(2.7, 2.5, 0.2) == pytest.approx(1.0)
    assert z_score(2.3, 2.5, 0.2) == pytest.approx(-1.0)


def test_z_score_rejects_non_positive_std():
    with pytest.raises(ValueError):
        z_score(1.0, 1.0, 0.0)


class TestCompositeZScore:
    """Tests for weighted thickness / area / volume composites."""

    def test_thickness_only_offset(self):
        m = RegionMeasurement(thickness=2.7, surf_area=1000, volume=3000)
        assert composite_z_score(m, REFERENCE, (80, 10, 10)) == pytest.approx(0.8)

    def test_all_metrics_offset(self):
        m = RegionMeasurement(thickness=2.7, surf_area=1100, volume=3300)
        assert composite_z_score(m, REFERENCE, (45, 30, 25)) == pytest.approx(1.0)

    def test_nan_propagates(self):
        m = RegionMeasurement(thickness=float("nan"), surf_area=1000, volume=3000)
        assert math.isnan(composite_z_score(m, REFERENCE, (80, 10, 10)))


@pytest.mark.parametrize("value,ndigits,expected", [
    (0.125, 2, 0.13),
    (2.5, 0, 3.0),
    (-2.5, 0, -2.0),
    (0.0004, 3, 0.0),
    (101.5, 0, 102.0),
])
def test_round_half_up(value, ndigits, expected):
    assert round_half_up(value, ndigits) == pytest.approx(expected)


class TestZToPercentile:
    """Tests for the normal CDF approximation."""

    @pytest.mark.parametrize("z,expected", [
        (0.0, 50),
        (1.0, 87),
        (-1.0, 13),
        (0.3, 65),
        (0.7, 79),
        (2.0, 98),
        (-2.0, 2),
    ])
    def test_known_values(self, z, expected):
        assert z_to_percentile(z) == expected

    @pytest.mark.parametrize("z", [x / 10 for x in range(1, 40, 3)])
    def test_symmetric(self, z):
        assert z_to_percentile(-z) + z_to_percentile(z) == 100

    def test_bounded(self):
        assert z_to_percentile(10) == 100
        assert z_to_percentile(-10) == 0

    def test_monotonic(self):
        zs = [x / 10 for x in range(-40, 41)]
        percentiles = [z_to_percentile(z) for z in zs]
        assert percentiles == sorted(percentiles)


class TestBandedPercentile:
    """Tests for top-down percentile bands."""

    BANDS = (
        PercentileBand(0.2, 90, 0.2, 40),
        PercentileBand(0.0, 50, 0.0, 200),
        PercentileBand(float("-inf"), 50, 0.0, 100),
    )

    def test_first_matching_band_applies(self):
        assert banded_percentile(0.25, self.BANDS) == 92
        assert banded_percentile(0.1, self.BANDS) == 70
        assert banded_percentile(-0.2, self.BANDS) == 30

    def test_clamped(self):
        assert banded_percentile(5.0, self.BANDS) == 99
        assert banded_percentile(-5.0, self.BANDS) == 1

    def test_no_band_matches_gives_floor(self):
        bands = (PercentileBand(0.0, 50, 0.0, 100),)
        assert banded_percentile(-1.0, bands) == 1


class TestNormalizedRatio:
    """Tests for (L - R) / (|L| + |R| + eps)."""

    def test_symmetric_is_zero(self):
        assert normalized_ratio(1.5, 1.5) == 0

    def test_sign_and_bounds(self):
        assert 0 < normalized_ratio(2.0, 1.0) < 1
        assert -1 < normalized_ratio(-1.0, 3.0) < 0

    def test_both_zero(self):
        assert normalized_ratio(0.0, 0.0) == 0

    def test_antisymmetric(self):
        assert normalized_ratio(0.3, -0.7) == pytest.approx(-normalized_ratio(-0.7, 0.3))
