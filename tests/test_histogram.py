"""
Tests for radial elevation-histogram rendering.
"""

import math

import pytest
import numpy as np

from src.mountainplot.geometry import ElevationCalibration, OutputGeometry
from src.mountainplot.histogram import (
    contribution_weight,
    render_histogram,
    splat_bilinear,
    splat_nearest,
)
from src.mountainplot.peaks import Peak, find_peak


class TestSplatBilinear:
    """Tests for the bilinear splat kernel."""

    def test_interior_weights(self):
        """Each corner gets its bilinear fraction."""
        hist = np.zeros((10, 10))

        splat_bilinear(hist, 3.25, 4.75, 2.0)

        assert hist[3, 4] == pytest.approx(2.0 * 0.75 * 0.25)
        assert hist[4, 4] == pytest.approx(2.0 * 0.25 * 0.25)
        assert hist[3, 5] == pytest.approx(2.0 * 0.75 * 0.75)
        assert hist[4, 5] == pytest.approx(2.0 * 0.25 * 0.75)
        assert np.count_nonzero(hist) == 4

    def test_interior_conserves_weight(self):
        """Interior placements conserve the full weight."""
        hist = np.zeros((8, 6))

        splat_bilinear(hist, 5.9, 0.3, 0.8)

        assert hist.sum() == pytest.approx(0.8)

    def test_last_column_is_lossy(self):
        """At px = ox-1 only two corners are written."""
        hist = np.zeros((5, 5))

        splat_bilinear(hist, 4.5, 2.25, 1.0)

        assert np.count_nonzero(hist) == 2
        assert hist[4, 2] == pytest.approx(0.375)
        assert hist[4, 3] == pytest.approx(0.125)
        assert hist.sum() < 1.0

    def test_last_corner_keeps_one_cell(self):
        """At the far corner only the base cell is written."""
        hist = np.zeros((5, 5))

        splat_bilinear(hist, 4.5, 4.5, 1.0)

        assert np.count_nonzero(hist) == 1
        assert hist[4, 4] == pytest.approx(0.25)

    def test_accumulates(self):
        """Repeated splats add up."""
        hist = np.zeros((4, 4))

        splat_bilinear(hist, 1.0, 1.0, 0.5)
        splat_bilinear(hist, 1.0, 1.0, 0.25)

        assert hist[1, 1] == pytest.approx(0.75)


class TestSplatNearest:
    """Tests for the nearest-cell splat kernel."""

    def test_whole_weight_to_one_cell(self):
        hist = np.zeros((5, 5))

        splat_nearest(hist, 2.9, 1.1, 0.7)

        assert hist[2, 1] == pytest.approx(0.7)
        assert hist.sum() == pytest.approx(0.7)

    def test_clamps_to_grid(self):
        hist = np.zeros((5, 5))

        splat_nearest(hist, 99.0, 7.5, 1.0)

        assert hist[4, 4] == pytest.approx(1.0)


class TestContributionWeight:
    """Tests for the distance falloff weight."""

    def test_peak_weight_is_one(self):
        assert contribution_weight(0.0, 0.3) == pytest.approx(1.0)

    def test_decays_with_distance(self):
        assert contribution_weight(3.0, 0.3) == pytest.approx(4.0 ** -0.3)
        assert contribution_weight(10.0, 0.3) < contribution_weight(3.0, 0.3)

    def test_custom_falloff(self):
        assert contribution_weight(3.0, 0.5) == pytest.approx(0.5)


def _geometry(width, height, max_horizontal, white, mpp=1.0):
    return OutputGeometry(
        width, height, max_horizontal, ElevationCalibration(0.0, white, mpp)
    )


class TestRenderHistogram:
    """Tests for render_histogram."""

    def test_shape_and_dtype(self, sample_dem):
        peak = find_peak(sample_dem)
        geometry = _geometry(30, 20, 80.0, 10.0)

        hist = render_histogram(sample_dem, peak, geometry)

        assert hist.shape == (30, 20)
        assert hist.dtype == np.float64

    def test_single_sample_placement(self):
        """A lone peak sample lands in column 0 at its elevation row."""
        dem = np.ones((1, 1), dtype=np.float32)
        geometry = _geometry(4, 10, math.sqrt(2), 5.0)

        hist = render_histogram(dem, Peak(0, 0, 1.0), geometry)

        # elevm = 5 m -> pfy = 5.5, split between rows 5 and 6
        assert hist[0, 5] == pytest.approx(0.5)
        assert hist[0, 6] == pytest.approx(0.5)
        assert hist.sum() == pytest.approx(1.0)

    def test_interior_total_weight_conserved(self):
        """When every sample lands inside, the histogram sums all weights."""
        dem = np.full((3, 3), 0.5, dtype=np.float32)
        geometry = _geometry(50, 50, 100.0, 20.0)

        hist = render_histogram(dem, Peak(0, 0, 0.5), geometry)

        ix, iy = np.meshgrid(np.arange(3), np.arange(3), indexing="ij")
        expected = np.sum((ix**2 + iy**2 + 1.0) ** -0.3)
        assert hist.sum() == pytest.approx(expected)

    def test_distance_maps_to_column(self):
        """The sample at maxhoriz / 2 lands at column ox / 2."""
        dem = np.zeros((5, 1), dtype=np.float32)
        geometry = _geometry(8, 10, 4.0, 5.0)

        hist = render_histogram(dem, Peak(0, 0, 0.0), geometry, splat="nearest")

        # distance 2 of 4 -> pfx = 4.0
        assert hist[4, 0] == pytest.approx(contribution_weight(4.0, 0.3))

    def test_elevation_maps_to_row(self):
        """Higher samples land in higher rows."""
        dem = np.zeros((2, 1), dtype=np.float32)
        dem[1, 0] = 0.5
        geometry = _geometry(4, 100, 2.0, 100.0)

        hist = render_histogram(dem, Peak(1, 0, 0.5), geometry, splat="nearest")

        # value 0.5 of 100 m -> pfy = 50.5
        assert hist[0, 50] == pytest.approx(1.0)
        # value 0 at distance 1 -> pfx = 2, pfy = 0.5
        assert hist[2, 0] == pytest.approx(2.0 ** -0.3)

    def test_nan_samples_skipped(self):
        dem = np.full((3, 3), 0.5, dtype=np.float32)
        with_nan = dem.copy()
        with_nan[2, 2] = np.nan
        geometry = _geometry(50, 50, 100.0, 20.0)

        full = render_histogram(dem, Peak(0, 0, 0.5), geometry)
        partial = render_histogram(with_nan, Peak(0, 0, 0.5), geometry)

        assert full.sum() - partial.sum() == pytest.approx(9.0 ** -0.3)

    def test_nearest_and_bilinear_same_total_inside(self, sample_dem):
        """Both splat modes distribute the same weight when nothing is clipped."""
        peak = find_peak(sample_dem)
        geometry = _geometry(200, 50, 200.0, 20.0)

        bilinear = render_histogram(sample_dem, peak, geometry, splat="bilinear")
        nearest = render_histogram(sample_dem, peak, geometry, splat="nearest")

        assert bilinear.sum() == pytest.approx(nearest.sum())

    def test_unknown_splat_raises(self, single_peak_dem):
        with pytest.raises(ValueError, match="Unknown splat mode"):
            render_histogram(
                single_peak_dem, Peak(1, 1, 1.0), _geometry(4, 4, 4.0, 4.0), splat="cubic"
            )

    def test_zero_max_horizontal_raises(self, single_peak_dem):
        with pytest.raises(ValueError, match="horizontal distance"):
            render_histogram(single_peak_dem, Peak(1, 1, 1.0), _geometry(4, 4, 0.0, 4.0))

    def test_float32_grid_matches_float64(self, sample_dem):
        """float32 grids render without an up-cast and give the same histogram."""
        dem32 = sample_dem.astype(np.float32)
        peak = find_peak(dem32)
        geometry = _geometry(60, 40, 80.0, 10.0)

        hist32 = render_histogram(dem32, peak, geometry)
        hist64 = render_histogram(dem32.astype(np.float64), peak, geometry)

        np.testing.assert_allclose(hist32, hist64, rtol=1e-6, atol=1e-12)

    def test_integer_grid_accepted(self):
        dem = np.zeros((3, 3), dtype=np.uint8)
        geometry = _geometry(10, 10, 5.0, 5.0)

        hist = render_histogram(dem, Peak(0, 0, 0.0), geometry)

        assert hist.sum() > 0.0
