"""Tests for radar chart rendering."""
import math

import pytest

from dailyreport.services.chart import ChartRenderer, RadarCategory, radar_points, spoke_angles


def test_spoke_angles_start_at_top():
    assert spoke_angles(3) == [-90.0, 30.0, 150.0]
    assert spoke_angles(4)[0] == -90.0


def test_radar_points_geometry():
    center = (50.0, 50.0)
    top, right, bottom, left = radar_points([100, 50, 0, 100], center, 40)
    assert top == pytest.approx((50.0, 10.0))
    assert right == pytest.approx((70.0, 50.0))
    assert bottom == pytest.approx(center)
    assert left == pytest.approx((10.0, 50.0))


def test_radar_points_clamp_out_of_range_values():
    center = (0.0, 0.0)
    over, under, _ = radar_points([150, -20, 0], center, 10)
    assert math.dist(over, center) == pytest.approx(10)
    assert under == pytest.approx(center)


def test_render_radar(rasterizer):
    renderer = ChartRenderer(rasterizer)
    categories = [RadarCategory("المشاركة", 100), RadarCategory("الواجبات", 100), RadarCategory("السلوك", 100)]

    chart = renderer.render_radar(categories, 240, 110)

    assert chart.image.mode == "RGBA"
    assert chart.image.width == pytest.approx(240 * rasterizer.scale, abs=1)
    assert chart.image.height == pytest.approx(110 * rasterizer.scale, abs=1)
    assert chart.radius > 0
    for point in chart.points:
        assert math.dist(point, chart.center) == pytest.approx(chart.radius)


def test_render_radar_zero_values_collapse_to_center(rasterizer):
    categories = [RadarCategory(str(index), 0) for index in range(3)]
    chart = ChartRenderer(rasterizer).render_radar(categories, 200, 120)
    for point in chart.points:
        assert point == pytest.approx(chart.center)


def test_render_radar_needs_three_categories(rasterizer):
    with pytest.raises(ValueError):
        ChartRenderer(rasterizer).render_radar([RadarCategory("a", 1), RadarCategory("b", 2)], 100, 100)
