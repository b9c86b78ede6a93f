import math

import pytest

from moving_person_detector.detection.pipeline import DetectionPipeline
from moving_person_detector.utils.visualization import (
    GREEN,
    RED,
    WHITE,
    YELLOW,
    build_display_points,
    field_of_view_polyline,
)


def test_display_points_order_and_colors(people_scans):
    background_scan, people_scan = people_scans
    pipeline = DetectionPipeline()
    pipeline.tick(scan=background_scan, is_moving=True)
    pipeline.tick(is_moving=False)
    result = pipeline.tick(scan=people_scan)

    display = build_display_points(result)
    colors = [p.color for p in display]

    n_clusters = len(result.clusters)
    assert colors[: 2 * n_clusters] == [GREEN, RED] * n_clusters
    assert colors[2 * n_clusters : 2 * n_clusters + 20] == [WHITE] * 20
    assert colors[2 * n_clusters + 20 :] == [YELLOW]
    assert (display[-1].x, display[-1].y) == pytest.approx(result.goal)
    assert all(p.z == 0.0 for p in display)

    first_start, first_end = display[0], display[1]
    assert (first_start.x, first_start.y) == pytest.approx(tuple(result.frame.points[0]))
    assert (first_end.x, first_end.y) == pytest.approx(tuple(result.frame.points[19]))


def test_field_of_view_polyline_defaults():
    line = field_of_view_polyline()

    assert len(line) == 2 + 723 + 2
    assert line[0] == pytest.approx((0.02 * math.cos(-2.356194), 0.02 * math.sin(-2.356194)))
    assert line[1] == pytest.approx((5.6 * math.cos(-2.356194), 5.6 * math.sin(-2.356194)))
    assert line[2] == pytest.approx(
        (5.6 * math.cos(-2.356194 + 0.006136), 5.6 * math.sin(-2.356194 + 0.006136))
    )
    assert line[-1] == pytest.approx((0.02 * math.cos(2.092350), 0.02 * math.sin(2.092350)))


def test_field_of_view_points_on_max_range_arc():
    line = field_of_view_polyline(-1.0, 1.0, 0.5, 3, 2.0, 0.1)

    assert len(line) == 7
    for x, y in line[1:-1]:
        assert math.hypot(x, y) == pytest.approx(2.0)
