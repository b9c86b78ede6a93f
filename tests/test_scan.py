import logging
import math

import numpy as np
import pytest

from moving_person_detector.detection.scan import beam_count, ingest_scan


def test_points_follow_beam_angles(make_scan):
    frame = ingest_scan(make_scan([1.0, 2.0, 3.0], angle_min=-0.5, angle_increment=0.25))

    assert frame.num_beams == 3
    for i, r in enumerate([1.0, 2.0, 3.0]):
        a = -0.5 + i * 0.25
        assert frame.points[i] == pytest.approx([r * math.cos(a), r * math.sin(a)])
        assert frame.angle(i) == pytest.approx(a)


def test_out_of_range_readings_clamped_to_range_max(make_scan):
    scan = make_scan([0.01, 0.05, 1.0, 10.0, 12.0, float("nan"), float("inf")])
    frame = ingest_scan(scan)

    # bounds are exclusive on both sides
    assert frame.ranges.tolist() == [10.0, 10.0, 1.0, 10.0, 10.0, 10.0, 10.0]
    assert np.all(np.isfinite(frame.points))


def test_sample_view(make_scan):
    frame = ingest_scan(make_scan([2.0, 2.5], angle_increment=0.5))
    sample = frame.sample(1)

    assert sample.angle_index == 1
    assert sample.range == 2.5
    assert sample.point == pytest.approx((2.5 * math.cos(0.5), 2.5 * math.sin(0.5)))


def test_beam_count_uses_floor_of_geometry(make_scan):
    scan = make_scan([1.0] * 5, angle_increment=0.1)
    scan.angle_max = scan.angle_min + 0.45
    assert beam_count(scan) == 4
    assert ingest_scan(scan).num_beams == 4


def test_capacity_exceeded_truncates_tail(make_scan, caplog):
    caplog.set_level(logging.WARNING)
    frame = ingest_scan(make_scan([0.5 * k for k in range(1, 13)]), max_beams=10)

    assert frame.num_beams == 10
    assert frame.dropped_beams == 2
    assert frame.ranges[-1] == pytest.approx(5.0)
    assert "Capacity exceeded" in caplog.text


def test_scan_shorter_than_declared_geometry(make_scan, caplog):
    caplog.set_level(logging.WARNING)
    scan = make_scan([1.0] * 8)
    scan.ranges = scan.ranges[:5]
    frame = ingest_scan(scan)

    assert frame.num_beams == 5
    assert frame.dropped_beams == 3
    assert "truncating" in caplog.text


def test_invalid_increment_gives_empty_frame(make_scan):
    scan = make_scan([1.0, 1.0])
    scan.angle_increment = 0.0
    frame = ingest_scan(scan)

    assert frame.num_beams == 0
    assert frame.points.shape == (0, 2)
