import math

import numpy as np
import pytest

from moving_person_detector.detection.clustering import perform_clustering, split_segments
from moving_person_detector.detection.motion import detect_motion
from moving_person_detector.detection.scan import ingest_scan


def _cluster(make_scan, ranges, background=None, **scan_kwargs):
    frame = ingest_scan(make_scan(ranges, **scan_kwargs))
    if background is None:
        background = frame.ranges
    dynamic = detect_motion(frame.ranges, np.asarray(background, dtype=float), 0.2)
    return frame, perform_clustering(frame, dynamic, 0.2)


def test_people_in_front_of_background(make_scan):
    ranges = [1.0, 1.0, 1.0, 0.3, 0.3, 0.3, 1.0, 1.0, 1.0, 1.0]
    _, clusters = _cluster(make_scan, ranges, background=[1.0] * 10)

    assert [(c.start_index, c.end_index) for c in clusters] == [(0, 2), (3, 5), (6, 9)]
    assert [c.dynamic_ratio for c in clusters] == [0.0, 100.0, 0.0]


def test_jump_equal_to_threshold_splits():
    assert split_segments(np.array([1.0, 1.25, 1.5]), 0.25) == [(0, 0), (1, 1), (2, 2)]
    assert split_segments(np.array([1.0, 1.1, 1.2]), 0.25) == [(0, 2)]


def test_clusters_partition_scan(make_scan):
    rng = np.random.default_rng(7)
    for _ in range(20):
        ranges = rng.choice([0.5, 0.6, 1.0, 2.0, 2.1, 4.0], size=int(rng.integers(1, 80)))
        frame, clusters = _cluster(make_scan, ranges.tolist())

        assert clusters[0].start_index == 0
        assert clusters[-1].end_index == frame.num_beams - 1
        for prev, nxt in zip(clusters, clusters[1:]):
            assert nxt.start_index == prev.end_index + 1
        assert sum(c.num_beams for c in clusters) == frame.num_beams


def test_dynamic_ratio_is_a_percentage(make_scan):
    ranges = [1.0, 1.05, 1.1, 1.15, 2.0]
    background = [1.0, 1.3, 1.1, 1.5, 2.0]
    _, clusters = _cluster(make_scan, ranges, background=background)

    assert clusters[0].dynamic_ratio == pytest.approx(50.0)
    assert all(0.0 <= c.dynamic_ratio <= 100.0 for c in clusters)


def test_single_beam_cluster_has_zero_arc_length(make_scan):
    _, clusters = _cluster(make_scan, [1.0, 3.0, 1.0])

    assert len(clusters) == 3
    assert all(c.arc_length == 0.0 for c in clusters)
    assert clusters[1].midpoint == pytest.approx((3.0 * math.cos(0.01), 3.0 * math.sin(0.01)))


def test_arc_length_sums_consecutive_steps(make_scan):
    # arc of radius 1 sampled every 0.1 rad: chords, not the arc itself
    frame, clusters = _cluster(make_scan, [1.0] * 6, angle_increment=0.1)

    assert len(clusters) == 1
    assert clusters[0].arc_length == pytest.approx(5 * 2 * math.sin(0.05))


def test_midpoint_is_between_end_points_not_centroid(make_scan):
    frame, clusters = _cluster(make_scan, [1.0, 1.0, 1.0, 1.0], angle_increment=0.5)

    p0, p3 = frame.points[0], frame.points[3]
    expected = (p0 + p3) / 2.0
    centroid = frame.points.mean(axis=0)
    assert clusters[0].midpoint == pytest.approx(tuple(expected))
    assert clusters[0].midpoint != pytest.approx(tuple(centroid))
