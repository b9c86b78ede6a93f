from types import SimpleNamespace

import pytest


def _make_scan(ranges, angle_min=0.0, angle_increment=0.01, range_min=0.05, range_max=10.0):
    """LaserScan stand-in whose geometry declares exactly len(ranges) beams."""
    n = len(ranges)
    return SimpleNamespace(
        range_min=range_min,
        range_max=range_max,
        angle_min=angle_min,
        angle_max=angle_min + (n + 0.5) * angle_increment,
        angle_increment=angle_increment,
        ranges=list(ranges),
    )


@pytest.fixture
def make_scan():
    return _make_scan


@pytest.fixture
def people_scans(make_scan):
    """
    Background wall at 3 m, then the same scan with two legs at 1 m.

    Legs cover beams 20-29 and 40-49 (arc ~0.09 m each, ~0.2 m apart).
    """
    background = [3.0] * 60
    current = list(background)
    for i in list(range(20, 30)) + list(range(40, 50)):
        current[i] = 1.0
    return make_scan(background), make_scan(current)
