"""
Display data for RViz.

Colors
------
green   start of a cluster
red     end of a cluster
white   beams of a moving leg
yellow  moving person
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from moving_person_detector.config import (
    FOV_ANGLE_INCREMENT,
    FOV_ANGLE_MAX,
    FOV_ANGLE_MIN,
    FOV_MAX_RANGE,
    FOV_MIN_RANGE,
    FOV_NUM_BEAMS,
)
from moving_person_detector.detection.pipeline import DetectionResult

Color = Tuple[float, float, float, float]  # r, g, b, a

GREEN: Color = (0.0, 1.0, 0.0, 1.0)
RED: Color = (1.0, 0.0, 0.0, 1.0)
WHITE: Color = (1.0, 1.0, 1.0, 1.0)
YELLOW: Color = (1.0, 1.0, 0.0, 1.0)


@dataclass(frozen=True)
class DisplayPoint:
    x: float
    y: float
    color: Color
    z: float = 0.0


def build_display_points(result: DetectionResult) -> List[DisplayPoint]:
    """
    Colored points for one processed tick.

    Order: start/end of each cluster, then every beam of each leg, then
    each person.
    """
    pts = result.frame.points
    display: List[DisplayPoint] = []

    for cluster in result.clusters:
        s, e = cluster.start_index, cluster.end_index
        display.append(DisplayPoint(float(pts[s][0]), float(pts[s][1]), GREEN))
        display.append(DisplayPoint(float(pts[e][0]), float(pts[e][1]), RED))

    for leg in result.legs:
        cluster = result.clusters[leg.cluster_index]
        for k in range(cluster.start_index, cluster.end_index + 1):
            display.append(DisplayPoint(float(pts[k][0]), float(pts[k][1]), WHITE))

    for person in result.persons:
        display.append(DisplayPoint(person.midpoint[0], person.midpoint[1], YELLOW))

    return display


def field_of_view_polyline(
    angle_min: float = FOV_ANGLE_MIN,
    angle_max: float = FOV_ANGLE_MAX,
    angle_increment: float = FOV_ANGLE_INCREMENT,
    num_beams: int = FOV_NUM_BEAMS,
    max_range: float = FOV_MAX_RANGE,
    min_range: float = FOV_MIN_RANGE,
) -> List[Tuple[float, float]]:
    """
    Outline of the scanner field of view.

    Goes out along angle_min, sweeps the max_range arc one beam at a time,
    then comes back along angle_max.
    """

    def polar(r: float, a: float) -> Tuple[float, float]:
        return (r * math.cos(a), r * math.sin(a))

    line = [polar(min_range, angle_min), polar(max_range, angle_min)]
    # first and last beam are already included
    line.extend(
        polar(max_range, angle_min + k * angle_increment)
        for k in range(1, num_beams + 1)
    )
    line.append(polar(max_range, angle_max))
    line.append(polar(min_range, angle_max))
    return line
