"""
Laser scan ingestion.

Converts a LaserScan-like message into a bounded, angle-ordered frame of
ranges and Cartesian points.

Coordinate Frame
----------------
Points are in the scanner's XY plane (x=forward, y=left), z is always 0.
Beam i has angle ``angle_min + i * angle_increment``.

Out-of-range readings (below range_min, above range_max, NaN, inf) are
replaced by range_max, i.e. treated as "no obstacle".
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np

from moving_person_detector.config import MAX_BEAMS

logger = logging.getLogger(__name__)


class RangeSample(NamedTuple):
    """One beam of a frame."""

    angle_index: int
    range: float
    point: Tuple[float, float]


@dataclass(frozen=True, eq=False)
class ScanFrame:
    """
    One ingested scan.

    Attributes
    ----------
    ranges : np.ndarray
        (N,) clamped ranges, ascending angle.
    points : np.ndarray
        (N, 2) XY coordinates of each beam.
    angle_min : float
        Angle of beam 0.
    angle_increment : float
        Angular step between beams.
    dropped_beams : int
        Declared beams that were not ingested (capacity or short message).
    """

    ranges: np.ndarray
    points: np.ndarray
    angle_min: float
    angle_increment: float
    dropped_beams: int = 0

    @property
    def num_beams(self) -> int:
        return int(self.ranges.shape[0])

    def angle(self, index: int) -> float:
        return self.angle_min + index * self.angle_increment

    def sample(self, index: int) -> RangeSample:
        x, y = self.points[index]
        return RangeSample(index, float(self.ranges[index]), (float(x), float(y)))


def beam_count(scan) -> int:
    """Number of beams declared by the scan geometry (unbounded)."""
    inc = float(scan.angle_increment)
    if not inc > 0.0:
        return 0
    return max(0, int(math.floor((scan.angle_max - scan.angle_min) / inc)))


def ingest_scan(scan, max_beams: int = MAX_BEAMS) -> ScanFrame:
    """
    Convert a LaserScan into a ScanFrame.

    Parameters
    ----------
    scan : sensor_msgs/LaserScan
        Any object with range_min, range_max, angle_min, angle_max,
        angle_increment and ranges.
    max_beams : int
        Buffer capacity. Beams beyond it are dropped with a warning.

    Returns
    -------
    ScanFrame
        Frame with at most max_beams beams. Empty if the geometry is invalid.
    """
    n = beam_count(scan)
    if n == 0:
        logger.warning(
            f"[SCAN] Invalid scan geometry: angle_min={scan.angle_min}, "
            f"angle_max={scan.angle_max}, angle_increment={scan.angle_increment}"
        )

    raw = np.asarray(scan.ranges, dtype=np.float64).reshape(-1)
    dropped = 0
    if n > max_beams:
        dropped = n - max_beams
        logger.warning(
            f"[SCAN] Capacity exceeded: {n} beams > {max_beams}, "
            f"ignoring the last {dropped}"
        )
        n = max_beams
    if n > raw.size:
        logger.warning(
            f"[SCAN] Scan declares {n} beams but carries {raw.size} ranges, truncating"
        )
        dropped += n - raw.size
        n = raw.size

    range_max = float(scan.range_max)
    r = raw[:n]
    ok = (r > scan.range_min) & (r < range_max)
    ranges = np.where(ok, r, range_max)

    a = scan.angle_min + np.arange(n, dtype=np.float64) * scan.angle_increment
    points = np.column_stack([ranges * np.cos(a), ranges * np.sin(a)])

    return ScanFrame(
        ranges=ranges,
        points=points,
        angle_min=float(scan.angle_min),
        angle_increment=float(scan.angle_increment),
        dropped_beams=dropped,
    )
