"""
Range-continuity clustering of a laser scan.

Neighbouring beams belong to the same cluster while their ranges differ by
less than cluster_threshold. The clusters partition the whole scan: every
beam belongs to exactly one cluster, and single-beam clusters are kept.

For each cluster [s, e]:

    arc_length    = sum of distances between consecutive points s..e
    midpoint      = point[s] + (point[e] - point[s]) / 2
    dynamic_ratio = 100 * dynamic beams / (e - s + 1)

The midpoint is the middle of the two end points, not the centroid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from moving_person_detector.config import CLUSTER_THRESHOLD
from moving_person_detector.detection.scan import ScanFrame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cluster:
    """A maximal run of contiguous beams."""

    start_index: int
    end_index: int
    arc_length: float  # meters
    midpoint: Tuple[float, float]
    dynamic_ratio: float  # percent, [0, 100]

    @property
    def num_beams(self) -> int:
        return self.end_index - self.start_index + 1


def split_segments(
    ranges: np.ndarray, threshold: float = CLUSTER_THRESHOLD
) -> List[Tuple[int, int]]:
    """Split beam indices into (start, end) runs by range discontinuity."""
    n = ranges.size
    if n == 0:
        return []
    breaks = np.where(~(np.abs(np.diff(ranges)) < threshold))[0] + 1
    starts = np.concatenate([[0], breaks])
    ends = np.concatenate([breaks - 1, [n - 1]])
    return list(zip(starts.tolist(), ends.tolist()))


def perform_clustering(
    frame: ScanFrame,
    dynamic: np.ndarray,
    cluster_threshold: float = CLUSTER_THRESHOLD,
) -> List[Cluster]:
    """
    Cluster a frame and describe each cluster.

    Parameters
    ----------
    frame : ScanFrame
        Current scan.
    dynamic : np.ndarray
        (N,) bool motion flags from detect_motion().
    cluster_threshold : float
        Max range jump between neighbouring beams of a cluster.

    Returns
    -------
    list of Cluster
        In ascending start index. Empty only for an empty frame.
    """
    pts = frame.points
    # steps[k] is the distance between beam k and beam k+1
    steps = np.linalg.norm(np.diff(pts, axis=0), axis=1)

    clusters: List[Cluster] = []
    for s, e in split_segments(frame.ranges, cluster_threshold):
        mid = pts[s] + (pts[e] - pts[s]) / 2.0
        cluster = Cluster(
            start_index=s,
            end_index=e,
            arc_length=float(np.sum(steps[s:e])),
            midpoint=(float(mid[0]), float(mid[1])),
            dynamic_ratio=100.0 * float(np.count_nonzero(dynamic[s : e + 1])) / (e - s + 1),
        )
        logger.debug(
            f"[CLUSTER] cluster[{len(clusters)}]: "
            f"[{s}]({pts[s][0]:.2f}, {pts[s][1]:.2f}) -> "
            f"[{e}]({pts[e][0]:.2f}, {pts[e][1]:.2f}), "
            f"size: {cluster.arc_length:.3f}, dynamic: {cluster.dynamic_ratio:.0f}%"
        )
        clusters.append(cluster)

    logger.debug(f"[CLUSTER] {len(clusters)} clusters over {frame.num_beams} beams")
    return clusters
