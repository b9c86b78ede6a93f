"""
Moving leg detection.

A moving leg is a cluster:
- with an arc length strictly between leg_size_min and leg_size_max;
- with at least dynamic_threshold % of its beams dynamic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from moving_person_detector.config import DYNAMIC_THRESHOLD, LEG_SIZE_MAX, LEG_SIZE_MIN
from moving_person_detector.detection.clustering import Cluster

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leg:
    """Midpoint of a cluster classified as a moving leg."""

    midpoint: Tuple[float, float]
    cluster_index: int


def is_moving_leg(
    cluster: Cluster,
    leg_size_min: float = LEG_SIZE_MIN,
    leg_size_max: float = LEG_SIZE_MAX,
    dynamic_threshold: float = DYNAMIC_THRESHOLD,
) -> bool:
    return (
        leg_size_min < cluster.arc_length < leg_size_max
        and cluster.dynamic_ratio >= dynamic_threshold
    )


def detect_moving_legs(
    clusters: Sequence[Cluster],
    leg_size_min: float = LEG_SIZE_MIN,
    leg_size_max: float = LEG_SIZE_MAX,
    dynamic_threshold: float = DYNAMIC_THRESHOLD,
) -> List[Leg]:
    """
    Select the clusters that look like moving legs.

    Legs are returned in cluster order; neighbouring legs are not merged.
    """
    legs: List[Leg] = []
    for i, cluster in enumerate(clusters):
        if is_moving_leg(cluster, leg_size_min, leg_size_max, dynamic_threshold):
            logger.debug(f"[LEGS] moving leg detected[{len(legs)}]: cluster[{i}]")
            legs.append(Leg(midpoint=cluster.midpoint, cluster_index=i))

    if legs:
        logger.info(f"[LEGS] {len(legs)} moving legs detected")
    return legs
