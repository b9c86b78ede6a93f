"""
Configuration for the moving person detector.

Defaults match the tuning of the original laser leg detector: a 2D scanner
mounted at leg height, ranges in meters. The same fields are exposed as ROS
parameters by the detector node, so a params YAML written for the node can
also be loaded directly with load_config().
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

import yaml

# Clustering
CLUSTER_THRESHOLD = 0.2  # max range jump between neighbouring beams (m)

# Motion detection
DETECTION_THRESHOLD = 0.2  # range change vs. background to flag a beam dynamic (m)
DYNAMIC_THRESHOLD = 75.0  # % of dynamic beams for a cluster to count as moving

# Moving legs
LEG_SIZE_MIN = 0.05  # exclusive, arc length (m)
LEG_SIZE_MAX = 0.25  # exclusive, arc length (m)

# Moving persons
LEGS_DISTANCE_MAX = 0.7  # max distance between the two legs of a person (m)

# Scan buffer
MAX_BEAMS = 1000

# Loop pacing
LOOP_HZ = 10.0

# Field of view reference drawn in RViz (Hokuyo-style scanner)
FOV_ANGLE_MIN = -2.356194
FOV_ANGLE_MAX = 2.092350
FOV_ANGLE_INCREMENT = 0.006136
FOV_NUM_BEAMS = 723
FOV_MAX_RANGE = 5.6
FOV_MIN_RANGE = 0.02


@dataclass
class DetectorConfig:
    """Thresholds, topics and display settings for the detector."""

    cluster_threshold: float = CLUSTER_THRESHOLD
    detection_threshold: float = DETECTION_THRESHOLD
    dynamic_threshold: float = DYNAMIC_THRESHOLD
    leg_size_min: float = LEG_SIZE_MIN
    leg_size_max: float = LEG_SIZE_MAX
    legs_distance_max: float = LEGS_DISTANCE_MAX
    max_beams: int = MAX_BEAMS
    loop_hz: float = LOOP_HZ

    scan_topic: str = "scan"
    robot_moving_topic: str = "robot_moving"
    goal_topic: str = "goal_to_reach"
    marker_topic: str = "moving_person_detector"
    frame_id: str = "laser"

    fov_angle_min: float = FOV_ANGLE_MIN
    fov_angle_max: float = FOV_ANGLE_MAX
    fov_angle_increment: float = FOV_ANGLE_INCREMENT
    fov_num_beams: int = FOV_NUM_BEAMS
    fov_max_range: float = FOV_MAX_RANGE
    fov_min_range: float = FOV_MIN_RANGE

    def __post_init__(self):
        for name in (
            "cluster_threshold",
            "detection_threshold",
            "legs_distance_max",
            "loop_hz",
        ):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")
        if not 0.0 <= self.leg_size_min < self.leg_size_max:
            raise ValueError(
                f"leg size window must satisfy 0 <= min < max, "
                f"got ({self.leg_size_min}, {self.leg_size_max})"
            )
        if not 0.0 <= self.dynamic_threshold <= 100.0:
            raise ValueError(
                f"dynamic_threshold must be in [0, 100], got {self.dynamic_threshold}"
            )
        if self.max_beams < 1:
            raise ValueError(f"max_beams must be >= 1, got {self.max_beams}")
        if self.fov_num_beams < 0:
            raise ValueError(f"fov_num_beams must be >= 0, got {self.fov_num_beams}")

    def as_dict(self) -> Dict[str, Any]:
        """Return the configuration as a plain dict (ROS parameter names)."""
        return asdict(self)


def load_config(path: str) -> DetectorConfig:
    """
    Load a DetectorConfig from YAML.

    Accepts either a flat mapping of field names or the ROS 2 params file
    layout (``<node_name>: {ros__parameters: {...}}``). Missing fields keep
    their defaults.

    Parameters
    ----------
    path : str
        Path to the YAML file.

    Returns
    -------
    DetectorConfig
        Validated configuration.

    Raises
    ------
    ValueError
        If the file contains unknown keys or out-of-range values.
    """
    with open(path) as f:
        d = yaml.safe_load(f) or {}
    if not isinstance(d, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(d).__name__}")

    if len(d) == 1:
        (inner,) = d.values()
        if isinstance(inner, dict) and "ros__parameters" in inner:
            d = inner["ros__parameters"] or {}

    known = {f.name for f in fields(DetectorConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ValueError(f"Unknown detector parameters in {path}: {unknown}")
    return DetectorConfig(**d)
