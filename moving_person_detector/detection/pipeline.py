"""
Moving person detection pipeline.

Runs once per tick of the detector loop:

    scan + robot_moving  ->  ready?  ->  stationary?
        ->  store background (robot just stopped)
        ->  detect_motion  ->  perform_clustering
        ->  detect_moving_legs  ->  detect_moving_persons

State
-----
Only the background snapshot and the motion flags survive between ticks.
Everything else (motion flags per beam, clusters, legs, persons, goal) is
rebuilt each tick and handed back in a DetectionResult.

The moving -> stationary edge is latched when the robot_moving update
arrives and consumed by the first stationary tick that has a scan, so the
background is stored exactly once per stop even if no new robot_moving
update arrives for several ticks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from moving_person_detector.config import DetectorConfig
from moving_person_detector.detection.clustering import Cluster, perform_clustering
from moving_person_detector.detection.legs import Leg, detect_moving_legs
from moving_person_detector.detection.motion import detect_motion
from moving_person_detector.detection.persons import (
    Person,
    detect_moving_persons,
    select_goal,
)
from moving_person_detector.detection.scan import ScanFrame, ingest_scan
from moving_person_detector.managers.background_model import BackgroundModel
from moving_person_detector.managers.motion_state import MotionStateTracker

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class DetectionResult:
    """Result of one processed tick."""

    frame: ScanFrame
    dynamic: np.ndarray
    clusters: List[Cluster] = field(default_factory=list)
    legs: List[Leg] = field(default_factory=list)
    persons: List[Person] = field(default_factory=list)
    goal: Optional[Tuple[float, float]] = None  # set iff persons is not empty
    background_captured: bool = False


class DetectionPipeline:
    """
    Moving person detector for a stationary robot.

    Lifecycle
    ---------
    1. on_scan(msg) / on_robot_moving(flag): feed inputs (or pass them to tick)
    2. tick(): returns DetectionResult or None

    tick() returns None while waiting for either input, while the robot is
    moving, and when the current scan cannot be compared to the background.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        self.config = config or DetectorConfig()
        self.motion_state = MotionStateTracker()
        self.background = BackgroundModel()

        self._frame: Optional[ScanFrame] = None
        self._capture_pending = False

        # waiting messages are logged on state changes only
        self._waiting_laser = False
        self._waiting_robot = False

    @property
    def laser_ready(self) -> bool:
        return self._frame is not None

    @property
    def robot_ready(self) -> bool:
        return self.motion_state.state_received

    @property
    def capture_pending(self) -> bool:
        return self._capture_pending

    def on_scan(self, scan) -> ScanFrame:
        """Ingest a LaserScan and keep it as the current frame."""
        self._frame = ingest_scan(scan, self.config.max_beams)
        return self._frame

    def on_robot_moving(self, is_moving: bool) -> None:
        """Handle a robot_moving update."""
        if self.motion_state.update(is_moving):
            self._capture_pending = True
        elif self.motion_state.current_moving:
            self._capture_pending = False

    def tick(self, scan=None, is_moving: Optional[bool] = None) -> Optional[DetectionResult]:
        """
        Run one detector step.

        Parameters
        ----------
        scan : sensor_msgs/LaserScan, optional
            Scan received since the last tick.
        is_moving : bool, optional
            robot_moving value received since the last tick.

        Returns
        -------
        DetectionResult or None
            None if no detection was performed this tick.
        """
        if scan is not None:
            self.on_scan(scan)
        if is_moving is not None:
            self.on_robot_moving(is_moving)

        if not self._check_ready():
            return None

        if not self.motion_state.is_stationary:
            logger.debug("[DETECTOR] Robot is moving, detection paused")
            return None

        return self.process_frame(self._frame)

    def process_frame(self, frame: ScanFrame) -> Optional[DetectionResult]:
        """
        Detect moving persons in a frame, robot assumed stationary.

        Stores the background first if the robot just stopped.

        Raises
        ------
        BackgroundNotCapturedError
            If no background was ever stored.
        """
        if frame.num_beams == 0:
            logger.warning("[DETECTOR] Empty scan, skipping detection")
            return None

        captured = False
        if self._capture_pending:
            self.background.capture(frame.ranges)
            self._capture_pending = False
            captured = True

        background = self.background.snapshot
        if background is not None and background.shape != frame.ranges.shape:
            logger.warning(
                f"[DETECTOR] Background has {background.shape[0]} beams but scan has "
                f"{frame.num_beams}, skipping detection until the next stop"
            )
            return None

        cfg = self.config
        dynamic = detect_motion(frame.ranges, background, cfg.detection_threshold)
        clusters = perform_clustering(frame, dynamic, cfg.cluster_threshold)
        legs = detect_moving_legs(
            clusters, cfg.leg_size_min, cfg.leg_size_max, cfg.dynamic_threshold
        )
        persons = detect_moving_persons(legs, cfg.legs_distance_max)
        goal = select_goal(persons)

        if persons:
            logger.info(
                f"[DETECTOR] {len(persons)} moving persons detected, "
                f"goal=({goal[0]:.2f}, {goal[1]:.2f})"
            )

        return DetectionResult(
            frame=frame,
            dynamic=dynamic,
            clusters=clusters,
            legs=legs,
            persons=persons,
            goal=goal,
            background_captured=captured,
        )

    def _check_ready(self) -> bool:
        """Whether both inputs arrived at least once; logs transitions."""
        laser, robot = self.laser_ready, self.robot_ready

        if not laser and not self._waiting_laser:
            logger.info("[DETECTOR] Waiting for laser data")
            self._waiting_laser = True
        elif laser and self._waiting_laser:
            logger.info("[DETECTOR] Laser data are ok")
            self._waiting_laser = False

        if not robot and not self._waiting_robot:
            logger.info("[DETECTOR] Waiting for robot_moving state")
            self._waiting_robot = True
        elif robot and self._waiting_robot:
            logger.info("[DETECTOR] robot_moving state is ok")
            self._waiting_robot = False

        return laser and robot
