"""Robot motion state tracking for the moving person detector."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class MotionStateTracker:
    """
    Tracks the robot_moving flag and its moving -> stationary transition.

    Both flags start as moving, so the first "not moving" update is seen as
    the robot stopping and triggers a background capture.
    """

    def __init__(self):
        """Initialize tracker with the robot assumed to be moving."""
        self.previous_moving = True
        self.current_moving = True
        self.state_received = False

    def update(self, is_moving: bool) -> bool:
        """
        Handle a robot_moving update.

        Parameters
        ----------
        is_moving : bool
            Latest value published by the robot.

        Returns
        -------
        bool
            True if this update is the moving -> stationary transition.
        """
        self.state_received = True
        self.previous_moving = self.current_moving
        self.current_moving = bool(is_moving)
        if self.just_stopped:
            logger.info("[MOTION] Robot stopped")
        elif self.current_moving and not self.previous_moving:
            logger.info("[MOTION] Robot started moving")
        return self.just_stopped

    @property
    def just_stopped(self) -> bool:
        """Whether the last update was the moving -> stationary edge."""
        return self.previous_moving and not self.current_moving

    @property
    def is_stationary(self) -> bool:
        """Whether a state was received and the robot is not moving."""
        return self.state_received and not self.current_moving
