"""Background snapshot used for motion detection."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


class BackgroundModel:
    """
    Holds the range array captured when the robot stopped.

    The snapshot is replaced wholesale on every capture and is read-only in
    between. There is no averaging or decay.
    """

    def __init__(self):
        """Initialize with no snapshot."""
        self._snapshot: Optional[np.ndarray] = None
        self.capture_count = 0

    @property
    def snapshot(self) -> Optional[np.ndarray]:
        """Read-only background ranges, or None before the first capture."""
        return self._snapshot

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def capture(self, ranges: np.ndarray) -> None:
        """
        Store ranges as the new background.

        Parameters
        ----------
        ranges : np.ndarray
            (N,) ranges of the current frame. Copied.
        """
        snapshot = np.array(ranges, dtype=np.float64, copy=True)
        snapshot.setflags(write=False)
        self._snapshot = snapshot
        self.capture_count += 1
        logger.info(
            f"[BACKGROUND] Stored {snapshot.size} beams (capture #{self.capture_count})"
        )
