"""Per-beam motion detection against the background snapshot."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from moving_person_detector.config import DETECTION_THRESHOLD

logger = logging.getLogger(__name__)


class BackgroundNotCapturedError(RuntimeError):
    """Motion detection ran before any background was stored."""


def detect_motion(
    ranges: np.ndarray,
    background: Optional[np.ndarray],
    detection_threshold: float = DETECTION_THRESHOLD,
) -> np.ndarray:
    """
    Classify each beam as dynamic or static.

    A beam is dynamic when its range differs from the background by more
    than detection_threshold.

    Parameters
    ----------
    ranges : np.ndarray
        (N,) current ranges.
    background : np.ndarray or None
        (N,) background ranges.
    detection_threshold : float
        Range difference in meters.

    Returns
    -------
    np.ndarray
        (N,) bool, True where the beam is dynamic.

    Raises
    ------
    BackgroundNotCapturedError
        If background is None. The pipeline stores the background on the
        tick the robot stops, before calling this.
    ValueError
        If background and ranges have different lengths.
    """
    if background is None:
        raise BackgroundNotCapturedError(
            "Motion detection requires a background; none has been stored"
        )
    if background.shape != ranges.shape:
        raise ValueError(
            f"Background has {background.shape[0]} beams, scan has {ranges.shape[0]}"
        )
    dynamic = np.abs(background - ranges) > detection_threshold
    logger.debug(f"[MOTION] {int(np.count_nonzero(dynamic))}/{dynamic.size} beams dynamic")
    return dynamic
