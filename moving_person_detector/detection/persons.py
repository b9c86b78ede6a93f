"""
Moving person detection from pairs of moving legs.

Every pair of legs closer than legs_distance_max is a person located at the
middle of the two legs. A leg can take part in several pairs, so one leg
between two others yields two persons.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from moving_person_detector.config import LEGS_DISTANCE_MAX
from moving_person_detector.detection.legs import Leg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Person:
    """A moving person built from two legs."""

    midpoint: Tuple[float, float]
    leg_indices: Tuple[int, int]


def distance_points(pa: Tuple[float, float], pb: Tuple[float, float]) -> float:
    return math.hypot(pa[0] - pb[0], pa[1] - pb[1])


def detect_moving_persons(
    legs: Sequence[Leg], legs_distance_max: float = LEGS_DISTANCE_MAX
) -> List[Person]:
    """
    Pair legs into persons.

    Pairs (i, j) with i < j are visited in nested ascending order, which is
    also the order of the returned persons.
    """
    persons: List[Person] = []
    for i in range(len(legs)):
        for j in range(i + 1, len(legs)):
            a, b = legs[i].midpoint, legs[j].midpoint
            if distance_points(a, b) < legs_distance_max:
                mid = (a[0] + (b[0] - a[0]) / 2.0, a[1] + (b[1] - a[1]) / 2.0)
                logger.info(
                    f"[PERSONS] moving person detected[{len(persons)}]: "
                    f"leg[{i}]+leg[{j}] -> ({mid[0]:.2f}, {mid[1]:.2f})"
                )
                persons.append(Person(midpoint=mid, leg_indices=(i, j)))
    return persons


def select_goal(persons: Sequence[Person]) -> Optional[Tuple[float, float]]:
    """
    Goal to publish for this frame.

    Each accepted pair overwrites the goal, so the last person in pairing
    order wins even when it is not the nearest one.
    """
    goal = None
    for person in persons:
        goal = person.midpoint
    return goal
