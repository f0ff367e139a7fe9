"""Tilt-compensated compass giving a heading relative to magnetic north."""

from __future__ import annotations

import math
from typing import Any

from .fmath import as_vector, radians_to_degrees

__all__ = ["calculate_heading"]


def calculate_heading(accelerometer: Any, magnetometer: Any) -> float:
    """Heading in degrees from accelerometer and magnetometer measurements in any calibrated units."""
    acceleration = as_vector(accelerometer)
    magnetic = as_vector(magnetometer)
    magnetic_west = acceleration.cross(magnetic).normalise()
    magnetic_north = magnetic_west.cross(acceleration).normalise()
    return radians_to_degrees(math.atan2(magnetic_west.x, magnetic_north.x))