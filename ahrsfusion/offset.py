"""Run-time calibration of the gyroscope offset."""

from __future__ import annotations

import math
from typing import Any

from .fmath import VECTOR_ZERO, Vector, as_vector

__all__ = ["Offset"]

CUTOFF_FREQUENCY = 0.02
"""Cutoff frequency in Hz."""

TIMEOUT = 5
"""Stationary time in seconds before the offset is adjusted."""

THRESHOLD = 3.0
"""Rate in degrees per second above which the gyroscope counts as moving."""


class Offset:
    """Gyroscope offset correction for a fixed sample rate in Hz."""

    def __init__(self, sample_rate: int) -> None:
        if isinstance(sample_rate, bool) or not isinstance(sample_rate, int):
            raise TypeError("Arguments are not (unsigned int)")
        if sample_rate <= 0:
            raise ValueError("sample_rate must be a positive integer")
        self.filter_coefficient = 2.0 * math.pi * CUTOFF_FREQUENCY * (1.0 / sample_rate)
        self.timeout = TIMEOUT * sample_rate
        self.timer = 0
        self.gyroscope_offset: Vector = VECTOR_ZERO

    def update(self, gyroscope: Any) -> Vector:
        """Return the measurement in degrees per second with the offset removed."""
        corrected = as_vector(gyroscope) - self.gyroscope_offset

        if any(abs(component) > THRESHOLD for component in corrected):
            self.timer = 0
            return corrected

        if self.timer < self.timeout:
            self.timer += 1
            return corrected

        self.gyroscope_offset = self.gyroscope_offset + corrected.scale(self.filter_coefficient)
        return corrected