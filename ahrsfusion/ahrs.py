"""AHRS algorithm combining gyroscope, accelerometer and magnetometer measurements
into a single measurement of orientation relative to the Earth."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .ahrs_types import Flags, InternalStates, Settings
from .compass import calculate_heading
from .fmath import (
    IDENTITY_QUATERNION,
    VECTOR_ZERO,
    Quaternion,
    Vector,
    as_vector,
    degrees_to_radians,
    fusion_asin,
    radians_to_degrees,
)

__all__ = ["Ahrs"]

INITIAL_GAIN = 10.0
"""Gain used at the start of the initialisation period."""

INITIALISATION_PERIOD = 3.0
"""Initialisation period in seconds."""


@dataclass
class _ActiveSettings:
    """Settings in the form the algorithm uses them."""

    gain: float
    acceleration_rejection: float
    magnetic_rejection: float
    rejection_timeout: int


def _rejection_threshold(degrees: float, timeout: int) -> float:
    if degrees == 0.0 or timeout == 0:
        return math.inf
    return (0.5 * math.sin(degrees_to_radians(degrees))) ** 2


class Ahrs:
    """Attitude and heading reference system with the default settings applied."""

    def __init__(self) -> None:
        self._initialising = True
        self._ramped_gain = INITIAL_GAIN
        self._ramped_gain_step = 0.0
        self._settings = _ActiveSettings(0.5, math.inf, math.inf, 0)
        self.set_settings(Settings())
        self.reset()

    def reset(self) -> None:
        """Restart the algorithm while keeping the current settings."""
        self._quaternion: Quaternion = IDENTITY_QUATERNION
        self._accelerometer: Vector = VECTOR_ZERO
        self._initialising = True
        self._ramped_gain = INITIAL_GAIN
        self._half_accelerometer_feedback: Vector = VECTOR_ZERO
        self._half_magnetometer_feedback: Vector = VECTOR_ZERO
        self._accelerometer_ignored = False
        self._acceleration_rejection_timer = 0
        self._acceleration_rejection_timeout = False
        self._magnetometer_ignored = False
        self._magnetic_rejection_timer = 0
        self._magnetic_rejection_timeout = False

    def set_settings(self, settings: Settings) -> None:
        """Apply new algorithm settings."""
        if not isinstance(settings, Settings):
            raise TypeError(f"Value type is not {Settings.__name__}")
        timeout = settings.rejection_timeout
        self._settings = _ActiveSettings(
            gain=settings.gain,
            acceleration_rejection=_rejection_threshold(settings.acceleration_rejection, timeout),
            magnetic_rejection=_rejection_threshold(settings.magnetic_rejection, timeout),
            rejection_timeout=timeout,
        )
        if not self._initialising:
            self._ramped_gain = self._settings.gain
        self._ramped_gain_step = (INITIAL_GAIN - self._settings.gain) / INITIALISATION_PERIOD

    def update(self, gyroscope: Any, accelerometer: Any, magnetometer: Any, delta_time: float) -> None:
        """Update with gyroscope (deg/s), accelerometer (g) and magnetometer (any units)."""
        gyro = as_vector(gyroscope)
        accel = as_vector(accelerometer)
        mag = as_vector(magnetometer)
        delta_time = float(delta_time)
        settings = self._settings

        self._accelerometer = accel

        if self._initialising:
            self._ramped_gain -= self._ramped_gain_step * delta_time
            if self._ramped_gain < settings.gain:
                self._ramped_gain = settings.gain
                self._initialising = False
                self._acceleration_rejection_timeout = False

        q = self._quaternion
        half_gravity = Vector(
            q.x * q.z - q.w * q.y,
            q.y * q.z + q.w * q.x,
            q.w * q.w - 0.5 + q.z * q.z,
        )

        half_accelerometer_feedback = VECTOR_ZERO
        self._accelerometer_ignored = True
        if not accel.is_zero():
            if self._acceleration_rejection_timer > settings.rejection_timeout:
                quaternion = self._quaternion
                self.reset()
                self._quaternion = quaternion
                self._acceleration_rejection_timer = 0
                self._acceleration_rejection_timeout = True

            self._half_accelerometer_feedback = accel.normalise().cross(half_gravity)

            if (
                self._initialising
                or self._half_accelerometer_feedback.magnitude_squared() <= settings.acceleration_rejection
            ):
                half_accelerometer_feedback = self._half_accelerometer_feedback
                self._accelerometer_ignored = False
                if self._acceleration_rejection_timer >= 10:
                    self._acceleration_rejection_timer -= 10
            else:
                self._acceleration_rejection_timer += 1

        half_magnetometer_feedback = VECTOR_ZERO
        self._magnetometer_ignored = True
        if not mag.is_zero():
            self._magnetic_rejection_timeout = False
            if self._magnetic_rejection_timer > settings.rejection_timeout:
                self.set_heading(calculate_heading(half_gravity, mag))
                self._magnetic_rejection_timer = 0
                self._magnetic_rejection_timeout = True

            q = self._quaternion
            half_west = Vector(
                q.x * q.y + q.w * q.z,
                q.w * q.w - 0.5 + q.y * q.y,
                q.y * q.z - q.w * q.x,
            )

            self._half_magnetometer_feedback = half_gravity.cross(mag).normalise().cross(half_west)

            if (
                self._initialising
                or self._half_magnetometer_feedback.magnitude_squared() <= settings.magnetic_rejection
            ):
                half_magnetometer_feedback = self._half_magnetometer_feedback
                self._magnetometer_ignored = False
                if self._magnetic_rejection_timer >= 10:
                    self._magnetic_rejection_timer -= 10
            else:
                self._magnetic_rejection_timer += 1

        half_gyroscope = gyro.scale(degrees_to_radians(0.5))
        adjusted = half_gyroscope + (half_accelerometer_feedback + half_magnetometer_feedback).scale(
            self._ramped_gain
        )
        quaternion = self._quaternion
        quaternion = quaternion + quaternion.multiply_vector(adjusted.scale(delta_time))
        self._quaternion = quaternion.normalise()

    def update_no_magnetometer(self, gyroscope: Any, accelerometer: Any, delta_time: float) -> None:
        """Update with gyroscope and accelerometer only; heading is held at zero while initialising."""
        self.update(gyroscope, accelerometer, VECTOR_ZERO, delta_time)
        if self._initialising and not self._acceleration_rejection_timeout:
            self.set_heading(0.0)

    def update_external_heading(
        self, gyroscope: Any, accelerometer: Any, heading: float, delta_time: float
    ) -> None:
        """Update with gyroscope, accelerometer and a heading measurement in degrees."""
        q = self._quaternion
        roll = math.atan2(q.w * q.x + q.y * q.z, 0.5 - q.y * q.y - q.x * q.x)
        heading_radians = degrees_to_radians(float(heading))
        sin_heading = math.sin(heading_radians)
        magnetometer = Vector(
            math.cos(heading_radians),
            -1.0 * math.cos(roll) * sin_heading,
            sin_heading * math.sin(roll),
        )
        self.update(gyroscope, accelerometer, magnetometer, delta_time)

    def set_heading(self, heading: float) -> None:
        """Set the heading of the orientation in degrees, e.g. to remove drift."""
        q = self._quaternion
        yaw = math.atan2(q.w * q.z + q.x * q.y, 0.5 - q.y * q.y - q.z * q.z)
        half_yaw_minus_heading = 0.5 * (yaw - degrees_to_radians(float(heading)))
        rotation = Quaternion(
            math.cos(half_yaw_minus_heading),
            0.0,
            0.0,
            -1.0 * math.sin(half_yaw_minus_heading),
        )
        self._quaternion = rotation.multiply(q)

    @property
    def quaternion(self) -> Quaternion:
        """Orientation of the sensor relative to the Earth."""
        return self._quaternion

    @property
    def linear_acceleration(self) -> Vector:
        """Accelerometer measurement in g with the 1 g of gravity removed."""
        q = self._quaternion
        gravity = Vector(
            2.0 * (q.x * q.z - q.w * q.y),
            2.0 * (q.y * q.z + q.w * q.x),
            2.0 * (q.w * q.w - 0.5 + q.z * q.z),
        )
        return self._accelerometer - gravity

    @property
    def earth_acceleration(self) -> Vector:
        """Accelerometer measurement in the Earth frame in g with gravity removed."""
        q = self._quaternion
        a = self._accelerometer
        qwqw = q.w * q.w
        qwqx = q.w * q.x
        qwqy = q.w * q.y
        qwqz = q.w * q.z
        qxqy = q.x * q.y
        qxqz = q.x * q.z
        qyqz = q.y * q.z
        return Vector(
            2.0 * ((qwqw - 0.5 + q.x * q.x) * a.x + (qxqy - qwqz) * a.y + (qxqz + qwqy) * a.z),
            2.0 * ((qxqy + qwqz) * a.x + (qwqw - 0.5 + q.y * q.y) * a.y + (qyqz - qwqx) * a.z),
            2.0 * ((qxqz - qwqy) * a.x + (qyqz + qwqx) * a.y + (qwqw - 0.5 + q.z * q.z) * a.z) - 1.0,
        )

    @property
    def internal_states(self) -> InternalStates:
        """Snapshot of the internal states."""
        timeout = self._settings.rejection_timeout
        return InternalStates(
            acceleration_error=radians_to_degrees(
                fusion_asin(2.0 * self._half_accelerometer_feedback.magnitude())
            ),
            accelerometer_ignored=self._accelerometer_ignored,
            acceleration_rejection_timer=(
                0.0 if timeout == 0 else self._acceleration_rejection_timer / timeout
            ),
            magnetic_error=radians_to_degrees(
                fusion_asin(2.0 * self._half_magnetometer_feedback.magnitude())
            ),
            magnetometer_ignored=self._magnetometer_ignored,
            magnetic_rejection_timer=(
                0.0 if timeout == 0 else self._magnetic_rejection_timer / timeout
            ),
        )

    @property
    def flags(self) -> Flags:
        """Snapshot of the algorithm flags."""
        warning_timeout = self._settings.rejection_timeout // 4
        return Flags(
            initialising=self._initialising,
            acceleration_rejection_warning=self._acceleration_rejection_timer > warning_timeout,
            acceleration_rejection_timeout=self._acceleration_rejection_timeout,
            magnetic_rejection_warning=self._magnetic_rejection_timer > warning_timeout,
            magnetic_rejection_timeout=self._magnetic_rejection_timeout,
        )