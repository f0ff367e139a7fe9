"""Gyroscope, accelerometer and magnetometer calibration models."""

from __future__ import annotations

from typing import Any

from .fmath import Matrix, Vector, as_vector

__all__ = ["calibration_inertial", "calibration_magnetic"]


def calibration_inertial(uncalibrated: Any, misalignment: Any, sensitivity: Any, offset: Any) -> Vector:
    """Gyroscope and accelerometer calibration model."""
    corrected = (as_vector(uncalibrated) - as_vector(offset)).hadamard(as_vector(sensitivity))
    return Matrix.from_array(misalignment).multiply_vector(corrected)


def calibration_magnetic(uncalibrated: Any, soft_iron_matrix: Any, hard_iron_offset: Any) -> Vector:
    """Magnetometer calibration model."""
    rotated = Matrix.from_array(soft_iron_matrix).multiply_vector(as_vector(uncalibrated))
    return rotated - as_vector(hard_iron_offset)