import numpy as np
import pytest

from ahrsfusion.calibration import calibration_inertial, calibration_magnetic
from ahrsfusion.fmath import IDENTITY_MATRIX, VECTOR_ONES, VECTOR_ZERO, Matrix, Vector

SWAP_XY = Matrix(0.0, 1.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0)


def test_inertial_identity_returns_input():
    u = Vector(1.5, -2.0, 3.25)
    assert calibration_inertial(u, IDENTITY_MATRIX, VECTOR_ONES, VECTOR_ZERO) == u


def test_inertial_subtracts_offset():
    u = Vector(1.5, -2.0, 3.25)
    offset = Vector(0.5, 0.25, -1.0)
    assert calibration_inertial(u, IDENTITY_MATRIX, VECTOR_ONES, offset) == u - offset


def test_inertial_applies_sensitivity_elementwise():
    u = Vector(1.5, -2.0, 3.25)
    sensitivity = Vector(2.0, 0.5, -1.0)
    assert calibration_inertial(u, IDENTITY_MATRIX, sensitivity, VECTOR_ZERO) == u.hadamard(sensitivity)


def test_inertial_misalignment_permutes():
    result = calibration_inertial(Vector(1.0, 2.0, 3.0), SWAP_XY, VECTOR_ONES, VECTOR_ZERO)
    assert result == Vector(2.0, 1.0, 3.0)


def test_inertial_accepts_arrays():
    result = calibration_inertial(
        np.array([1.0, 2.0, 3.0]), np.eye(3), [1.0, 1.0, 1.0], [1.0, 2.0, 3.0]
    )
    assert result.is_zero()


def test_magnetic_identity_subtracts_hard_iron():
    u = Vector(0.3, -0.2, 0.9)
    hard = Vector(0.1, 0.1, 0.1)
    assert calibration_magnetic(u, IDENTITY_MATRIX, hard) == u - hard


def test_magnetic_soft_iron_applied_before_offset():
    result = calibration_magnetic(Vector(1.0, 2.0, 3.0), SWAP_XY, Vector(2.0, 1.0, 3.0))
    assert result.is_zero()


def test_wrong_matrix_size_raises():
    with pytest.raises(TypeError):
        calibration_magnetic(Vector(1.0, 2.0, 3.0), np.eye(2), VECTOR_ZERO)


def test_wrong_vector_size_raises():
    with pytest.raises(TypeError):
        calibration_inertial([1.0, 2.0], IDENTITY_MATRIX, VECTOR_ONES, VECTOR_ZERO)