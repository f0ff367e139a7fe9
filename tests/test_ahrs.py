import math

import numpy as np
import pytest

from ahrsfusion.ahrs import Ahrs
from ahrsfusion.ahrs_types import Settings
from ahrsfusion.compass import calculate_heading
from ahrsfusion.fmath import Quaternion

STILL = (0.0, 0.0, 0.0)
LEVEL = (0.0, 0.0, 1.0)
DT = 0.01


def _run(ahrs, steps, gyro=STILL, accel=LEVEL, mag=None):
    for _ in range(steps):
        if mag is None:
            ahrs.update_no_magnetometer(np.array(gyro), np.array(accel), DT)
        else:
            ahrs.update(np.array(gyro), np.array(accel), np.array(mag), DT)


def _norm(q: Quaternion) -> float:
    return math.sqrt(q.w * q.w + q.x * q.x + q.y * q.y + q.z * q.z)


def test_initial_state_is_identity_and_initialising():
    ahrs = Ahrs()
    assert ahrs.quaternion == Quaternion(1.0, 0.0, 0.0, 0.0)
    assert ahrs.flags.initialising is True


def test_initialisation_ends_after_period():
    ahrs = Ahrs()
    _run(ahrs, 100)
    assert ahrs.flags.initialising is True
    _run(ahrs, 300)
    assert ahrs.flags.initialising is False


def test_level_stationary_stays_level():
    ahrs = Ahrs()
    _run(ahrs, 200)
    euler = ahrs.quaternion.to_euler()
    assert euler.roll == pytest.approx(0.0, abs=1e-6)
    assert euler.pitch == pytest.approx(0.0, abs=1e-6)
    assert euler.yaw == pytest.approx(0.0, abs=1e-6)


def test_linear_and_earth_acceleration_zero_when_level():
    ahrs = Ahrs()
    _run(ahrs, 50)
    assert list(ahrs.linear_acceleration) == pytest.approx([0.0, 0.0, 0.0], abs=1e-5)
    assert list(ahrs.earth_acceleration) == pytest.approx([0.0, 0.0, 0.0], abs=1e-5)


def test_converges_to_tilt_from_accelerometer():
    ahrs = Ahrs()
    roll = 30.0
    accel = (0.0, math.sin(math.radians(roll)), math.cos(math.radians(roll)))
    _run(ahrs, 500, accel=accel)
    assert ahrs.quaternion.to_euler().roll == pytest.approx(roll, abs=0.5)
    assert list(ahrs.linear_acceleration) == pytest.approx([0.0, 0.0, 0.0], abs=0.02)


def test_quaternion_remains_normalised():
    ahrs = Ahrs()
    _run(ahrs, 300, gyro=(20.0, -15.0, 40.0), accel=(0.1, 0.2, 0.9))
    assert _norm(ahrs.quaternion) == pytest.approx(1.0, abs=1e-3)


def test_gyroscope_integration_without_references():
    ahrs = Ahrs()
    for _ in range(100):
        ahrs.update(np.array([0.0, 0.0, 90.0]), np.zeros(3), np.zeros(3), DT)
    assert ahrs.quaternion.to_euler().yaw == pytest.approx(90.0, abs=0.5)
    assert ahrs.internal_states.accelerometer_ignored is True
    assert ahrs.internal_states.magnetometer_ignored is True


def test_no_magnetometer_holds_heading_zero_while_initialising():
    ahrs = Ahrs()
    _run(ahrs, 20, gyro=(0.0, 0.0, 50.0))
    assert ahrs.flags.initialising is True
    assert ahrs.quaternion.to_euler().yaw == pytest.approx(0.0, abs=1e-6)


def test_no_magnetometer_heading_drifts_after_initialising():
    ahrs = Ahrs()
    _run(ahrs, 400)
    _run(ahrs, 50, gyro=(0.0, 0.0, 50.0))
    assert ahrs.quaternion.to_euler().yaw > 10.0


def test_set_heading_sets_yaw():
    ahrs = Ahrs()
    ahrs.set_heading(90.0)
    euler = ahrs.quaternion.to_euler()
    assert euler.yaw == pytest.approx(90.0, abs=1e-6)
    assert euler.roll == pytest.approx(0.0, abs=1e-6)


def test_magnetometer_converges_to_compass_heading():
    ahrs = Ahrs()
    mag = (0.0, -1.0, 0.0)
    _run(ahrs, 500, mag=mag)
    expected = calculate_heading(np.array(LEVEL), np.array(mag))
    assert ahrs.quaternion.to_euler().yaw == pytest.approx(expected, abs=0.5)
    assert ahrs.internal_states.magnetometer_ignored is False


def test_external_heading_converges():
    ahrs = Ahrs()
    for _ in range(500):
        ahrs.update_external_heading(np.zeros(3), np.array(LEVEL), 45.0, DT)
    assert ahrs.quaternion.to_euler().yaw == pytest.approx(45.0, abs=0.5)


def test_internal_states_when_level():
    ahrs = Ahrs()
    _run(ahrs, 10)
    states = ahrs.internal_states
    assert states.accelerometer_ignored is False
    assert states.magnetometer_ignored is True
    assert states.acceleration_error == pytest.approx(0.0, abs=1e-3)
    assert states.acceleration_rejection_timer == 0.0


def test_reset_restores_identity():
    ahrs = Ahrs()
    _run(ahrs, 400)
    _run(ahrs, 50, gyro=(10.0, 20.0, 30.0))
    ahrs.reset()
    assert ahrs.quaternion == Quaternion(1.0, 0.0, 0.0, 0.0)
    assert ahrs.flags.initialising is True


def test_acceleration_rejection_warning_and_timeout():
    ahrs = Ahrs()
    ahrs.set_settings(Settings(0.5, 10.0, 20.0, 10))
    _run(ahrs, 400)
    assert ahrs.flags.initialising is False

    _run(ahrs, 3, accel=(1.0, 0.0, 0.0))
    assert ahrs.internal_states.accelerometer_ignored is True
    assert ahrs.flags.acceleration_rejection_warning is True
    assert ahrs.flags.acceleration_rejection_timeout is False

    _run(ahrs, 9, accel=(1.0, 0.0, 0.0))
    flags = ahrs.flags
    assert flags.acceleration_rejection_timeout is True
    assert flags.initialising is True


def test_set_settings_rejects_wrong_type():
    ahrs = Ahrs()
    with pytest.raises(TypeError):
        ahrs.set_settings({"gain": 0.5})


def test_update_rejects_wrong_array_size():
    ahrs = Ahrs()
    with pytest.raises(TypeError):
        ahrs.update(np.zeros(2), np.array(LEVEL), np.zeros(3), DT)


def test_update_rejects_two_dimensional_array():
    ahrs = Ahrs()
    with pytest.raises(TypeError):
        ahrs.update_no_magnetometer(np.zeros((3, 1)), np.array(LEVEL), DT)