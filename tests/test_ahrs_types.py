import dataclasses

import pytest

from ahrsfusion.ahrs_types import Flags, InternalStates, Settings


def test_settings_defaults_match_initialisation():
    settings = Settings()
    assert settings.gain == 0.5
    assert settings.acceleration_rejection == 90.0
    assert settings.magnetic_rejection == 90.0
    assert settings.rejection_timeout == 0


def test_settings_positional_arguments():
    settings = Settings(0.5, 10.0, 20.0, 500)
    assert (settings.gain, settings.acceleration_rejection) == (0.5, 10.0)
    assert (settings.magnetic_rejection, settings.rejection_timeout) == (20.0, 500)


def test_settings_converts_integers_to_float():
    settings = Settings(gain=1, acceleration_rejection=10, magnetic_rejection=20)
    assert isinstance(settings.gain, float)
    assert settings.acceleration_rejection == 10.0


def test_settings_assignment_is_validated():
    settings = Settings()
    settings.gain = 2
    assert settings.gain == 2.0
    with pytest.raises(TypeError):
        settings.gain = "fast"


@pytest.mark.parametrize("timeout", [1.5, "5", True, None])
def test_settings_rejects_non_integer_timeout(timeout):
    with pytest.raises(TypeError):
        Settings(rejection_timeout=timeout)


def test_settings_rejects_negative_timeout():
    with pytest.raises(ValueError):
        Settings(rejection_timeout=-1)


def test_settings_equality():
    assert Settings(0.5, 10.0, 20.0, 500) == Settings(0.5, 10.0, 20.0, 500)
    assert Settings(0.5, 10.0, 20.0, 500) != Settings(0.5, 10.0, 20.0, 499)


def test_internal_states_fields_and_immutability():
    states = InternalStates(1.0, True, 0.25, 2.0, False, 0.5)
    assert states.accelerometer_ignored is True
    assert states.magnetic_rejection_timer == 0.5
    with pytest.raises(dataclasses.FrozenInstanceError):
        states.acceleration_error = 3.0


def test_flags_defaults_and_immutability():
    flags = Flags()
    assert dataclasses.astuple(flags) == (False, False, False, False, False)
    with pytest.raises(dataclasses.FrozenInstanceError):
        flags.initialising = True


def test_flags_equality():
    assert Flags(initialising=True) == Flags(True, False, False, False, False)
    assert Flags(initialising=True) != Flags()