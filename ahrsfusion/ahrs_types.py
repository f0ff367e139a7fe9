"""Settings, internal states and flags of the AHRS algorithm."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["Settings", "InternalStates", "Flags"]

_FLOAT_FIELDS = frozenset({"gain", "acceleration_rejection", "magnetic_rejection"})


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be a float")
    try:
        return float(value)
    except (TypeError, ValueError) as error:
        raise TypeError(f"{name} must be a float") from error


def _as_timeout(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("rejection_timeout must be an unsigned int")
    if value < 0:
        raise ValueError("rejection_timeout must not be negative")
    return value


@dataclass
class Settings:
    """AHRS algorithm settings.

    ``acceleration_rejection`` and ``magnetic_rejection`` are thresholds in
    degrees; ``rejection_timeout`` is a number of updates.  A threshold or a
    timeout of zero disables rejection.
    """

    gain: float = 0.5
    acceleration_rejection: float = 90.0
    magnetic_rejection: float = 90.0
    rejection_timeout: int = 0

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _FLOAT_FIELDS:
            value = _as_float(name, value)
        elif name == "rejection_timeout":
            value = _as_timeout(value)
        super().__setattr__(name, value)


@dataclass(frozen=True)
class InternalStates:
    """Snapshot of the AHRS algorithm internal states.

    Errors are in degrees; rejection timers are fractions of the rejection
    timeout.
    """

    acceleration_error: float = 0.0
    accelerometer_ignored: bool = False
    acceleration_rejection_timer: float = 0.0
    magnetic_error: float = 0.0
    magnetometer_ignored: bool = False
    magnetic_rejection_timer: float = 0.0


@dataclass(frozen=True)
class Flags:
    """Snapshot of the AHRS algorithm flags."""

    initialising: bool = False
    acceleration_rejection_warning: bool = False
    acceleration_rejection_timeout: bool = False
    magnetic_rejection_warning: bool = False
    magnetic_rejection_timeout: bool = False