"""Interactive accelerometer calibration procedure and application of a stored calibration."""

from __future__ import annotations

import logging
import sys
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from os import PathLike
from typing import Any, Callable, Optional, Union

from .accel_calib import AccelCalib, CalibrationError, Orientation

__all__ = ["ImuSample", "ProcedureState", "CalibrationProcedure", "CalibrationApplier"]

_log = logging.getLogger(__name__)

PathType = Union[str, "PathLike[str]"]

ORIENTATION_LABELS = {
    Orientation.XPOS: "X+",
    Orientation.XNEG: "X-",
    Orientation.YPOS: "Y+",
    Orientation.YNEG: "Y-",
    Orientation.ZPOS: "Z+",
    Orientation.ZNEG: "Z-",
}


def _triple(name: str, values: Any) -> tuple[float, float, float]:
    items = tuple(float(value) for value in values)
    if len(items) != 3:
        raise ValueError(f"{name} must hold exactly three values")
    return items  # type: ignore[return-value]


@dataclass(frozen=True)
class ImuSample:
    """One IMU reading: angular velocity, linear acceleration and orientation (x, y, z, w)."""

    angular_velocity: tuple[float, float, float] = (0.0, 0.0, 0.0)
    linear_acceleration: tuple[float, float, float] = (0.0, 0.0, 0.0)
    orientation: tuple[float, float, float, float] = field(default=(0.0, 0.0, 0.0, 1.0))

    def __post_init__(self) -> None:
        object.__setattr__(self, "angular_velocity", _triple("angular_velocity", self.angular_velocity))
        object.__setattr__(
            self, "linear_acceleration", _triple("linear_acceleration", self.linear_acceleration)
        )
        orientation = tuple(float(value) for value in self.orientation)
        if len(orientation) != 4:
            raise ValueError("orientation must hold exactly four values")
        object.__setattr__(self, "orientation", orientation)


class ProcedureState(Enum):
    """Stages of the calibration procedure."""

    START = auto()
    SWITCHING = auto()
    RECEIVING = auto()
    COMPUTING = auto()
    DONE = auto()


def _default_prompt(label: str) -> None:
    input(f"Orient IMU with {label} axis up and press Enter")


class CalibrationProcedure:
    """Collects accelerometer samples in six orientations, then computes and saves a calibration."""

    def __init__(
        self,
        measurements: int = 400,
        reference_acceleration: float = 9.80665,
        output_file: PathType = "imu_calib.yaml",
        prompt: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.measurements_per_orientation = measurements
        self.reference_acceleration = reference_acceleration
        self.output_file = output_file
        self.prompt = prompt if prompt is not None else _default_prompt
        self.calib = AccelCalib()
        self.saved = False
        self._state = ProcedureState.START
        self._orientations: deque[Orientation] = deque(Orientation)
        self._current: Optional[Orientation] = None
        self._received = 0

    @property
    def state(self) -> ProcedureState:
        """Current stage of the procedure."""
        return self._state

    @property
    def current_orientation(self) -> Optional[Orientation]:
        """Orientation being recorded, or None before the first one."""
        return self._current

    def running(self) -> bool:
        """True until the procedure has finished."""
        return self._state is not ProcedureState.DONE

    def process(self, sample: ImuSample) -> ProcedureState:
        """Advance the procedure with one IMU sample and return the new stage."""
        state = self._state
        if state is ProcedureState.START:
            self.calib.begin_calib(6 * self.measurements_per_orientation, self.reference_acceleration)
            self._state = ProcedureState.SWITCHING
        elif state is ProcedureState.SWITCHING:
            if not self._orientations:
                self._state = ProcedureState.COMPUTING
            else:
                self._current = self._orientations.popleft()
                self._received = 0
                self.prompt(ORIENTATION_LABELS[self._current])
                print("Recording measurements...", end="", flush=True)
                self._state = ProcedureState.RECEIVING
        elif state is ProcedureState.RECEIVING:
            assert self._current is not None
            if self.calib.add_measurement(self._current, *sample.linear_acceleration):
                self._received += 1
            if self._received >= self.measurements_per_orientation:
                print(" Done.", flush=True)
                self._state = ProcedureState.SWITCHING
        elif state is ProcedureState.COMPUTING:
            self._compute()
            self._state = ProcedureState.DONE
        return self._state

    def _compute(self) -> None:
        print("Computing calibration parameters...", end="", flush=True)
        try:
            self.calib.compute_calib()
        except CalibrationError as error:
            print(" Failed.", file=sys.stdout, flush=True)
            _log.error("Calibration failed: %s", error)
            return
        print(" Success!", flush=True)
        print("Saving calibration file...", end="", flush=True)
        try:
            self.calib.save_calib(self.output_file)
        except CalibrationError as error:
            print(" Failed.", flush=True)
            _log.error("Saving calibration failed: %s", error)
            return
        self.saved = True
        print(" Success!", flush=True)


class CalibrationApplier:
    """Applies a stored accelerometer calibration and removes an estimated gyroscope bias."""

    def __init__(
        self,
        calib: Union[AccelCalib, PathType] = "imu_calib.yaml",
        calibrate_gyros: bool = True,
        gyro_calib_samples: int = 100,
    ) -> None:
        if not isinstance(calib, AccelCalib):
            calib = AccelCalib(calib)
        if not calib.calib_ready():
            raise CalibrationError("Calibration could not be loaded")
        self.calib = calib
        self.calibrate_gyros = calibrate_gyros
        self.gyro_calib_samples = gyro_calib_samples
        self._sample_count = 0
        self._bias = (0.0, 0.0, 0.0)
        self._announced = False

    @property
    def gyro_bias(self) -> tuple[float, float, float]:
        """Current gyroscope bias estimate."""
        return self._bias

    def process(self, sample: ImuSample) -> Optional[ImuSample]:
        """Return the corrected sample, or None while the gyroscope bias is being estimated."""
        if self.calibrate_gyros:
            if not self._announced:
                _log.info("Calibrating gyros; do not move the IMU")
                self._announced = True
            self._sample_count += 1
            n = self._sample_count
            self._bias = tuple(  # type: ignore[assignment]
                ((n - 1) * bias + value) / n
                for bias, value in zip(self._bias, sample.angular_velocity)
            )
            if self._sample_count >= self.gyro_calib_samples:
                _log.info(
                    "Gyro calibration complete! (bias = [%.3f, %.3f, %.3f])", *self._bias
                )
                self.calibrate_gyros = False
            return None

        corrected_accel = tuple(float(v) for v in self.calib.apply_calib(sample.linear_acceleration))
        corrected_gyro = tuple(
            value - bias for value, bias in zip(sample.angular_velocity, self._bias)
        )
        return replace(
            sample, linear_acceleration=corrected_accel, angular_velocity=corrected_gyro
        )