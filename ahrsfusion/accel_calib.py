"""Computation, storage and application of accelerometer calibration parameters."""

from __future__ import annotations

from enum import IntEnum
from os import PathLike
from typing import Any, Union

import numpy as np
import yaml

__all__ = ["Orientation", "CalibrationError", "AccelCalib"]

PathType = Union[str, "PathLike[str]"]

_PARAMETERS = 12


class CalibrationError(Exception):
    """Raised when a calibration cannot be loaded, saved, computed or applied."""


class Orientation(IntEnum):
    """Which sensor axis points up while a measurement is taken."""

    XPOS = 0
    XNEG = 1
    YPOS = 2
    YNEG = 3
    ZPOS = 4
    ZNEG = 5

    @property
    def reference_index(self) -> int:
        """Index of the axis that sees the reference acceleration."""
        return self.value // 2

    @property
    def reference_sign(self) -> int:
        """Sign of the reference acceleration on that axis."""
        return 1 if self.value % 2 == 0 else -1


class AccelCalib:
    """Accelerometer calibration: ``corrected = SM @ raw - bias``."""

    def __init__(self, calib_file: PathType | None = None) -> None:
        self._ready = False
        self._initialised = False
        self.sm = np.zeros((3, 3))
        self.bias = np.zeros(3)
        self.reference_acceleration = 0.0
        self._meas = np.zeros((0, _PARAMETERS))
        self._ref = np.zeros(0)
        self._num_measurements = 0
        self._received = 0
        self._orientation_count = dict.fromkeys(Orientation, 0)
        if calib_file is not None:
            self.load_calib(calib_file)

    def calib_ready(self) -> bool:
        """True once parameters have been loaded or computed."""
        return self._ready

    def load_calib(self, calib_file: PathType) -> None:
        """Load parameters from a YAML file holding ``SM`` (9 values) and ``bias`` (3 values)."""
        try:
            with open(calib_file, encoding="utf-8") as stream:
                node = yaml.safe_load(stream)
        except (OSError, yaml.YAMLError) as error:
            raise CalibrationError(f"cannot read calibration file {calib_file}") from error
        if not isinstance(node, dict):
            raise CalibrationError("calibration file is not a mapping")
        sm_values = node.get("SM")
        bias_values = node.get("bias")
        if not isinstance(sm_values, list) or len(sm_values) != 9:
            raise CalibrationError("SM must be a sequence of 9 values")
        if not isinstance(bias_values, list) or len(bias_values) != 3:
            raise CalibrationError("bias must be a sequence of 3 values")
        try:
            sm = np.array([float(value) for value in sm_values]).reshape(3, 3)
            bias = np.array([float(value) for value in bias_values])
        except (TypeError, ValueError) as error:
            raise CalibrationError("calibration values must be numbers") from error
        self.sm = sm
        self.bias = bias
        self._ready = True

    def save_calib(self, calib_file: PathType) -> None:
        """Write the parameters to a YAML file."""
        if not self._ready:
            raise CalibrationError("no calibration to save")
        document = {
            "SM": [float(value) for value in self.sm.reshape(-1)],
            "bias": [float(value) for value in self.bias],
        }
        try:
            with open(calib_file, "w", encoding="utf-8") as stream:
                yaml.safe_dump(document, stream, default_flow_style=False)
        except OSError as error:
            raise CalibrationError(f"cannot write calibration file {calib_file}") from error

    def begin_calib(self, measurements: int, reference_acceleration: float) -> None:
        """Start collecting ``measurements`` samples against the given reference."""
        if measurements < 0:
            raise ValueError("measurements must not be negative")
        self.reference_acceleration = float(reference_acceleration)
        self._num_measurements = measurements
        self._received = 0
        self._meas = np.zeros((3 * measurements, _PARAMETERS))
        self._ref = np.zeros(3 * measurements)
        self._orientation_count = dict.fromkeys(Orientation, 0)
        self._initialised = True

    def add_measurement(self, orientation: Any, ax: float, ay: float, az: float) -> bool:
        """Record one sample; False if collection has not begun or is already full."""
        orientation = Orientation(orientation)
        if not self._initialised or self._received >= self._num_measurements:
            return False
        base = 3 * self._received
        for axis in range(3):
            row = base + axis
            self._meas[row, 3 * axis : 3 * axis + 3] = (ax, ay, az)
            self._meas[row, 9 + axis] = -1.0
        self._ref[base + orientation.reference_index] = (
            orientation.reference_sign * self.reference_acceleration
        )
        self._received += 1
        self._orientation_count[orientation] += 1
        return True

    def compute_calib(self) -> None:
        """Solve for the parameters by least squares."""
        if self._received < 12:
            raise CalibrationError("at least 12 measurements are needed")
        missing = [o.name for o, count in self._orientation_count.items() if count == 0]
        if missing:
            raise CalibrationError(f"no measurements for orientations {', '.join(missing)}")
        solution, *_ = np.linalg.lstsq(self._meas, self._ref, rcond=None)
        self.sm = solution[:9].reshape(3, 3)
        self.bias = solution[9:].copy()
        self._ready = True

    def apply_calib(self, raw: Any) -> np.ndarray:
        """Return the corrected acceleration for a raw three-axis measurement."""
        if not self._ready:
            raise CalibrationError("calibration is not ready")
        vector = np.asarray(raw, dtype=float)
        if vector.shape != (3,):
            raise ValueError("raw must hold exactly three values")
        return self.sm @ vector - self.bias