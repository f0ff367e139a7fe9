# ahrsfusion

Attitude and heading reference system (AHRS) fusion for inertial measurement
units. It combines gyroscope, accelerometer and magnetometer readings into one
orientation relative to the Earth. It also has the tools that usually go with
that job: axis remapping, calibration models, a tilt-compensated compass,
gyroscope offset correction, and a six-orientation accelerometer calibration.

## Modules

- `ahrsfusion.fmath`: the maths types and helpers.
  - Immutable `Vector`, `Quaternion`, `Matrix` and `Euler` types. Euler angles
    are in degrees.
  - `degrees_to_radians`, `radians_to_degrees` and `fusion_asin`. The last one
    is an arc sine that clamps its argument to [-1, 1].
  - `fast_inverse_sqrt`.
  - `as_vector`, which turns any one-dimensional sequence of three numbers into
    a `Vector`.
  - The constants `VECTOR_ZERO`, `VECTOR_ONES`, `IDENTITY_QUATERNION`,
    `IDENTITY_MATRIX` and `EULER_ZERO`.
- `ahrsfusion.ahrs`: the `Ahrs` algorithm.
  - While it starts up, its gain ramps down from 10 to the configured gain over
    3 seconds.
  - It has acceleration rejection and magnetic rejection.
  - After a rejection timeout it recovers.
  - It exposes the properties `quaternion`, `linear_acceleration`,
    `earth_acceleration`, `internal_states` and `flags`.
- `ahrsfusion.ahrs_types`: the data types used by `Ahrs`.
  - `Settings`, which checks the type of each value when it is set.
  - The read-only snapshots `InternalStates` and `Flags`.
- `ahrsfusion.axes`: `AxesAlignment` (24 alignments, such as `PYNXPZ` for
  +Y-X+Z) and `axes_swap`, which maps sensor axes onto body axes.
- `ahrsfusion.calibration`: the calibration models.
  - `calibration_inertial`, for the gyroscope and accelerometer: misalignment,
    sensitivity and offset.
  - `calibration_magnetic`, for the magnetometer: soft-iron matrix and
    hard-iron offset.
- `ahrsfusion.compass`: `calculate_heading`, a tilt-compensated heading in
  degrees.
- `ahrsfusion.offset`: `Offset`, which corrects the gyroscope offset while the
  program runs.
  - It counts the gyroscope as stationary while every axis stays within
    3 degrees per second.
  - After 5 seconds of stationary readings it starts to adjust the offset.
- `ahrsfusion.accel_calib`: `AccelCalib`, which works out an accelerometer
  calibration by least squares and applies it: `corrected = SM @ raw - bias`.
  - `Orientation` names the six upward axes the procedure uses.
  - Parameters are stored in YAML as the keys `SM` (9 values) and `bias`
    (3 values).
  - When a calibration cannot be loaded, saved, computed or applied, the call
    raises `CalibrationError`.
- `ahrsfusion.calib_session`: runs over a stream of `ImuSample` values.
  - `CalibrationProcedure` is a state machine whose stages are given by
    `ProcedureState`. It asks for each orientation in turn, records the
    samples, then computes and saves the calibration.
  - `CalibrationApplier` first estimates the gyroscope bias from a number of
    stationary samples. After that it returns each sample with the
    accelerometer calibration applied and the bias subtracted.

Inputs can be lists, tuples, numpy arrays or the package's own types.

## Installation

```
pip install .
```

To also install what the tests need:

```
pip install .[test]
```

## Orientation from gyroscope and accelerometer

Gyroscope readings are in degrees per second. Accelerometer readings are in g.

```python
from ahrsfusion.ahrs import Ahrs

ahrs = Ahrs()
for _ in range(100):
    ahrs.update_no_magnetometer([0.0, 0.0, 0.0], [0.0, 0.0, 1.0], 0.01)

print(ahrs.quaternion.to_euler())   # Euler(roll=..., pitch=..., yaw=...)
print(ahrs.flags.initialising)
```

## Full fusion with calibration, settings and offset correction

```python
from ahrsfusion.ahrs import Ahrs
from ahrsfusion.ahrs_types import Settings
from ahrsfusion.calibration import calibration_inertial, calibration_magnetic
from ahrsfusion.fmath import IDENTITY_MATRIX, VECTOR_ONES, VECTOR_ZERO
from ahrsfusion.offset import Offset

sample_rate = 100
offset = Offset(sample_rate)
ahrs = Ahrs()
ahrs.set_settings(Settings(gain=0.5, acceleration_rejection=10.0,
                           magnetic_rejection=20.0, rejection_timeout=5 * sample_rate))

gyroscope = calibration_inertial([0.0, 0.0, 0.0], IDENTITY_MATRIX, VECTOR_ONES, VECTOR_ZERO)
accelerometer = calibration_inertial([0.0, 0.0, 1.0], IDENTITY_MATRIX, VECTOR_ONES, VECTOR_ZERO)
magnetometer = calibration_magnetic([1.0, 0.0, 0.0], IDENTITY_MATRIX, VECTOR_ZERO)

gyroscope = offset.update(gyroscope)
ahrs.update(gyroscope, accelerometer, magnetometer, 1 / sample_rate)

print(ahrs.earth_acceleration)
print(ahrs.internal_states)
```

To use an external heading instead of a magnetometer, call
`ahrs.update_external_heading(gyroscope, accelerometer, heading, delta_time)`.
To reset the heading, for example to remove drift, call
`ahrs.set_heading(degrees)`.

## Axes and compass

```python
from ahrsfusion.axes import AxesAlignment, axes_swap
from ahrsfusion.compass import calculate_heading

body = axes_swap([1.0, 2.0, 3.0], AxesAlignment.PYNXPZ)   # Vector(x=2.0, y=-1.0, z=3.0)
heading = calculate_heading([0.0, 0.0, 1.0], [1.0, 0.0, 0.0])   # 0.0
```

## Accelerometer calibration

```python
from ahrsfusion.accel_calib import AccelCalib, Orientation

g = 9.80665
ideal = {
    Orientation.XPOS: (g, 0, 0), Orientation.XNEG: (-g, 0, 0),
    Orientation.YPOS: (0, g, 0), Orientation.YNEG: (0, -g, 0),
    Orientation.ZPOS: (0, 0, g), Orientation.ZNEG: (0, 0, -g),
}

calib = AccelCalib()
calib.begin_calib(6 * 2, g)
for orientation, reading in ideal.items():
    for _ in range(2):
        calib.add_measurement(orientation, *reading)
calib.compute_calib()
calib.save_calib("imu_calib.yaml")

loaded = AccelCalib("imu_calib.yaml")
corrected = loaded.apply_calib([0.1, 0.2, 9.7])   # numpy array
```

`compute_calib` needs at least 12 measurements, and at least one in each of
the six orientations.

## Calibration over a sample stream

```python
from ahrsfusion.calib_session import CalibrationApplier, CalibrationProcedure, ImuSample

procedure = CalibrationProcedure(measurements=400, output_file="imu_calib.yaml",
                                 prompt=lambda label: print(f"Put {label} up"))
# Call procedure.process(ImuSample(...)) for each reading
# until procedure.running() returns False.

applier = CalibrationApplier("imu_calib.yaml", calibrate_gyros=True, gyro_calib_samples=100)
result = applier.process(ImuSample(angular_velocity=(0.0, 0.0, 0.0),
                                   linear_acceleration=(0.0, 0.0, 9.8)))
# result is None while the gyroscope bias is being estimated,
# and a corrected ImuSample after that.
```

If no `prompt` is given, `CalibrationProcedure` waits for Enter on standard
input. It writes its progress to standard output.

## What the package does not do

- It does not read sensors. It does not talk to a device, a serial line or a
  network message bus, and it has no command-line program. Readings are
  passed in by your own code, and results are returned to it.
- `CalibrationProcedure` and `CalibrationApplier` only process the
  `ImuSample` values they are handed. They do not publish the results
  anywhere.