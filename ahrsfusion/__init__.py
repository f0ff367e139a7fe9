"""AHRS sensor fusion, axis remapping, compass, gyroscope offset correction and accelerometer calibration."""

__version__ = "0.1.0"