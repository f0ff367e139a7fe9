[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ahrsfusion"
version = "0.1.0"
description = "AHRS sensor fusion, gyroscope offset correction and accelerometer calibration for inertial measurement units"
requires-python = ">=3.10"
keywords = [
    "ahrs",
    "imu",
    "sensor fusion",
    "quaternion",
    "gyroscope",
    "accelerometer",
    "magnetometer",
    "compass",
    "calibration",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "numpy",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ahrsfusion"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
