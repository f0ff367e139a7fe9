"""Vector, quaternion, matrix and Euler angle maths used by the AHRS algorithms."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np

__all__ = [
    "Vector",
    "Quaternion",
    "Matrix",
    "Euler",
    "degrees_to_radians",
    "radians_to_degrees",
    "fusion_asin",
    "fast_inverse_sqrt",
    "as_vector",
    "VECTOR_ZERO",
    "VECTOR_ONES",
    "IDENTITY_QUATERNION",
    "IDENTITY_MATRIX",
    "EULER_ZERO",
]

_MAGIC = 0x5F1F1412


def degrees_to_radians(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * (math.pi / 180.0)


def radians_to_degrees(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * (180.0 / math.pi)


def fusion_asin(value: float) -> float:
    """Arc sine that clamps its argument to [-1, 1] instead of failing."""
    if value <= -1.0:
        return math.pi / -2.0
    if value >= 1.0:
        return math.pi / 2.0
    return math.asin(value)


def fast_inverse_sqrt(x: float) -> float:
    """Approximate 1/sqrt(x) using single-precision bit manipulation."""
    (bits,) = struct.unpack("<i", struct.pack("<f", x))
    bits = (_MAGIC - (bits >> 1)) & 0xFFFFFFFF
    (y,) = struct.unpack("<f", struct.pack("<I", bits))
    return y * (1.69000231 - 0.714158168 * x * y * y)


def _parse_array(values: Any, size: int) -> tuple[float, ...]:
    """Read exactly ``size`` floats from a one-dimensional array-like."""
    try:
        array = np.asarray(values, dtype=object)
    except (TypeError, ValueError) as error:
        raise TypeError("Invalid array element type") from error
    if array.ndim != 1:
        raise TypeError("Array dimensions is not 1")
    if array.size != size:
        raise TypeError(f"Array size is not {size}")
    try:
        return tuple(float(element) for element in array)
    except (TypeError, ValueError) as error:
        raise TypeError("Invalid array element type") from error


def as_vector(values: Any) -> Vector:
    """Return ``values`` as a Vector, accepting any 1-D sequence of 3 numbers."""
    if isinstance(values, Vector):
        return values
    return Vector(*_parse_array(values, 3))


@dataclass(frozen=True)
class Vector:
    """Three-dimensional vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    @property
    def array(self) -> np.ndarray:
        """The elements as a numpy array."""
        return np.array([self.x, self.y, self.z])

    def is_zero(self) -> bool:
        """True if every element is exactly zero."""
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0

    def __add__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def sum(self) -> float:
        """Sum of the elements."""
        return self.x + self.y + self.z

    def scale(self, scalar: float) -> Vector:
        """Multiply every element by a scalar."""
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    def hadamard(self, other: Vector) -> Vector:
        """Element-wise product."""
        return Vector(self.x * other.x, self.y * other.y, self.z * other.z)

    def cross(self, other: Vector) -> Vector:
        """Cross product ``self x other``."""
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude_squared(self) -> float:
        """Squared Euclidean length."""
        return self.hadamard(self).sum()

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.magnitude_squared())

    def normalise(self) -> Vector:
        """Unit vector in the same direction (the zero vector stays zero)."""
        return self.scale(fast_inverse_sqrt(self.magnitude_squared()))


@dataclass(frozen=True)
class Quaternion:
    """Quaternion with scalar part ``w``."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, values: Any) -> Quaternion:
        """Build a quaternion from a 1-D sequence of four numbers (w, x, y, z)."""
        if isinstance(values, Quaternion):
            return values
        return cls(*_parse_array(values, 4))

    def __iter__(self) -> Iterator[float]:
        yield self.w
        yield self.x
        yield self.y
        yield self.z

    @property
    def array(self) -> np.ndarray:
        """The elements (w, x, y, z) as a numpy array."""
        return np.array([self.w, self.x, self.y, self.z])

    def __add__(self, other: Quaternion) -> Quaternion:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return Quaternion(self.w + other.w, self.x + other.x, self.y + other.y, self.z + other.z)

    def multiply(self, other: Quaternion) -> Quaternion:
        """Hamilton product ``self * other``."""
        a, b = self, other
        return Quaternion(
            a.w * b.w - a.x * b.x - a.y * b.y - a.z * b.z,
            a.w * b.x + a.x * b.w + a.y * b.z - a.z * b.y,
            a.w * b.y - a.x * b.z + a.y * b.w + a.z * b.x,
            a.w * b.z + a.x * b.y - a.y * b.x + a.z * b.w,
        )

    def multiply_vector(self, vector: Vector) -> Quaternion:
        """Product with a vector treated as a quaternion whose w is zero."""
        q, v = self, vector
        return Quaternion(
            -q.x * v.x - q.y * v.y - q.z * v.z,
            q.w * v.x + q.y * v.z - q.z * v.y,
            q.w * v.y - q.x * v.z + q.z * v.x,
            q.w * v.z + q.x * v.y - q.y * v.x,
        )

    def normalise(self) -> Quaternion:
        """Unit quaternion in the same direction."""
        reciprocal = fast_inverse_sqrt(
            self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z
        )
        return Quaternion(
            self.w * reciprocal, self.x * reciprocal, self.y * reciprocal, self.z * reciprocal
        )

    def to_matrix(self) -> Matrix:
        """Rotation matrix equivalent to this quaternion."""
        w, x, y, z = self
        qwqw = w * w
        qwqx = w * x
        qwqy = w * y
        qwqz = w * z
        qxqy = x * y
        qxqz = x * z
        qyqz = y * z
        return Matrix(
            2.0 * (qwqw - 0.5 + x * x),
            2.0 * (qxqy - qwqz),
            2.0 * (qxqz + qwqy),
            2.0 * (qxqy + qwqz),
            2.0 * (qwqw - 0.5 + y * y),
            2.0 * (qyqz - qwqx),
            2.0 * (qxqz - qwqy),
            2.0 * (qyqz + qwqx),
            2.0 * (qwqw - 0.5 + z * z),
        )

    def to_euler(self) -> Euler:
        """ZYX Euler angles in degrees."""
        w, x, y, z = self
        half_minus_qy_squared = 0.5 - y * y
        return Euler(
            roll=radians_to_degrees(math.atan2(w * x + y * z, half_minus_qy_squared - x * x)),
            pitch=radians_to_degrees(fusion_asin(2.0 * (w * y - z * x))),
            yaw=radians_to_degrees(math.atan2(w * z + x * y, half_minus_qy_squared - z * z)),
        )


@dataclass(frozen=True)
class Matrix:
    """3x3 matrix in row-major order."""

    xx: float = 1.0
    xy: float = 0.0
    xz: float = 0.0
    yx: float = 0.0
    yy: float = 1.0
    yz: float = 0.0
    zx: float = 0.0
    zy: float = 0.0
    zz: float = 1.0

    @classmethod
    def from_array(cls, values: Any) -> Matrix:
        """Build a matrix from a 3x3 array-like or nine row-major numbers."""
        if isinstance(values, Matrix):
            return values
        try:
            flat = np.asarray(values, dtype=float).reshape(-1)
        except (TypeError, ValueError) as error:
            raise TypeError("Invalid array element type") from error
        if flat.size != 9:
            raise TypeError("Array size is not 9")
        return cls(*(float(element) for element in flat))

    @property
    def array(self) -> np.ndarray:
        """The elements as a 3x3 numpy array."""
        return np.array(
            [
                [self.xx, self.xy, self.xz],
                [self.yx, self.yy, self.yz],
                [self.zx, self.zy, self.zz],
            ]
        )

    def multiply_vector(self, vector: Vector) -> Vector:
        """Matrix-vector product."""
        v = vector
        return Vector(
            self.xx * v.x + self.xy * v.y + self.xz * v.z,
            self.yx * v.x + self.yy * v.y + self.yz * v.z,
            self.zx * v.x + self.zy * v.y + self.zz * v.z,
        )


@dataclass(frozen=True)
class Euler:
    """Roll, pitch and yaw in degrees: rotations about X, Y and Z."""

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.roll
        yield self.pitch
        yield self.yaw

    @property
    def array(self) -> np.ndarray:
        """The angles as a numpy array."""
        return np.array([self.roll, self.pitch, self.yaw])


VECTOR_ZERO = Vector(0.0, 0.0, 0.0)
VECTOR_ONES = Vector(1.0, 1.0, 1.0)
IDENTITY_QUATERNION = Quaternion(1.0, 0.0, 0.0, 0.0)
IDENTITY_MATRIX = Matrix()
EULER_ZERO = Euler(0.0, 0.0, 0.0)