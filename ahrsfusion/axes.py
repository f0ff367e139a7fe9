"""Swapping of sensor axes for alignment with the body axes."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from .fmath import Vector, as_vector

__all__ = ["AxesAlignment", "axes_swap"]


class AxesAlignment(IntEnum):
    """Sensor axes relative to the body axes.

    Each name reads as three signed axes: ``PYNXPZ`` (+Y-X+Z) means the body X
    axis is the sensor Y axis, the body Y axis is the negated sensor X axis and
    the body Z axis is the sensor Z axis.
    """

    PXPYPZ = 0
    PXNZPY = 1
    PXNYNZ = 2
    PXPZNY = 3
    NXPYNZ = 4
    NXPZPY = 5
    NXNYPZ = 6
    NXNZNY = 7
    PYNXPZ = 8
    PYNZNX = 9
    PYPXNZ = 10
    PYPZPX = 11
    NYPXPZ = 12
    NYNZPX = 13
    NYNXNZ = 14
    NYPZNX = 15
    PZPYNX = 16
    PZPXPY = 17
    PZNYPX = 18
    PZNXNY = 19
    NZPYPX = 20
    NZNXPY = 21
    NZNYNX = 22
    NZPXNY = 23

    @property
    def mapping(self) -> tuple[tuple[float, str], ...]:
        """(sign, sensor axis) for each of the body axes x, y and z."""
        chunks = (self.name[index : index + 2] for index in (0, 2, 4))
        return tuple((1.0 if sign == "P" else -1.0, axis.lower()) for sign, axis in chunks)


def axes_swap(sensor: Any, alignment: int) -> Vector:
    """Return the sensor measurement expressed in the body axes.

    An alignment value outside the enumeration leaves the measurement unchanged.
    """
    vector = as_vector(sensor)
    try:
        member = AxesAlignment(alignment)
    except ValueError:
        return vector
    if member is AxesAlignment.PXPYPZ:
        return vector
    return Vector(*(sign * getattr(vector, axis) for sign, axis in member.mapping))