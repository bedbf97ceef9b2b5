"""Typed vehicle and flight-envelope constants.

Each constant carries its unit and where the number comes from. Angular
limits are stored in degrees, as they are usually quoted, and converted
with :attr:`PhysicalConstant.radians` where the model needs them.

Usage:
    from trajopt.constants import MAX_TILT_DEG

    lower, upper = MAX_TILT_DEG.symmetric_bounds(radians=True)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

_DEGREE_UNITS = ("deg", "deg/s")


@dataclass(frozen=True)
class PhysicalConstant:
    """A number with its unit and provenance.

    Attributes:
        value: Numerical value in ``unit``
        unit: Unit string (e.g. "m/s^2", "deg", "deg/s")
        source: Where the value comes from
        notes: Additional documentation
    """

    value: float
    unit: str
    source: str
    notes: str = ""

    @property
    def is_angle(self) -> bool:
        return self.unit in _DEGREE_UNITS

    @property
    def radians(self) -> float:
        """Value converted from degrees (or degrees per second) to radians."""
        if not self.is_angle:
            raise ValueError(f"Cannot convert {self.unit!r} to radians")
        return math.radians(self.value)

    def symmetric_bounds(self, radians: bool = False) -> tuple[float, float]:
        """Return ``(-value, value)``, optionally in radians."""
        magnitude = self.radians if radians else self.value
        return -magnitude, magnitude

    def __float__(self) -> float:
        return float(self.value)
