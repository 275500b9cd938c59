"""Small immutable 2D, 3D and 4D vector types."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class Vector2D:
    """A 2D vector of floats."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]

    def __str__(self) -> str:
        return f"({_fmt(self.x)},{_fmt(self.y)})"

    def __add__(self, other: Vector2D) -> Vector2D:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector2D:
        return Vector2D(-self.x, -self.y)

    def __mul__(self, scalar: float) -> Vector2D:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__


@dataclass(frozen=True)
class Vector3D:
    """A 3D vector of floats."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __str__(self) -> str:
        return f"({_fmt(self.x)},{_fmt(self.y)},{_fmt(self.z)})"

    def __add__(self, other: Vector3D) -> Vector3D:
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector3D:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3D:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def unit(self) -> Vector3D:
        """This vector scaled to unit length."""
        return self / self.norm()

    def dot(self, other: Vector3D) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )


@dataclass(frozen=True)
class Vector4D:
    """A 4D (homogeneous) vector of floats."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z, self.w)[index]

    def __str__(self) -> str:
        return f"({_fmt(self.x)},{_fmt(self.y)},{_fmt(self.z)},{_fmt(self.w)})"

    def __add__(self, other: Vector4D) -> Vector4D:
        if not isinstance(other, Vector4D):
            return NotImplemented
        return Vector4D(*(a + b for a, b in zip(self, other)))

    def __sub__(self, other: Vector4D) -> Vector4D:
        if not isinstance(other, Vector4D):
            return NotImplemented
        return Vector4D(*(a - b for a, b in zip(self, other)))

    def __neg__(self) -> Vector4D:
        return Vector4D(-self.x, -self.y, -self.z, -self.w)

    def __mul__(self, scalar: float) -> Vector4D:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector4D(*(a * scalar for a in self))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector4D:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector4D(*(a / scalar for a in self))

    def dot(self, other: Vector4D) -> float:
        return sum(a * b for a, b in zip(self, other))

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def unit(self) -> Vector4D:
        """This vector scaled to unit length."""
        return self / self.norm()

    def to_3d(self) -> Vector3D:
        """Drop the w component."""
        return Vector3D(self.x, self.y, self.z)

    def project_to_3d(self) -> Vector3D:
        """Divide x, y and z by w."""
        inv_w = 1.0 / self.w
        return Vector3D(self.x * inv_w, self.y * inv_w, self.z * inv_w)