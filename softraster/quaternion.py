"""Quaternions for representing 3D rotations."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator

import numpy as np

from .matrix4x4 import Matrix4x4
from .vectors import Vector3D, Vector4D

_EPS_D = 1e-11


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Quaternion:
    """A quaternion ``x i + y j + z k + w``; the default is the identity."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    @classmethod
    def from_axis_angle(cls, axis: Vector3D, radians: float) -> Quaternion:
        """The rotation by ``radians`` about ``axis``."""
        half = radians / 2
        n = axis.unit()
        s = math.sin(half)
        return cls(s * n.x, s * n.y, s * n.z, math.cos(half)).unit()

    @classmethod
    def from_scaled_axis(cls, vec: Vector3D) -> Quaternion:
        """The rotation about ``vec`` by an angle equal to its length."""
        theta = vec.norm()
        if theta > 0.0001:
            s = math.sin(theta / 2.0)
            axis = vec / theta * s
            return cls(axis.x, axis.y, axis.z, math.cos(theta / 2.0))
        return cls()

    @classmethod
    def from_euler(cls, euler: Vector3D) -> Quaternion:
        """From euler angles in roll-pitch-yaw order."""
        c1 = math.cos(euler[2] * 0.5)
        c2 = math.cos(euler[1] * 0.5)
        c3 = math.cos(euler[0] * 0.5)
        s1 = math.sin(euler[2] * 0.5)
        s2 = math.sin(euler[1] * 0.5)
        s3 = math.sin(euler[0] * 0.5)
        return cls(
            c1 * c2 * s3 - s1 * s2 * c3,
            c1 * s2 * c3 + s1 * c2 * s3,
            s1 * c2 * c3 - c1 * s2 * s3,
            c1 * c2 * c3 + s1 * s2 * s3,
        )

    def complex(self) -> Vector3D:
        return Vector3D(self.x, self.y, self.z)

    def real(self) -> float:
        return self.w

    def norm(self) -> float:
        return math.sqrt(sum(v * v for v in self))

    def unit(self) -> Quaternion:
        n = self.norm()
        return Quaternion(self.x / n, self.y / n, self.z / n, self.w / n)

    def conjugate(self) -> Quaternion:
        return Quaternion(-self.x, -self.y, -self.z, self.w)

    def inverse(self) -> Quaternion:
        """The conjugate divided by the norm."""
        n = self.norm()
        c = self.conjugate()
        return Quaternion(c.x / n, c.y / n, c.z / n, c.w / n)

    def product(self, rhs: Quaternion) -> Quaternion:
        x, y, z, w = self
        return Quaternion(
            y * rhs.z - z * rhs.y + x * rhs.w + w * rhs.x,
            z * rhs.x - x * rhs.z + y * rhs.w + w * rhs.y,
            x * rhs.y - y * rhs.x + z * rhs.w + w * rhs.z,
            w * rhs.w - x * rhs.x - y * rhs.y - z * rhs.z,
        )

    def __mul__(self, rhs):
        if isinstance(rhs, Quaternion):
            return self.product(rhs)
        if isinstance(rhs, Real):
            return Quaternion(*(v * rhs for v in self))
        return NotImplemented

    def __rmul__(self, scalar):
        if not isinstance(scalar, Real):
            return NotImplemented
        return Quaternion(*(v * scalar for v in self))

    def matrix(self) -> Matrix4x4:
        """The matrix ``M`` with ``M * q.vector() == (self * q).vector()``."""
        x, y, z, w = self
        return Matrix4x4([
            [w, -z, y, x],
            [z, w, -x, y],
            [-y, x, w, z],
            [-x, -y, -z, w],
        ])

    def right_matrix(self) -> Matrix4x4:
        """The matrix ``M`` with ``q.vector()^T M == (q * self).vector()^T``."""
        x, y, z, w = self
        return Matrix4x4([
            [w, -z, y, -x],
            [z, w, -x, -y],
            [-y, x, w, -z],
            [x, y, z, w],
        ])

    def vector(self) -> Vector4D:
        return Vector4D(self.x, self.y, self.z, self.w)

    def rotation_matrix(self) -> np.ndarray:
        """The 3x3 rotation matrix of a unit quaternion."""
        x, y, z, w = self
        return np.array([
            [1 - 2 * y * y - 2 * z * z, 2 * x * y - 2 * z * w, 2 * x * z + 2 * y * w],
            [2 * x * y + 2 * z * w, 1 - 2 * x * x - 2 * z * z, 2 * y * z - 2 * x * w],
            [2 * x * z - 2 * y * w, 2 * y * z + 2 * x * w, 1 - 2 * x * x - 2 * y * y],
        ])

    def scaled_axis(self) -> Vector3D:
        """The normalised rotation axis of this quaternion."""
        q1 = self.unit()
        s = math.sqrt(max(0.0, 1 - q1.w * q1.w))
        if s < 0.001:
            return Vector3D(q1.x, q1.y, q1.z)
        return Vector3D(q1.x / s, q1.y / s, q1.z / s)

    def rotated_vector(self, v: Vector3D) -> Vector3D:
        """``v`` rotated by this (unit) quaternion."""
        return ((self * Quaternion(v.x, v.y, v.z, 0.0)) * self.conjugate()).complex()

    def euler(self) -> Vector3D:
        """Euler angles in roll-pitch-yaw order."""
        x, y, z, w = self
        sqw, sqx, sqy, sqz = w * w, x * x, y * y, z * z
        pitch = math.asin(_clamp(2.0 * (w * y - x * z), -1.0, 1.0))
        if math.pi / 2 - abs(pitch) > _EPS_D:
            yaw = math.atan2(2.0 * (x * y + w * z), sqx - sqy - sqz + sqw)
            roll = math.atan2(2.0 * (w * x + y * z), sqw - sqx - sqy + sqz)
        else:
            yaw = math.atan2(2 * y * z - 2 * x * w, 2 * x * z + 2 * y * w)
            roll = 0.0
            if pitch < 0:
                yaw = math.pi - yaw
        return Vector3D(roll, pitch, yaw)

    def decouple_z(self) -> tuple[Quaternion, Quaternion]:
        """Split into ``(qxy, qz)`` with ``self == qxy * qz``."""
        ztt = Vector3D(0.0, 0.0, 1.0)
        zbt = self.rotated_vector(ztt)
        axis_xy = ztt.cross(zbt)
        axis_norm = axis_xy.norm()
        axis_theta = math.acos(_clamp(zbt.z, -1.0, 1.0))
        if axis_norm > 0.00001:
            axis_xy = axis_xy * (axis_theta / axis_norm)
        qxy = Quaternion.from_scaled_axis(axis_xy)
        qz = qxy.conjugate() * self
        return qxy, qz

    def slerp(self, other: Quaternion, t: float) -> Quaternion:
        """Spherical interpolation from this quaternion to ``other`` by ``t``."""
        omega = math.acos(_clamp(sum(a * b for a, b in zip(self, other)), -1.0, 1.0))
        if abs(omega) < 1e-10:
            omega = 1e-10
        som = math.sin(omega)
        st0 = math.sin((1 - t) * omega) / som
        st1 = math.sin(t * omega) / som
        return Quaternion(*(a * st0 + b * st1 for a, b in zip(self, other)))