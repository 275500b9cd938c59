"""A 4x4 matrix of floats."""

from __future__ import annotations

from numbers import Real
from typing import Iterable, Union

import numpy as np

from .vectors import Vector4D


class Matrix4x4:
    """A 4x4 matrix indexed as ``m[row, col]``; ``m[i]`` is column ``i``."""

    __slots__ = ("_m",)

    def __init__(self, rows: Iterable | None = None) -> None:
        if rows is None:
            self._m = np.zeros((4, 4))
            return
        arr = np.array(rows, dtype=float)
        if arr.size != 16:
            raise ValueError("a 4x4 matrix needs exactly 16 values")
        self._m = arr.reshape(4, 4).copy()

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> Matrix4x4:
        result = cls.__new__(cls)
        result._m = arr
        return result

    @classmethod
    def identity(cls) -> Matrix4x4:
        return cls._wrap(np.eye(4))

    @classmethod
    def zeros(cls, value: float = 0.0) -> Matrix4x4:
        """A matrix with every element set to ``value``."""
        return cls._wrap(np.full((4, 4), float(value)))

    def __getitem__(self, index: Union[int, tuple[int, int]]):
        if isinstance(index, tuple):
            row, col = index
            return float(self._m[row, col])
        return self.column(index)

    def __setitem__(self, index, value) -> None:
        if isinstance(index, tuple):
            row, col = index
            self._m[row, col] = float(value)
        else:
            self._m[:, index] = [float(v) for v in value]

    def column(self, i: int) -> Vector4D:
        return Vector4D(*(float(v) for v in self._m[:, i]))

    def det(self) -> float:
        return float(np.linalg.det(self._m))

    def norm(self) -> float:
        """Frobenius norm."""
        return float(np.linalg.norm(self._m))

    def T(self) -> Matrix4x4:
        return Matrix4x4._wrap(self._m.T.copy())

    def inv(self) -> Matrix4x4:
        try:
            return Matrix4x4._wrap(np.linalg.inv(self._m))
        except np.linalg.LinAlgError as exc:
            raise ValueError("matrix is singular") from exc

    def __add__(self, other: Matrix4x4) -> Matrix4x4:
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return Matrix4x4._wrap(self._m + other._m)

    def __neg__(self) -> Matrix4x4:
        return Matrix4x4._wrap(-self._m)

    def __sub__(self, other: Matrix4x4) -> Matrix4x4:
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return Matrix4x4._wrap(self._m - other._m)

    def __mul__(self, other):
        if isinstance(other, Matrix4x4):
            return Matrix4x4._wrap(self._m @ other._m)
        if isinstance(other, Vector4D):
            return Vector4D(*(float(v) for v in self._m @ np.array(tuple(other))))
        if isinstance(other, Real):
            return Matrix4x4._wrap(self._m * float(other))
        return NotImplemented

    def __rmul__(self, scalar: float) -> Matrix4x4:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Matrix4x4._wrap(self._m * float(scalar))

    def __truediv__(self, scalar: float) -> Matrix4x4:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Matrix4x4._wrap(self._m / float(scalar))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "\n".join(
            "[ " + " ".join(f"{v:g}" for v in row) + " ]" for row in self._m
        )

    def __repr__(self) -> str:
        return f"Matrix4x4({self._m.tolist()!r})"


def outer(u: Vector4D, v: Vector4D) -> Matrix4x4:
    """The outer product ``u v^T``."""
    return Matrix4x4._wrap(np.outer(tuple(u), tuple(v)).astype(float))