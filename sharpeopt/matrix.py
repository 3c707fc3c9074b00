"""Dense real matrices with the linear-algebra and statistics the optimiser needs."""

from __future__ import annotations

import math
from numbers import Real
from typing import Iterable


class Matrix:
    """A rectangular matrix of floats stored row by row."""

    __slots__ = ("_rows", "_cols", "_data")

    def __init__(self, data: Iterable[Iterable[float]] = ()) -> None:
        rows = [[float(value) for value in row] for row in data]
        cols = len(rows[0]) if rows else 0
        if any(len(row) != cols for row in rows):
            raise ValueError("All rows must have the same number of columns.")
        self._rows = len(rows)
        self._cols = cols
        self._data = rows

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "Matrix":
        """Return a rows x cols matrix filled with zeros."""
        if rows < 0 or cols < 0:
            raise ValueError("Matrix dimensions must be non-negative.")
        return cls([0.0] * cols for _ in range(rows))

    @property
    def num_rows(self) -> int:
        return self._rows

    @property
    def num_cols(self) -> int:
        return self._cols

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return self._data[row][col]

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        row, col = index
        self._data[row][col] = float(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (
            self._rows == other._rows
            and self._cols == other._cols
            and self._data == other._data
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix({self._data!r})"

    def __str__(self) -> str:
        return "".join(
            "".join(f"{value:12.6f} " for value in row) + "\n" for row in self._data
        )

    def to_lists(self) -> list[list[float]]:
        """Return a copy of the contents as a list of rows."""
        return [list(row) for row in self._data]

    def transpose(self) -> "Matrix":
        if not self._rows:
            return Matrix.zeros(self._cols, 0)
        return Matrix(zip(*self._data))

    def dot(self, other: "Matrix") -> "Matrix":
        """Matrix product self x other."""
        if self._cols != other._rows:
            raise ValueError("Matrix dimension mismatch for multiplication.")
        other_cols = other.transpose()._data
        if not self._rows:
            return Matrix.zeros(0, other._cols)
        return Matrix(
            [sum(a * b for a, b in zip(row, col)) for col in other_cols]
            for row in self._data
        )

    def __mul__(self, scalar: float) -> "Matrix":
        if not isinstance(scalar, Real):
            return NotImplemented
        result = Matrix([value * scalar for value in row] for row in self._data)
        result._cols = self._cols
        return result

    def __rmul__(self, scalar: float) -> "Matrix":
        return self.__mul__(scalar)

    def _check_same_shape(self, other: "Matrix", operation: str) -> None:
        if self._rows != other._rows or self._cols != other._cols:
            raise ValueError(f"Matrix dimensions must match for {operation}.")

    def __add__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other, "addition")
        result = Matrix(
            [a + b for a, b in zip(row, other_row)]
            for row, other_row in zip(self._data, other._data)
        )
        result._cols = self._cols
        return result

    def __sub__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other, "subtraction")
        result = Matrix(
            [a - b for a, b in zip(row, other_row)]
            for row, other_row in zip(self._data, other._data)
        )
        result._cols = self._cols
        return result

    def _cholesky(self) -> list[list[float]]:
        """Lower-triangular L with self = L * L^T."""
        if self._rows != self._cols:
            raise ValueError("Cholesky decomposition requires a square matrix.")
        n = self._rows
        lower = [[0.0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1):
                partial = sum(a * b for a, b in zip(lower[i][:j], lower[j][:j]))
                if i == j:
                    value = self._data[i][i] - partial
                    if value <= 0.0:
                        raise ValueError("Matrix is not positive-definite.")
                    lower[i][i] = math.sqrt(value)
                else:
                    lower[i][j] = (self._data[i][j] - partial) / lower[j][j]
        return lower

    def inverse(self) -> "Matrix":
        """Inverse of a symmetric positive-definite matrix via Cholesky."""
        lower = self._cholesky()
        n = len(lower)
        inv_lower = [[0.0] * n for _ in range(n)]
        for i in range(n):
            inv_lower[i][i] = 1.0 / lower[i][i]
            for j in range(i + 1, n):
                partial = -sum(lower[j][k] * inv_lower[k][i] for k in range(i, j))
                inv_lower[j][i] = partial / lower[j][j]
        inv_l = Matrix(inv_lower)
        if not n:
            return Matrix()
        return inv_l.transpose().dot(inv_l)

    def mean_per_column(self) -> list[float]:
        """Arithmetic mean of each column; empty for an empty matrix."""
        if not self._rows or not self._cols:
            return []
        return [sum(column) / self._rows for column in zip(*self._data)]

    def covariance_matrix(self) -> "Matrix":
        """Unbiased sample covariance of the columns (cols x cols)."""
        if self._rows < 2:
            raise ValueError("At least 2 rows required for covariance matrix.")
        means = self.mean_per_column()
        centred = [
            [value - mean for value in column]
            for column, mean in zip(zip(*self._data), means)
        ]
        denominator = self._rows - 1
        return Matrix(
            [sum(a * b for a, b in zip(ci, cj)) / denominator for cj in centred]
            for ci in centred
        )