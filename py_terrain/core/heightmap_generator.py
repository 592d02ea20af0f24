"""
Diamond-square heightmap generation.

Builds a square grid of ``2**n + 1`` elevation values by seeding the four
corners and refining the grid with alternating square and diamond passes.
Each pass halves the chunk size and the perturbation amplitude, so detail
gets finer and flatter at smaller scales.

The generator is a plain function of its parameters plus an injected random
source. It keeps no state between calls and performs no I/O.
"""

import math
import numbers
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..utils.random import RandomSource, create_random_source, is_random_source, uniform


class InvalidParameterError(ValueError):
    """Raised when generation parameters are outside their valid domain."""


@dataclass(frozen=True, eq=False)
class HeightGrid:
    """
    Square grid of elevations stored as a flat row-major array.

    The value at (row, col) lives at ``values[row * size + col]``. The
    array is read-only once the grid is constructed.
    """

    detail_exponent: int
    values: np.ndarray

    def __post_init__(self):
        expected = self.size * self.size
        if self.values.shape != (expected,):
            raise ValueError(
                f"Expected {expected} values for detail exponent "
                f"{self.detail_exponent}, got shape {self.values.shape}"
            )
        self.values.flags.writeable = False

    @property
    def size(self) -> int:
        """Number of points along one side of the grid."""
        return grid_size(self.detail_exponent)

    def __len__(self) -> int:
        return self.values.shape[0]

    def __getitem__(self, index: Tuple[int, int]) -> float:
        row, col = index
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"({row}, {col}) is outside a {self.size}x{self.size} grid")
        return float(self.values[row * self.size + col])

    def as_matrix(self) -> np.ndarray:
        """Read-only ``size x size`` view of the values."""
        return self.values.reshape(self.size, self.size)

    def to_list(self) -> List[float]:
        return self.values.tolist()


def grid_size(detail_exponent: int) -> int:
    """Side length of the grid for a given detail exponent."""
    return 2**detail_exponent + 1


def validate_parameters(
    detail_exponent, max_initial_height: float, roughness: float
) -> None:
    """
    Check generation parameters.

    Raises:
        InvalidParameterError: If the exponent is not a non-negative
            integer, or the height or roughness is negative or not finite.
    """
    if isinstance(detail_exponent, bool) or not isinstance(
        detail_exponent, numbers.Integral
    ):
        raise InvalidParameterError(
            f"detail_exponent must be an integer, got {detail_exponent!r}"
        )
    if detail_exponent < 0:
        raise InvalidParameterError(
            f"detail_exponent must be non-negative, got {detail_exponent}"
        )

    for name, value in (("max_initial_height", max_initial_height), ("roughness", roughness)):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidParameterError(f"{name} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise InvalidParameterError(f"{name} must be finite, got {value}")
        if value < 0:
            raise InvalidParameterError(f"{name} must be non-negative, got {value}")


def roughness_schedule(detail_exponent: int, roughness: float) -> List[Tuple[int, float]]:
    """
    List the (chunk_size, amplitude) pairs used by each refinement pass.

    Passes run from the coarsest chunk (``size - 1``) down to a chunk of 2;
    the amplitude halves after every pass.
    """
    schedule = []
    chunk_size = grid_size(detail_exponent) - 1
    amplitude = roughness
    while chunk_size > 1:
        schedule.append((chunk_size, amplitude))
        chunk_size //= 2
        amplitude /= 2
    return schedule


def _noise(rng: RandomSource, count: int, amplitude: float) -> np.ndarray:
    """Draw ``count`` perturbations in [-amplitude, amplitude], in order."""
    return np.array(
        [uniform(rng, -amplitude, amplitude) for _ in range(count)], dtype=np.float64
    )


def seed_corners(matrix: np.ndarray, max_initial_height: float, rng: RandomSource) -> None:
    """Set the four corners to values drawn from [0, max_initial_height]."""
    last = matrix.shape[0] - 1
    for row, col in ((0, 0), (0, last), (last, 0), (last, last)):
        matrix[row, col] = uniform(rng, 0.0, max_initial_height)


def square_step(
    matrix: np.ndarray, chunk_size: int, amplitude: float, rng: RandomSource
) -> None:
    """
    Set the centre of every chunk to the mean of its corners plus noise.

    Chunks tile the grid with top-left corners at multiples of
    ``chunk_size``. Centres are visited row by row.
    """
    half = chunk_size // 2
    c = chunk_size
    corner_mean = (
        matrix[0:-1:c, 0:-1:c]
        + matrix[0:-1:c, c::c]
        + matrix[c::c, 0:-1:c]
        + matrix[c::c, c::c]
    ) / 4.0
    noise = _noise(rng, corner_mean.size, amplitude).reshape(corner_mean.shape)
    matrix[half::c, half::c] = corner_mean + noise


def diamond_points(size: int, chunk_size: int) -> np.ndarray:
    """
    Coordinates of the diamond lattice for one pass, in row-major order.

    Rows sit at every multiple of ``half``. Rows that are multiples of
    ``chunk_size`` hold the midpoints of horizontal chunk edges (odd
    multiples of ``half``); the rows in between hold the midpoints of
    vertical edges (multiples of ``chunk_size``).

    Returns:
        Integer array of shape (n, 2) holding (row, col) pairs
    """
    half = chunk_size // 2
    points = []
    for row in range(0, size, half):
        start = half if row % chunk_size == 0 else 0
        for col in range(start, size, chunk_size):
            points.append((row, col))
    return np.array(points, dtype=np.int64).reshape(-1, 2)


def diamond_averages(
    matrix: np.ndarray, points: np.ndarray, half: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Average the in-bounds diamond neighbours of each point.

    Neighbours lie ``half`` cells above, below, left and right. Points on
    the grid boundary have only three of them; missing neighbours are left
    out of the mean rather than counted as zero.

    Returns:
        Tuple of (averages, neighbour_counts), one entry per point
    """
    size = matrix.shape[0]
    rows, cols = points[:, 0], points[:, 1]
    total = np.zeros(len(points), dtype=np.float64)
    count = np.zeros(len(points), dtype=np.int64)

    for d_row, d_col in ((-half, 0), (half, 0), (0, -half), (0, half)):
        n_rows = rows + d_row
        n_cols = cols + d_col
        inside = (n_rows >= 0) & (n_rows < size) & (n_cols >= 0) & (n_cols < size)
        total[inside] += matrix[n_rows[inside], n_cols[inside]]
        count += inside

    return total / count, count


def diamond_step(
    matrix: np.ndarray, chunk_size: int, amplitude: float, rng: RandomSource
) -> None:
    """Set every diamond point to the mean of its neighbours plus noise."""
    half = chunk_size // 2
    points = diamond_points(matrix.shape[0], chunk_size)
    averages, _ = diamond_averages(matrix, points, half)
    matrix[points[:, 0], points[:, 1]] = averages + _noise(rng, len(points), amplitude)


def generate(
    detail_exponent: int,
    max_initial_height: float,
    roughness: float,
    rng: Optional[RandomSource] = None,
) -> HeightGrid:
    """
    Generate a fractal heightmap with the diamond-square algorithm.

    Args:
        detail_exponent: Grid resolution exponent; the grid has
            ``2**detail_exponent + 1`` points per side
        max_initial_height: Upper bound for the random corner heights
        roughness: Perturbation amplitude of the first pass; halved after
            every pass. Zero gives pure midpoint interpolation.
        rng: Random source with a ``uniform(low, high)`` or ``random()``
            method. A fresh unseeded source is used when omitted.

    Returns:
        A new, fully populated HeightGrid

    Raises:
        InvalidParameterError: If any parameter is out of range
        TypeError: If ``rng`` is not a random source
    """
    validate_parameters(detail_exponent, max_initial_height, roughness)
    if rng is None:
        rng = create_random_source()
    elif not is_random_source(rng):
        raise TypeError(f"{type(rng).__name__} is not a random source")

    size = grid_size(detail_exponent)
    matrix = np.full((size, size), np.nan, dtype=np.float64)

    seed_corners(matrix, max_initial_height, rng)
    for chunk_size, amplitude in roughness_schedule(detail_exponent, roughness):
        square_step(matrix, chunk_size, amplitude, rng)
        diamond_step(matrix, chunk_size, amplitude, rng)

    return HeightGrid(detail_exponent=int(detail_exponent), values=matrix.reshape(-1))
