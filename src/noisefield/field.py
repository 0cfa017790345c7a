"""Seeded 2D fractal noise fields."""

from __future__ import annotations

import logging
import math
import numbers
import operator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .core.lattice import single_octave
from .core.permutation import ShuffleMode, coerce_shuffle, build_permutation
from .core.rng import coerce_seed
from .errors import InvalidParameterError
from .shaping import DEFAULT_SHAPING, ShapingParameters

logger = logging.getLogger(__name__)

# Supported evaluation precisions
DTYPES = {
    "float64": np.dtype(np.float64),
    "float32": np.dtype(np.float32),
}


def _coerce_dtype(dtype: str | np.dtype | type) -> np.dtype:
    try:
        resolved = np.dtype(dtype)
    except TypeError as exc:
        raise InvalidParameterError(f"Unsupported dtype: {dtype!r}") from exc
    if resolved not in DTYPES.values():
        raise InvalidParameterError(
            f"Unsupported dtype: {dtype!r} (expected one of {sorted(DTYPES)})"
        )
    return resolved


def _coerce_grid_size(grid_size: object) -> int:
    if isinstance(grid_size, bool):
        raise InvalidParameterError(f"grid_size must be an integer, got {grid_size!r}")
    try:
        grid_size = operator.index(grid_size)
    except TypeError as exc:
        raise InvalidParameterError(f"grid_size must be an integer, got {grid_size!r}") from exc
    if grid_size <= 0:
        raise InvalidParameterError(f"grid_size must be positive, got {grid_size}")
    return grid_size


class NoiseField:
    """Deterministic 2D gradient noise with fractal octave shaping.

    The permutation table is built once from the seed and is read-only
    afterwards; the field has no setters, so one instance can be shared across
    threads. Re-seeding means constructing a new field.

    Coordinates are in world units; lattice points of the first octave sit
    every ``grid_size`` units and each later octave halves the spacing (never
    below 1).
    """

    __slots__ = ("_seed", "_grid_size", "_dtype", "_source", "_shuffle", "_table")

    def __init__(
        self,
        seed: int,
        grid_size: int = 16,
        *,
        source: str = "pcg64",
        shuffle: ShuffleMode | str = ShuffleMode.FULL_RANGE,
        dtype: str | np.dtype | type = "float64",
    ) -> None:
        """Build the field's permutation table.

        Args:
            seed: Integer seed
            grid_size: Base lattice spacing in world units
            source: Integer source used to shuffle the table
            shuffle: Shuffle variant
            dtype: Evaluation precision, float64 or float32

        Raises:
            InvalidParameterError: If any argument is invalid
        """
        self._seed = coerce_seed(seed)
        self._grid_size = _coerce_grid_size(grid_size)
        self._dtype = _coerce_dtype(dtype)
        self._source = source
        self._shuffle = coerce_shuffle(shuffle)
        self._table = build_permutation(self._seed, source, self._shuffle)
        logger.debug(
            "Built noise field seed=%d grid_size=%d source=%s shuffle=%s dtype=%s",
            self._seed, self._grid_size, self._source, self._shuffle.value, self._dtype,
        )

    def __repr__(self) -> str:
        return (
            f"NoiseField(seed={self._seed}, grid_size={self._grid_size}, "
            f"source={self._source!r}, shuffle={self._shuffle.value!r}, dtype={self._dtype.name!r})"
        )

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def source(self) -> str:
        return self._source

    @property
    def shuffle(self) -> ShuffleMode:
        return self._shuffle

    @property
    def permutation(self) -> NDArray[np.int64]:
        """The read-only 512-entry permutation table."""
        return self._table

    def _coords(self, x: ArrayLike, y: ArrayLike) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """Convert coordinates to the field's dtype and broadcast them."""
        try:
            x = np.asarray(x, dtype=self._dtype)
            y = np.asarray(y, dtype=self._dtype)
            x, y = np.broadcast_arrays(x, y)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(f"Invalid coordinates: {exc}") from exc
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
            raise InvalidParameterError("Coordinates must be finite")
        return x, y

    @staticmethod
    def _to_output(value: NDArray[np.floating]) -> float | NDArray[np.floating]:
        if np.ndim(value) == 0:
            return float(value)
        return value

    def single_octave(
        self,
        x: ArrayLike,
        y: ArrayLike,
        grid_size: int | None = None,
    ) -> float | NDArray[np.floating]:
        """Evaluate one unshaped octave in [0, 1].

        Args:
            x: X coordinate(s)
            y: Y coordinate(s)
            grid_size: Lattice spacing (defaults to the field's grid size)
        """
        grid_size = self._grid_size if grid_size is None else _coerce_grid_size(grid_size)
        x, y = self._coords(x, y)
        return self._to_output(single_octave(self._table, x, y, grid_size))

    def evaluate(
        self,
        x: ArrayLike,
        y: ArrayLike,
        shaping: ShapingParameters | None = None,
    ) -> float | NDArray[np.floating]:
        """Evaluate the shaped fractal noise at (x, y).

        Args:
            x: X coordinate(s)
            y: Y coordinate(s)
            shaping: Octave shaping policy (defaults to ``DEFAULT_SHAPING``)

        Returns:
            Value(s) in [0, 1]; a float for scalar input, otherwise an array
            of the field's dtype
        """
        if shaping is None:
            shaping = DEFAULT_SHAPING
        x, y = self._coords(x, y)
        self._check_range(shaping)

        real = self._dtype.type
        persistence = real(shaping.persistence)
        contrast = real(shaping.contrast)
        first_contrast = real(shaping.first_octave_contrast)
        bias = real(shaping.bias)
        factor = real(shaping.post_bias_factor)

        total = np.zeros(x.shape, dtype=self._dtype)
        amplitude = real(1)
        max_amplitude = real(0)
        grid_size = self._grid_size

        # The amplitude after the last octave is never used and may overflow
        with np.errstate(over="ignore", invalid="ignore"):
            for i in range(shaping.octaves):
                octave = single_octave(self._table, x, y, grid_size)
                # Rounding can leave the remapped value a hair outside [0, 1]
                octave = np.clip(octave, 0, 1)

                if i == 0:
                    octave = np.power(octave, first_contrast)
                    octave = (octave * 2 - 1) * factor - bias
                else:
                    octave = np.power(octave, contrast)

                total += octave * amplitude
                max_amplitude += amplitude
                amplitude *= persistence
                grid_size = max(grid_size // 2, 1)

        if not np.isfinite(max_amplitude) or max_amplitude <= 0:
            raise InvalidParameterError(
                f"Octave amplitudes overflow {self._dtype.name} (persistence={shaping.persistence})"
            )
        if not np.all(np.isfinite(total)):
            raise InvalidParameterError(
                f"Shaped octaves overflow {self._dtype.name}; reduce persistence or post_bias_factor"
            )

        return self._to_output(np.clip(total / max_amplitude, 0, 1))

    def _check_range(self, shaping: ShapingParameters) -> None:
        """Reject shaping values the field's dtype cannot represent."""
        limit = float(np.finfo(self._dtype).max)
        for name in ("persistence", "contrast", "first_octave_contrast", "bias", "post_bias_factor"):
            value = getattr(shaping, name)
            if abs(value) > limit:
                raise InvalidParameterError(f"{name} overflows {self._dtype.name}, got {value}")
        if shaping.amplitude_sum > limit:
            raise InvalidParameterError(
                f"Octave amplitudes overflow {self._dtype.name} (persistence={shaping.persistence})"
            )

    def sample_grid(
        self,
        width: int,
        height: int,
        origin: tuple[float, float] = (0.0, 0.0),
        step: float = 1.0,
        shaping: ShapingParameters | None = None,
    ) -> NDArray[np.floating]:
        """Evaluate the field over a regular grid of sample points.

        Args:
            width: Number of columns
            height: Number of rows
            origin: World position of the first sample (x, y)
            step: World distance between neighbouring samples

        Returns:
            ``height x width`` array; element [row, col] is the value at
            ``(origin[0] + col * step, origin[1] + row * step)``
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
        if isinstance(step, bool) or not isinstance(step, numbers.Real) or not math.isfinite(step) or step <= 0:
            raise InvalidParameterError(f"step must be positive and finite, got {step!r}")

        xs = origin[0] + np.arange(width, dtype=np.float64) * step
        ys = origin[1] + np.arange(height, dtype=np.float64) * step
        xv, yv = np.meshgrid(xs, ys)
        return self.evaluate(xv, yv, shaping)


def create(
    seed: int,
    grid_size: int = 16,
    *,
    source: str = "pcg64",
    shuffle: ShuffleMode | str = ShuffleMode.FULL_RANGE,
    dtype: str | np.dtype | type = "float64",
) -> NoiseField:
    """Create a noise field. See ``NoiseField`` for the arguments."""
    return NoiseField(seed, grid_size, source=source, shuffle=shuffle, dtype=dtype)


def evaluate(
    field: NoiseField,
    x: ArrayLike,
    y: ArrayLike,
    octaves: int = 4,
    persistence: float = 0.5,
    contrast: float = 1.0,
    first_octave_contrast: float = 0.5,
    bias: float = 0.1,
    post_bias_factor: float = 1.5,
) -> float | NDArray[np.floating]:
    """Evaluate ``field`` with shaping given as keyword arguments.

    Equivalent to ``field.evaluate(x, y, ShapingParameters(...))``.
    """
    shaping = ShapingParameters(
        octaves=octaves,
        persistence=persistence,
        contrast=contrast,
        first_octave_contrast=first_octave_contrast,
        bias=bias,
        post_bias_factor=post_bias_factor,
    )
    return field.evaluate(x, y, shaping)
