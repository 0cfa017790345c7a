"""Per-evaluation octave shaping parameters."""

from __future__ import annotations

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import InvalidParameterError


@dataclass(frozen=True)
class ShapingParameters:
    """Octave composition and shaping policy for one evaluation.

    The first octave is shaped differently from the rest: it is raised to
    ``first_octave_contrast``, remapped back to roughly [-1, 1], scaled by
    ``post_bias_factor`` and darkened by ``bias``. Later octaves are only
    raised to ``contrast``.

    Attributes:
        octaves: Number of octaves to sum (positive)
        persistence: Amplitude multiplier per octave (positive)
        contrast: Exponent applied to octaves after the first
        first_octave_contrast: Exponent applied to the first octave
        bias: Value subtracted from the first octave after scaling
        post_bias_factor: Scale applied to the remapped first octave
    """

    octaves: int = 4
    persistence: float = 0.5
    contrast: float = 1.0
    first_octave_contrast: float = 0.5
    bias: float = 0.1
    post_bias_factor: float = 1.5

    def __post_init__(self) -> None:
        """Validate every field."""
        if isinstance(self.octaves, bool) or not isinstance(self.octaves, numbers.Integral):
            raise InvalidParameterError(f"octaves must be an integer, got {self.octaves!r}")
        if self.octaves <= 0:
            raise InvalidParameterError(f"octaves must be positive, got {self.octaves}")

        for name in ("persistence", "contrast", "first_octave_contrast", "bias", "post_bias_factor"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidParameterError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value}")

        if self.persistence <= 0:
            raise InvalidParameterError(
                f"persistence must be positive, got {self.persistence}"
            )
        # Negative exponents would send zero-valued octaves to infinity
        for name in ("contrast", "first_octave_contrast"):
            if getattr(self, name) < 0:
                raise InvalidParameterError(
                    f"{name} must not be negative, got {getattr(self, name)}"
                )

    def replace(self, **changes: Any) -> ShapingParameters:
        """Return a copy with the given fields changed (and re-validated)."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ShapingParameters:
        """Build parameters from a mapping, defaulting missing keys.

        Raises:
            InvalidParameterError: On unknown keys or invalid values
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidParameterError(
                f"Unknown shaping parameters: {sorted(unknown)} (expected {sorted(known)})"
            )
        return cls(**data)

    @property
    def amplitude_sum(self) -> float:
        """Normalization denominator: the sum of all octave amplitudes."""
        total = 0.0
        amplitude = 1.0
        for _ in range(self.octaves):
            total += amplitude
            amplitude *= self.persistence
        return total


DEFAULT_SHAPING = ShapingParameters()
