"""Deterministic 2D coherent noise with fractal octave shaping."""

from .core import ShuffleMode, build_permutation, fade, gradient
from .errors import InvalidParameterError
from .field import NoiseField, create, evaluate
from .presets import PresetLoader, load_preset
from .shaping import DEFAULT_SHAPING, ShapingParameters

__all__ = [
    "NoiseField",
    "create",
    "evaluate",
    "ShapingParameters",
    "DEFAULT_SHAPING",
    "InvalidParameterError",
    "ShuffleMode",
    "build_permutation",
    "fade",
    "gradient",
    "PresetLoader",
    "load_preset",
]
