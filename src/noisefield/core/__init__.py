"""Noise primitives: integer sources, permutation tables and lattice noise."""

from .lattice import fade, gradient, lerp, single_octave
from .permutation import ShuffleMode, build_permutation
from .rng import DotNetSource, IntegerSource, Pcg64Source, SOURCES, make_source

__all__ = [
    "fade",
    "gradient",
    "lerp",
    "single_octave",
    "ShuffleMode",
    "build_permutation",
    "DotNetSource",
    "IntegerSource",
    "Pcg64Source",
    "SOURCES",
    "make_source",
]
