"""Permutation table construction for lattice hashing."""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidParameterError
from .rng import IntegerSource, make_source

TABLE_PERIOD = 256
TABLE_SIZE = TABLE_PERIOD * 2


class ShuffleMode(Enum):
    """How the identity table is shuffled."""
    # Swap index drawn from the whole table at every step
    FULL_RANGE = "full_range"
    # Canonical Fisher-Yates with a shrinking draw range
    FISHER_YATES = "fisher_yates"


def coerce_shuffle(shuffle: ShuffleMode | str) -> ShuffleMode:
    if isinstance(shuffle, ShuffleMode):
        return shuffle
    try:
        return ShuffleMode(shuffle)
    except ValueError as exc:
        valid = [mode.value for mode in ShuffleMode]
        raise InvalidParameterError(
            f"Unknown shuffle mode: {shuffle!r} (expected one of {valid})"
        ) from exc


def shuffle_identity(source: IntegerSource, shuffle: ShuffleMode | str = ShuffleMode.FULL_RANGE) -> list[int]:
    """Shuffle ``0..255`` in place using draws from ``source``.

    Args:
        source: Seeded integer source
        shuffle: Shuffle variant

    Returns:
        List holding a permutation of 0..255
    """
    shuffle = coerce_shuffle(shuffle)
    perm = list(range(TABLE_PERIOD))

    if shuffle is ShuffleMode.FULL_RANGE:
        for i in range(TABLE_PERIOD):
            j = source.next_below(TABLE_PERIOD)
            perm[i], perm[j] = perm[j], perm[i]
    else:
        for i in range(TABLE_PERIOD - 1, 0, -1):
            j = source.next_below(i + 1)
            perm[i], perm[j] = perm[j], perm[i]

    return perm


def build_permutation(
    seed: int,
    source: str = "pcg64",
    shuffle: ShuffleMode | str = ShuffleMode.FULL_RANGE,
) -> NDArray[np.int64]:
    """Build the mirrored 512-entry permutation table for a seed.

    The first 256 entries are a seeded permutation of 0..255 and the next 256
    repeat them, so ``table[table[i] + j]`` stays in bounds for any i, j in
    [0, 255].

    Args:
        seed: Integer seed
        source: Name of the integer source (see ``rng.SOURCES``)
        shuffle: Shuffle variant

    Returns:
        Read-only int64 array of length 512
    """
    rng = make_source(source, seed)
    perm = np.array(shuffle_identity(rng, shuffle), dtype=np.int64)
    table = np.concatenate([perm, perm])
    table.setflags(write=False)
    return table

