"""Deterministic integer sources used to shuffle permutation tables.

Each source is a fully specified algorithm so a given seed produces the same
draws on every platform and numpy release.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod

import numpy as np

from ..errors import InvalidParameterError

_UINT64_MASK = (1 << 64) - 1
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def coerce_seed(seed: object) -> int:
    """Return ``seed`` as a plain int, rejecting non-integral values."""
    if isinstance(seed, bool):
        raise InvalidParameterError(f"Seed must be an integer, got {seed!r}")
    try:
        return operator.index(seed)
    except TypeError as exc:
        raise InvalidParameterError(f"Seed must be an integer, got {seed!r}") from exc


class IntegerSource(ABC):
    """Abstract seeded source of uniformly distributed integers."""

    name: str = ""

    def __init__(self, seed: int) -> None:
        self.seed = coerce_seed(seed)

    @abstractmethod
    def next_below(self, bound: int) -> int:
        """Draw an integer uniformly from ``[0, bound)``."""

    @staticmethod
    def _check_bound(bound: int) -> int:
        bound = operator.index(bound)
        if bound < 1:
            raise InvalidParameterError(f"Bound must be at least 1, got {bound}")
        return bound


class Pcg64Source(IntegerSource):
    """PCG64 (XSL-RR 128/64) seeded through numpy's SeedSequence.

    Negative seeds are folded to their 64-bit two's complement. Draws use the
    top bits of each raw 64-bit output; bounds that are not a power of two are
    served by rejection so every value stays equally likely.
    """

    name = "pcg64"

    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        self._bit_generator = np.random.PCG64(self.seed & _UINT64_MASK)

    def next_raw(self) -> int:
        """Return the next raw 64-bit output."""
        return int(self._bit_generator.random_raw())

    def next_below(self, bound: int) -> int:
        bound = self._check_bound(bound)
        if bound == 1:
            return 0
        bits = (bound - 1).bit_length()
        shift = 64 - bits
        while True:
            value = self.next_raw() >> shift
            if value < bound:
                return value


def _wrap_int32(value: int) -> int:
    """Wrap an int to signed 32-bit range the way unchecked integer math does."""
    return ((value - _INT32_MIN) & 0xFFFFFFFF) + _INT32_MIN


class DotNetSource(IntegerSource):
    """Knuth's subtractive generator as seeded by .NET's ``System.Random(int)``.

    Reproduces the legacy seeded algorithm (also used by Mono and Unity), so
    tables built from this source match content generated by hosts on that
    runtime. ``next_below(n)`` mirrors ``Random.Next(n)``.
    """

    name = "dotnet"

    MBIG = _INT32_MAX
    MSEED = 161803398

    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        if not _INT32_MIN <= self.seed <= _INT32_MAX:
            raise InvalidParameterError(
                f"Seed for the dotnet source must fit in 32 bits, got {self.seed}"
            )

        subtraction = _INT32_MAX if self.seed == _INT32_MIN else abs(self.seed)
        state = [0] * 56
        mj = self.MSEED - subtraction
        state[55] = mj
        mk = 1
        for i in range(1, 55):
            ii = (21 * i) % 55
            state[ii] = mk
            mk = mj - mk
            if mk < 0:
                mk += self.MBIG
            mj = state[ii]

        for _ in range(1, 5):
            for i in range(1, 56):
                state[i] = _wrap_int32(state[i] - state[1 + (i + 30) % 55])
                if state[i] < 0:
                    state[i] = _wrap_int32(state[i] + self.MBIG)

        self._state = state
        self._inext = 0
        self._inextp = 21

    def _internal_sample(self) -> int:
        inext = self._inext + 1
        if inext >= 56:
            inext = 1
        inextp = self._inextp + 1
        if inextp >= 56:
            inextp = 1

        value = _wrap_int32(self._state[inext] - self._state[inextp])
        if value == self.MBIG:
            value -= 1
        if value < 0:
            value = _wrap_int32(value + self.MBIG)

        self._state[inext] = value
        self._inext = inext
        self._inextp = inextp
        return value

    def next_int(self) -> int:
        """Return an int in ``[0, 2**31 - 1)``, like ``Random.Next()``."""
        return self._internal_sample()

    def sample(self) -> float:
        """Return a double in ``[0, 1)``."""
        return self._internal_sample() * (1.0 / self.MBIG)

    def next_below(self, bound: int) -> int:
        bound = self._check_bound(bound)
        if bound > _INT32_MAX:
            raise InvalidParameterError(
                f"Bound for the dotnet source must fit in 32 bits, got {bound}"
            )
        return int(self.sample() * bound)


# Registry of integer sources by name
SOURCES: dict[str, type[IntegerSource]] = {
    Pcg64Source.name: Pcg64Source,
    DotNetSource.name: DotNetSource,
}


def make_source(name: str, seed: int) -> IntegerSource:
    """Create the integer source registered under ``name``.

    Raises:
        InvalidParameterError: If no source is registered under ``name``
    """
    source_class = SOURCES.get(name)
    if source_class is None:
        raise InvalidParameterError(
            f"Unknown random source: {name!r} (expected one of {sorted(SOURCES)})"
        )
    return source_class(seed)
