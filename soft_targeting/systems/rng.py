"""Domain-separated deterministic RNG using xxhash.

A sandbox run is a pure function of its seed: every random draw is
Hash(WorldSeed, Domain, Handle, Step), so populating or stepping the arena
in a different order never changes the outcome.
"""

from __future__ import annotations

import struct

import xxhash

from soft_targeting.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator."""

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, handle: int, step: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, handle, step)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, handle: int, step: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, handle, step) / (self._MAX_UINT64 + 1)

    def next_range(self, domain: Domain, handle: int, step: int, low: float, high: float) -> float:
        """Return a deterministic float in [low, high)."""
        return low + (high - low) * self.next_float(domain, handle, step)

    def next_int(self, domain: Domain, handle: int, step: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, handle, step)
        return low + int(f * (high - low + 1))
