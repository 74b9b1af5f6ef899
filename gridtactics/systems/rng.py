"""Seeded draws for battlefield generation and army placement.

Every draw hashes ``(seed, domain, key, index)`` with xxhash, so a value
depends only on where it is used and never on how many draws came before
it.  Map generation keys its draws by patch number and tile, spawning by
unit id; changing one feature of the generator does not shift the others.
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from gridtactics.core.enums import Domain
from gridtactics.core.models import Vector2

T = TypeVar("T")

_SCALE = float(1 << 64)


class DeterministicRNG:
    """Stateless domain-separated draws for one battle seed."""

    __slots__ = ("_seed",)

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def next_float(self, domain: Domain, key: int, index: int) -> float:
        """Uniform float in [0.0, 1.0)."""
        payload = struct.pack("<qiqi", self._seed, domain.value, key, index)
        return xxhash.xxh64_intdigest(payload) / _SCALE

    def next_int(self, domain: Domain, key: int, index: int, low: int, high: int) -> int:
        """Integer in [low, high] inclusive."""
        return low + int(self.next_float(domain, key, index) * (high - low + 1))

    def next_bool(self, domain: Domain, key: int, index: int, probability: float = 0.5) -> bool:
        return self.next_float(domain, key, index) < probability

    def choice(self, domain: Domain, key: int, index: int, options: Sequence[T]) -> T:
        """One element of *options*; raises IndexError when it is empty."""
        if not options:
            raise IndexError("cannot choose from an empty sequence")
        return options[self.next_int(domain, key, index, 0, len(options) - 1)]

    def point(
        self,
        domain: Domain,
        key: int,
        index: int,
        x_range: tuple[int, int],
        y_range: tuple[int, int],
    ) -> Vector2:
        """Grid coordinate with x and y drawn from inclusive ranges.

        Uses *index* for x and ``index + 1`` for y.
        """
        return Vector2(
            self.next_int(domain, key, index, *x_range),
            self.next_int(domain, key, index + 1, *y_range),
        )
