"""Deterministic seeding with 32-bit wraparound arithmetic.

The hash and generator below reproduce signed/unsigned 32-bit integer
semantics exactly, so a given seed string yields the same variant and the
same random sequence in every process:

- rolling_hash: ``h = h * 31 + code_unit`` wrapped to signed 32 bits,
  iterated over UTF-16 code units
- SeededRandom: mulberry32-style generator seeded from the hash
"""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_GOLDEN = 0x6D2B79F5


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str) -> list[int]:
    data = text.encode("utf-16-le", errors="surrogatepass")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def rolling_hash(seed: str) -> int:
    """Signed 32-bit rolling hash of ``seed``.

    Examples:
        >>> rolling_hash("a")
        97
        >>> rolling_hash("ab")
        3105
    """
    h = 0
    for unit in _utf16_units(seed):
        h = _to_int32((h << 5) - h + unit)
    return h


def hash_seed(seed: str) -> int:
    """Non-negative seed hash used for variant selection."""
    return abs(rolling_hash(seed))


class SeededRandom:
    """Mulberry32-style generator returning floats in ``[0, 1)``.

    Two instances built from the same seed string produce identical
    sequences.
    """

    def __init__(self, seed: str) -> None:
        self._state = (abs(rolling_hash(seed)) or 1) & _MASK32

    def next(self) -> float:
        """Advance the generator and return the next value."""
        self._state = (self._state + _GOLDEN) & _MASK32
        s = self._state
        t = ((s ^ (s >> 15)) * (1 | s)) & _MASK32
        return ((t + (t ^ (t >> 7))) & _MASK32) / 4294967296

    __call__ = next


def pick(rng: SeededRandom, items: Sequence[T]) -> T:
    """Choose one element of ``items`` deterministically.

    Raises:
        ValueError: If ``items`` is empty
    """
    if not items:
        raise ValueError("pick: empty sequence")
    return items[int(rng.next() * len(items)) % len(items)]
