"""
Seeded pseudo-random generation for Open Network Wars.

Board generation must be bit-identical for a given game number on every
platform, so this module carries its own 32-bit generator (mulberry32)
instead of relying on Python's Mersenne Twister. All arithmetic is masked
to 32 bits to reproduce wraparound.
"""

from typing import List, Optional, Sequence, TypeVar

from config import load_config

T = TypeVar('T')

MASK_32 = 0xFFFFFFFF
GOLDEN_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, low 32 bits kept."""
    return (a * b) & MASK_32


class SeededRandom:
    """Deterministic 32-bit-state generator (mulberry32)."""

    def __init__(self, seed: int):
        self.state = seed & MASK_32

    def next_float(self) -> float:
        """Return the next value in [0, 1)."""
        self.state = (self.state + GOLDEN_INCREMENT) & MASK_32
        s = self.state
        t = _imul(s ^ (s >> 15), 1 | s)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & MASK_32) ^ t
        return ((t ^ (t >> 14)) & MASK_32) / 4294967296

    def next_int(self, min_value: int, max_value: int) -> int:
        """Return an integer in the inclusive range [min_value, max_value]."""
        return min_value + int(self.next_float() * (max_value - min_value + 1))

    def shuffle(self, seq: Sequence[T]) -> List[T]:
        """Return a shuffled copy of seq (Fisher-Yates, from the end); seq is untouched."""
        items = list(seq)
        for i in range(len(items) - 1, 0, -1):
            j = int(self.next_float() * (i + 1))
            items[i], items[j] = items[j], items[i]
        return items


def hash_seed(game_number: int, secret: Optional[str] = None) -> int:
    """
    Derive a 32-bit seed from a game number.

    Args:
        game_number: External game identifier
        secret: Base seed string (defaults to the configured secret_base_seed)

    Returns:
        Unsigned 32-bit hash of "<secret>:<game_number>"
    """
    if secret is None:
        secret = load_config()['secret_base_seed']
    text = f"{secret}:{game_number}"
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & MASK_32
    return h


def create_rng(game_number: int) -> SeededRandom:
    """Create the board generator for a game number."""
    return SeededRandom(hash_seed(game_number))
