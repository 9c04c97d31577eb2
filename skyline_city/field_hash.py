"""
Streaming hash used to derive stable per-cell seeds for window colors.

Jenkins one-at-a-time: every byte is folded into a 32-bit accumulator and a
short finalizer spreads the last inputs across all output bits. Not
cryptographic, just enough avalanche that neighbouring cells look unrelated.
"""

from dataclasses import dataclass

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

WINDOW_SALT = 0x5EEDC17E


@dataclass(frozen=True)
class FieldHash:
    state: int = 0

    def absorb(self, value):
        """Mix a 32-bit word, least significant byte first."""
        h = self.state
        value &= MASK32
        for shift in (0, 8, 16, 24):
            h = (h + ((value >> shift) & 0xFF)) & MASK32
            h = (h + (h << 10)) & MASK32
            h ^= h >> 6
        return FieldHash(h)

    def finish(self):
        h = self.state
        h = (h + (h << 3)) & MASK32
        h ^= h >> 11
        h = (h + (h << 15)) & MASK32
        return h


def cell_seed(instance_seed, x, y, salt=WINDOW_SALT):
    """Seed for the cell at building-space (x, y) of one building instance."""
    h = FieldHash().absorb(salt).absorb(x).absorb(y).finish()
    return (instance_seed ^ ((h << 32) | h)) & MASK64
