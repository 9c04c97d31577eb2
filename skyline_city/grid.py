"""
Flat row-major buffer of palette color indices.
"""

import numpy as np


class Grid:
    """
    Fixed-size 2D canvas stored as one contiguous numpy buffer.

    Cell (x, y) lives at ``y * width + x``. Rows are handed out as numpy
    views so callers can paint whole spans with a single slice assignment.
    """

    DTYPE = np.uint8

    def __init__(self, width, height, fill=0):
        self._alloc(width, height, fill)

    def _alloc(self, width, height, fill):
        if width <= 0 or height <= 0:
            raise ValueError(f"grid size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.data = np.full(width * height, fill, dtype=self.DTYPE)

    @property
    def size(self):
        return self.width, self.height

    def index(self, x, y):
        return y * self.width + x

    def fill(self, color):
        self.data.fill(color)

    def row(self, y):
        """Writable view of row ``y``."""
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} out of range 0..{self.height - 1}")
        start = y * self.width
        return self.data[start : start + self.width]

    def rows(self):
        for y in range(self.height):
            yield self.row(y)

    def get(self, x, y):
        return int(self.data[self.index(x, y)])

    def set(self, x, y, color):
        self.data[self.index(x, y)] = color

    def resize(self, width, height, fill=0):
        # Old contents are dropped; the engine repaints every tick anyway
        self._alloc(width, height, fill)

    def as_array(self):
        """Read-only (height, width) view of the buffer."""
        view = self.data.reshape(self.height, self.width).view()
        view.flags.writeable = False
        return view

    def __repr__(self):
        return f"Grid({self.width}x{self.height})"
