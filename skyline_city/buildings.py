"""
Building, layer and City classes for the scrolling skyline.

The City owns one Grid and repaints it from scratch every tick: each layer
may spawn a building at the right edge, then every live building is placed
from its age, clipped to the viewport and drawn back to front.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass, field

from .field_hash import cell_seed
from .grid import Grid

logger = logging.getLogger(__name__)

# Wraps at a quarter of the u32 range so elapsed = tick + TICK_WRAP - spawn
# stays in range for anything spawned before the wrap
TICK_WRAP = 0xFFFFFFFF // 4
COLLISION_GAP = 2
PROBABILITY_CURVE = 2.5

BUILDING_MIN_W = 6
BUILDING_MAX_W = 25
BUILDING_MIN_H = 10
BUILDING_EXTRA_H = 2  # tallest building pokes this far above the viewport

# Facade layout, in building-space cells
ROOF_MARGIN = 1
WINDOW_PAD_TOP = 2
WINDOW_PAD_X = 1
WINDOW_W = 2
WINDOW_H = 1
WINDOW_GAP_X = 1
WINDOW_GAP_Y = 1
MIN_DRAW_W = 2 * WINDOW_PAD_X + WINDOW_W


@dataclass(frozen=True)
class LayerDesc:
    density: float  # 0.0 (empty) .. 1.0 (packed)
    collision: float  # same scale, used while the layer is congested
    speed: int  # ticks per column: 1 (fastest) .. n (slower)
    wall_colors: tuple
    draw_windows: bool = False
    window_colors: tuple = ()


@dataclass(frozen=True)
class Building:
    size_x: int
    size_y: int
    spawn_tick: int
    color: int
    seed: int


@dataclass
class Layer:
    ring: deque = field(default_factory=deque)
    rightmost_extent: int = 0


class City:
    def __init__(self, width, height, step, rng, background, layers, tick=1):
        self.rng = rng
        self.width = width
        self.height = height
        self.step = step
        self.tick = tick
        self.background = background
        self.layers_desc = tuple(layers)
        self._layers = [Layer() for _ in self.layers_desc]
        self._grid = Grid(width, height, background)
        logger.debug(
            "city %dx%d step=%d layers=%d", width, height, step, len(self._layers)
        )

    def current_tick(self):
        return self.tick

    def current_size(self):
        return self.width, self.height

    def canvas(self):
        """The painted grid; callers read it, only the City writes it."""
        return self._grid

    @property
    def layers(self):
        return tuple(self._layers)

    def building_count(self):
        return sum(len(layer.ring) for layer in self._layers)

    def resize(self, width, height):
        # Buildings are not re-anchored; next tick clips them to the new size
        self.width = width
        self.height = height
        self._grid.resize(width, height, self.background)
        logger.debug("city resized to %dx%d", width, height)

    def advance_tick(self):
        sx, sy = self.width, self.height
        tick = self.tick

        self._grid.fill(self.background)

        for d, layer in zip(self.layers_desc, self._layers):
            if self._should_spawn(d, layer, tick):
                layer.ring.append(self._spawn(d, tick))

            # A building spawned this tick sits at x == width and paints nothing yet
            rightmost = 0
            for _ in range(len(layer.ring)):
                b = layer.ring.popleft()

                if b.spawn_tick > tick:
                    elapsed = tick + TICK_WRAP - b.spawn_tick
                else:
                    elapsed = tick - b.spawn_tick

                x = sx - elapsed * self.step // d.speed
                if x < 0:
                    offset_x, x = -x, 0
                else:
                    offset_x = 0

                if b.size_y > sy:
                    offset_y, y = b.size_y - sy, 0
                else:
                    offset_y, y = 0, sy - b.size_y

                if offset_x > b.size_x:
                    continue  # scrolled out, drop it

                w = min(b.size_x - offset_x, sx - x)
                h = min(b.size_y - offset_y, sy)

                rightmost = max(rightmost, x + b.size_x + COLLISION_GAP)
                self._draw_building(b, d, x, y, offset_x, offset_y, w, h)
                layer.ring.append(b)

            layer.rightmost_extent = rightmost

        tick += 1
        if tick > TICK_WRAP:
            tick = 1
        self.tick = tick

    def _should_spawn(self, d, layer, tick):
        if tick % d.speed != 0:
            return False
        if layer.rightmost_extent > self.width:
            threshold = d.collision
        else:
            threshold = d.density
        return self.rng.random() < threshold**PROBABILITY_CURVE

    def _spawn(self, d, tick):
        rng = self.rng
        max_h = max(BUILDING_MIN_H, self.height + BUILDING_EXTRA_H)
        size_x = rng.randint(BUILDING_MIN_W, BUILDING_MAX_W)
        size_y = rng.randint(BUILDING_MIN_H, max_h)

        n_colors = len(d.wall_colors)
        color_i = rng.randrange(n_colors) if n_colors > 1 else 0

        return Building(
            size_x=size_x,
            size_y=size_y,
            spawn_tick=tick,
            color=d.wall_colors[color_i],
            seed=rng.getrandbits(64),
        )

    def _draw_building(self, b, d, x, y, offset_x, offset_y, w, h):
        """
        Paint the visible part of a building.

        (x, y) is the top-left grid cell, (offset_x, offset_y) the first
        building-space cell shown there and (w, h) the clipped size.
        """
        if w <= 0 or h <= 0 or b.size_x < MIN_DRAW_W:
            return

        windows = d.draw_windows and len(d.window_colors) > 0
        period_y = WINDOW_H + WINDOW_GAP_Y
        band_y = None
        band_colors = {}

        for cy in range(h):
            by = offset_y + cy
            span = self._grid.row(y + cy)[x : x + w]

            if by == 0:
                # Roof: leave the corner columns open
                lo = max(ROOF_MARGIN - offset_x, 0)
                hi = min(b.size_x - ROOF_MARGIN - offset_x, w)
                if hi > lo:
                    span[lo:hi] = b.color
                continue

            span[:] = b.color

            if not windows or by < WINDOW_PAD_TOP:
                continue
            band_row = (by - WINDOW_PAD_TOP) % period_y
            if band_row >= WINDOW_H:
                continue

            if by - band_row != band_y:
                band_y = by - band_row
                band_colors = {}
            self._draw_windows(span, b, d, band_y, band_colors, offset_x, w)

    def _draw_windows(self, span, b, d, band_y, band_colors, offset_x, w):
        period_x = WINDOW_W + WINDOW_GAP_X
        right = b.size_x - WINDOW_PAD_X

        # First cell that can reach the visible columns
        k = max(offset_x - WINDOW_PAD_X, 0) // period_x
        cell_x = WINDOW_PAD_X + k * period_x

        while cell_x + WINDOW_W <= right and cell_x < offset_x + w:
            lo = max(cell_x, offset_x) - offset_x
            hi = min(cell_x + WINDOW_W, offset_x + w) - offset_x
            if hi > lo:
                color = band_colors.get(cell_x)
                if color is None:
                    color = window_color(b, d, cell_x, band_y)
                    band_colors[cell_x] = color
                span[lo:hi] = color
            cell_x += period_x


def window_color(b, d, cell_x, cell_y):
    """
    Color of the window cell whose top-left is building-space (cell_x, cell_y).

    Uses its own generator; the city's shared rng is left untouched.
    """
    return random.Random(cell_seed(b.seed, cell_x, cell_y)).choice(d.window_colors)
