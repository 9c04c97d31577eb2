"""
Configuration constants, palettes and layer presets for the city skyline.
"""

from .buildings import LayerDesc

# --- Frame ---
FPS = 30
STEP_DEFAULT = 1

# --- Canvas size ---
SIZE_DEFAULT_W = 150
SIZE_DEFAULT_H = 40
SIZE_MIN_W = 30
SIZE_MIN_H = 30
# Rows reserved below the canvas in auto-size mode (info line, prompt)
SIZE_AUTO_PAD_W = 0
SIZE_AUTO_PAD_H = 5

# --- Palette (xterm-256 color numbers) ---
C_SKY = 17

WALLS_BACK = (235, 236, 237)
WALLS_MID = (238, 239, 60)
WALLS_FRONT = (240, 241, 242, 96)

WINDOWS_WARM = (220, 221, 229, 214, 236, 236)
WINDOWS_NEON = (51, 201, 87, 213, 228, 237, 237, 237)

MAX_COLORS = 32

# Back to front; speed is ticks per column, so the back layer scrolls slowest
LAYERS = (
    LayerDesc(
        density=0.9,
        collision=0.35,
        speed=4,
        wall_colors=WALLS_BACK,
        draw_windows=False,
        window_colors=(),
    ),
    LayerDesc(
        density=0.8,
        collision=0.2,
        speed=2,
        wall_colors=WALLS_MID,
        draw_windows=True,
        window_colors=WINDOWS_WARM,
    ),
    LayerDesc(
        density=0.7,
        collision=0.1,
        speed=1,
        wall_colors=WALLS_FRONT,
        draw_windows=True,
        window_colors=WINDOWS_NEON,
    ),
)


class ConfigError(ValueError):
    """Raised for a layer or canvas configuration the engine cannot run with."""


def _check_colors(name, colors, min_len):
    if not min_len <= len(colors) <= MAX_COLORS:
        raise ConfigError(
            f"{name}: expected {min_len}..{MAX_COLORS} colors, got {len(colors)}"
        )
    for c in colors:
        if not 0 <= c <= 255:
            raise ConfigError(f"{name}: color {c} outside 0..255")


def validate_layers(layers):
    if not layers:
        raise ConfigError("at least one layer is required")

    for i, d in enumerate(layers):
        if not 0.0 <= d.density <= 1.0:
            raise ConfigError(f"layer {i}: density {d.density} outside [0, 1]")
        if not 0.0 <= d.collision <= 1.0:
            raise ConfigError(f"layer {i}: collision {d.collision} outside [0, 1]")
        if d.speed < 1:
            raise ConfigError(f"layer {i}: speed must be >= 1, got {d.speed}")
        _check_colors(f"layer {i} walls", d.wall_colors, 1)
        _check_colors(f"layer {i} windows", d.window_colors, 0)


def validate_size(width, height, step):
    if width < SIZE_MIN_W or height < SIZE_MIN_H:
        raise ConfigError(
            f"canvas {width}x{height} is smaller than {SIZE_MIN_W}x{SIZE_MIN_H}"
        )
    if not 1 <= step <= width // 2:
        raise ConfigError(f"step must be in 1..{width // 2}, got {step}")
