"""
Terminal output for the city canvas.
"""

import ctypes
import os
import shutil
import sys

import numpy as np

from .config import SIZE_AUTO_PAD_H, SIZE_AUTO_PAD_W

RESET = "\033[0m"


class ConsoleError(RuntimeError):
    """Raised when the terminal cannot host the canvas."""


# --- Windows ANSI Support ---
def enable_windows_ansi():
    if os.name == "nt":
        kernel32 = ctypes.windll.kernel32
        hStdOut = kernel32.GetStdHandle(-11)
        mode = ctypes.c_ulong()
        kernel32.GetConsoleMode(hStdOut, ctypes.byref(mode))
        mode.value |= 4  # ENABLE_VIRTUAL_TERMINAL_PROCESSING
        kernel32.SetConsoleMode(hStdOut, mode)


def get_term_size():
    cols, rows = shutil.get_terminal_size(fallback=(0, 0))
    w, h = cols - SIZE_AUTO_PAD_W, rows - SIZE_AUTO_PAD_H
    if w <= 0 or h <= 0:
        raise ConsoleError("Can't get terminal size, try without --auto-size")
    return w, h


def hide_cursor():
    sys.stdout.write("\033[?25l")


def show_cursor():
    sys.stdout.write("\033[?25h")


def clear_screen():
    sys.stdout.write("\033[2J\033[1;1H")


def prepare_canvas(height):
    # Reserve the info line plus one line per canvas row; frames overwrite them
    print("info line")
    for _ in range(height):
        print()


def bg(color):
    return f"\033[48;5;{color}m"


def row_to_str(row):
    """Render one canvas row, switching color only where it changes."""
    if len(row) == 0:
        return ""
    starts = np.concatenate(([0], np.flatnonzero(np.diff(row)) + 1))
    ends = np.append(starts[1:], len(row))
    return "".join(
        bg(row[s]) + " " * (e - s) for s, e in zip(starts.tolist(), ends.tolist())
    )


def frame_to_str(city, info):
    _, height = city.current_size()

    # Back to the info line, clear it and reset styles
    parts = [f"{RESET}\033[{height + 1}A\033[2K\r{info}"]
    for row in city.canvas().rows():
        parts.append("\n")
        parts.append(row_to_str(row))
    parts.append(RESET)
    return "".join(parts)


def draw_to_console(city, info, out=None):
    out = out or sys.stdout
    out.write(frame_to_str(city, info) + "\n")
    out.flush()
