"""
City Skyline - an endless parallax skyline scrolling in the terminal.
"""

import argparse
import logging
import random
import signal
import sys
import time

from .buildings import City
from .config import (
    FPS,
    STEP_DEFAULT,
    SIZE_DEFAULT_W,
    SIZE_DEFAULT_H,
    C_SKY,
    LAYERS,
    ConfigError,
    validate_layers,
    validate_size,
)
from .console import (
    RESET,
    ConsoleError,
    enable_windows_ansi,
    get_term_size,
    hide_cursor,
    show_cursor,
    clear_screen,
    prepare_canvas,
    draw_to_console,
)

logger = logging.getLogger(__name__)

BANNER = "oO0OoO0OoO0Oo CiTY oO0OoO0OoO0Oo"


class FrameClock:
    """Sleeps away the rest of each frame and keeps running timing averages."""

    ALPHA = 0.1

    def __init__(self, fps):
        self.budget = 1.0 / fps
        self.frames = 0
        self.avg_work = 0.0
        self.avg_sleep = 0.0
        self._last = time.perf_counter()

    def tick(self):
        now = time.perf_counter()
        work = now - self._last
        pause = max(0.0, self.budget - work)
        if pause > 0:
            time.sleep(pause)

        if self.frames == 0:
            self.avg_work, self.avg_sleep = work, pause
        else:
            self.avg_work += self.ALPHA * (work - self.avg_work)
            self.avg_sleep += self.ALPHA * (pause - self.avg_sleep)
        self.frames += 1
        self._last = time.perf_counter()
        return pause

    def summary(self):
        return f"frame {self.avg_work * 1000:.1f}ms sleep {self.avg_sleep * 1000:.1f}ms"


class Shutdown(Exception):
    """Raised from the SIGTERM handler to leave the main loop."""


def _on_sigterm(signum, frame):
    raise Shutdown()


def info_center(msg, width):
    print(f"{msg:^{width}}")


def info_line(city, clock, stats):
    line = f"tick: {city.current_tick()}"
    if stats:
        line += (
            f"  layers: {len(city.layers)}"
            f"  buildings: {city.building_count()}"
            f"  {clock.summary()}"
        )
    return line


def build_parser():
    parser = argparse.ArgumentParser(
        prog="skyline-city",
        description="Endless procedural city skyline for the terminal",
    )
    parser.add_argument("--width", "-W", type=int, default=SIZE_DEFAULT_W, help="Canvas width in columns")
    parser.add_argument("--height", "-H", type=int, default=SIZE_DEFAULT_H, help="Canvas height in rows")
    parser.add_argument("--auto-size", "-a", action="store_true", help="Fit the terminal and follow resizes")
    parser.add_argument("--fps", "-f", type=int, default=FPS, help="Frames per second")
    parser.add_argument("--step", "-s", type=int, default=STEP_DEFAULT, help="Columns the fastest layer moves per frame")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: current time)")
    parser.add_argument("--stats", action="store_true", help="Show frame timing on the info line")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument("--log-file", default=None, help="Write log records here instead of stderr")
    return parser


def setup_logging(level, path=None):
    logging.basicConfig(
        level=getattr(logging, level),
        filename=path,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve_size(parser, args):
    if not args.auto_size:
        return args.width, args.height
    try:
        return get_term_size()
    except ConsoleError as e:
        parser.error(str(e))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    if args.fps < 1:
        parser.error(f"fps must be >= 1, got {args.fps}")

    width, height = resolve_size(parser, args)
    try:
        validate_size(width, height, args.step)
        validate_layers(LAYERS)
    except ConfigError as e:
        parser.error(str(e))

    seed = args.seed if args.seed is not None else int(time.time())

    info_center(BANNER, width)
    info_center(f"seed: {seed}", width)
    print()
    logger.info("starting %dx%d seed=%d step=%d", width, height, seed, args.step)

    rng = random.Random(seed)
    city = City(width, height, args.step, rng, C_SKY, LAYERS)
    clock = FrameClock(args.fps)

    signal.signal(signal.SIGTERM, _on_sigterm)
    enable_windows_ansi()
    hide_cursor()
    prepare_canvas(height)

    size_lost = False
    try:
        while True:
            if args.auto_size:
                try:
                    new_size = get_term_size()
                    size_lost = False
                except ConsoleError:
                    if not size_lost:
                        logger.warning("terminal size unavailable, keeping %dx%d", width, height)
                    size_lost = True
                    new_size = (width, height)
                if new_size != (width, height):
                    width, height = new_size
                    city.resize(width, height)
                    logger.info("resized to %dx%d", width, height)
                    clear_screen()
                    prepare_canvas(height)

            city.advance_tick()

            draw_to_console(city, info_line(city, clock, args.stats))
            clock.tick()

    except (KeyboardInterrupt, Shutdown):
        pass
    finally:
        sys.stdout.write(RESET)
        show_cursor()
        print()
        print("City skyline ended.")
        logger.info("stopped at tick %d after %d frames", city.current_tick(), clock.frames)


if __name__ == "__main__":
    main()
