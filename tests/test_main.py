"""
Tests for the command-line driver.
"""

import logging

import pytest

from skyline_city import main as cli
from skyline_city.config import FPS, SIZE_DEFAULT_H, SIZE_DEFAULT_W


class TestParser:
    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert (args.width, args.height) == (SIZE_DEFAULT_W, SIZE_DEFAULT_H)
        assert args.fps == FPS
        assert args.step == 1
        assert args.seed is None
        assert not args.auto_size
        assert not args.stats

    def test_short_flags(self):
        args = cli.build_parser().parse_args(["-a", "-s", "3", "-f", "10"])
        assert args.auto_size
        assert args.step == 3
        assert args.fps == 10


class TestStartupErrors:
    @pytest.mark.parametrize(
        "argv",
        [
            ["--width", "10"],
            ["--height", "5"],
            ["--step", "0"],
            ["--step", "200"],
            ["--fps", "0"],
        ],
    )
    def test_bad_arguments_exit(self, argv):
        with pytest.raises(SystemExit) as exc:
            cli.main(argv)
        assert exc.value.code == 2

    def test_auto_size_without_terminal(self, monkeypatch):
        def no_term():
            raise cli.ConsoleError("no terminal")

        monkeypatch.setattr(cli, "get_term_size", no_term)
        with pytest.raises(SystemExit):
            cli.main(["--auto-size"])


class TestFrameClock:
    def test_sleeps_remaining_budget(self, monkeypatch):
        slept = []
        monkeypatch.setattr(cli.time, "sleep", slept.append)
        clock = cli.FrameClock(10)
        pause = clock.tick()
        assert slept == [pause]
        assert 0 < pause <= 0.1
        assert clock.frames == 1

    def test_never_sleeps_negative(self, monkeypatch):
        slept = []
        monkeypatch.setattr(cli.time, "sleep", slept.append)
        clock = cli.FrameClock(10)
        clock._last -= 1.0  # a frame that took a full second
        assert clock.tick() == 0.0
        assert slept == []
        assert clock.avg_work >= 1.0

    def test_summary(self):
        clock = cli.FrameClock(30)
        assert clock.summary() == "frame 0.0ms sleep 0.0ms"


class TestRun:
    def test_runs_until_interrupted(self, monkeypatch, capsys):
        infos = []

        def fake_draw(city, info, out=None):
            infos.append(info)
            if len(infos) == 3:
                raise KeyboardInterrupt

        monkeypatch.setattr(cli, "draw_to_console", fake_draw)
        monkeypatch.setattr(cli.signal, "signal", lambda *a: None)
        monkeypatch.setattr(cli.time, "sleep", lambda s: None)

        cli.main(["--seed", "7", "--width", "40", "--height", "30"])

        assert infos == ["tick: 2", "tick: 3", "tick: 4"]
        out = capsys.readouterr().out
        assert "seed: 7" in out
        assert cli.BANNER in out
        assert "City skyline ended." in out

    def test_stats_line(self, monkeypatch):
        infos = []

        def fake_draw(city, info, out=None):
            infos.append(info)
            raise cli.Shutdown()

        monkeypatch.setattr(cli, "draw_to_console", fake_draw)
        monkeypatch.setattr(cli.signal, "signal", lambda *a: None)

        cli.main(["--seed", "1", "--width", "40", "--height", "30", "--stats"])

        assert infos[0].startswith("tick: 2  layers: 3  buildings: ")
        assert "frame " in infos[0]

    def test_follows_terminal_resize(self, monkeypatch):
        sizes = iter([(60, 30), (60, 30), (50, 32)])
        seen = []

        def fake_draw(city, info, out=None):
            seen.append(city.current_size())
            if len(seen) == 2:
                raise KeyboardInterrupt

        monkeypatch.setattr(cli, "get_term_size", lambda: next(sizes))
        monkeypatch.setattr(cli, "draw_to_console", fake_draw)
        monkeypatch.setattr(cli.signal, "signal", lambda *a: None)
        monkeypatch.setattr(cli.time, "sleep", lambda s: None)

        cli.main(["--seed", "3", "--auto-size"])

        assert seen == [(60, 30), (50, 32)]

    def test_lost_terminal_size_warns_once(self, monkeypatch, caplog):
        """A run of failed size queries logs one warning, a new run logs again."""
        answers = iter(
            [(60, 30), None, None, None, (60, 30), None, None]
        )
        frames = []

        def term_size():
            size = next(answers)
            if size is None:
                raise cli.ConsoleError("gone")
            return size

        def fake_draw(city, info, out=None):
            frames.append(city.current_size())
            if len(frames) == 6:
                raise KeyboardInterrupt

        monkeypatch.setattr(cli, "get_term_size", term_size)
        monkeypatch.setattr(cli, "draw_to_console", fake_draw)
        monkeypatch.setattr(cli.signal, "signal", lambda *a: None)
        monkeypatch.setattr(cli.time, "sleep", lambda s: None)
        caplog.set_level(logging.WARNING, logger="skyline_city.main")

        cli.main(["--seed", "5", "--auto-size"])

        warnings = [r for r in caplog.records if "terminal size unavailable" in r.getMessage()]
        assert len(warnings) == 2
        assert frames == [(60, 30)] * 6

    def test_sigterm_handler_raises(self):
        with pytest.raises(cli.Shutdown):
            cli._on_sigterm(15, None)
