"""
Tests for CLI parsing, shortcuts and crash logging.
"""

import os

import pygame
import pytest

from config import GridConfig, PlaybackConfig
from input.bounds import hit_rect, in_staff_area
from input.shortcuts import DEFAULT_SHORTCUTS, COMMANDS, CLEAR, PLAY, parse_shortcuts
from main import build_parser, config_from_args, main
from utils.crashlog import log_exception


class TestConfigFromArgs:

    def test_defaults(self):
        cfg = config_from_args(build_parser().parse_args([]))
        assert cfg.grid == GridConfig()
        assert cfg.audio.backend == "tone"
        assert cfg.playback.interval_s == 0.5

    def test_policies_and_range(self):
        args = build_parser().parse_args(
            ["--snap", "fixed", "--placement", "click_x", "--order", "x", "--range", "12", "--step", "5"])
        grid = config_from_args(args).grid
        assert grid.snap_policy == "fixed"
        assert grid.placement_policy == "click_x"
        assert grid.playback_order == "x"
        assert grid.middle_index == 12 and grid.grid_steps == 24
        assert grid.line_y(12) == grid.middle_line_y

    def test_rejects_unknown_policy(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--snap", "diagonal"])


class TestBounds:

    def test_hit_rect(self):
        assert hit_rect(GridConfig()) == (130, 30, 730, 200)

    def test_inside_and_outside(self):
        cfg = GridConfig()
        assert in_staff_area(cfg, 300, 130)
        assert not in_staff_area(cfg, 129.9, 130)
        assert not in_staff_area(cfg, 300, 200.1)


class TestShortcuts:

    def test_defaults_map_to_commands(self):
        assert set(DEFAULT_SHORTCUTS.values()) <= set(COMMANDS)
        assert DEFAULT_SHORTCUTS[pygame.K_c] == CLEAR

    def test_parse_numeric_keycodes(self):
        assert parse_shortcuts(f"{pygame.K_F5}=play") == {pygame.K_F5: PLAY}

    def test_parse_unknown_command(self):
        with pytest.raises(ValueError, match="Unknown command"):
            parse_shortcuts("x=undo")


def test_log_exception_writes_report(tmp_path, monkeypatch):
    monkeypatch.setenv("STAFF_SKETCH_LOG_DIR", str(tmp_path))
    try:
        raise OSError("disk full")
    except OSError as e:
        path = log_exception("export_svg", e)
    assert os.path.dirname(path) == str(tmp_path)
    with open(path, encoding="utf-8") as f:
        text = f.read()
    assert "[export_svg] OSError: disk full" in text
    assert "Traceback" in text


class TestPlaybackConfig:

    def test_invalid_bpm(self):
        with pytest.raises(ValueError, match="Invalid bpm"):
            PlaybackConfig(bpm=0)

    def test_invalid_interval(self):
        with pytest.raises(ValueError, match="Invalid interval_s"):
            PlaybackConfig(interval_s=0)

    def test_unknown_duration_token(self):
        with pytest.raises(ValueError, match="Unknown duration token"):
            PlaybackConfig(sequence_duration="dotted")

    def test_cli_rejects_zero_bpm(self):
        with pytest.raises(ValueError, match="Invalid bpm"):
            config_from_args(build_parser().parse_args(["--bpm", "0"]))

    def test_main_exits_with_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--interval", "0"])
        assert exc.value.code == 2
        assert "Invalid interval_s" in capsys.readouterr().err
