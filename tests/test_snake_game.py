"""
Tests for snake_game.py - scene handlers and the frame-driven game update.

Runs pygame headless through SDL's dummy video/audio drivers.
"""

import sys
import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pygame

import snake_game as sg
from snake_config import Settings
from snake_logic import Body, COUNTDOWN, RUNNING, GAME_OVER, UP


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k, unicode="")


@pytest.fixture
def app():
    a = sg.new_app(Settings(mute=True, seed=3))
    yield a
    pygame.quit()


def finish_countdown(app):
    sg.update_game(app, 4000)
    assert app["game"].phase == RUNNING


class TestMenu:

    def test_starts_on_menu(self, app):
        assert app["state"] == sg.STATE_MENU
        assert app["high_score"] == 0
        assert app["game"] is None

    def test_navigation_wraps(self, app):
        sg.handle_menu(app, [key(pygame.K_UP)])
        assert app["menu_idx"] == len(sg.MENU_ITEMS) - 1
        sg.handle_menu(app, [key(pygame.K_DOWN)])
        assert app["menu_idx"] == 0

    def test_start_opens_difficulty(self, app):
        sg.handle_menu(app, [key(pygame.K_RETURN)])
        assert app["state"] == sg.STATE_DIFFICULTY
        assert sg.DIFFICULTY_ITEMS[app["diff_idx"]] == "Normal"

    def test_credits_and_back(self, app):
        sg.handle_menu(app, [key(pygame.K_s), key(pygame.K_SPACE)])
        assert app["state"] == sg.STATE_CREDITS
        sg.draw_credits(app)
        sg.handle_credits(app, [key(pygame.K_ESCAPE)])
        assert app["state"] == sg.STATE_MENU

    def test_quit_exits(self, app):
        with pytest.raises(SystemExit):
            sg.handle_menu(app, [pygame.event.Event(pygame.QUIT)])


class TestDifficulty:

    def test_pick_hard_starts_game(self, app):
        app["state"] = sg.STATE_DIFFICULTY
        sg.handle_difficulty(app, [key(pygame.K_DOWN), key(pygame.K_RETURN)])
        assert app["state"] == sg.STATE_PLAY
        assert app["difficulty"] == "hard"
        assert app["game"].interval == 120
        assert app["game"].phase == COUNTDOWN
        assert app["countdown_clock"].running is True
        assert app["game_clock"].running is False

    def test_cancel_returns_to_menu(self, app):
        app["state"] = sg.STATE_DIFFICULTY
        sg.handle_difficulty(app, [key(pygame.K_DOWN), key(pygame.K_DOWN), key(pygame.K_RETURN)])
        assert app["state"] == sg.STATE_MENU
        assert app["game"] is None


class TestPlay:

    def test_countdown_then_running(self, app):
        sg.start_game(app, "normal")
        sg.update_game(app, 1000)
        assert app["game"].countdown_label() == "2"
        sg.draw_play(app)

        sg.update_game(app, 3000)
        assert app["game"].phase == RUNNING
        assert app["countdown_clock"].running is False
        assert app["game_clock"].running is True

    def test_keys_ignored_during_countdown(self, app):
        sg.start_game(app, "normal")
        sg.handle_play(app, [key(pygame.K_UP)])
        assert len(app["game"].pending) == 0

    def test_arrow_key_turns_snake(self, app):
        sg.start_game(app, "normal")
        finish_countdown(app)
        G = app["game"]
        G.food = (0, 0)
        sg.handle_play(app, [key(pygame.K_w)])
        sg.update_game(app, G.interval)
        assert G.direction == UP
        sg.draw_play(app)

    def test_collision_records_high_score(self, app):
        sg.start_game(app, "easy")
        finish_countdown(app)
        G = app["game"]
        G.score = 15
        G.body = Body([(sg.cfg.GRID_COLS - 1, 3), (sg.cfg.GRID_COLS - 2, 3)])
        G.food = (0, 0)
        sg.update_game(app, G.interval)
        assert G.phase == GAME_OVER
        assert app["high_score"] == 15
        assert app["game_clock"].running is False
        sg.draw_play(app)

    def test_restart_after_game_over(self, app):
        sg.start_game(app, "normal")
        finish_countdown(app)
        G = app["game"]
        G.body = Body([(sg.cfg.GRID_COLS - 1, 3), (sg.cfg.GRID_COLS - 2, 3)])
        sg.update_game(app, G.interval)
        assert G.phase == GAME_OVER

        sg.handle_play(app, [key(pygame.K_r)])
        assert app["game"] is G
        assert G.phase == COUNTDOWN
        assert G.score == 0
        assert app["countdown_clock"].running is True

    def test_game_over_menu_choice(self, app):
        sg.start_game(app, "normal")
        finish_countdown(app)
        G = app["game"]
        G.body = Body([(sg.cfg.GRID_COLS - 1, 3), (sg.cfg.GRID_COLS - 2, 3)])
        sg.update_game(app, G.interval)

        sg.handle_play(app, [key(pygame.K_DOWN)])
        assert sg.GAMEOVER_ITEMS[app["over_idx"]] == "Main Menu"
        sg.handle_play(app, [key(pygame.K_RETURN)])
        assert app["state"] == sg.STATE_MENU
        assert app["game"] is None

    def test_escape_mid_game_stops_clocks(self, app):
        sg.start_game(app, "normal")
        finish_countdown(app)
        sg.handle_play(app, [key(pygame.K_ESCAPE)])
        assert app["state"] == sg.STATE_MENU
        assert app["game_clock"].running is False
        assert app["countdown_clock"].running is False


class TestParseArgs:

    def test_defaults(self):
        args = sg.parse_args([])
        assert args.difficulty is None
        assert args.seed is None
        assert args.mute is False
        assert args.log_level is None

    def test_flags(self):
        args = sg.parse_args(["--difficulty", "hard", "--seed", "4", "--mute", "--log-level", "DEBUG"])
        assert (args.difficulty, args.seed, args.mute, args.log_level) == ("hard", 4, True, "DEBUG")

    def test_rejects_unknown_difficulty(self):
        with pytest.raises(SystemExit):
            sg.parse_args(["--difficulty", "extreme"])
