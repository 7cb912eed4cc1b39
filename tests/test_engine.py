"""Tests for the pygame front-end."""

import os
import random

import pytest

# Use dummy video driver for headless testing
os.environ['SDL_VIDEODRIVER'] = 'dummy'

import pygame

from glider_rush.config import GameConfig
from glider_rush.engine import GliderEngine, PygameRenderer, hex_to_rgb, main
from glider_rush.entities import Obstacle, PowerUp
from glider_rush.persistence import JsonBestScoreStore, MemoryBestScoreStore
from glider_rush.session import GameSession, SessionState, Signal


@pytest.fixture
def engine():
    engine = GliderEngine(GameConfig(), store=MemoryBestScoreStore())
    yield engine
    pygame.quit()


class TestSignalMapping:
    @pytest.mark.parametrize("key,signal", [
        (pygame.K_SPACE, Signal.FLAP),
        (pygame.K_UP, Signal.FLAP),
        (pygame.K_p, Signal.PAUSE),
        (pygame.K_r, Signal.RESUME),
        (pygame.K_RETURN, Signal.START),
    ])
    def test_keys(self, engine, key, signal):
        event = pygame.event.Event(pygame.KEYDOWN, key=key)
        assert engine.signal_for_event(event) == signal

    def test_unmapped_key(self, engine):
        event = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_z)
        assert engine.signal_for_event(event) is None

    def test_click_flaps(self, engine):
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10))
        assert engine.signal_for_event(event) == Signal.FLAP

    def test_focus_loss_pauses(self, engine):
        event = pygame.event.Event(pygame.WINDOWFOCUSLOST)
        assert engine.signal_for_event(event) == Signal.PAUSE


class TestGliderEngine:
    def test_initialization(self, engine):
        assert engine.session.state == SessionState.IDLE
        assert engine.screen.get_size() == (480, 640)

    def test_events_drive_session(self, engine):
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
        engine.handle_events()
        assert engine.session.state == SessionState.PLAYING
        assert engine.session.glider.vy == -6.8

    def test_escape_stops(self, engine):
        engine.running = True
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        engine.handle_events()
        assert not engine.running

    def test_tick_advances(self, engine):
        engine.session.flap()
        assert engine.tick(1000) == 0.0
        assert engine.tick(1016.666) == pytest.approx(1.0)
        assert engine.session.ticks == 1


class TestPygameRenderer:
    def test_renders_every_state_and_kind(self):
        pygame.init()
        surface = pygame.Surface((480, 640))
        renderer = PygameRenderer(surface)
        session = GameSession(rng=random.Random(0))
        renderer.render(session.snapshot())  # idle overlay

        session.start()
        for i, kind in enumerate(("static", "moving", "tilting", "laser")):
            session.obstacles.append(
                Obstacle(kind, 150 + i * 80, 320, 2.4, 640, rng=random.Random(i))
            )
        session.power_ups.append(PowerUp(session.registry["Shield"], 300, 200, 2.4))
        session.glider.shielded = True
        for _ in range(5):
            session.update(1.0)
        renderer.render(session.snapshot())

        session.pause()
        renderer.render(session.snapshot())
        session.resume()
        session.game_over()
        renderer.render(session.snapshot())

        # Sky gradient is drawn under everything
        assert surface.get_at((0, 0))[:3] != (0, 0, 0)

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#4cd964") == (76, 217, 100)


class TestMain:
    def test_main_runs_and_quits(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            GliderEngine, "run",
            lambda self: setattr(self, "ran", True),
        )
        main(["--preset", "easy", "--best-score-path", str(tmp_path / "best.json"),
              "--log-level", "warning"])

    def test_main_rejects_unknown_preset(self, tmp_path):
        with pytest.raises(ValueError):
            main(["--preset", "nope", "--best-score-path", str(tmp_path / "best.json")])

    def test_engine_persists_best_score(self, tmp_path):
        path = tmp_path / "best.json"
        engine = GliderEngine(store=JsonBestScoreStore(str(path)))
        engine.session.start()
        engine.session.score = 9
        engine.session.game_over()
        assert JsonBestScoreStore(str(path)).load() == 9
        pygame.quit()
