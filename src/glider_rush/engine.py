"""Pygame front-end: window, input mapping, rendering and the game loop.

The simulation lives in GameSession/SimulationDriver; this module only
translates pygame events into signals and draws snapshots.
"""

import argparse
import logging
import math
from typing import Optional, Tuple

import pygame

from .config import GameConfig, get_config
from .driver import Renderer, SimulationDriver
from .persistence import BestScoreStore, open_store
from .session import GameSession, SessionSnapshot, Signal

logger = logging.getLogger(__name__)


# Colors (RGB)
COLOR_SKY_TOP = (116, 192, 255)
COLOR_SKY_BOTTOM = (208, 235, 255)
COLOR_GROUND = (116, 198, 157)
COLOR_COLUMN = (46, 204, 113)
COLOR_LASER = (255, 82, 82)
COLOR_GLIDER = (76, 185, 255)
COLOR_COCKPIT = (255, 255, 255)
COLOR_WING = (15, 66, 117)
COLOR_SHIELD = (76, 217, 100)
COLOR_TRAIL = (255, 255, 255)
COLOR_TEXT = (20, 40, 70)
COLOR_OVERLAY_TEXT = (255, 255, 255)

# Keyboard mapping
FLAP_KEYS = (pygame.K_SPACE, pygame.K_UP)
PAUSE_KEYS = (pygame.K_p,)
RESUME_KEYS = (pygame.K_r,)
START_KEYS = (pygame.K_RETURN,)


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


class PygameRenderer(Renderer):
    """Draws snapshots onto a pygame surface."""

    def __init__(self, surface: pygame.Surface, show_hud: bool = True):
        self.surface = surface
        self.show_hud = show_hud
        self._background: Optional[pygame.Surface] = None
        self._fonts = {}

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def _sky(self) -> pygame.Surface:
        """Vertical gradient, built once per surface size."""
        w, h = self.surface.get_size()
        if self._background is None or self._background.get_size() != (w, h):
            sky = pygame.Surface((w, h))
            for y in range(h):
                t = y / max(h - 1, 1)
                color = tuple(
                    int(a + (b - a) * t) for a, b in zip(COLOR_SKY_TOP, COLOR_SKY_BOTTOM)
                )
                pygame.draw.line(sky, color, (0, y), (w, y))
            self._background = sky
        return self._background

    def render(self, snapshot: SessionSnapshot) -> None:
        self.surface.blit(self._sky(), (0, 0))
        w, h = snapshot.field_width, snapshot.field_height

        # Clouds
        for layer in snapshot.layers:
            cloud = pygame.Surface((int(layer.size * 2), int(layer.size * 1.2)), pygame.SRCALPHA)
            pygame.draw.ellipse(cloud, layer.color, cloud.get_rect())
            for x, y in layer.items:
                self.surface.blit(cloud, (int(x - layer.size), int(y + layer.offset - layer.size * 0.6)))

        pygame.draw.rect(self.surface, COLOR_GROUND, (0, h - 20, w, 20))

        for obstacle in snapshot.obstacles:
            self._draw_obstacle(obstacle, h)

        for power_up in snapshot.power_ups:
            color = hex_to_rgb(power_up.color)
            center = (int(power_up.x), int(power_up.y))
            pygame.draw.circle(self.surface, color, center, int(power_up.radius))
            letter = self._font(22).render(power_up.name[0], True, COLOR_OVERLAY_TEXT)
            self.surface.blit(letter, letter.get_rect(center=center))

        self._draw_glider(snapshot)

        if self.show_hud:
            self._draw_hud(snapshot)

    def _draw_obstacle(self, obstacle, field_height: int) -> None:
        top = obstacle.gap_y - obstacle.gap_size / 2
        bottom = obstacle.gap_y + obstacle.gap_size / 2

        if obstacle.kind == "laser":
            mid = int(obstacle.x + obstacle.width / 2)
            pygame.draw.line(self.surface, COLOR_LASER, (mid, 0), (mid, field_height), 6)
            return

        if obstacle.kind == "tilting":
            # Draw the pair on a tall surface and rotate it around the gap centre
            width = int(obstacle.width)
            column = pygame.Surface((width, field_height * 2), pygame.SRCALPHA)
            half_gap = int(obstacle.gap_size / 2)
            pygame.draw.rect(column, COLOR_COLUMN, (0, 0, width, field_height - half_gap))
            pygame.draw.rect(column, COLOR_COLUMN, (0, field_height + half_gap, width, field_height))
            rotated = pygame.transform.rotate(column, -math.degrees(obstacle.rotation))
            center = (obstacle.x + obstacle.width / 2, obstacle.gap_y)
            self.surface.blit(rotated, rotated.get_rect(center=center))
            return

        pygame.draw.rect(self.surface, COLOR_COLUMN, (int(obstacle.x), 0, int(obstacle.width), int(top)))
        pygame.draw.rect(
            self.surface, COLOR_COLUMN,
            (int(obstacle.x), int(bottom), int(obstacle.width), int(field_height - bottom)),
        )

    def _draw_glider(self, snapshot: SessionSnapshot) -> None:
        g = snapshot.glider
        for x, y in g.trail:
            pygame.draw.circle(self.surface, COLOR_TRAIL, (int(x), int(y)), 4)

        r = g.radius
        body = pygame.Surface((int(r * 2 + 24), int(r * 2)), pygame.SRCALPHA)
        bw, bh = body.get_size()
        pygame.draw.ellipse(body, COLOR_GLIDER, (0, 8, bw, bh - 16))
        pygame.draw.circle(body, COLOR_COCKPIT, (bw // 2 + 12, bh // 2 - 6), 9)
        pygame.draw.polygon(
            body, COLOR_WING,
            [(bw // 2 - 10, bh // 2 + 6), (bw // 2 + 18, bh // 2 + 14), (bw // 2 - 6, bh - 2)],
        )
        rotated = pygame.transform.rotate(body, -math.degrees(g.rotation))
        self.surface.blit(rotated, rotated.get_rect(center=(int(g.x), int(g.y))))

        if g.shielded:
            pygame.draw.circle(self.surface, COLOR_SHIELD, (int(g.x), int(g.y)), int(r + 8), 4)

    def _draw_hud(self, snapshot: SessionSnapshot) -> None:
        font = self._font(28)
        score = font.render(f"Score: {snapshot.score}", True, COLOR_TEXT)
        self.surface.blit(score, (10, 10))
        best = font.render(f"Best: {snapshot.best_score}", True, COLOR_TEXT)
        self.surface.blit(best, best.get_rect(topright=(snapshot.field_width - 10, 10)))
        power = self._font(24).render(snapshot.power_up_text, True, COLOR_TEXT)
        self.surface.blit(power, (10, 36))

        if snapshot.overlay:
            shade = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
            shade.fill((0, 0, 0, 120))
            self.surface.blit(shade, (0, 0))
            big = self._font(44)
            lines = snapshot.overlay.split("\n")
            cx = snapshot.field_width // 2
            cy = snapshot.field_height // 2 - (len(lines) - 1) * 22
            for i, line in enumerate(lines):
                text = big.render(line, True, COLOR_OVERLAY_TEXT)
                self.surface.blit(text, text.get_rect(center=(cx, cy + i * 44)))


class GliderEngine:
    """Main game engine: pygame window, input and loop.

    Handles:
    - Game loop driven by pygame.time.get_ticks()
    - Keyboard/mouse mapping to session signals
    - Pausing when the window loses focus
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[BestScoreStore] = None,
    ):
        self.config = config or GameConfig()

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.config.screen_width, self.config.screen_height)
        )
        pygame.display.set_caption("Glider Rush")
        self.clock = pygame.time.Clock()

        self.session = GameSession(self.config, store=store)
        self.renderer = PygameRenderer(self.screen)
        self.driver = SimulationDriver(self.session, self.renderer)
        self.running = False

    def signal_for_event(self, event: pygame.event.Event) -> Optional[Signal]:
        """Map a pygame event to a session signal (None if unmapped)."""
        if event.type == pygame.KEYDOWN:
            if event.key in FLAP_KEYS:
                return Signal.FLAP
            if event.key in PAUSE_KEYS:
                return Signal.PAUSE
            if event.key in RESUME_KEYS:
                return Signal.RESUME
            if event.key in START_KEYS:
                return Signal.START
        elif event.type == pygame.MOUSEBUTTONDOWN:
            return Signal.FLAP
        elif event.type == pygame.WINDOWFOCUSLOST:
            return Signal.PAUSE
        return None

    def handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
            else:
                signal = self.signal_for_event(event)
                if signal is not None:
                    self.session.handle_signal(signal)

    def tick(self, timestamp: Optional[float] = None) -> float:
        """One frame: simulate, draw, flip."""
        if timestamp is None:
            timestamp = pygame.time.get_ticks()
        delta = self.driver.frame(timestamp)
        pygame.display.flip()
        return delta

    def run(self) -> None:
        """Main game loop."""
        self.running = True
        logger.info("Glider Rush %dx%d @ %d fps", self.config.screen_width,
                    self.config.screen_height, self.config.fps)
        while self.running:
            self.handle_events()
            self.tick()
            self.clock.tick(self.config.fps)
        pygame.quit()


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="glider-rush", description="Glider Rush arcade game")
    parser.add_argument("--preset", default="default", help="Config preset name")
    parser.add_argument(
        "--best-score-path", default="data/best_score.json",
        help="JSON file holding the best score",
    )
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    engine = GliderEngine(get_config(args.preset), store=open_store(args.best_score_path))
    engine.run()


if __name__ == "__main__":
    main()
