"""Game session: state machine plus the per-tick simulation.

The session owns every entity of one play-through. Input arrives as
synchronous signal calls; the driver calls update() once per frame and reads
snapshot() afterwards for rendering. Nothing here draws or reads a clock.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .collision import absorb_hit, first_collision, mark_passed, out_of_bounds
from .config import FRAME_MS, GameConfig
from .entities import Glider, Obstacle, ParallaxLayer, PowerUp, default_layers
from .persistence import BestScoreStore, MemoryBestScoreStore
from .powerups import ActivePowerUp, PowerUpEffect, create_registry

logger = logging.getLogger(__name__)

NO_POWER_UP_TEXT = "Power-up: None"


class SessionState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    GAMEOVER = "gameover"


class Signal(Enum):
    """Discrete input signals."""
    FLAP = "flap"
    PAUSE = "pause"
    RESUME = "resume"
    START = "start"


# ------------------------------------------------------------------
# Read-only snapshots for renderers and HUDs
# ------------------------------------------------------------------

@dataclass(frozen=True)
class GliderSnapshot:
    x: float
    y: float
    rotation: float
    radius: float
    shielded: bool
    trail: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class ObstacleSnapshot:
    kind: str
    x: float
    width: float
    gap_y: float
    gap_size: float
    rotation: float
    passed: bool


@dataclass(frozen=True)
class PowerUpSnapshot:
    name: str
    color: str
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class LayerSnapshot:
    color: Tuple[int, int, int, int]
    size: float
    offset: float
    items: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a renderer or score display may read after a tick."""
    state: SessionState
    score: int
    best_score: int
    score_multiplier: int
    speed_multiplier: float
    power_up_name: Optional[str]
    power_up_text: str
    overlay: Optional[str]
    glider: GliderSnapshot
    obstacles: Tuple[ObstacleSnapshot, ...]
    power_ups: Tuple[PowerUpSnapshot, ...]
    layers: Tuple[LayerSnapshot, ...]
    field_width: int
    field_height: int


class GameSession:
    """One play-through: entities, score, multipliers and the state machine.

    Transitions:
        idle     --flap/start--> playing   (flap in idle also flaps)
        playing  --pause-------> paused
        paused   --resume------> playing
        playing  --fatal hit---> gameover  (best score persisted if beaten)
        gameover --flap/start--> playing

    Any other signal is ignored. Only `playing` runs update().
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[BestScoreStore] = None,
        rng: Optional[random.Random] = None,
    ):
        """Create session in the idle state.

        Args:
            config: Game configuration. Uses defaults if None.
            store: Best-score persistence. In-memory if None.
            rng: Random source for spawns and phase offsets.
        """
        self.config = config or GameConfig()
        self.store = store or MemoryBestScoreStore()
        self.rng = rng or random.Random()
        self.registry = create_registry(self.config.power_ups)

        self.best_score = self.store.load()

        # Bumped on start/resume; the driver re-anchors its clock when it changes
        self.clock_epoch = 0

        self.glider = Glider(self.config.screen_height / 2, self.config.glider)
        self.obstacles: List[Obstacle] = []
        self.power_ups: List[PowerUp] = []
        self.layers: List[ParallaxLayer] = []
        self.active_power_up: Optional[ActivePowerUp] = None
        self.power_up_text = NO_POWER_UP_TEXT
        self.reset()

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Back to idle with fresh entities, timers and multipliers."""
        self.state = SessionState.IDLE
        self.glider.reset(self.config.screen_height / 2)
        self.obstacles = []
        self.power_ups = []
        self.score = 0
        self.score_multiplier = 1
        self.speed_multiplier = 1.0
        self.time_since_obstacle = 0.0
        self.time_since_power_up = 0.0
        self.sim_time = 0.0
        self.ticks = 0
        self.active_power_up = None
        self.power_up_text = NO_POWER_UP_TEXT
        self.layers = default_layers(
            self.config.screen_width, self.config.screen_height, self.rng
        )

    def start(self) -> None:
        if self.state not in (SessionState.IDLE, SessionState.GAMEOVER):
            logger.debug("Ignoring start while %s", self.state.value)
            return
        self.reset()
        self.state = SessionState.PLAYING
        self.clock_epoch += 1
        logger.info("Run started (best=%d)", self.best_score)

    def flap(self) -> None:
        if self.state == SessionState.PLAYING:
            self.glider.flap()
        elif self.state == SessionState.IDLE:
            self.start()
            self.glider.flap()
        elif self.state == SessionState.GAMEOVER:
            self.start()
        else:
            logger.debug("Ignoring flap while %s", self.state.value)

    def pause(self) -> None:
        if self.state != SessionState.PLAYING:
            logger.debug("Ignoring pause while %s", self.state.value)
            return
        self.state = SessionState.PAUSED

    def resume(self) -> None:
        if self.state != SessionState.PAUSED:
            logger.debug("Ignoring resume while %s", self.state.value)
            return
        self.state = SessionState.PLAYING
        self.clock_epoch += 1

    def handle_signal(self, signal) -> None:
        """Dispatch a Signal (or its string value)."""
        signal = Signal(signal)
        if signal == Signal.FLAP:
            self.flap()
        elif signal == Signal.PAUSE:
            self.pause()
        elif signal == Signal.RESUME:
            self.resume()
        elif signal == Signal.START:
            self.start()

    def game_over(self) -> None:
        self.state = SessionState.GAMEOVER
        logger.info("Game over: score=%d best=%d", self.score, self.best_score)
        if self.score > self.best_score:
            self.best_score = self.score
            self.store.save(self.best_score)
            logger.info("New best score: %d", self.best_score)

    @property
    def is_playing(self) -> bool:
        return self.state == SessionState.PLAYING

    # ------------------------------------------------------------------
    # Power-ups
    # ------------------------------------------------------------------

    def activate_power_up(self, effect: PowerUpEffect) -> None:
        """Clear any running effect, then apply `effect`. No stacking."""
        if self.active_power_up:
            self.clear_power_up()
        effect.apply(self)
        self.active_power_up = ActivePowerUp(effect, self.sim_time + effect.duration)
        self.power_up_text = f"Power-up: {effect.name}"
        logger.debug("Power-up %s active for %.0fms", effect.name, effect.duration)

    def clear_power_up(self) -> None:
        if not self.active_power_up:
            return
        self.active_power_up.effect.clear(self)
        logger.debug("Power-up %s cleared", self.active_power_up.effect.name)
        self.active_power_up = None
        self.power_up_text = NO_POWER_UP_TEXT

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def spawn_obstacle(self) -> Obstacle:
        cfg = self.config.obstacles
        h = self.config.screen_height
        kind = self.rng.choice(cfg.kinds)
        gap_y = h * cfg.gap_min_fraction + self.rng.random() * h * cfg.gap_span_fraction
        speed = cfg.base_speed + self.rng.random() * cfg.speed_jitter
        obstacle = Obstacle(
            kind,
            self.config.screen_width + cfg.width,
            gap_y,
            speed,
            field_height=h,
            config=cfg,
            rng=self.rng,
        )
        self.obstacles.append(obstacle)
        return obstacle

    def spawn_power_up(self) -> PowerUp:
        effect = self.rng.choice(list(self.registry.values()))
        y = self.config.screen_height * (0.25 + self.rng.random() * 0.5)
        power_up = PowerUp(
            effect,
            self.config.screen_width + 40,
            y,
            base_speed=self.config.obstacles.base_speed,
            config=self.config.power_ups,
        )
        self.power_ups.append(power_up)
        return power_up

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self, delta: float) -> None:
        """Advance one frame. No-op unless playing.

        Order: layers, glider, spawns, obstacles (+ scoring), power-ups
        (+ pickup), boundary, obstacle collision, power-up timer.
        """
        if self.state != SessionState.PLAYING:
            return

        self.ticks += 1
        self.sim_time += delta * FRAME_MS
        now = self.sim_time

        for layer in self.layers:
            layer.update(delta, self.speed_multiplier, now)

        game_speed = self.config.obstacles.base_speed * self.speed_multiplier
        self.glider.update(delta, game_speed, now)

        self._update_spawns(delta)

        for obstacle in self.obstacles:
            obstacle.update(delta, self.speed_multiplier, now)
            if mark_passed(obstacle, self.glider):
                self.score += self.score_multiplier
        self.obstacles = [o for o in self.obstacles if not o.is_offscreen()]

        for power_up in self.power_ups:
            power_up.update(delta, self.speed_multiplier, now)
            if power_up.active and power_up.collides(self.glider):
                power_up.active = False
                self.activate_power_up(power_up.effect)
        self.power_ups = [p for p in self.power_ups if p.active and not p.is_offscreen()]

        if out_of_bounds(self.glider, self.config.screen_height):
            if not absorb_hit(self.glider):
                self.game_over()
                return
            logger.debug("Shield absorbed boundary hit")

        hit = first_collision(self.obstacles, self.glider)
        if hit is not None:
            if not absorb_hit(self.glider):
                self.game_over()
                return
            hit.disarmed = True
            logger.debug("Shield absorbed %s obstacle", hit.kind.value)

        self._tick_power_up()

    def _update_spawns(self, delta: float) -> None:
        spawn = self.config.spawn
        self.time_since_obstacle += delta * spawn.timer_ms_per_delta
        if self.time_since_obstacle > spawn.obstacle_interval / self.speed_multiplier:
            self.spawn_obstacle()
            self.time_since_obstacle = 0.0

        self.time_since_power_up += delta * spawn.timer_ms_per_delta
        if self.time_since_power_up > spawn.power_up_interval:
            self.spawn_power_up()
            self.time_since_power_up = 0.0

    def _tick_power_up(self) -> None:
        if not self.active_power_up:
            return
        remaining = self.active_power_up.remaining(self.sim_time)
        if remaining <= 0:
            self.clear_power_up()
        else:
            self.power_up_text = self.active_power_up.effect.update(self, remaining)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def overlay(self) -> Optional[str]:
        if self.state == SessionState.IDLE:
            return "Tap Start or press Space to fly"
        if self.state == SessionState.PAUSED:
            return "Paused"
        if self.state == SessionState.GAMEOVER:
            return f"Game Over\nScore: {self.score}"
        return None

    def snapshot(self) -> SessionSnapshot:
        g = self.glider
        active = self.active_power_up
        return SessionSnapshot(
            state=self.state,
            score=self.score,
            best_score=self.best_score,
            score_multiplier=self.score_multiplier,
            speed_multiplier=self.speed_multiplier,
            power_up_name=active.effect.name if active else None,
            power_up_text=self.power_up_text,
            overlay=self.overlay,
            glider=GliderSnapshot(g.x, g.y, g.rotation, g.radius, g.shielded, tuple(g.trail)),
            obstacles=tuple(
                ObstacleSnapshot(
                    o.kind.value, o.x, o.width, o.gap_y, o.gap_size, o.rotation, o.passed
                )
                for o in self.obstacles
            ),
            power_ups=tuple(
                PowerUpSnapshot(p.effect.name, p.effect.color, p.x, p.y, p.radius)
                for p in self.power_ups
            ),
            layers=tuple(
                LayerSnapshot(
                    layer.color, layer.size, layer.offset,
                    tuple((item.x, item.y) for item in layer.items),
                )
                for layer in self.layers
            ),
            field_width=self.config.screen_width,
            field_height=self.config.screen_height,
        )

    def get_state(self) -> Dict[str, Any]:
        """Flat state dictionary for observation/logging."""
        return {
            "state": self.state.value,
            "score": self.score,
            "best_score": self.best_score,
            "score_multiplier": self.score_multiplier,
            "speed_multiplier": self.speed_multiplier,
            "glider_y": self.glider.y,
            "glider_vy": self.glider.vy,
            "shielded": self.glider.shielded,
            "obstacles": len(self.obstacles),
            "power_ups": len(self.power_ups),
            "active_power_up": self.active_power_up.effect.name if self.active_power_up else None,
            "sim_time": self.sim_time,
            "ticks": self.ticks,
        }
