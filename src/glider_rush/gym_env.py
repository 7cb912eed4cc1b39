"""Gymnasium environment wrapper for Glider Rush.

Provides the standard Gym API for RL training and automated play. Each step
advances the session by a fixed delta, so episodes are reproducible from the
reset seed.
"""

import random
from typing import Optional, Dict, Any, Tuple

import numpy as np
import gymnasium
from gymnasium import spaces

import pygame

from .config import GameConfig
from .driver import SimulationDriver
from .engine import PygameRenderer
from .entities import ObstacleKind
from .powerups import effect_names
from .session import GameSession, SessionState


STATE_SIZE = 13
_KIND_INDEX = {kind: i for i, kind in enumerate(ObstacleKind)}
_EFFECT_INDEX = {name: i for i, name in enumerate(effect_names())}


class GliderEnv(gymnasium.Env):
    """Gymnasium wrapper for the glider game.

    Observation space (Dict):
        'rgb': uint8 array of shape (H, W, 3) - rendered frame
        'state': float32 array of shape (13,) - state vector containing:
            [0]  glider y
            [1]  glider vertical velocity
            [2]  glider rotation
            [3]  shielded (0/1)
            [4]  distance from glider to next obstacle's trailing edge
            [5]  next obstacle gap centre
            [6]  next obstacle gap size
            [7]  next obstacle kind (0-3, -1 if none)
            [8]  speed multiplier
            [9]  score multiplier
            [10] score
            [11] active power-up (0-2, -1 if none)
            [12] episode progress (steps / max_steps)

    Action space: Discrete(2) - 1 = flap.

    Reward = weighted sum of raw signals (stored in info['reward_signals']):
        pass:     points scored this step
        power_up: 1.0 when a power-up was picked up
        death:    1.0 when the run ends
        step:     1.0 every step
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_resolution: Tuple[int, int] = (128, 96),
        max_episode_steps: int = 3000,
        step_delta: float = 1.0,
        reward_weights: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.obs_height, self.obs_width = obs_resolution
        self.max_episode_steps = max_episode_steps
        self.step_delta = step_delta

        self.reward_weights = reward_weights or {
            "pass": 10.0,
            "power_up": 1.0,
            "death": -50.0,
            "step": 0.1,
        }

        self.action_space = spaces.Discrete(2)
        self.observation_space = spaces.Dict({
            "rgb": spaces.Box(
                low=0, high=255,
                shape=(self.obs_height, self.obs_width, 3),
                dtype=np.uint8,
            ),
            "state": spaces.Box(
                low=-np.inf, high=np.inf,
                shape=(STATE_SIZE,),
                dtype=np.float32,
            ),
        })

        # Initialize pygame (caller sets SDL_VIDEODRIVER for headless)
        if not pygame.get_init():
            pygame.init()

        self._surface = pygame.Surface(
            (self.config.screen_width, self.config.screen_height)
        )
        self._renderer = PygameRenderer(self._surface, show_hud=False)

        self._display = None
        if render_mode == "human":
            self._display = pygame.display.set_mode(
                (self.config.screen_width, self.config.screen_height)
            )
            pygame.display.set_caption("GliderEnv")
            self._hud_renderer = PygameRenderer(self._display, show_hud=True)

        self.session = GameSession(self.config)
        self.driver = SimulationDriver(self.session)
        self._episode_steps = 0

    def reset(self, *, seed=None, options=None):
        super().reset(seed=seed)

        # Spawn RNG derived from the env's seeded generator
        self.session.rng = random.Random(int(self.np_random.integers(0, 2**31)))
        self.session.reset()
        self.session.start()
        self._episode_steps = 0

        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self.session.state != SessionState.IDLE, "Must call reset() before step()"
        assert self.session.state != SessionState.GAMEOVER, "Episode is over; call reset() before step()"

        if int(np.asarray(action).item()) == 1:
            self.session.flap()

        score_before = self.session.score
        power_up_before = self.session.active_power_up

        self.driver.step(self.step_delta)
        self._episode_steps += 1

        active = self.session.active_power_up
        reward_signals = {
            "pass": float(self.session.score - score_before),
            "power_up": 1.0 if active is not None and active is not power_up_before else 0.0,
            "death": 1.0 if self.session.state == SessionState.GAMEOVER else 0.0,
            "step": 1.0,
        }
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        terminated = self.session.state == SessionState.GAMEOVER
        truncated = self._episode_steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_signals"] = reward_signals

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------

    def _get_obs(self):
        # Skip rendering unless someone asked for frames
        if self.render_mode in ("rgb_array", "human"):
            rgb = self._render_frame()
        else:
            rgb = np.zeros((self.obs_height, self.obs_width, 3), dtype=np.uint8)
        return {"rgb": rgb, "state": self._get_state_vector()}

    def _next_obstacle(self):
        """First obstacle whose trailing edge is still ahead of the glider."""
        glider_x = self.session.glider.x
        for obstacle in self.session.obstacles:
            if obstacle.trailing_edge >= glider_x:
                return obstacle
        return None

    def _get_state_vector(self):
        state = np.zeros(STATE_SIZE, dtype=np.float32)
        session = self.session
        glider = session.glider

        state[0] = glider.y
        state[1] = glider.vy
        state[2] = glider.rotation
        state[3] = float(glider.shielded)

        obstacle = self._next_obstacle()
        if obstacle is not None:
            state[4] = obstacle.trailing_edge - glider.x
            state[5] = obstacle.gap_y
            state[6] = 0.0 if obstacle.kind == ObstacleKind.LASER else obstacle.gap_size
            state[7] = float(_KIND_INDEX[obstacle.kind])
        else:
            state[4] = float(self.config.screen_width)
            state[5] = self.config.screen_height / 2
            state[6] = self.config.obstacles.gap_size
            state[7] = -1.0

        state[8] = session.speed_multiplier
        state[9] = float(session.score_multiplier)
        state[10] = float(session.score)
        active = session.active_power_up
        state[11] = float(_EFFECT_INDEX[active.effect.name]) if active else -1.0
        state[12] = float(self._episode_steps) / max(self.max_episode_steps, 1)
        return state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_frame(self):
        """Render current state to numpy array (H, W, 3) uint8."""
        self._renderer.render(self.session.snapshot())
        scaled = pygame.transform.scale(
            self._surface, (self.obs_width, self.obs_height)
        )
        # surfarray gives (W, H, 3); transpose to (H, W, 3)
        array = pygame.surfarray.array3d(scaled)
        return np.transpose(array, (1, 0, 2)).astype(np.uint8)

    def render(self):
        if self.render_mode == "rgb_array":
            return self._render_frame()
        elif self.render_mode == "human" and self._display:
            self._hud_renderer.render(self.session.snapshot())
            pygame.display.flip()

    def _get_info(self):
        info = self.session.get_state()
        info["episode_steps"] = self._episode_steps
        return info

    def close(self):
        if self._display:
            pygame.display.quit()
            self._display = None
