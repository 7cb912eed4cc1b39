"""glider-rush: single-screen arcade glider game with a headless simulation core.

The glider dodges scrolling obstacles (static, moving, tilting, laser) and
collects timed power-ups (Shield, Slow Motion, Score Surge). The simulation
(GameSession + SimulationDriver) runs without any rendering surface; the
pygame engine and the Gymnasium environment are front-ends over it.
"""

from .config import GliderConfig, ObstacleConfig, PowerUpConfig, SpawnConfig, GameConfig, CONFIGS, FRAME_MS
from .entities import Bounds, Glider, Obstacle, ObstacleKind, PowerUp, ParallaxLayer
from .powerups import PowerUpEffect, ShieldEffect, SlowMotionEffect, ScoreSurgeEffect, POWER_UP_TYPES, create_registry
from .session import GameSession, SessionState, Signal, SessionSnapshot
from .driver import SimulationDriver, Renderer, NullRenderer
from .persistence import BestScoreStore, MemoryBestScoreStore, JsonBestScoreStore

__all__ = [
    "GliderConfig",
    "ObstacleConfig",
    "PowerUpConfig",
    "SpawnConfig",
    "GameConfig",
    "CONFIGS",
    "FRAME_MS",
    "Bounds",
    "Glider",
    "Obstacle",
    "ObstacleKind",
    "PowerUp",
    "ParallaxLayer",
    "PowerUpEffect",
    "ShieldEffect",
    "SlowMotionEffect",
    "ScoreSurgeEffect",
    "POWER_UP_TYPES",
    "create_registry",
    "GameSession",
    "SessionState",
    "Signal",
    "SessionSnapshot",
    "SimulationDriver",
    "Renderer",
    "NullRenderer",
    "BestScoreStore",
    "MemoryBestScoreStore",
    "JsonBestScoreStore",
]
