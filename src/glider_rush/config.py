"""Configuration system for Glider Rush.

All values are expressed in source units: distances in pixels, velocities in
pixels per reference frame, and times in milliseconds. One "delta" equals one
reference frame of FRAME_MS milliseconds, so a velocity of 2.4 moves an entity
2.4 px per 16.666 ms.

This design separates:
- Glider handling (what the player feels) - GliderConfig
- Obstacle geometry and motion - ObstacleConfig
- Power-up pickups and effect strength - PowerUpConfig
- Spawn cadence and frame timing - SpawnConfig
"""

from dataclasses import dataclass, field, fields
from typing import Tuple, Dict, Any, ClassVar
import random


# Reference frame duration in milliseconds (one delta unit)
FRAME_MS = 16.666


@dataclass
class GliderConfig:
    """Glider handling parameters."""

    gravity: float = 0.35
    gravity_damping: float = 0.6  # Scales gravity per delta (floatier than raw gravity)
    flap_velocity: float = -6.8  # Replaces vy on flap (negative = up)
    radius: float = 22.0
    x: float = 120.0  # Fixed horizontal position
    trail_length: int = 12  # Cosmetic ring buffer capacity
    bank_scale: float = 0.8  # Rotation damping applied to atan2 banking angle

    GRAVITY_RANGE: ClassVar[Tuple[float, float]] = (0.25, 0.45)
    FLAP_VELOCITY_RANGE: ClassVar[Tuple[float, float]] = (-8.0, -5.5)

    @classmethod
    def sample(cls) -> "GliderConfig":
        """Sample handling parameters."""
        return cls(
            gravity=random.uniform(*cls.GRAVITY_RANGE),
            flap_velocity=random.uniform(*cls.FLAP_VELOCITY_RANGE),
        )

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GliderConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})


@dataclass
class ObstacleConfig:
    """Obstacle geometry and motion parameters."""

    width: float = 80.0
    gap_size: float = 160.0
    base_speed: float = 2.4  # Base scroll speed shared by every moving entity
    speed_jitter: float = 1.2  # Per-instance speed = base_speed + U(0, speed_jitter)
    laser_half_width: float = 4.0
    moving_drift: float = 0.8  # Gap centre drift per delta at peak of the sinusoid
    moving_period: float = 600.0  # ms divisor for the moving sinusoid
    tilt_amplitude: float = 0.2  # Radians
    tilt_period: float = 750.0
    offscreen_margin: float = 120.0  # Removed once x + width <= -offscreen_margin
    gap_min_fraction: float = 0.3  # Gap centre sampled in [h*min, h*(min+span)]
    gap_span_fraction: float = 0.4
    kinds: Tuple[str, ...] = ("static", "moving", "tilting", "laser")

    GAP_SIZE_RANGE: ClassVar[Tuple[float, float]] = (130.0, 200.0)
    BASE_SPEED_RANGE: ClassVar[Tuple[float, float]] = (2.0, 3.2)

    @classmethod
    def sample(cls) -> "ObstacleConfig":
        """Sample obstacle geometry."""
        return cls(
            gap_size=random.uniform(*cls.GAP_SIZE_RANGE),
            base_speed=random.uniform(*cls.BASE_SPEED_RANGE),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        d["kinds"] = list(self.kinds)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ObstacleConfig":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in d.items() if k in known}
        if "kinds" in kwargs:
            kwargs["kinds"] = tuple(kwargs["kinds"])
        return cls(**kwargs)


@dataclass
class PowerUpConfig:
    """Power-up pickup and effect parameters."""

    radius: float = 18.0
    overlap_tolerance: float = 5.0  # Pickup needs this much overlap
    drift_factor: float = 1.2  # Drifts at base_speed * drift_factor
    bob_amplitude: float = 0.4
    bob_period: float = 300.0
    offscreen_x: float = -40.0
    slow_motion_multiplier: float = 0.55
    score_surge_multiplier: int = 2
    shield_duration: float = 6000.0
    slow_motion_duration: float = 5000.0
    score_surge_duration: float = 7000.0

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PowerUpConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})


@dataclass
class SpawnConfig:
    """Spawn cadence and frame timing."""

    obstacle_interval: float = 1600.0  # ms, divided by the speed multiplier
    power_up_interval: float = 5500.0  # ms, fixed
    max_delta: float = 1.6  # Clamp for stalls (tab switch, debugger, ...)
    timer_ms_per_delta: float = 16.0  # Spawn timers tick 16 ms per delta, not FRAME_MS

    OBSTACLE_INTERVAL_RANGE: ClassVar[Tuple[float, float]] = (1200.0, 2200.0)
    POWER_UP_INTERVAL_RANGE: ClassVar[Tuple[float, float]] = (3500.0, 8000.0)

    @classmethod
    def sample(cls) -> "SpawnConfig":
        """Sample spawn cadence."""
        return cls(
            obstacle_interval=random.uniform(*cls.OBSTACLE_INTERVAL_RANGE),
            power_up_interval=random.uniform(*cls.POWER_UP_INTERVAL_RANGE),
        )

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SpawnConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})


@dataclass
class GameConfig:
    """Complete game configuration combining all parameter groups."""
    glider: GliderConfig = field(default_factory=GliderConfig)
    obstacles: ObstacleConfig = field(default_factory=ObstacleConfig)
    power_ups: PowerUpConfig = field(default_factory=PowerUpConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)

    # Play field (also the window size)
    screen_width: int = 480
    screen_height: int = 640
    fps: int = 60

    @classmethod
    def sample_full(cls) -> "GameConfig":
        """Sample a complete random configuration."""
        return cls(
            glider=GliderConfig.sample(),
            obstacles=ObstacleConfig.sample(),
            spawn=SpawnConfig.sample(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "glider": self.glider.to_dict(),
            "obstacles": self.obstacles.to_dict(),
            "power_ups": self.power_ups.to_dict(),
            "spawn": self.spawn.to_dict(),
            "screen_width": self.screen_width,
            "screen_height": self.screen_height,
            "fps": self.fps,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GameConfig":
        """Create from nested dictionary. Missing groups use defaults."""
        return cls(
            glider=GliderConfig.from_dict(d.get("glider", {})),
            obstacles=ObstacleConfig.from_dict(d.get("obstacles", {})),
            power_ups=PowerUpConfig.from_dict(d.get("power_ups", {})),
            spawn=SpawnConfig.from_dict(d.get("spawn", {})),
            screen_width=d.get("screen_width", 480),
            screen_height=d.get("screen_height", 640),
            fps=d.get("fps", 60),
        )


def get_config(name: str) -> GameConfig:
    """Look up a preset by name. Returns a fresh copy callers may modify."""
    if name not in CONFIGS:
        raise ValueError(f"Unknown preset: {name} (choose from {sorted(CONFIGS)})")
    return GameConfig.from_dict(CONFIGS[name].to_dict())


# Predefined configurations
CONFIGS = {
    # Arcade defaults
    "default": GameConfig(),

    # Wide gaps, lazy gravity, no lasers
    "easy": GameConfig(
        glider=GliderConfig(gravity=0.3),
        obstacles=ObstacleConfig(
            gap_size=200.0, base_speed=2.0,
            kinds=("static", "moving", "tilting"),
        ),
        spawn=SpawnConfig(obstacle_interval=2000.0, power_up_interval=4500.0),
    ),

    # Tight gaps, fast scroll
    "hard": GameConfig(
        obstacles=ObstacleConfig(gap_size=140.0, base_speed=3.0, speed_jitter=1.6),
        spawn=SpawnConfig(obstacle_interval=1300.0, power_up_interval=7000.0),
    ),

    # Static pipes only, for learning the flap rhythm
    "breezy": GameConfig(
        obstacles=ObstacleConfig(kinds=("static",)),
    ),
}
