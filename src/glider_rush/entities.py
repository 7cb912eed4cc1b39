"""Game entities: Glider, obstacles, power-ups, parallax layers.

Entities own their position/velocity state and a per-frame update rule.
They never reference each other; collision tests take the glider as a
read-only argument. Sinusoidal motion is keyed to simulation time (the sum
of frame deltas in ms), so runs replay identically for the same seed.
"""

import math
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional, Tuple, TYPE_CHECKING

from .config import GliderConfig, ObstacleConfig, PowerUpConfig

if TYPE_CHECKING:
    from .powerups import PowerUpEffect


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box (top-left origin, y grows downward)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height


class Glider:
    """Player glider with gravity integration and a flap impulse.

    The trail is a cosmetic ring buffer. Nothing in the simulation reads it.
    """

    def __init__(self, y: float, config: Optional[GliderConfig] = None):
        self.config = config or GliderConfig()
        self.x = self.config.x
        self.y = y
        self.vy = 0.0
        self.rotation = 0.0
        self.shielded = False
        self.trail: Deque[Tuple[float, float]] = deque(maxlen=self.config.trail_length)

    @property
    def radius(self) -> float:
        return self.config.radius

    def flap(self) -> None:
        """Replace vertical velocity with the flap impulse."""
        self.vy = self.config.flap_velocity

    def update(self, delta: float, game_speed: float, sim_time: float = 0.0) -> None:
        """Integrate one frame.

        Args:
            delta: Normalized frame delta.
            game_speed: Current horizontal scroll speed, used for banking.
            sim_time: Simulation clock in ms (trail wobble only).
        """
        self.vy += self.config.gravity * delta * self.config.gravity_damping
        self.y += self.vy * delta
        self.rotation = math.atan2(self.vy, game_speed * 16) * self.config.bank_scale
        self.trail.append((self.x - 12, self.y + math.sin(sim_time / 80) * 2))

    def reset(self, y: float) -> None:
        self.y = y
        self.vy = 0.0
        self.rotation = 0.0
        self.shielded = False
        self.trail.clear()

    def get_bounds(self) -> Bounds:
        r = self.config.radius
        return Bounds(self.x - r, self.y - r, r * 2, r * 2)


class ObstacleKind(Enum):
    """Obstacle behavior variant."""
    STATIC = "static"
    MOVING = "moving"  # Gap centre oscillates vertically
    TILTING = "tilting"  # Gap rotates; widened conservative hitbox
    LASER = "laser"  # Thin full-height beam, ignores the gap

    @classmethod
    def parse(cls, value) -> "ObstacleKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown obstacle kind: {value}") from None


class Obstacle:
    """A scrolling pair of columns with a gap, or a laser beam."""

    def __init__(
        self,
        kind,
        x: float,
        gap_y: float,
        speed: float,
        field_height: float,
        config: Optional[ObstacleConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """Create obstacle.

        Args:
            kind: ObstacleKind or its string value.
            x: Left edge.
            gap_y: Gap centre.
            speed: Per-instance scroll speed (px per delta).
            field_height: Play field height, used by the tilting hitbox.
            config: Geometry/motion config. Uses defaults if None.
            rng: Random source for the phase offset.
        """
        rng = rng or random
        self.kind = ObstacleKind.parse(kind)
        self.config = config or ObstacleConfig()
        self.x = x
        self.gap_y = gap_y
        # A laser is only as wide as its beam
        if self.kind == ObstacleKind.LASER:
            self.width = self.config.laser_half_width * 2
        else:
            self.width = self.config.width
        self.gap_size = self.config.gap_size
        self.speed = speed
        self.field_height = field_height
        self.passed = False
        self.disarmed = False  # Absorbed a shield hit; no longer lethal
        # Per-instance phase so obstacles of the same kind desync
        self.wave_offset = rng.random() * math.pi * 2
        self.rotation = rng.random() * math.pi * 0.25

    @property
    def gap_top(self) -> float:
        return self.gap_y - self.gap_size / 2

    @property
    def gap_bottom(self) -> float:
        return self.gap_y + self.gap_size / 2

    @property
    def trailing_edge(self) -> float:
        return self.x + self.width

    def update(self, delta: float, speed_multiplier: float, sim_time: float) -> None:
        self.x -= self.speed * speed_multiplier * delta
        if self.kind == ObstacleKind.MOVING:
            phase = sim_time / self.config.moving_period + self.wave_offset
            self.gap_y += math.sin(phase) * self.config.moving_drift * delta
        elif self.kind == ObstacleKind.TILTING:
            phase = sim_time / self.config.tilt_period + self.wave_offset
            self.rotation = math.sin(phase) * self.config.tilt_amplitude

    def is_offscreen(self) -> bool:
        return self.x + self.width <= -self.config.offscreen_margin

    def collides(self, glider: Glider) -> bool:
        """Variant-dispatched geometric test against the glider's box."""
        bounds = glider.get_bounds()

        if self.kind == ObstacleKind.LASER:
            mid = self.x + self.width / 2
            half = self.config.laser_half_width
            return bounds.right > mid - half and bounds.left < mid + half

        if self.kind == ObstacleKind.TILTING:
            # Bounding width of the rotated columns; overestimates the true shape
            width = (
                self.width * abs(math.cos(self.rotation))
                + self.field_height * abs(math.sin(self.rotation))
            )
        else:
            width = self.width

        overlaps = bounds.left < self.x + width and bounds.right > self.x
        outside_gap = bounds.top < self.gap_top or bounds.bottom > self.gap_bottom
        return overlaps and outside_gap


class PowerUp:
    """A drifting pickup carrying one power-up effect."""

    def __init__(
        self,
        effect: "PowerUpEffect",
        x: float,
        y: float,
        base_speed: float,
        config: Optional[PowerUpConfig] = None,
    ):
        self.effect = effect
        self.config = config or PowerUpConfig()
        self.x = x
        self.y = y
        self.base_speed = base_speed
        self.radius = self.config.radius
        self.active = True

    def update(self, delta: float, speed_multiplier: float, sim_time: float) -> None:
        self.x -= self.base_speed * speed_multiplier * delta * self.config.drift_factor
        # Cosmetic bob; the collider follows it but nothing else depends on it
        phase = sim_time / self.config.bob_period + self.x / 50
        self.y += math.sin(phase) * self.config.bob_amplitude * delta

    def is_offscreen(self) -> bool:
        return self.x <= self.config.offscreen_x

    def collides(self, glider: Glider) -> bool:
        distance = math.hypot(glider.x - self.x, glider.y - self.y)
        return distance < self.radius + glider.radius - self.config.overlap_tolerance


@dataclass
class LayerItem:
    x: float
    y: float


class ParallaxLayer:
    """Decorative background layer of recycled items (clouds)."""

    def __init__(
        self,
        speed: float,
        color: Tuple[int, int, int, int],
        size: float,
        field_width: float,
        field_height: float,
        offset: float = 0.0,
        amplitude: float = 0.0,
        rng: Optional[random.Random] = None,
    ):
        self.speed = speed
        self.color = color
        self.size = size
        self.offset = offset
        self.amplitude = amplitude
        self.field_width = field_width
        self.field_height = field_height
        self._rng = rng or random
        self.items: List[LayerItem] = []
        self.populate()

    def populate(self) -> None:
        count = math.ceil(self.field_width / self.size) + 2
        self.items = [
            LayerItem(
                x=i * self.size + self._rng.random() * 60,
                y=self._rng.random() * self.field_height * 0.6,
            )
            for i in range(count)
        ]

    def update(self, delta: float, speed_multiplier: float, sim_time: float) -> None:
        step = self.speed * speed_multiplier * delta
        for item in self.items:
            item.x -= step
            item.y += math.sin(sim_time / 1000 + item.x / 80) * self.amplitude * delta
            if item.x < -self.size:
                item.x = self.field_width + self.size
                item.y = self._rng.random() * self.field_height * 0.6


def default_layers(
    field_width: float,
    field_height: float,
    rng: Optional[random.Random] = None,
) -> List[ParallaxLayer]:
    """Three cloud layers, far to near."""
    return [
        ParallaxLayer(0.2, (255, 255, 255, 128), 60, field_width, field_height, 80, 0.2, rng),
        ParallaxLayer(0.5, (255, 255, 255, 178), 48, field_width, field_height, 120, 0.3, rng),
        ParallaxLayer(1.2, (255, 255, 255, 230), 36, field_width, field_height, 180, 0.4, rng),
    ]
