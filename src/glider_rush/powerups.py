"""Power-up effects and the registry of available types.

Each effect implements the same three-method interface:

- apply(session): switch the session-level flag or multiplier on
- update(session, remaining_ms): produce HUD text, no gameplay effect
- clear(session): revert the flag or multiplier to baseline

Only one effect is active at a time (see GameSession.activate_power_up).
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

from .config import PowerUpConfig

if TYPE_CHECKING:
    from .session import GameSession


class PowerUpEffect:
    """Base power-up effect.

    Subclasses set name/color and override apply() and clear().
    """

    name: str = "base"
    label: str = "base"  # Short HUD name
    color: str = "#ffffff"

    def __init__(self, config: Optional[PowerUpConfig] = None):
        self.config = config or PowerUpConfig()

    @property
    def duration(self) -> float:
        """Effect duration in ms."""
        raise NotImplementedError

    def apply(self, session: "GameSession") -> None:
        raise NotImplementedError

    def update(self, session: "GameSession", remaining_ms: float) -> str:
        return f"Power-up: {self.label} ({remaining_ms / 1000:.1f}s)"

    def clear(self, session: "GameSession") -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(duration={self.duration:.0f})"


class ShieldEffect(PowerUpEffect):
    """Glider survives one would-be-fatal contact.

    The shield is consumed by the collision pass, but the effect stays
    active until its timer runs out.
    """

    name = "Shield"
    label = "Shield"
    color = "#4cd964"

    @property
    def duration(self) -> float:
        return self.config.shield_duration

    def apply(self, session):
        session.glider.shielded = True

    def clear(self, session):
        session.glider.shielded = False


class SlowMotionEffect(PowerUpEffect):
    name = "Slow Motion"
    label = "Slow Motion"
    color = "#ffd31a"

    @property
    def duration(self) -> float:
        return self.config.slow_motion_duration

    def apply(self, session):
        session.speed_multiplier = self.config.slow_motion_multiplier

    def clear(self, session):
        session.speed_multiplier = 1.0


class ScoreSurgeEffect(PowerUpEffect):
    name = "Score Surge"
    label = "Score x2"
    color = "#ff6b81"

    @property
    def duration(self) -> float:
        return self.config.score_surge_duration

    def apply(self, session):
        session.score_multiplier = self.config.score_surge_multiplier

    def clear(self, session):
        session.score_multiplier = 1


# Canonical order (spawn picks uniformly from this list)
POWER_UP_TYPES = (ShieldEffect, SlowMotionEffect, ScoreSurgeEffect)


def create_registry(config: Optional[PowerUpConfig] = None) -> Dict[str, PowerUpEffect]:
    """Factory: one effect instance per type, keyed by name."""
    config = config or PowerUpConfig()
    return {cls.name: cls(config) for cls in POWER_UP_TYPES}


def get_effect(registry: Dict[str, PowerUpEffect], name: str) -> PowerUpEffect:
    if name not in registry:
        raise ValueError(f"Unknown power-up: {name} (choose from {list(registry)})")
    return registry[name]


def effect_names() -> List[str]:
    return [cls.name for cls in POWER_UP_TYPES]


@dataclass
class ActivePowerUp:
    """The single active effect slot: effect plus absolute expiry (sim ms)."""
    effect: PowerUpEffect
    expires: float

    def remaining(self, now: float) -> float:
        return self.expires - now
