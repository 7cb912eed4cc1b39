"""Scripted policies for automated play.

Each policy takes a GliderEnv observation and returns a Discrete(2)
action (1 = flap).
"""

import numpy as np
from typing import Dict, Optional


class BasePolicy:
    """Base class for scripted policies."""

    name: str = "base"

    def __call__(self, obs: Dict[str, np.ndarray]) -> int:
        return self.act(obs)

    def act(self, obs: Dict[str, np.ndarray]) -> int:
        raise NotImplementedError

    def reset(self):
        """Called at the start of each episode."""
        pass


class RandomPolicy(BasePolicy):
    """Flaps at random. Short, chaotic runs."""

    name = "random"

    def __init__(self, flap_chance: float = 0.08, rng: Optional[np.random.Generator] = None):
        self.flap_chance = flap_chance
        self.rng = rng or np.random.default_rng()

    def act(self, obs):
        return int(self.rng.random() < self.flap_chance)


class GapSeekingPolicy(BasePolicy):
    """Flaps whenever the glider sinks below the next gap's centre.

    Only flaps while falling, which keeps it from stacking flaps into
    the ceiling.
    """

    name = "gap_seeking"

    def __init__(self, margin: float = 12.0):
        self.margin = margin

    def act(self, obs):
        state = obs["state"]
        y = state[0]
        vy = state[1]
        gap_y = state[5]
        return int(y > gap_y + self.margin and vy >= 0.0)


POLICIES = {
    "random": RandomPolicy,
    "gap_seeking": GapSeekingPolicy,
}
