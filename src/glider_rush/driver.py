"""Frame driver: turns host frame timestamps into normalized simulation ticks.

The host (pygame loop, test, env) calls frame(timestamp_ms) once per frame
with a monotonic timestamp. The driver is the only place that looks at time.
"""

import logging
from typing import Optional

from .config import FRAME_MS
from .session import GameSession, SessionSnapshot

logger = logging.getLogger(__name__)


class Renderer:
    """Base class for anything that draws a session snapshot."""

    def render(self, snapshot: SessionSnapshot) -> None:
        raise NotImplementedError


class NullRenderer(Renderer):
    """Keeps the last snapshot; draws nothing."""

    def __init__(self):
        self.last: Optional[SessionSnapshot] = None
        self.frames = 0

    def render(self, snapshot: SessionSnapshot) -> None:
        self.last = snapshot
        self.frames += 1


def normalize_delta(elapsed_ms: float, max_delta: float) -> float:
    """Elapsed ms -> delta units, clamped to [0, max_delta]."""
    return min(max_delta, max(0.0, elapsed_ms / FRAME_MS))


class SimulationDriver:
    """Advances a GameSession once per host frame.

    The first frame after the session starts or resumes only anchors the
    clock (delta 0), so a pause never turns into a large jump. Every
    frame, whatever the state, ends with a renderer call.
    """

    def __init__(self, session: GameSession, renderer: Optional[Renderer] = None):
        self.session = session
        self.renderer = renderer or NullRenderer()
        self.max_delta = session.config.spawn.max_delta
        self.last_timestamp: Optional[float] = None
        self.last_delta = 0.0
        self._epoch = session.clock_epoch

    def frame(self, timestamp: float) -> float:
        """Process one host frame.

        Args:
            timestamp: Monotonic timestamp in ms.

        Returns:
            The delta applied to the session (0 when nothing ran).
        """
        delta = 0.0
        if self.session.is_playing:
            if self._epoch != self.session.clock_epoch or self.last_timestamp is None:
                # Started or resumed since the last frame: re-anchor only
                self._epoch = self.session.clock_epoch
            else:
                delta = normalize_delta(timestamp - self.last_timestamp, self.max_delta)
                self.session.update(delta)
        self.last_timestamp = timestamp
        self.last_delta = delta
        self.renderer.render(self.session.snapshot())
        return delta

    def step(self, delta: float) -> None:
        """Run one tick with an explicit delta (headless/fixed-step use)."""
        self.last_delta = min(self.max_delta, max(0.0, delta))
        self.session.update(self.last_delta)
        self.renderer.render(self.session.snapshot())
