"""Collision and scoring pass.

Pure geometric queries over the session's entities. The session calls these
in a fixed order each tick; none of them touch session state directly.
"""

from typing import Iterable, Optional

from .entities import Glider, Obstacle


def out_of_bounds(glider: Glider, field_height: float) -> bool:
    """Glider box pokes above the top or below the bottom of the play field."""
    return glider.y - glider.radius < 0 or glider.y + glider.radius > field_height


def mark_passed(obstacle: Obstacle, glider: Glider) -> bool:
    """Flip `passed` once the trailing edge is behind the glider.

    Returns True only on the tick the flag transitions, so each obstacle
    scores exactly once.
    """
    if obstacle.passed or obstacle.trailing_edge >= glider.x:
        return False
    obstacle.passed = True
    return True


def first_collision(obstacles: Iterable[Obstacle], glider: Glider) -> Optional[Obstacle]:
    """First armed obstacle (in spawn order) touching the glider."""
    for obstacle in obstacles:
        if obstacle.disarmed:
            continue
        if obstacle.collides(glider):
            return obstacle
    return None


def absorb_hit(glider: Glider) -> bool:
    """Spend the shield on a would-be-fatal contact.

    Returns True if the hit was absorbed, False if it is fatal.
    """
    if not glider.shielded:
        return False
    glider.shielded = False
    return True
