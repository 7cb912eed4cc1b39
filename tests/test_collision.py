"""Tests for the collision and scoring pass."""

import random

from glider_rush.collision import absorb_hit, first_collision, mark_passed, out_of_bounds
from glider_rush.entities import Glider, Obstacle


def make_obstacle(kind, x, gap_y=320.0):
    return Obstacle(kind, x, gap_y, 2.4, field_height=640, rng=random.Random(0))


class TestOutOfBounds:
    def test_mid_field(self):
        assert not out_of_bounds(Glider(320), 640)

    def test_top(self):
        assert out_of_bounds(Glider(21), 640)
        assert not out_of_bounds(Glider(22), 640)

    def test_bottom(self):
        assert out_of_bounds(Glider(619), 640)
        assert not out_of_bounds(Glider(618), 640)


class TestMarkPassed:
    def test_not_yet_passed(self):
        glider = Glider(320)
        obstacle = make_obstacle("static", 40)  # trailing edge 120 == glider x
        assert not mark_passed(obstacle, glider)
        assert not obstacle.passed

    def test_passes_once(self):
        glider = Glider(320)
        obstacle = make_obstacle("static", 39)
        assert mark_passed(obstacle, glider)
        assert obstacle.passed
        assert not mark_passed(obstacle, glider)
        obstacle.x -= 50
        assert not mark_passed(obstacle, glider)


class TestFirstCollision:
    def test_none(self):
        glider = Glider(320)
        assert first_collision([make_obstacle("static", 300)], glider) is None

    def test_returns_first_in_order(self):
        glider = Glider(250)
        a = make_obstacle("static", 100)
        b = make_obstacle("laser", 110)
        assert first_collision([a, b], glider) is a

    def test_skips_disarmed(self):
        glider = Glider(250)
        a = make_obstacle("static", 100)
        a.disarmed = True
        b = make_obstacle("laser", 110)
        assert first_collision([a, b], glider) is b
        b.disarmed = True
        assert first_collision([a, b], glider) is None


class TestAbsorbHit:
    def test_unshielded_is_fatal(self):
        glider = Glider(320)
        assert not absorb_hit(glider)

    def test_shield_consumed_once(self):
        glider = Glider(320)
        glider.shielded = True
        assert absorb_hit(glider)
        assert not glider.shielded
        assert not absorb_hit(glider)
