"""
Physics Tests — geometry, entity helpers and the per-tick PhysicsEngine step.

Default court: 800x600, paddles 15x100 at x=30 / x=755, ball 15x15,
paddle speed 8, serve speed 5.
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import PongConfig, COURT_HEIGHT, PADDLE_SPEED
from entities import Ball, Paddle, Side, clamp_paddle, initial_paddle, spawn_ball
from geometry import Rect, overlaps
from physics import Directive, PhysicsEngine


# ── Helpers ──────────────────────────────────────────────

def make_court(config: PongConfig = PongConfig()):
    """Centered paddles for both sides."""
    return initial_paddle(Side.LEFT, config), initial_paddle(Side.RIGHT, config)


def make_ball(x: float, y: float, vx: float, vy: float) -> Ball:
    return Ball(x, y, 15.0, 15.0, velocity=[vx, vy])


# ── Geometry ─────────────────────────────────────────────

class TestOverlaps:

    def test_partial_overlap(self):
        assert overlaps(Rect(0, 0, 10, 10), Rect(5, 5, 10, 10))

    def test_containment(self):
        assert overlaps(Rect(0, 0, 100, 100), Rect(40, 40, 5, 5))

    @pytest.mark.parametrize("other", [
        Rect(10, 0, 10, 10),    # touching right edge
        Rect(0, 10, 10, 10),    # touching bottom edge
        Rect(-10, 0, 10, 10),   # touching left edge
        Rect(20, 20, 5, 5),     # disjoint
    ])
    def test_touching_or_apart_is_not_overlap(self, other):
        assert not overlaps(Rect(0, 0, 10, 10), other)

    @pytest.mark.parametrize("a, b", [
        (Rect(0, 0, 10, 10), Rect(5, 5, 10, 10)),
        (Rect(0, 0, 10, 10), Rect(10, 0, 10, 10)),
        (Rect(3.5, 1.0, 2.0, 50.0), Rect(0.0, 20.0, 4.0, 4.0)),
    ])
    def test_symmetric(self, a, b):
        assert overlaps(a, b) == overlaps(b, a)

    def test_rect_helpers(self):
        r = Rect(10, 20, 30, 40)
        assert r.right == 40
        assert r.bottom == 60
        assert r.center_y == 40


# ── Entities ─────────────────────────────────────────────

class TestEntities:

    def test_initial_paddles_are_centered(self):
        left, right = make_court()
        assert (left.x, left.y) == (30.0, 250.0)
        assert (right.x, right.y) == (755.0, 250.0)
        assert left.side is Side.LEFT and right.side is Side.RIGHT

    @pytest.mark.parametrize("y, expected", [(-20.0, 0.0), (700.0, 500.0), (123.0, 123.0)])
    def test_clamp_paddle(self, y, expected):
        p = Paddle(30, y, 15, 100, Side.LEFT)
        assert clamp_paddle(p, COURT_HEIGHT) is p
        assert p.y == expected

    @pytest.mark.parametrize("side, sign", [(Side.LEFT, -1), (Side.RIGHT, 1)])
    def test_spawn_ball_serves_toward_side(self, side, sign):
        ball = spawn_ball(PongConfig(), side, np.random.default_rng(0))
        assert (ball.x, ball.y) == (400.0, 300.0)
        assert (ball.width, ball.height) == (15.0, 15.0)
        assert ball.vx == sign * 5.0
        assert -2.5 <= ball.vy < 2.5

    def test_spawn_ball_vy_spread(self):
        rng = np.random.default_rng(7)
        vys = [spawn_ball(PongConfig(), Side.LEFT, rng).vy for _ in range(500)]
        assert min(vys) >= -2.5 and max(vys) < 2.5
        # Uniform draw: both halves of the range get used
        assert min(vys) < -2.0 and max(vys) > 2.0

    def test_spawn_ball_seeded_is_reproducible(self):
        a = spawn_ball(PongConfig(), Side.RIGHT, np.random.default_rng(123))
        b = spawn_ball(PongConfig(), Side.RIGHT, np.random.default_rng(123))
        assert a.vy == b.vy
        assert a is not b

    def test_side_helpers(self):
        assert Side.LEFT.opponent is Side.RIGHT
        assert Side.RIGHT.label == "Right Player"

    def test_ball_copy_is_independent(self):
        ball = make_ball(1, 2, 3, 4)
        dup = ball.copy()
        dup.vx = 99.0
        dup.x = 50.0
        assert ball.vx == 3.0 and ball.x == 1.0


# ── Paddle movement ──────────────────────────────────────

class TestPaddleMovement:

    def setup_method(self):
        self.engine = PhysicsEngine()
        self.left, self.right = make_court()

    def test_up_moves_by_paddle_speed(self):
        self.engine.move_paddle(self.left, {Directive.LEFT_UP})
        assert self.left.y == 250.0 - PADDLE_SPEED

    def test_down_moves_by_paddle_speed(self):
        self.engine.move_paddle(self.right, {Directive.RIGHT_DOWN})
        assert self.right.y == 250.0 + PADDLE_SPEED

    def test_up_and_down_cancel(self):
        self.engine.move_paddle(self.left, {Directive.LEFT_UP, Directive.LEFT_DOWN})
        assert self.left.y == 250.0

    def test_other_side_directives_ignored(self):
        self.engine.move_paddle(self.left, {Directive.RIGHT_UP, Directive.RIGHT_DOWN})
        assert self.left.y == 250.0

    def test_up_blocked_at_top(self):
        self.left.y = 0.0
        self.engine.move_paddle(self.left, {Directive.LEFT_UP})
        assert self.left.y == 0.0

    def test_down_blocked_at_bottom(self):
        self.left.y = 500.0
        self.engine.move_paddle(self.left, {Directive.LEFT_DOWN})
        assert self.left.y == 500.0

    def test_partial_step_is_clamped(self):
        """A step that would cross the edge stops exactly on it."""
        self.left.y = 3.0
        self.engine.move_paddle(self.left, {Directive.LEFT_UP})
        assert self.left.y == 0.0

        self.right.y = 497.0
        self.engine.move_paddle(self.right, {Directive.RIGHT_DOWN})
        assert self.right.y == 500.0


# ── Ball integration + walls ─────────────────────────────

class TestBallMotion:

    def setup_method(self):
        self.engine = PhysicsEngine()
        self.left, self.right = make_court()

    def test_euler_step(self):
        ball = make_ball(400, 300, 5, 2)
        self.engine.advance(self.left, self.right, ball, set())
        assert (ball.x, ball.y) == (405.0, 302.0)
        assert (ball.vx, ball.vy) == (5.0, 2.0)

    def test_top_wall_rebound_symmetry(self):
        ball = make_ball(400, 0, 3, -4)
        result = self.engine.advance(self.left, self.right, ball, set())

        assert ball.vy == 4.0
        assert ball.vx == 3.0
        assert (ball.x, ball.y) == (403.0, -4.0)   # no clamp back inside
        assert (ball.width, ball.height) == (15.0, 15.0)
        assert (self.left.y, self.right.y) == (250.0, 250.0)
        assert result.scored is None
        assert [ev["type"] for ev in result.events] == ["wall"]

    def test_bottom_wall_rebound(self):
        ball = make_ball(400, 585, 3, 4)
        self.engine.advance(self.left, self.right, ball, set())
        assert ball.vy == -4.0
        assert ball.y == 589.0

    def test_no_rebound_mid_court(self):
        ball = make_ball(400, 300, 3, -4)
        result = self.engine.advance(self.left, self.right, ball, set())
        assert ball.vy == -4.0
        assert result.events == []


# ── Paddle collision ─────────────────────────────────────

class TestPaddleCollision:

    def setup_method(self):
        self.engine = PhysicsEngine()
        self.left, self.right = make_court()

    def test_left_collision_reposition(self):
        # Ball center level with paddle center
        ball = make_ball(40, 292.5, -5, 0)
        result = self.engine.advance(self.left, self.right, ball, set())

        assert ball.x == self.left.x + self.left.width
        assert ball.vx > 0
        assert ball.vx == pytest.approx(5.0 * 1.05)
        assert ball.vy == pytest.approx(0.0)
        assert any(ev["type"] == "paddle" and ev["side"] == "left" for ev in result.events)

    def test_right_collision_reposition(self):
        ball = make_ball(738, 292.5, 5, 0)
        self.engine.advance(self.left, self.right, ball, set())

        assert ball.x == self.right.x - ball.width
        assert ball.vx == pytest.approx(-5.0 * 1.05)

    def test_hit_near_top_deflects_up(self):
        # Ball center lands exactly on the paddle's top edge → rel = 0
        ball = make_ball(40, 242.5, -5, 0)
        self.engine.advance(self.left, self.right, ball, set())
        assert ball.vy == pytest.approx(-5.0)

    def test_hit_near_bottom_deflects_down(self):
        # Ball center on the paddle's bottom edge → rel = 1
        ball = make_ball(40, 342.5, -5, 0)
        self.engine.advance(self.left, self.right, ball, set())
        assert ball.vy == pytest.approx(5.0)

    def test_left_paddle_forces_positive_vx(self):
        """Even a ball already moving right leaves the left paddle moving right."""
        ball = make_ball(30, 292.5, 2, 0)
        self.engine.advance(self.left, self.right, ball, set())
        assert ball.vx == pytest.approx(2.0 * 1.05)

    def test_speed_grows_every_exchange(self):
        ball = make_ball(40, 292.5, -5, 0)
        speeds = []
        for _ in range(6):
            if ball.vx < 0:
                ball.x, ball.y = 40.0, 292.5
            else:
                ball.x, ball.y = 738.0, 292.5
            self.engine.advance(self.left, self.right, ball, set())
            speeds.append(abs(ball.vx))
        assert speeds == sorted(speeds)
        assert speeds[-1] == pytest.approx(5.0 * 1.05 ** 6)

    def test_miss_keeps_velocity(self):
        ball = make_ball(40, 100, -5, 1)
        self.engine.advance(self.left, self.right, ball, set())
        assert (ball.vx, ball.vy) == (-5.0, 1.0)


# ── Scoring ──────────────────────────────────────────────

class TestGoalLines:

    def setup_method(self):
        self.engine = PhysicsEngine()
        self.left, self.right = make_court()

    def test_left_edge_scores_for_right(self):
        ball = make_ball(2, 100, -5, 0)
        result = self.engine.advance(self.left, self.right, ball, set())
        assert result.scored is Side.RIGHT
        assert {"type": "score", "side": "right"} in result.events

    def test_right_edge_scores_for_left(self):
        ball = make_ball(798, 100, 5, 0)
        result = self.engine.advance(self.left, self.right, ball, set())
        assert result.scored is Side.LEFT

    @pytest.mark.parametrize("x", [0.0, 400.0, 800.0])
    def test_inside_or_on_line_is_not_a_point(self, x):
        ball = make_ball(x, 100, 0, 0)
        result = self.engine.advance(self.left, self.right, ball, set())
        assert result.scored is None

    def test_events_reset_each_advance(self):
        ball = make_ball(2, 100, -5, 0)
        self.engine.advance(self.left, self.right, ball, set())
        ball = make_ball(400, 300, 1, 0)
        self.engine.advance(self.left, self.right, ball, set())
        assert self.engine.events == []
