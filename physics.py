"""
Pong Physics Engine
Per-tick paddle movement, ball integration, wall rebound, paddle deflection
and goal-line detection. Units are court units per tick (no dt).
"""

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from config import PongConfig, DEFAULT_CONFIG
from entities import Ball, Paddle, Side, clamp_paddle
from geometry import overlaps


class Directive(enum.Enum):
    """Movement intent for one tick, derived from held input."""
    LEFT_UP = "left_up"
    LEFT_DOWN = "left_down"
    RIGHT_UP = "right_up"
    RIGHT_DOWN = "right_down"


# (up, down) directive pair per paddle side
PADDLE_DIRECTIVES = {
    Side.LEFT: (Directive.LEFT_UP, Directive.LEFT_DOWN),
    Side.RIGHT: (Directive.RIGHT_UP, Directive.RIGHT_DOWN),
}


@dataclass
class StepResult:
    """Outcome of one ``advance`` call."""
    scored: Optional[Side] = None
    events: List[dict] = field(default_factory=list)


class PhysicsEngine:
    """Fixed-step Pong physics over one court."""

    def __init__(self, config: PongConfig = DEFAULT_CONFIG):
        self.config = config
        self.events: list = []

    # ──────────────────────────────────────────
    # Paddles
    # ──────────────────────────────────────────
    def move_paddle(self, paddle: Paddle, directives: Iterable[Directive]) -> None:
        """Apply the paddle's up/down directives, then enforce the bounds invariant.

        Up and down held together cancel unless one of them is blocked by an edge.
        """
        up, down = PADDLE_DIRECTIVES[paddle.side]
        limit = self.config.court_height - paddle.height
        if up in directives and paddle.y > 0:
            paddle.y -= self.config.paddle_speed
        if down in directives and paddle.y < limit:
            paddle.y += self.config.paddle_speed
        clamp_paddle(paddle, self.config.court_height)

    # ──────────────────────────────────────────
    # Ball
    # ──────────────────────────────────────────
    @staticmethod
    def integrate(ball: Ball) -> None:
        """Single explicit Euler step. Fast balls can tunnel through paddles."""
        ball.x += ball.vx
        ball.y += ball.vy

    def _check_wall_rebound(self, ball: Ball) -> None:
        # Ball is not pushed back inside; a small overshoot is expected.
        if ball.y <= 0 or ball.y + ball.height >= self.config.court_height:
            ball.vy = -ball.vy
            self.events.append({"type": "wall", "speed": ball.speed})

    def _check_paddle_collision(self, ball: Ball, paddle: Paddle) -> None:
        if not overlaps(ball, paddle):
            return

        # 0.0 = ball center at paddle top, 1.0 = at paddle bottom
        rel = (ball.y + ball.height / 2 - paddle.y) / paddle.height
        ball.vy = (rel - 0.5) * self.config.deflection_gain

        speed_x = abs(ball.vx) * self.config.acceleration_factor
        if paddle.side is Side.LEFT:
            ball.vx = speed_x
            ball.x = paddle.x + paddle.width
        else:
            ball.vx = -speed_x
            ball.x = paddle.x - ball.width

        self.events.append({"type": "paddle", "side": paddle.side.value, "speed": ball.speed})

    def _check_goal(self, ball: Ball) -> Optional[Side]:
        """Side that wins the point, if the ball crossed a goal line."""
        if ball.x < 0:
            return Side.RIGHT
        if ball.x > self.config.court_width:
            return Side.LEFT
        return None

    # ──────────────────────────────────────────
    # Main step
    # ──────────────────────────────────────────
    def advance(self, left: Paddle, right: Paddle, ball: Ball,
                directives: Iterable[Directive]) -> StepResult:
        """Advance the court by one tick. Entities are mutated in place."""
        self.events.clear()
        directives = frozenset(directives)

        self.move_paddle(left, directives)
        self.move_paddle(right, directives)

        self.integrate(ball)
        self._check_wall_rebound(ball)

        # Left paddle resolves before the right one.
        self._check_paddle_collision(ball, left)
        self._check_paddle_collision(ball, right)

        scored = self._check_goal(ball)
        if scored is not None:
            self.events.append({"type": "score", "side": scored.value})

        return StepResult(scored=scored, events=list(self.events))
