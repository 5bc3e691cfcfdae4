"""
Paddle and ball entities plus their construction helpers.
"""

import enum
import numpy as np
from dataclasses import dataclass, field

from config import PongConfig
from geometry import Rect


class Side(enum.Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def label(self) -> str:
        return "Left Player" if self is Side.LEFT else "Right Player"

    @property
    def opponent(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT

    @property
    def direction(self) -> int:
        """Sign of vx for a ball travelling toward this side's edge."""
        return -1 if self is Side.LEFT else 1


@dataclass
class Paddle(Rect):
    """Vertical paddle. Only ``y`` changes after creation."""
    side: Side = Side.LEFT

    def copy(self) -> "Paddle":
        return Paddle(self.x, self.y, self.width, self.height, self.side)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["side"] = self.side.value
        return d


@dataclass(eq=False)
class Ball(Rect):
    """Square ball with a per-tick velocity vector [vx, vy]."""
    velocity: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0]))

    def __post_init__(self):
        self.velocity = np.array(self.velocity, dtype=float)

    @property
    def vx(self) -> float:
        return float(self.velocity[0])

    @vx.setter
    def vx(self, value: float) -> None:
        self.velocity[0] = value

    @property
    def vy(self) -> float:
        return float(self.velocity[1])

    @vy.setter
    def vy(self, value: float) -> None:
        self.velocity[1] = value

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def copy(self) -> "Ball":
        return Ball(self.x, self.y, self.width, self.height, self.velocity.copy())

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["vx"] = self.vx
        d["vy"] = self.vy
        return d


# ──────────────────────────────────────────────
# Construction / invariants
# ──────────────────────────────────────────────

def clamp_paddle(paddle: Paddle, court_height: float) -> Paddle:
    """Pull ``paddle.y`` back into [0, court_height - height]. Mutates and returns it."""
    paddle.y = max(0.0, min(court_height - paddle.height, paddle.y))
    return paddle


def initial_paddle(side: Side, config: PongConfig) -> Paddle:
    if side is Side.LEFT:
        x = config.paddle_margin
    else:
        x = config.court_width - config.paddle_margin - config.paddle_width
    y = config.court_height / 2 - config.paddle_height / 2
    return Paddle(x, y, config.paddle_width, config.paddle_height, side)


def spawn_ball(config: PongConfig, serve_toward: Side,
               rng: np.random.Generator) -> Ball:
    """New ball at court center heading for ``serve_toward``.

    vy is uniform in [-speed/2, speed/2); the draw comes from ``rng`` so a
    seeded generator gives reproducible serves.
    """
    speed = config.initial_ball_speed
    vx = serve_toward.direction * speed
    vy = float(rng.uniform(-speed / 2, speed / 2))
    return Ball(
        config.court_width / 2,
        config.court_height / 2,
        config.ball_size,
        config.ball_size,
        velocity=[vx, vy],
    )
