"""
Pong configuration — court, paddle and ball constants.

Values are fixed when a PongController is built; nothing here is mutated
while a match runs.
"""

from dataclasses import dataclass, asdict

# ──────────────────────────────────────────────
# Constants (court units, one unit = one pixel)
# ──────────────────────────────────────────────
COURT_WIDTH: float = 800.0
COURT_HEIGHT: float = 600.0

PADDLE_WIDTH: float = 15.0
PADDLE_HEIGHT: float = 100.0
PADDLE_SPEED: float = 8.0      # units per tick
PADDLE_MARGIN: float = 30.0    # gap between a paddle and its own edge

BALL_SIZE: float = 15.0
INITIAL_BALL_SPEED: float = 5.0  # units per tick

WINNING_SCORE: int = 11
DEFLECTION_GAIN: float = 10.0       # vy range after a paddle hit: ±gain/2
ACCELERATION_FACTOR: float = 1.05   # |vx| multiplier per paddle hit, uncapped


@dataclass(frozen=True)
class PongConfig:
    """All tunables for one controller instance."""
    court_width: float = COURT_WIDTH
    court_height: float = COURT_HEIGHT
    paddle_width: float = PADDLE_WIDTH
    paddle_height: float = PADDLE_HEIGHT
    paddle_speed: float = PADDLE_SPEED
    paddle_margin: float = PADDLE_MARGIN
    ball_size: float = BALL_SIZE
    initial_ball_speed: float = INITIAL_BALL_SPEED
    winning_score: int = WINNING_SCORE
    deflection_gain: float = DEFLECTION_GAIN
    acceleration_factor: float = ACCELERATION_FACTOR

    def validate(self) -> "PongConfig":
        """Raise ValueError if any value breaks a simulation precondition."""
        positive = (
            "court_width", "court_height", "paddle_width", "paddle_height",
            "paddle_speed", "ball_size", "initial_ball_speed",
        )
        for name in positive:
            if getattr(self, name) <= 0:
                raise ValueError(f"PongConfig.{name} must be positive, got {getattr(self, name)}")
        if self.paddle_margin < 0:
            raise ValueError(f"PongConfig.paddle_margin must be >= 0, got {self.paddle_margin}")
        if self.paddle_height > self.court_height:
            raise ValueError("PongConfig.paddle_height exceeds court_height")
        if 2 * (self.paddle_margin + self.paddle_width) > self.court_width:
            raise ValueError("paddles do not fit side by side in court_width")
        if self.winning_score < 1:
            raise ValueError(f"PongConfig.winning_score must be >= 1, got {self.winning_score}")
        if self.acceleration_factor <= 1.0:
            raise ValueError("PongConfig.acceleration_factor must be > 1")
        return self

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_CONFIG = PongConfig()
