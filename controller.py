"""
PongController — simulation loop

Owns the paddles, the ball, the score and the phase, and is the only thing
that mutates them. An external driver (server.py, a test, a training script)
calls:
  ctrl.tick(directives)   — advance one frame, returns a Snapshot
  ctrl.start_match()      — (re)start from any phase
  ctrl.toggle_pause()     — PLAYING ⇄ PAUSED
  ctrl.pending_events     — renderer notifications, drained by the driver
  ctrl.physics_events     — wall/paddle/score cues from the last tick

Calls must be strictly sequential; nothing here is thread-safe and nothing
needs to be, since every entry point is synchronous.
"""

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from config import PongConfig
from entities import Ball, Paddle, Side, initial_paddle, spawn_ball
from phase import Phase, PhaseController, Score
from physics import Directive, PhysicsEngine

log = logging.getLogger("pong.controller")


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one frame. Entities are copies."""
    left_paddle: Paddle
    right_paddle: Paddle
    ball: Ball
    score: tuple
    phase: Phase
    winner: Optional[Side]
    tick: int

    @property
    def winner_label(self) -> Optional[str]:
        return self.winner.label if self.winner is not None else None

    def to_dict(self) -> dict:
        return {
            "left_paddle": self.left_paddle.to_dict(),
            "right_paddle": self.right_paddle.to_dict(),
            "ball": self.ball.to_dict(),
            "score": list(self.score),
            "phase": self.phase.name,
            "winner": self.winner_label,
            "tick": self.tick,
        }


class PongController:
    """Simulation loop: phase gating + physics orchestration."""

    OBS_SIZE = 10
    MAX_SIM_TICKS = 100_000

    def __init__(self, config: Optional[PongConfig] = None, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = (config or PongConfig()).validate()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.engine = PhysicsEngine(self.config)
        self.phase_ctrl = PhaseController(self.config.winning_score)

        self.left_paddle = initial_paddle(Side.LEFT, self.config)
        self.right_paddle = initial_paddle(Side.RIGHT, self.config)
        # Parked at center until the first serve
        self.ball = Ball(self.config.court_width / 2, self.config.court_height / 2,
                         self.config.ball_size, self.config.ball_size)
        self.tick_count = 0

        self.pending_events: list[dict] = []
        self.physics_events: list[dict] = []

    # ── Read-only state ──────────────────────────────────────────────────────

    @property
    def phase(self) -> Phase:
        return self.phase_ctrl.phase

    @property
    def score(self) -> Score:
        return self.phase_ctrl.score

    @property
    def winner(self) -> Optional[Side]:
        return self.phase_ctrl.winner

    def snapshot(self) -> Snapshot:
        return Snapshot(
            left_paddle=self.left_paddle.copy(),
            right_paddle=self.right_paddle.copy(),
            ball=self.ball.copy(),
            score=self.score.as_tuple(),
            phase=self.phase,
            winner=self.winner,
            tick=self.tick_count,
        )

    # ──────────────────────────────────────────────────────────────────────────
    # Main loop
    # ──────────────────────────────────────────────────────────────────────────

    def tick(self, directives: Iterable[Directive] = ()) -> Snapshot:
        """Advance one frame. Outside PLAYING this only returns the frozen frame."""
        active = self._check_directives(directives)
        self.physics_events.clear()

        if not self.phase_ctrl.is_running:
            return self.snapshot()

        result = self.engine.advance(self.left_paddle, self.right_paddle, self.ball, active)
        self.tick_count += 1
        self.physics_events.extend(result.events)

        if result.scored is not None:
            self._on_point(result.scored)

        return self.snapshot()

    @staticmethod
    def _check_directives(directives: Iterable[Directive]) -> frozenset:
        active = frozenset(directives)
        for d in active:
            if not isinstance(d, Directive):
                raise ValueError(f"tick: unknown directive {d!r}")
        return active

    def _on_point(self, side: Side) -> None:
        finished = self.phase_ctrl.record_point(side)
        self.pending_events.append({
            "type": "point_scored",
            "side": side.value,
            "score": list(self.score.as_tuple()),
        })

        # Serve toward the player who just conceded
        self.ball = spawn_ball(self.config, side.opponent, self.rng)

        if finished:
            self.pending_events.append({"type": "match_finished", "winner": side.label})

    # ──────────────────────────────────────────────────────────────────────────
    # Commands
    # ──────────────────────────────────────────────────────────────────────────

    def start_match(self) -> Snapshot:
        """Reset score and entities and serve toward a random side."""
        self.phase_ctrl.start_match()
        self.left_paddle = initial_paddle(Side.LEFT, self.config)
        self.right_paddle = initial_paddle(Side.RIGHT, self.config)

        serve = Side.LEFT if self.rng.random() < 0.5 else Side.RIGHT
        self.ball = spawn_ball(self.config, serve, self.rng)
        self.tick_count = 0
        log.debug("Serve toward %s: v=(%.3f, %.3f)", serve.value, self.ball.vx, self.ball.vy)

        self.pending_events.append({"type": "match_started", "serve": serve.value})
        return self.snapshot()

    def toggle_pause(self) -> Phase:
        before = self.phase
        after = self.phase_ctrl.toggle_pause()
        if before is Phase.PLAYING and after is Phase.PAUSED:
            self.pending_events.append({"type": "paused"})
        elif before is Phase.PAUSED and after is Phase.PLAYING:
            self.pending_events.append({"type": "resumed"})
        return after

    # ──────────────────────────────────────────────────────────────────────────
    # Headless helpers
    # ──────────────────────────────────────────────────────────────────────────

    def get_obs(self) -> np.ndarray:
        """Flat float32 observation vector, shape ``(OBS_SIZE,)``.

        Layout: [left.y, right.y, ball.x, ball.y, ball.vx, ball.vy,
                 left_score, right_score, phase, tick]
        """
        return np.array([
            self.left_paddle.y,
            self.right_paddle.y,
            self.ball.x,
            self.ball.y,
            self.ball.vx,
            self.ball.vy,
            self.score.left,
            self.score.right,
            self.phase.value,
            self.tick_count,
        ], dtype=np.float32)

    def get_state_json(self) -> str:
        """Current snapshot as compact single-line JSON."""
        return json.dumps(self.snapshot().to_dict(), separators=(',', ':'))

    def simulate(self, directives: Iterable[Directive] = (),
                 max_ticks: int = MAX_SIM_TICKS) -> int:
        """Tick with a fixed directive set until play stops or max_ticks.

        Returns:
            Number of ticks actually simulated.
        """
        active = self._check_directives(directives)
        ticks = 0
        while ticks < max_ticks and self.phase_ctrl.is_running:
            self.tick(active)
            ticks += 1
        return ticks
