"""
Match phase state machine and score keeping.

    IDLE ──start_match──▶ PLAYING ◀──toggle_pause──▶ PAUSED
                            │
                            └─ score reaches winning_score ─▶ FINISHED(winner)

start_match is accepted from every phase and always resets the score.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from config import WINNING_SCORE
from entities import Side

log = logging.getLogger("pong.phase")


class Phase(enum.Enum):
    IDLE = 0
    PLAYING = 1
    PAUSED = 2
    FINISHED = 3


@dataclass
class Score:
    left: int = 0
    right: int = 0

    def get(self, side: Side) -> int:
        return self.left if side is Side.LEFT else self.right

    def as_tuple(self) -> tuple:
        return (self.left, self.right)


class PhaseController:
    """Owns phase, score and winner. Decides whether physics may run."""

    def __init__(self, winning_score: int = WINNING_SCORE):
        self.winning_score = winning_score
        self.phase = Phase.IDLE
        self.score = Score()
        self.winner: Optional[Side] = None

    @property
    def is_running(self) -> bool:
        return self.phase is Phase.PLAYING

    def start_match(self) -> None:
        self.score = Score()
        self.winner = None
        self.phase = Phase.PLAYING
        log.info("Match started (first to %d)", self.winning_score)

    def toggle_pause(self) -> Phase:
        """PLAYING ⇄ PAUSED; any other phase is left untouched."""
        if self.phase is Phase.PLAYING:
            self.phase = Phase.PAUSED
            log.debug("Paused at %d-%d", self.score.left, self.score.right)
        elif self.phase is Phase.PAUSED:
            self.phase = Phase.PLAYING
            log.debug("Resumed")
        return self.phase

    def record_point(self, side: Side) -> bool:
        """Credit a point to ``side``. Returns True if it ended the match."""
        if self.phase is not Phase.PLAYING:
            raise RuntimeError(f"record_point: no point can be scored while {self.phase.name}")

        if side is Side.LEFT:
            self.score.left += 1
        else:
            self.score.right += 1
        log.debug("Point %s: %d-%d", side.label, self.score.left, self.score.right)

        if self.score.get(side) >= self.winning_score:
            self.winner = side
            self.phase = Phase.FINISHED
            log.info("%s wins %d-%d", side.label, self.score.left, self.score.right)
            return True
        return False
