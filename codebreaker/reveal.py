"""
Reveal sequencer: discloses one submitted row's outcomes a peg at a time.

    idle --submit--> revealing(row, 0) --tick--> revealing(row, 1) ...
         --tick after last peg--> settling --settle delay--> idle

Win/loss is decided when the row enters settling, not at submission.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .engine import is_win

if TYPE_CHECKING:
    from .session import Session


class RevealPhase(str, Enum):
    IDLE = "idle"
    REVEALING = "revealing"
    SETTLING = "settling"


@dataclass
class RevealState:
    phase: RevealPhase = RevealPhase.IDLE
    row_index: Optional[int] = None
    # Highest disclosed peg; pegs 0..peg_index are visible
    peg_index: int = -1

    @property
    def active(self) -> bool:
        return self.phase is not RevealPhase.IDLE

    def revealed_peg_count(self, code_length: int) -> int:
        if self.phase is RevealPhase.REVEALING:
            return self.peg_index + 1
        if self.phase is RevealPhase.SETTLING:
            return code_length
        return 0


def begin_reveal(session: "Session", row_index: int) -> None:
    state = session.reveal
    if state.active:
        raise ValueError("A reveal is already running for this session.")
    state.phase = RevealPhase.REVEALING
    state.row_index = row_index
    state.peg_index = 0


def advance_reveal(session: "Session") -> RevealPhase:
    """One reveal tick. Entering settling decides won / game_over."""
    state = session.reveal
    if state.phase is not RevealPhase.REVEALING:
        return state.phase

    if state.peg_index + 1 < session.code_length:
        state.peg_index += 1
        return state.phase

    state.phase = RevealPhase.SETTLING
    record = session.guesses[state.row_index]
    won = is_win(record.outcomes)
    session.won = won
    # Never clears a game over the clock already declared
    session.game_over = session.game_over or won or state.row_index + 1 >= session.attempts_max
    return state.phase


def finish_reveal(session: "Session") -> None:
    state = session.reveal
    if state.phase is not RevealPhase.SETTLING:
        return
    state.phase = RevealPhase.IDLE
    state.row_index = None
    state.peg_index = -1
