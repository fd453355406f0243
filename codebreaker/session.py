"""
Session state
Holds one game in memory: secret, committed rows, the guess being built,
flags, and the clock / reveal / countdown sub-states.

Only the SessionController mutates a Session.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .clock import ClockState, CountdownState
from .engine import count_outcomes, is_win, score_guess
from .reveal import RevealPhase, RevealState
from .types import Color, Difficulty, Outcome

ATTEMPTS_MAX = 7


@dataclass(frozen=True)
class DifficultyPreset:
    code_length: int
    per_peg_hints: bool     # otherwise only the aggregate counts are shown
    disables_colors: bool   # colors proven absent get greyed out


PRESETS: Dict[str, DifficultyPreset] = {
    "easy": DifficultyPreset(code_length=4, per_peg_hints=True, disables_colors=True),
    "difficult": DifficultyPreset(code_length=5, per_peg_hints=False, disables_colors=False),
}


@dataclass(frozen=True)
class GuessRecord:
    guess: Tuple[Color, ...]
    outcomes: Tuple[Outcome, ...]

    def __post_init__(self) -> None:
        if len(self.guess) == 0 or len(self.outcomes) != len(self.guess):
            raise ValueError("A guess record needs one outcome per peg.")

    @classmethod
    def scored(cls, secret: Sequence[Color], guess: Sequence[Color]) -> "GuessRecord":
        return cls(guess=tuple(guess), outcomes=tuple(score_guess(secret, guess)))

    @property
    def counts(self) -> Tuple[int, int, int]:
        return count_outcomes(self.outcomes)


@dataclass
class Session:
    secret: Tuple[Color, ...]
    difficulty: Difficulty = "easy"
    # Bumped on every restart; timer callbacks carry the value they were armed with
    generation: int = 0
    attempts_max: int = ATTEMPTS_MAX
    guesses: List[GuessRecord] = field(default_factory=list)
    current_guess: List[Color] = field(default_factory=list)
    game_over: bool = False
    won: bool = False
    show_game_over: bool = False
    disabled_colors: Set[Color] = field(default_factory=set)
    paused: bool = False
    help_open: bool = False
    clock: ClockState = field(default_factory=ClockState)
    reveal: RevealState = field(default_factory=RevealState)
    countdown: CountdownState = field(default_factory=CountdownState)

    @property
    def code_length(self) -> int:
        return len(self.secret)

    @property
    def preset(self) -> DifficultyPreset:
        return PRESETS[self.difficulty]

    @property
    def attempts_left(self) -> int:
        return self.attempts_max - len(self.guesses)

    @property
    def input_blocked(self) -> bool:
        """Guess editing and submission are off during overlays, reveals and after the game."""
        return (self.game_over or self.countdown.active or self.reveal.active
                or self.paused or self.help_open)

    @property
    def current_row_index(self) -> Optional[int]:
        """Row the player is typing into; None while a reveal runs or once the game ends."""
        if self.game_over or self.reveal.active or len(self.guesses) >= self.attempts_max:
            return None
        return len(self.guesses)


def new_session(difficulty: Difficulty, secret: Sequence[Color], generation: int = 0,
                clock_seconds: int = 120) -> Session:
    preset = PRESETS[difficulty]
    if len(secret) != preset.code_length:
        raise ValueError(
            f"A {difficulty} secret must have exactly {preset.code_length} colors."
        )
    return Session(
        secret=tuple(Color(c) for c in secret),
        difficulty=difficulty,
        generation=generation,
        clock=ClockState(seconds_left=clock_seconds),
    )


def disable_absent_colors(session: Session, guess: Iterable[Color]) -> None:
    # Only ever grows until the next restart
    if not session.preset.disables_colors:
        return
    session.disabled_colors |= set(guess) - set(session.secret)


def invariant_violations(session: Session) -> List[str]:
    """Returns every broken consistency rule; empty when the session is sound."""
    problems: List[str] = []
    n = session.code_length

    for index, record in enumerate(session.guesses):
        if len(record.outcomes) != n:
            problems.append(f"row {index} has {len(record.outcomes)} outcomes, expected {n}")
        if sum(record.counts) != n:
            problems.append(f"row {index} outcome counts do not add up to {n}")

    if len(session.guesses) > session.attempts_max:
        problems.append("more rows than attempts")

    exhausted = (
        len(session.guesses) == session.attempts_max
        and session.reveal.phase is not RevealPhase.REVEALING
    )
    expected_over = session.won or exhausted or session.clock.seconds_left == 0
    if session.game_over != expected_over:
        problems.append(f"game_over is {session.game_over}, expected {expected_over}")

    if session.won and (not session.guesses or not is_win(session.guesses[-1].outcomes)):
        problems.append("won without an all-correct last row")

    if session.difficulty == "difficult" and session.disabled_colors:
        problems.append("disabled colors in difficult mode")

    if session.reveal.active and session.current_row_index is not None:
        problems.append("a row is current while a reveal is running")

    return problems
