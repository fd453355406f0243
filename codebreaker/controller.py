"""
Session controller: the command surface of one game.

Commands and timer callbacks all run on the same scheduler queue, one at a
time. A command whose precondition is not met is ignored (logged at DEBUG),
never raised: the UI is expected to disable those buttons anyway.
"""

import logging
from typing import Callable, Dict, Optional
from uuid import uuid4

from .clock import arm_countdown, can_resume, start_clock, stop_clock, tick_clock, tick_countdown
from .config import GameSettings
from .random_client import sample_code
from .reveal import RevealPhase, advance_reveal, begin_reveal, finish_reveal
from .scheduler import Callback, Handle, Scheduler
from .schemas import CountdownOut, GameSnapshot, RevealOut, RowOut
from .session import GuessRecord, PRESETS, Session, disable_absent_colors, new_session
from .types import PALETTE, Code, Color, Difficulty

logger = logging.getLogger(__name__)

CodeFactory = Callable[[int], Code]

PALETTE_IDS = frozenset(int(color) for color in PALETTE)


class SessionController:
    def __init__(
        self,
        scheduler: Scheduler,
        settings: Optional[GameSettings] = None,
        code_factory: Optional[CodeFactory] = None,
        difficulty: Difficulty = "easy",
        game_id: Optional[str] = None,
        secret: Optional[Code] = None,
    ) -> None:
        self.game_id = game_id or str(uuid4())
        self._scheduler = scheduler
        self._settings = settings or GameSettings()
        self._code_factory = code_factory or sample_code
        self._timers: Dict[str, Handle] = {}
        self._session = self._new_session(difficulty, generation=0, secret=secret)
        self._open_game(countdown=self._settings.countdown_on_start)

    @property
    def session(self) -> Session:
        """Live state, for reading only. Mutate through the commands."""
        return self._session

    # ---------------- Commands ----------------

    def add_color(self, color: int) -> None:
        s = self._session
        if color not in PALETTE_IDS:
            self._ignore("add_color")
            return
        color = Color(color)
        if s.input_blocked or len(s.current_guess) >= s.code_length or color in s.disabled_colors:
            self._ignore("add_color")
            return
        s.current_guess.append(color)

    def erase_last(self) -> None:
        s = self._session
        if s.input_blocked or not s.current_guess:
            self._ignore("erase_last")
            return
        s.current_guess.pop()

    def submit_guess(self) -> None:
        s = self._session
        if s.input_blocked or len(s.current_guess) != s.code_length:
            self._ignore("submit_guess")
            return

        record = GuessRecord.scored(s.secret, s.current_guess)
        s.guesses.append(record)
        s.current_guess = []
        disable_absent_colors(s, record.guess)

        begin_reveal(s, len(s.guesses) - 1)
        self._set_timer("reveal", self._scheduler.call_every(
            self._settings.reveal_tick, self._bind(self._on_reveal_tick)))

    def restart(self, difficulty: Difficulty, secret: Optional[Code] = None) -> None:
        # Drop every timer of the old game before the new one exists
        self._cancel_all_timers()
        self._session = self._new_session(difficulty, generation=self._session.generation + 1,
                                          secret=secret)
        self._open_game(countdown=self._settings.countdown_on_restart)

    def draw_secret(self, difficulty: Difficulty) -> Code:
        """May block on the network; call it off the event loop."""
        return self._code_factory(PRESETS[difficulty].code_length)

    def pause(self) -> None:
        s = self._session
        if s.game_over or s.countdown.active:
            self._ignore("pause")
            return
        s.paused = True
        self._halt_clock()

    def resume(self) -> None:
        s = self._session
        if not s.paused:
            self._ignore("resume")
            return
        s.paused = False
        self._resume_clock()

    def open_help(self) -> None:
        s = self._session
        if s.game_over or s.countdown.active:
            self._ignore("open_help")
            return
        s.help_open = True
        self._halt_clock()

    def close_help(self) -> None:
        s = self._session
        if not s.help_open:
            self._ignore("close_help")
            return
        s.help_open = False
        self._resume_clock()

    def close(self) -> None:
        """Cancel everything still scheduled; the controller is unusable afterwards."""
        self._cancel_all_timers()

    # ---------------- Snapshot ----------------

    def snapshot(self) -> GameSnapshot:
        s = self._session
        revealing = s.reveal.row_index if s.reveal.active else None
        return GameSnapshot(
            game_id=self.game_id,
            difficulty=s.difficulty,
            code_length=s.code_length,
            attempts_max=s.attempts_max,
            attempts_left=s.attempts_left,
            secret=[int(c) for c in s.secret] if s.game_over else None,
            rows=[self._row_out(index, record) for index, record in enumerate(s.guesses)],
            current_guess=[int(c) for c in s.current_guess],
            current_row_index=s.current_row_index,
            seconds_left=s.clock.seconds_left,
            flash=s.clock.flash,
            clock_running=s.clock.running,
            game_over=s.game_over,
            won=s.won,
            show_game_over=s.show_game_over,
            disabled_colors=sorted(int(c) for c in s.disabled_colors),
            countdown=CountdownOut(active=s.countdown.active, value=s.countdown.value),
            reveal=RevealOut(
                revealing_row_index=revealing,
                revealed_peg_count=s.reveal.revealed_peg_count(s.code_length),
            ),
            paused=s.paused,
            help_open=s.help_open,
        )

    def _row_out(self, index: int, record: GuessRecord) -> RowOut:
        s = self._session
        disclosed = s.code_length
        if s.reveal.active and s.reveal.row_index == index:
            disclosed = s.reveal.revealed_peg_count(s.code_length)

        outcomes = None
        if s.preset.per_peg_hints:
            outcomes = list(record.outcomes[:disclosed])

        correct = wrong_position = None
        if disclosed == s.code_length:
            correct, wrong_position, _ = record.counts

        return RowOut(
            guess=[int(c) for c in record.guess],
            outcomes=outcomes,
            correct=correct,
            wrong_position=wrong_position,
        )

    # ---------------- Timer callbacks ----------------

    def _on_countdown_tick(self) -> None:
        if tick_countdown(self._session.countdown):
            self._cancel_timer("countdown")
            self._start_clock()

    def _on_clock_tick(self) -> None:
        s = self._session
        expired = tick_clock(s, self._settings.flash_threshold_seconds)
        if not s.clock.running:
            self._cancel_timer("clock")
        if expired:
            logger.info("game %s: time is up after %d guess(es)", self.game_id, len(s.guesses))
            self._schedule_game_over()

    def _on_reveal_tick(self) -> None:
        s = self._session
        if advance_reveal(s) is RevealPhase.REVEALING:
            return

        self._cancel_timer("reveal")
        if s.game_over:
            self._halt_clock()
            if s.won:
                logger.info("game %s: won in %d guess(es)", self.game_id, len(s.guesses))
            elif s.clock.seconds_left > 0:
                logger.info("game %s: lost, out of attempts", self.game_id)
            # Time may have run out mid-reveal; keep that overlay's due time
            if not s.show_game_over and "game_over" not in self._timers:
                self._schedule_game_over()

        self._set_timer("settle", self._scheduler.call_later(
            self._settings.settle_delay, self._bind(self._on_settled)))

    def _on_settled(self) -> None:
        finish_reveal(self._session)

    def _on_game_over_delay(self) -> None:
        self._session.show_game_over = True

    # ---------------- Helpers ----------------

    def _new_session(self, difficulty: Difficulty, generation: int,
                     secret: Optional[Code] = None) -> Session:
        if secret is None:
            secret = self.draw_secret(difficulty)
        logger.info("game %s: new %s game (generation %d)", self.game_id, difficulty, generation)
        return new_session(difficulty, secret, generation=generation,
                           clock_seconds=self._settings.clock_seconds)

    def _open_game(self, countdown: bool) -> None:
        if countdown and self._settings.countdown_from > 0:
            arm_countdown(self._session.countdown, self._settings.countdown_from)
            self._set_timer("countdown", self._scheduler.call_every(
                self._settings.countdown_tick, self._bind(self._on_countdown_tick)))
        else:
            self._start_clock()

    def _start_clock(self) -> None:
        start_clock(self._session.clock)
        self._arm_clock()

    def _resume_clock(self) -> None:
        s = self._session
        if s.paused or s.help_open or not can_resume(s):
            return
        s.clock.running = True
        self._arm_clock()

    def _arm_clock(self) -> None:
        # A fresh one-second period, so pausing never eats a partial second
        self._set_timer("clock", self._scheduler.call_every(
            self._settings.clock_tick, self._bind(self._on_clock_tick)))

    def _halt_clock(self) -> None:
        stop_clock(self._session.clock)
        self._cancel_timer("clock")

    def _schedule_game_over(self) -> None:
        self._set_timer("game_over", self._scheduler.call_later(
            self._settings.game_over_delay, self._bind(self._on_game_over_delay)))

    def _bind(self, callback: Callback) -> Callback:
        """Tie a timer callback to the current game; it goes stale on restart."""
        generation = self._session.generation

        def guarded() -> None:
            if self._session.generation != generation:
                logger.debug("game %s: dropped stale timer from generation %d",
                             self.game_id, generation)
                return
            callback()

        return guarded

    def _set_timer(self, name: str, handle: Handle) -> None:
        self._cancel_timer(name)
        self._timers[name] = handle

    def _cancel_timer(self, name: str) -> None:
        handle = self._timers.pop(name, None)
        if handle is not None:
            handle.cancel()

    def _cancel_all_timers(self) -> None:
        for name in list(self._timers):
            self._cancel_timer(name)

    def _ignore(self, command: str) -> None:
        logger.debug("game %s: ignored %s", self.game_id, command)
