"""
Gameplay clock and the pre-game countdown gate.

Both are plain state records plus transition functions. The controller owns
the repeating timers and calls tick_clock / tick_countdown once per second.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import Session


@dataclass
class ClockState:
    seconds_left: int = 120
    running: bool = False
    # False until the countdown is done (or skipped); resume() needs it
    started: bool = False
    flash: bool = False


@dataclass
class CountdownState:
    active: bool = False
    value: int = 0


def start_clock(clock: ClockState) -> None:
    clock.running = True
    clock.started = True
    clock.flash = False


def stop_clock(clock: ClockState) -> None:
    clock.running = False


def can_resume(session: "Session") -> bool:
    clock = session.clock
    return clock.started and not session.game_over and clock.seconds_left > 0


def tick_clock(session: "Session", flash_threshold: int) -> bool:
    """
    One real-time second. Returns True when this tick ran the clock out.
    """
    clock = session.clock
    if not clock.running or session.game_over or session.won:
        return False

    clock.seconds_left -= 1
    if clock.seconds_left <= 0:
        clock.seconds_left = 0
        clock.running = False
        session.game_over = True
        return True

    if clock.seconds_left <= flash_threshold:
        clock.flash = not clock.flash
    return False


def arm_countdown(countdown: CountdownState, start_from: int) -> None:
    countdown.active = True
    countdown.value = start_from


def tick_countdown(countdown: CountdownState) -> bool:
    """3 -> 2 -> 1 -> 0. Returns True when the gate opens."""
    if not countdown.active:
        return False
    countdown.value -= 1
    if countdown.value <= 0:
        countdown.value = 0
        countdown.active = False
        return True
    return False
