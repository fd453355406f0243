"""
- A virtual-time scheduler so timer-driven behavior is deterministic
- Controller / store fixtures with a known secret and no countdown
- A client fixture (TestClient(app)) whose store runs on the fake scheduler,
  wired in through FastAPI's dependency_overrides
"""
import heapq
import itertools
from dataclasses import replace
from typing import Callable, List, Tuple

import pytest
from fastapi.testclient import TestClient

from codebreaker.config import GameSettings
from codebreaker.controller import SessionController
from codebreaker.main import app, get_store
from codebreaker.scheduler import Scheduler
from codebreaker.session import invariant_violations
from codebreaker.store import GameStore
from codebreaker.types import Color

# Known secrets per code length
EASY_SECRET = [Color.RED, Color.GREEN, Color.BLUE, Color.YELLOW]
DIFFICULT_SECRET = [Color.RED, Color.GREEN, Color.BLUE, Color.YELLOW, Color.MAGENTA]

# Long enough for one reveal (4-5 ticks of 0.12s) plus the 0.25s settle
SETTLE_TIME = 0.9


def fixed_code(length: int) -> List[Color]:
    if length == 4:
        return list(EASY_SECRET)
    if length == 5:
        return list(DIFFICULT_SECRET)
    return [Color.RED for _ in range(length)]


class FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler(Scheduler):
    """Callbacks only run inside advance(), in due-time order."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, FakeHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        handle = FakeHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle, callback))
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        # small epsilon: 0.12 * 3 is not exactly 0.36
        while self._queue and self._queue[0][0] <= target + 1e-9:
            when, _, handle, callback = heapq.heappop(self._queue)
            self.now = max(self.now, when)
            if not handle.cancelled:
                callback()
        self.now = target

    @property
    def pending(self) -> int:
        return sum(1 for item in self._queue if not item[2].cancelled)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def settings() -> GameSettings:
    return GameSettings(countdown_on_start=False)


@pytest.fixture
def make_controller(scheduler, settings):
    def _make(difficulty="easy", **overrides) -> SessionController:
        cfg = replace(settings, **overrides)
        return SessionController(scheduler, settings=cfg, code_factory=fixed_code,
                                 difficulty=difficulty)
    return _make


@pytest.fixture
def controller(make_controller) -> SessionController:
    return make_controller()


@pytest.fixture
def play():
    """Type a full row and submit it."""
    def _play(game: SessionController, colors) -> None:
        for color in colors:
            game.add_color(color)
        game.submit_guess()
    return _play


@pytest.fixture
def assert_consistent():
    def _check(game: SessionController) -> None:
        assert invariant_violations(game.session) == []
    return _check


@pytest.fixture
def games(scheduler, settings) -> GameStore:
    return GameStore(scheduler, settings=settings, code_factory=fixed_code)


@pytest.fixture
def client(games):
    """Force the app to use our fake-scheduler store for every request."""
    async def _get_store_for_tests():
        return games

    app.dependency_overrides[get_store] = _get_store_for_tests
    yield TestClient(app)
    app.dependency_overrides.clear()
