"""
Single place to:
- Load env vars from .env if present
- Read the game timings and switches into one GameSettings value
- Provide get_settings() for the app and tests

Durations are configured in milliseconds (env) and stored in seconds.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# dev convenience; in prod the platform injects env vars
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class GameSettings:
    clock_seconds: int = 120
    flash_threshold_seconds: int = 10
    clock_tick: float = 1.0
    reveal_tick: float = 0.12
    settle_delay: float = 0.25
    game_over_delay: float = 0.5
    countdown_from: int = 3
    countdown_tick: float = 1.0
    countdown_on_start: bool = True
    countdown_on_restart: bool = False
    secret_source: str = "local"   # "local" | "random_org"
    log_level: str = "INFO"


def get_settings() -> GameSettings:
    return GameSettings(
        clock_seconds=_env_int("CLOCK_SECONDS", 120),
        flash_threshold_seconds=_env_int("FLASH_THRESHOLD_SECONDS", 10),
        reveal_tick=_env_int("REVEAL_TICK_MS", 120) / 1000,
        settle_delay=_env_int("SETTLE_DELAY_MS", 250) / 1000,
        game_over_delay=_env_int("GAME_OVER_DELAY_MS", 500) / 1000,
        countdown_from=_env_int("COUNTDOWN_FROM", 3),
        countdown_on_start=_env_bool("COUNTDOWN_ON_START", True),
        countdown_on_restart=_env_bool("COUNTDOWN_ON_RESTART", False),
        secret_source=os.getenv("SECRET_SOURCE", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
