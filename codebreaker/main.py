'''
Code Breaker API

Endpoints:
GET    /palette                  -> color ids and names
POST   /games                    -> start a game
GET    /games/{id}               -> snapshot
DELETE /games/{id}               -> drop a game
POST   /games/{id}/colors        -> add a color to the current guess
DELETE /games/{id}/colors/last   -> erase the last color
POST   /games/{id}/guess         -> submit the current guess
POST   /games/{id}/pause         -> pause the clock
POST   /games/{id}/resume        -> resume the clock
POST   /games/{id}/help          -> open help (pauses the clock)
DELETE /games/{id}/help          -> close help (resumes the clock)
POST   /games/{id}/restart       -> new secret, same game id

Every command answers with the fresh snapshot. Commands that are not allowed
right now (full guess, game over, countdown, reveal running...) are ignored.

Routes are async on purpose: they run on the same event loop as the game
timers, so a command never interleaves with a tick. Drawing a secret may hit
random.org, so that one call goes to the threadpool first.
'''

import logging
from functools import partial

from fastapi import FastAPI, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .controller import SessionController
from .random_client import fetch_code
from .scheduler import AsyncioScheduler
from .schemas import AddColorRequest, ColorOut, GameSnapshot
from .store import GameStore
from .types import PALETTE, Difficulty

settings = get_settings()
logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Code Breaker API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# One process-wide registry; tests swap it through dependency_overrides
store = GameStore(
    AsyncioScheduler(),
    settings=settings,
    code_factory=partial(fetch_code, source=settings.secret_source),
)


async def get_store() -> GameStore:
    return store


async def get_game(game_id: str, games: GameStore = Depends(get_store)) -> SessionController:
    game = games.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return game

# ---------------- Routes ----------------

@app.get("/palette", response_model=list[ColorOut], summary="List selectable colors")
async def get_palette() -> list[ColorOut]:
    return [ColorOut(id=int(color), name=color.name.lower()) for color in PALETTE]

@app.post("/games", response_model=GameSnapshot, summary="Start a new game")
async def start_game(
    difficulty: Difficulty = "easy",
    games: GameStore = Depends(get_store),
) -> GameSnapshot:
    """
    Difficulty presets:
      easy      -> 4 pegs, per-peg hints, absent colors get disabled
      difficult -> 5 pegs, aggregate hint only
    Both give 7 attempts and 2 minutes.
    """
    secret = await run_in_threadpool(games.draw_secret, difficulty)
    return games.create(difficulty, secret=secret).snapshot()

@app.get("/games/{game_id}", response_model=GameSnapshot, summary="Get current game snapshot")
async def get_snapshot(game: SessionController = Depends(get_game)) -> GameSnapshot:
    return game.snapshot()

@app.delete("/games/{game_id}", summary="Drop a game and its timers")
async def delete_game(game_id: str, games: GameStore = Depends(get_store)) -> dict:
    if not games.discard(game_id):
        raise HTTPException(status_code=404, detail="Game not found")
    return {"message": "Game discarded."}

@app.post("/games/{game_id}/colors", response_model=GameSnapshot, summary="Add a color to the current guess")
async def add_color(
    payload: AddColorRequest,
    game: SessionController = Depends(get_game),
) -> GameSnapshot:
    game.add_color(payload.color)
    return game.snapshot()

@app.delete("/games/{game_id}/colors/last", response_model=GameSnapshot, summary="Erase the last color")
async def erase_last(game: SessionController = Depends(get_game)) -> GameSnapshot:
    game.erase_last()
    return game.snapshot()

@app.post("/games/{game_id}/guess", response_model=GameSnapshot, summary="Submit the current guess")
async def submit_guess(game: SessionController = Depends(get_game)) -> GameSnapshot:
    game.submit_guess()
    return game.snapshot()

@app.post("/games/{game_id}/pause", response_model=GameSnapshot, summary="Pause the clock")
async def pause(game: SessionController = Depends(get_game)) -> GameSnapshot:
    game.pause()
    return game.snapshot()

@app.post("/games/{game_id}/resume", response_model=GameSnapshot, summary="Resume the clock")
async def resume(game: SessionController = Depends(get_game)) -> GameSnapshot:
    game.resume()
    return game.snapshot()

@app.post("/games/{game_id}/help", response_model=GameSnapshot, summary="Open help (pauses the clock)")
async def open_help(game: SessionController = Depends(get_game)) -> GameSnapshot:
    game.open_help()
    return game.snapshot()

@app.delete("/games/{game_id}/help", response_model=GameSnapshot, summary="Close help (resumes the clock)")
async def close_help(game: SessionController = Depends(get_game)) -> GameSnapshot:
    game.close_help()
    return game.snapshot()

@app.post("/games/{game_id}/restart", response_model=GameSnapshot, summary="Restart with a difficulty")
async def restart(
    difficulty: Difficulty = "easy",
    game: SessionController = Depends(get_game),
) -> GameSnapshot:
    secret = await run_in_threadpool(game.draw_secret, difficulty)
    game.restart(difficulty, secret=secret)
    return game.snapshot()
