"""
Testing API via TestClient
- The client fixture swaps the store for one built on the fake scheduler,
  so the secret is known and time only moves when a test says so.
"""

import asyncio

from fastapi.testclient import TestClient

from codebreaker.main import app, get_store
from codebreaker.store import GameStore

from conftest import SETTLE_TIME, fixed_code


def _type_row(client, game_id, colors):
    for color in colors:
        response = client.post(f"/games/{game_id}/colors", json={"color": color})
        assert response.status_code == 200
    return client.post(f"/games/{game_id}/guess")


def test_palette(client):
    response = client.get("/palette")
    assert response.status_code == 200
    palette = response.json()
    assert len(palette) == 7
    assert palette[0] == {"id": 0, "name": "red"}
    assert palette[6] == {"id": 6, "name": "white"}


def test_start_easy_and_win(client, scheduler):
    """
    Flow:
    1) Start EASY game; secret is [0,1,2,3] due to the fixed code factory.
    2) Incomplete guess -> ignored, snapshot unchanged.
    3) Winning guess -> reveal, then 'won' and secret revealed.
    """
    response = client.post("/games?difficulty=easy")
    assert response.status_code == 200
    game = response.json()
    game_id = game["game_id"]
    assert game["code_length"] == 4
    assert game["secret"] is None
    assert game["countdown"]["active"] is False

    # Incomplete guess is ignored
    client.post(f"/games/{game_id}/colors", json={"color": 0})
    response = client.post(f"/games/{game_id}/guess")
    assert response.status_code == 200
    assert response.json()["rows"] == []
    assert response.json()["current_guess"] == [0]

    client.delete(f"/games/{game_id}/colors/last")
    response = _type_row(client, game_id, [0, 1, 2, 3])
    body = response.json()
    assert body["reveal"] == {"revealing_row_index": 0, "revealed_peg_count": 1}
    assert body["rows"][0]["outcomes"] == ["correct"]
    assert body["current_row_index"] is None

    scheduler.advance(SETTLE_TIME + 0.5)   # overlay follows the last peg by 0.5s
    final = client.get(f"/games/{game_id}").json()
    assert final["won"] is True
    assert final["game_over"] is True
    assert final["secret"] == [0, 1, 2, 3]
    assert final["rows"][0]["correct"] == 4
    assert final["show_game_over"] is True


def test_difficult_rows_only_show_counts(client, scheduler):
    game_id = client.post("/games?difficulty=difficult").json()["game_id"]
    _type_row(client, game_id, [4, 3, 2, 1, 0])
    scheduler.advance(SETTLE_TIME)

    row = client.get(f"/games/{game_id}").json()["rows"][0]
    assert row["outcomes"] is None
    assert row["correct"] == 1
    assert row["wrong_position"] == 4


def test_pause_resume_and_help(client, scheduler):
    game_id = client.post("/games").json()["game_id"]
    scheduler.advance(2)

    paused = client.post(f"/games/{game_id}/pause").json()
    assert paused["paused"] is True
    assert paused["clock_running"] is False
    scheduler.advance(10)

    resumed = client.post(f"/games/{game_id}/resume").json()
    assert resumed["paused"] is False
    assert resumed["seconds_left"] == 118

    helped = client.post(f"/games/{game_id}/help").json()
    assert helped["help_open"] is True
    assert helped["clock_running"] is False
    closed = client.delete(f"/games/{game_id}/help").json()
    assert closed["help_open"] is False
    assert closed["clock_running"] is True


def test_restart_with_difficulty(client, scheduler):
    game_id = client.post("/games?difficulty=easy").json()["game_id"]
    _type_row(client, game_id, [6, 6, 6, 6])
    scheduler.advance(SETTLE_TIME)
    assert client.get(f"/games/{game_id}").json()["disabled_colors"] == [6]

    response = client.post(f"/games/{game_id}/restart?difficulty=difficult")
    assert response.status_code == 200
    body = response.json()
    assert body["game_id"] == game_id
    assert body["difficulty"] == "difficult"
    assert body["code_length"] == 5
    assert body["rows"] == []
    assert body["disabled_colors"] == []
    assert body["seconds_left"] == 120


def test_validation_and_missing_games(client):
    game_id = client.post("/games").json()["game_id"]

    assert client.post(f"/games/{game_id}/colors", json={"color": 7}).status_code == 422
    assert client.post(f"/games/{game_id}/colors", json={"color": -1}).status_code == 422
    assert client.post("/games?difficulty=hard").status_code == 422

    assert client.get("/games/nope").status_code == 404
    assert client.post("/games/nope/guess").status_code == 404

    assert client.delete(f"/games/{game_id}").status_code == 200
    assert client.get(f"/games/{game_id}").status_code == 404


def test_secrets_are_drawn_off_the_event_loop(scheduler, settings):
    """The random.org source blocks, so the factory must never run on the loop."""
    on_loop = []

    def watching_code(length):
        try:
            asyncio.get_running_loop()
            on_loop.append(True)
        except RuntimeError:
            on_loop.append(False)
        return fixed_code(length)

    games = GameStore(scheduler, settings=settings, code_factory=watching_code)

    async def _get_store_for_tests():
        return games

    app.dependency_overrides[get_store] = _get_store_for_tests
    try:
        client = TestClient(app)
        game_id = client.post("/games?difficulty=easy").json()["game_id"]
        body = client.post(f"/games/{game_id}/restart?difficulty=difficult").json()
    finally:
        app.dependency_overrides.clear()

    assert body["code_length"] == 5
    assert on_loop == [False, False]
