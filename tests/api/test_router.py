"""Tests for the HTTP surface: chessledger/api/router.py and the error mapping in chessledger/api/app.py"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from chessledger.api.app import create_app, status_code_for
from chessledger.core.exceptions import (
    ChallengeNotFoundError,
    DrawOfferError,
    GameError,
    IllegalMoveError,
    NotYourTurnError,
)
from chessledger.db.database import get_db


@pytest.fixture
def client(db_session_repo: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def _override_get_db() -> Generator[Session, None, None]:
        yield db_session_repo

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client


def headers(player: str, block: int = 0) -> dict[str, str]:
    return {"X-Player": player, "X-Block-Height": str(block)}


def start_game(client: TestClient) -> int:
    """alice (white) vs bob (black), 10 blocks per turn"""
    response = client.post(
        "/challenges",
        json={"opponent": "bob", "play_as": "white", "block_limit": 10},
        headers=headers("alice", 100),
    )
    assert response.status_code == 201
    challenge_id = response.json()["challenge_id"]

    response = client.post(f"/challenges/{challenge_id}/accept", headers=headers("bob", 100))
    assert response.status_code == 200
    assert response.json()["player1"] == "alice"
    return response.json()["game_id"]


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ChallengeNotFoundError(), 404),
        (NotYourTurnError(), 403),
        (IllegalMoveError(), 400),
        (DrawOfferError(), 400),
        (GameError(), 400),
    ],
)
def test_status_codes(error: GameError, status_code: int) -> None:
    assert status_code_for(error) == status_code


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


# -- SETUP --
def test_state(client: TestClient) -> None:
    assert client.get("/state").status_code == 404
    assert client.post("/state", json={"owner": "root"}).status_code == 201
    assert client.get("/state").json() == {"owner": "root"}
    response = client.post("/state", json={"owner": "other"})
    assert response.status_code == 400
    assert response.json()["error"] == "AlreadyInitializedError"


# -- CHALLENGES --
def test_challenge_lifecycle(client: TestClient) -> None:
    response = client.post("/challenges", json={}, headers=headers("alice", 5))
    assert response.status_code == 201
    challenge = response.json()
    assert challenge["created_by"] == "alice"
    assert challenge["opponent"] is None
    assert challenge["block_created"] == 5

    listed = client.get("/challenges").json()
    assert [c["challenge_id"] for c in listed] == [challenge["challenge_id"]]

    response = client.delete(f"/challenges/{challenge['challenge_id']}", headers=headers("bob"))
    assert response.status_code == 403
    response = client.delete(f"/challenges/{challenge['challenge_id']}", headers=headers("alice"))
    assert response.status_code == 204
    assert client.get(f"/challenges/{challenge['challenge_id']}").status_code == 404


def test_missing_caller_header(client: TestClient) -> None:
    response = client.post("/challenges", json={}, headers={"X-Block-Height": "1"})
    assert response.status_code == 422


def test_challenge_yourself(client: TestClient) -> None:
    response = client.post("/challenges", json={"opponent": "alice"}, headers=headers("alice"))
    assert response.status_code == 400
    assert response.json()["error"] == "CannotPlaySelfError"


# -- GAMES --
def test_play_to_checkmate(client: TestClient) -> None:
    game_id = start_game(client)
    for player, move in [("alice", "f2f3"), ("bob", "e7e5"), ("alice", "g2g4")]:
        response = client.post(
            f"/games/{game_id}/turn",
            json={"action": "move", "move": move},
            headers=headers(player, 101),
        )
        assert response.status_code == 200
        assert response.json()["status"] is None

    response = client.post(
        f"/games/{game_id}/turn",
        json={"action": "move", "move": "d8h4"},
        headers=headers("bob", 102),
    )
    assert response.json() == {
        "game_id": game_id,
        "status": "black_checkmates",
        "color_to_move": None,
    }

    game = client.get(f"/games/{game_id}").json()
    assert [m["action"] for m in game["moves"]] == ["f2f3", "e7e5", "g2g4", "d8h4"]
    ratings = {r["player"]: r["rating"] for r in client.get("/ratings").json()}
    assert ratings == {"alice": 1184, "bob": 1216}

    response = client.post(
        f"/games/{game_id}/turn", json={"action": "resign"}, headers=headers("alice", 103)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "GameOverError"


def test_turn_errors(client: TestClient) -> None:
    game_id = start_game(client)
    response = client.post(
        f"/games/{game_id}/turn",
        json={"action": "move", "move": "e7e5"},
        headers=headers("bob", 101),
    )
    assert response.status_code == 403

    response = client.post(
        f"/games/{game_id}/turn",
        json={"action": "move", "move": "e2e5"},
        headers=headers("alice", 101),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "IllegalMoveError"

    response = client.post(
        f"/games/{game_id}/turn",
        json={"action": "move", "move": "not-uci"},
        headers=headers("alice", 101),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidRequestError"

    assert client.post("/games/999/turn", json={"action": "resign"}, headers=headers("alice")).status_code == 404


def test_timeout(client: TestClient) -> None:
    game_id = start_game(client)
    response = client.post(f"/games/{game_id}/timeout", headers=headers("carol", 110))
    assert response.status_code == 400
    assert response.json()["error"] == "GameNotTimedOutError"

    response = client.post(f"/games/{game_id}/timeout", headers=headers("carol", 111))
    assert response.status_code == 200
    assert response.json()["status"] == "white_timeout"


def test_game_queries(client: TestClient) -> None:
    game_id = start_game(client)
    assert client.get(f"/games/{game_id}/turn", params={"player": "alice"}).json() == {"result": True}
    assert client.get(f"/games/{game_id}/turn", params={"player": "bob"}).json() == {"result": False}
    valid = client.get(f"/games/{game_id}/valid-move", params={"player": "alice", "move": "e2e4"})
    assert valid.json() == {"result": True}
    invalid = client.get(f"/games/{game_id}/valid-move", params={"player": "alice", "move": "e2e5"})
    assert invalid.json() == {"result": False}

    games = client.get("/games", params={"player": "bob"}).json()
    assert [g["game_id"] for g in games] == [game_id]
    assert games[0]["color_to_move"] == "white"
    assert client.get("/games", params={"player": "carol"}).json() == []
