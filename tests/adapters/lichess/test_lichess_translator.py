from __future__ import annotations

from datetime import UTC, datetime

import pytest

from chequemate.adapters.lichess import GamePayload, is_translatable, translate_game
from chequemate.domain.model import Platform, Side

CREATED = int(datetime(2025, 3, 1, 12, 0, tzinfo=UTC).timestamp() * 1000)
LAST_MOVE = int(datetime(2025, 3, 1, 12, 9, tzinfo=UTC).timestamp() * 1000)


def _payload(**overrides: object) -> GamePayload:
    data: dict[str, object] = {
        "id": "q7ZvsdUF",
        "rated": True,
        "speed": "blitz",
        "status": "mate",
        "winner": "black",
        "createdAt": CREATED,
        "lastMoveAt": LAST_MOVE,
        "clock": {"initial": 300, "increment": 3, "totalTime": 420},
        "players": {
            "white": {"user": {"name": "DrNykterstein", "id": "drnykterstein"}, "rating": 3000},
            "black": {"user": {"name": "penguingm1", "id": "penguingm1"}, "rating": 2950},
        },
    }
    data.update(overrides)
    return GamePayload.model_validate(data)


def test_translate_finished_game() -> None:
    game = translate_game(_payload())

    assert game is not None
    assert game.platform is Platform.LICHESS
    assert game.url == "https://lichess.org/q7ZvsdUF"
    assert game.winning_sides() == (Side.BLACK,)
    assert game.white_result == "lose"
    assert game.ended_at == datetime(2025, 3, 1, 12, 9, tzinfo=UTC)
    assert game.time_control == "5+3"
    assert game.end_reason == "mate"


def test_translate_draw() -> None:
    game = translate_game(_payload(status="draw", winner=None))

    assert game is not None
    assert game.winning_sides() == ()
    assert game.white_result == game.black_result == "draw"


def test_falls_back_to_creation_time() -> None:
    game = translate_game(_payload(lastMoveAt=None))

    assert game is not None
    assert game.ended_at == datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize("status", ["started", "aborted", "noStart", "created"])
def test_unfinished_games_are_dropped(status: str) -> None:
    payload = _payload(status=status, winner=None)

    assert not is_translatable(payload)
    assert translate_game(payload) is None


def test_games_against_the_computer_are_dropped() -> None:
    payload = _payload(
        players={
            "white": {"user": {"name": "DrNykterstein"}, "rating": 3000},
            "black": {"aiLevel": 8},
        }
    )

    assert translate_game(payload) is None


def test_correspondence_games_have_no_time_control() -> None:
    game = translate_game(_payload(clock=None))

    assert game is not None
    assert game.time_control is None
