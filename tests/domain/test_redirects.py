from __future__ import annotations

import pytest

from chequemate.domain.model import Platform, TimeControl
from chequemate.domain.redirects import build_challenge_url


@pytest.mark.parametrize(
    ("time_control", "expected"),
    [
        ("5+3", "https://www.chess.com/play/online/new?opponent=testopponent&time=300|3"),
        ("1+1", "https://www.chess.com/play/online/new?opponent=testopponent&time=60|1"),
        (
            TimeControl(minutes=15, increment=10),
            "https://www.chess.com/play/online/new?opponent=testopponent&time=900|10",
        ),
    ],
)
def test_chess_com_urls_carry_seconds(time_control: TimeControl | str, expected: str) -> None:
    assert build_challenge_url(Platform.CHESS_COM, "testopponent", time_control) == expected


def test_lichess_url_carries_minutes() -> None:
    assert (
        build_challenge_url("lichess.org", "testopponent", "5+3")
        == "https://lichess.org/@/testopponent?time=5+3"
    )


def test_without_time_control_plain_friend_links_are_used() -> None:
    assert (
        build_challenge_url(Platform.CHESS_COM, "someone")
        == "https://www.chess.com/play/online/new?opponent=someone"
    )
    assert build_challenge_url(Platform.LICHESS, "someone", "bogus") == (
        "https://lichess.org/?user=someone#friend"
    )


def test_unknown_platform_is_rejected() -> None:
    with pytest.raises(ValueError, match="not a valid Platform"):
        build_challenge_url("chess24", "someone")
