"""Time controls as agreed between the two players."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

ASSUMED_MOVES_PER_PLAYER: Final[int] = 30
DEFAULT_DURATION_SECONDS: Final[int] = 300

_LABEL_PATTERN = re.compile(r"^\s*(\d+)\s*\+\s*(\d+)\s*$")


@dataclass(frozen=True, slots=True)
class TimeControl:
    """Base time in minutes plus Fischer increment in seconds (``5+3``)."""

    minutes: int
    increment: int = 0

    def __post_init__(self) -> None:
        if self.minutes < 0 or self.increment < 0:
            raise ValueError("Time control values must be non-negative")

    @classmethod
    def parse(cls, label: str) -> TimeControl:
        match = _LABEL_PATTERN.match(label)
        if match is None:
            raise ValueError(f"Invalid time control: {label!r}")
        return cls(minutes=int(match.group(1)), increment=int(match.group(2)))

    @classmethod
    def try_parse(cls, label: str | None) -> TimeControl | None:
        if not label:
            return None
        try:
            return cls.parse(label)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return f"{self.minutes}+{self.increment}"

    @property
    def base_seconds(self) -> int:
        return self.minutes * 60

    def estimated_duration_seconds(self) -> int:
        """Both clocks fully used plus the increment for an average-length game."""

        return self.base_seconds * 2 + ASSUMED_MOVES_PER_PLAYER * self.increment * 2

    def __str__(self) -> str:
        return self.label


def estimate_match_duration(
    time_control: TimeControl | str | None,
    *,
    default_seconds: int = DEFAULT_DURATION_SECONDS,
) -> int:
    """Return the expected wall-clock length of a game in seconds.

    Missing or unparseable time controls fall back to ``default_seconds``.
    """

    if isinstance(time_control, str):
        time_control = TimeControl.try_parse(time_control)
    if time_control is None:
        return default_seconds
    return time_control.estimated_duration_seconds()
