"""Lichess API response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LichessBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LichessUser(LichessBaseModel):
    name: str
    id: str | None = None


class GamePlayer(LichessBaseModel):
    user: LichessUser | None = None
    rating: int | None = None
    ai_level: int | None = Field(default=None, alias="aiLevel")


class GamePlayers(LichessBaseModel):
    white: GamePlayer
    black: GamePlayer


class GameClock(LichessBaseModel):
    initial: int
    increment: int = 0


class GamePayload(LichessBaseModel):
    id: str
    status: str
    players: GamePlayers
    created_at: int = Field(alias="createdAt")
    last_move_at: int | None = Field(default=None, alias="lastMoveAt")
    winner: str | None = None
    rated: bool | None = None
    speed: str | None = None
    perf: str | None = None
    clock: GameClock | None = None


class UserProfile(LichessBaseModel):
    id: str
    username: str
    disabled: bool = False
    closed: bool = False
