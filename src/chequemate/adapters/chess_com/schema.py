"""Chess.com published-data API response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChessComBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ArchivesResponse(ChessComBaseModel):
    archives: list[str] = Field(default_factory=list)


class GamePlayer(ChessComBaseModel):
    username: str
    result: str
    rating: int | None = None


class GamePayload(ChessComBaseModel):
    url: str
    end_time: int
    white: GamePlayer
    black: GamePlayer
    uuid: str | None = None
    time_control: str | None = None
    time_class: str | None = None
    rules: str | None = None
    rated: bool | None = None


class MonthlyGamesResponse(ChessComBaseModel):
    games: list[GamePayload] = Field(default_factory=list)


class PlayerProfile(ChessComBaseModel):
    username: str
    player_id: int | None = None
    status: str | None = None
