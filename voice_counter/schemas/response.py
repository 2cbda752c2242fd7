from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── POST /execute ────────────────────────────────────────────────────────────
class ExecuteRequest(BaseModel):
    # Presence is checked by the route so a missing field answers 400, not 422
    model_config = ConfigDict(extra="allow")

    name: Any = None
    username: Any = None
    stats: Any = None


class Player(BaseModel):
    name: Any
    username: Any
    stats: Any


class ExecuteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    execution_count: int = Field(alias="executionCount")
    player: Player


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


# ── GET /counter, GET / ──────────────────────────────────────────────────────
class CounterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    execution_count: int = Field(alias="executionCount")


class StatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "running"
    execution_count: int = Field(alias="executionCount")
    channel_id: str = Field(alias="channelId")
    bot_online: bool = Field(alias="botOnline")
