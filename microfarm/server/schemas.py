"""Request bodies for the HTTP API.

Field names follow the browser client's camelCase JSON.  Player creation
takes a free-form body because ``parse_avatar`` owns those rules and
reports every problem at once.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UseToolRequest(BaseModel):
    """Body of ``POST /api/players/{id}/use-tool``."""

    tool: str
    tile_x: int = Field(..., alias="tileX")
    tile_y: int = Field(..., alias="tileY")


class CameraUpdate(BaseModel):
    x: float | None = None
    y: float | None = None


class GameUpdate(BaseModel):
    current_tool: str | None = Field(None, alias="currentTool")


class GameStatePatch(BaseModel):
    camera: CameraUpdate | None = None
    game: GameUpdate | None = None


class UpdateGameStateRequest(BaseModel):
    """Body of ``PUT /api/players/{id}/game-state``.

    Only the camera and the selected tool can be changed this way.
    """

    player_id: str | None = Field(None, alias="playerId")
    game_state: GameStatePatch = Field(
        default_factory=GameStatePatch,
        alias="gameState",
    )


class UpdateCropsRequest(BaseModel):
    """Optional body of ``POST /api/players/{id}/update-crops``."""

    ticks: int = Field(1, ge=1, le=10_000)
