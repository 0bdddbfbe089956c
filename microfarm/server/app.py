"""MicroFarm HTTP API.

Thin REST layer over FarmService.  Every response uses the envelope
``{success, data?, error?}``; status codes are 201 for player creation,
200 for reads and updates, 400 for invalid input or a rejected action,
404 for an unknown player and 500 for anything unexpected.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from microfarm.errors import (
    FarmError,
    InsufficientEnergy,
    InvalidCoordinates,
    SessionNotFound,
    ToolNotApplicable,
    ValidationError,
)
from microfarm.server.schemas import (
    UpdateCropsRequest,
    UpdateGameStateRequest,
    UseToolRequest,
)
from microfarm.simulation.config import FarmConfig
from microfarm.simulation.service import FarmService
from microfarm.world import rules

logger = logging.getLogger(__name__)

_REJECTION_MESSAGES: dict[type[FarmError], str] = {
    InvalidCoordinates: "Invalid tile coordinates",
    InsufficientEnergy: "Not enough energy",
    ToolNotApplicable: "Cannot use this tool on this tile",
}


def envelope(
    data: Any = None,
    *,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
    details: list[str] | None = None,
) -> JSONResponse:
    """Wrap a payload in the API's response envelope."""
    body: dict[str, Any] = {"success": error is None}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def create_app(
    config: FarmConfig | None = None,
    service: FarmService | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Game configuration, ignored if ``service`` is given.
        service: Session service to expose.  A new in-memory one is built
            from ``config`` when omitted.
    """
    service = service or FarmService(config or FarmConfig())

    app = FastAPI(
        title="MicroFarm API",
        description="Backend for MicroFarm - an isometric browser farming game",
        version="0.1.0",
    )
    app.state.service = service

    # The browser client is served from a different origin in development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return envelope(
            error=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
            details=exc.reasons,
        )

    @app.exception_handler(RequestValidationError)
    async def _request_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        details = [
            f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}"
            for err in exc.errors()
        ]
        return envelope(
            error="Invalid request body",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )

    @app.exception_handler(SessionNotFound)
    async def _not_found(request: Request, exc: SessionNotFound) -> JSONResponse:
        return envelope(error="Player not found", status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(Exception)
    async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return envelope(
            error="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        """API health check."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/api/players")
    def create_player(payload: dict[str, Any] = Body(...)) -> JSONResponse:
        service.evict_idle()
        session_id, _ = service.create_session(payload)
        state = service.snapshot(session_id)
        return envelope(
            {"player": state["player"], "gameState": state},
            status_code=status.HTTP_201_CREATED,
        )

    @app.get("/api/players/{player_id}")
    def get_player(player_id: str) -> JSONResponse:
        state = service.snapshot(player_id)
        return envelope({"player": state["player"], "gameState": state})

    @app.post("/api/players/{player_id}/use-tool")
    def use_tool(player_id: str, request: UseToolRequest) -> JSONResponse:
        try:
            result, state = service.use_tool(
                player_id,
                request.tool,
                request.tile_x,
                request.tile_y,
            )
        except (InvalidCoordinates, InsufficientEnergy, ToolNotApplicable) as exc:
            # Send the unchanged state back so the client can resync.
            tool = rules.parse_tool(request.tool)
            return envelope(
                {
                    "success": False,
                    "energyCost": rules.energy_cost(tool, service.config.energy_costs),
                    "harvestValue": 0,
                    "gameState": service.snapshot(player_id),
                },
                error=_REJECTION_MESSAGES[type(exc)],
                status_code=status.HTTP_400_BAD_REQUEST,
                details=[str(exc)],
            )
        return envelope(
            {
                "success": result.applied,
                "energyCost": result.energy_cost,
                "harvestValue": result.harvest_value,
                "gameState": state,
            },
        )

    @app.put("/api/players/{player_id}/game-state")
    def update_game_state(
        player_id: str,
        request: UpdateGameStateRequest,
    ) -> JSONResponse:
        patch = request.game_state
        camera = patch.camera
        state = service.update_state(
            player_id,
            tool=patch.game.current_tool if patch.game is not None else None,
            camera_x=camera.x if camera is not None else None,
            camera_y=camera.y if camera is not None else None,
        )
        return envelope({"gameState": state})

    @app.post("/api/players/{player_id}/update-crops")
    def update_crops(
        player_id: str,
        request: UpdateCropsRequest | None = None,
    ) -> JSONResponse:
        ticks = request.ticks if request is not None else 1
        return envelope({"gameState": service.advance_crops(player_id, ticks)})

    return app
