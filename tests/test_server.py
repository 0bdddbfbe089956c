"""Tests for the HTTP API in microfarm.server.app."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from microfarm.server.app import create_app
from microfarm.simulation.config import FarmConfig
from microfarm.simulation.service import FarmService


@pytest.fixture
def client(fast_config: FarmConfig) -> TestClient:
    return TestClient(create_app(fast_config))


@pytest.fixture
def player_id(client: TestClient, cosmetics: dict[str, str]) -> str:
    response = client.post("/api/players", json=cosmetics)
    return response.json()["data"]["player"]["id"]


def _use(client: TestClient, player_id: str, tool: str, x: int = 0, y: int = 0):
    return client.post(
        f"/api/players/{player_id}/use-tool",
        json={"tool": tool, "tileX": x, "tileY": y},
    )


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestPlayers:
    """Tests for player creation and lookup."""

    def test_create_player(self, client: TestClient, cosmetics: dict[str, str]) -> None:
        response = client.post("/api/players", json=cosmetics)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        player = body["data"]["player"]
        assert player["name"] == "Test Farmer"
        assert player["bodyType"] == "average"
        assert player["id"]
        state = body["data"]["gameState"]
        assert state["game"]["money"] == 100
        assert state["game"]["energy"] == 100
        assert state["game"]["seeds"] == 5
        assert state["farm"]["width"] == 20
        assert state["farm"]["height"] == 15
        assert state["farm"]["tiles"][0][0]["type"] == "grass"

    def test_invalid_player_data(self, client: TestClient) -> None:
        response = client.post("/api/players", json={"name": "", "bodyType": "giant"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Invalid player data"
        assert len(body["details"]) > 0

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/api/players", json=["not", "an", "object"])
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_get_player(self, client: TestClient, player_id: str) -> None:
        response = client.get(f"/api/players/{player_id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["player"]["id"] == player_id
        assert data["gameState"]["player"]["id"] == player_id

    def test_unknown_player(self, client: TestClient) -> None:
        response = client.get("/api/players/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Player not found"}


class TestUseTool:
    """Tests for the tool endpoint."""

    def test_hoe(self, client: TestClient, player_id: str) -> None:
        response = _use(client, player_id, "hoe")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["success"] is True
        assert data["energyCost"] == 5
        assert data["harvestValue"] == 0
        assert data["gameState"]["game"]["energy"] == 95
        assert data["gameState"]["farm"]["tiles"][0][0]["type"] == "tilled"

    def test_water_then_plant(self, client: TestClient, player_id: str) -> None:
        _use(client, player_id, "hoe")
        water = _use(client, player_id, "water").json()["data"]
        assert water["energyCost"] == 3
        assert water["gameState"]["farm"]["tiles"][0][0]["watered"] is True
        plant = _use(client, player_id, "plant").json()["data"]
        assert plant["energyCost"] == 2
        assert plant["gameState"]["game"]["seeds"] == 4
        assert plant["gameState"]["farm"]["tiles"][0][0]["growthStage"] == 1

    def test_grow_and_harvest(self, client: TestClient, player_id: str) -> None:
        for tool in ("hoe", "water", "plant"):
            _use(client, player_id, tool, 2, 1)
        response = client.post(f"/api/players/{player_id}/update-crops", json={"ticks": 4})
        assert response.status_code == 200
        tile = response.json()["data"]["gameState"]["farm"]["tiles"][1][2]
        assert tile["growthStage"] == 3

        data = _use(client, player_id, "harvest", 2, 1).json()["data"]
        assert data["harvestValue"] == 25
        assert data["gameState"]["game"]["money"] == 125

    def test_invalid_coordinates(self, client: TestClient, player_id: str) -> None:
        response = _use(client, player_id, "hoe", 999, 999)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid tile coordinates"
        assert body["data"]["success"] is False
        assert body["data"]["gameState"]["game"]["energy"] == 100

    def test_not_applicable(self, client: TestClient, player_id: str) -> None:
        response = _use(client, player_id, "water")
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Cannot use this tool on this tile"
        assert body["data"]["gameState"]["game"]["energy"] == 100

    def test_unknown_tool(self, client: TestClient, player_id: str) -> None:
        response = _use(client, player_id, "shovel")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_missing_coordinates(self, client: TestClient, player_id: str) -> None:
        response = client.post(
            f"/api/players/{player_id}/use-tool",
            json={"tool": "hoe"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_unknown_player(self, client: TestClient) -> None:
        assert _use(client, "nope", "hoe").status_code == 404

    def test_unknown_player_with_unknown_tool(self, client: TestClient) -> None:
        response = _use(client, "nope", "shovel")
        assert response.status_code == 404
        assert response.json()["error"] == "Player not found"


class TestGameState:
    """Tests for camera/tool updates and crop ticks."""

    def test_update_camera_and_tool(self, client: TestClient, player_id: str) -> None:
        response = client.put(
            f"/api/players/{player_id}/game-state",
            json={
                "playerId": player_id,
                "gameState": {"camera": {"x": 16}, "game": {"currentTool": "water"}},
            },
        )
        assert response.status_code == 200
        state = response.json()["data"]["gameState"]
        assert state["camera"] == {"x": 16, "y": 0}
        assert state["game"]["currentTool"] == "water"

    def test_bad_tool_leaves_camera_alone(
        self,
        client: TestClient,
        player_id: str,
    ) -> None:
        response = client.put(
            f"/api/players/{player_id}/game-state",
            json={"gameState": {"camera": {"x": 64}, "game": {"currentTool": "axe"}}},
        )
        assert response.status_code == 400
        state = client.get(f"/api/players/{player_id}").json()["data"]["gameState"]
        assert state["camera"] == {"x": 0, "y": 0}

    def test_game_state_unknown_player(self, client: TestClient) -> None:
        response = client.put(
            "/api/players/nope/game-state",
            json={"gameState": {"game": {"currentTool": "axe"}}},
        )
        assert response.status_code == 404

    def test_update_crops_without_body(self, client: TestClient, player_id: str) -> None:
        response = client.post(f"/api/players/{player_id}/update-crops")
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_update_crops_unknown_player(self, client: TestClient) -> None:
        assert client.post("/api/players/nope/update-crops").status_code == 404


class _BrokenService(FarmService):
    def advance_crops(self, session_id: str, ticks: int = 1):
        raise RuntimeError("boom")


def test_unexpected_error_is_500(cosmetics: dict[str, str]) -> None:
    service = _BrokenService(FarmConfig())
    client = TestClient(create_app(service=service), raise_server_exceptions=False)
    sid, _ = service.create_session(cosmetics)
    response = client.post(f"/api/players/{sid}/update-crops")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
