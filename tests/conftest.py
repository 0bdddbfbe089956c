"""Shared fixtures for the MicroFarm test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from microfarm.player.avatar import Avatar, BodyType, HairStyle, Player
from microfarm.simulation.config import FarmConfig
from microfarm.simulation.service import FarmService
from microfarm.simulation.session import GameSession
from microfarm.world.farm import FarmGrid

COSMETICS = {
    "name": "Test Farmer",
    "bodyType": "average",
    "hairStyle": "short",
    "hairColor": "#8B4513",
    "skinTone": "#FDBB7D",
}


class FakeClock:
    """A manually advanced UTC clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def cosmetics() -> dict[str, str]:
    """Valid raw avatar data as the browser client sends it."""
    return dict(COSMETICS)


@pytest.fixture
def small_farm() -> FarmGrid:
    """A small 4x3 farm for fast tests."""
    return FarmGrid(width=4, height=3)


@pytest.fixture
def default_config() -> FarmConfig:
    """Default game config (no YAML file needed)."""
    return FarmConfig()


@pytest.fixture
def fast_config() -> FarmConfig:
    """Config where a crop gains a stage every 2 ticks."""
    return FarmConfig(growth_ticks=2)


@pytest.fixture
def player() -> Player:
    avatar = Avatar(
        name="Test Farmer",
        body_type=BodyType.AVERAGE,
        hair_style=HairStyle.SHORT,
        hair_color="#8B4513",
        skin_tone="#FDBB7D",
    )
    return Player(id="player-1", avatar=avatar)


@pytest.fixture
def session(player: Player, default_config: FarmConfig) -> GameSession:
    """A fresh 20x15 session with reference starting resources."""
    return GameSession(player=player, config=default_config)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(fast_config: FarmConfig, clock: FakeClock) -> FarmService:
    """An in-memory service with fast crops and a controllable clock."""
    return FarmService(fast_config, clock=clock)
