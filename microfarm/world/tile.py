"""Tile — a single cell of the farm grid.

A tile's cultivation state is exactly one of three variants held in
``Tile.soil``: ``Grass``, ``Tilled`` or ``Planted``.  The booleans the
client still expects (``watered``, ``planted``) are derived from the
variant, so a watered patch of grass or a crop on untilled ground cannot
be represented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class SurfaceState(Enum):
    """Coarse tile state as reported to clients."""

    GRASS = "grass"
    TILLED = "tilled"
    PLANTED = "planted"


@dataclass(frozen=True)
class Grass:
    """Untouched ground."""


@dataclass(frozen=True)
class Tilled:
    """Hoed soil, optionally watered.

    Attributes:
        watered: Whether the soil has been watered.
        last_watered_at: When it was watered.  Informational only.
    """

    watered: bool = False
    last_watered_at: datetime | None = None


@dataclass(frozen=True)
class Planted:
    """A growing crop.

    Attributes:
        growth_stage: Maturity level, 1 when sown.
        growth_ticks: Ticks accumulated toward the next stage.
        growth_ticks_required: Ticks needed per stage, fixed at sowing.
        watered: Carried over from the soil it was sown in.
        last_watered_at: When the soil was last watered.
    """

    growth_stage: int = 1
    growth_ticks: int = 0
    growth_ticks_required: int = 300
    watered: bool = True
    last_watered_at: datetime | None = None


Soil = Grass | Tilled | Planted

_SURFACE: dict[type, SurfaceState] = {
    Grass: SurfaceState.GRASS,
    Tilled: SurfaceState.TILLED,
    Planted: SurfaceState.PLANTED,
}


@dataclass
class Tile:
    """A single farm cell.

    Attributes:
        x: Column position.
        y: Row position.
        soil: Current cultivation state.
    """

    x: int
    y: int
    soil: Soil = field(default_factory=Grass)

    @property
    def surface(self) -> SurfaceState:
        return _SURFACE[type(self.soil)]

    @property
    def watered(self) -> bool:
        return not isinstance(self.soil, Grass) and self.soil.watered

    @property
    def planted(self) -> bool:
        return isinstance(self.soil, Planted)

    @property
    def growth_stage(self) -> int:
        return self.soil.growth_stage if isinstance(self.soil, Planted) else 0

    @property
    def growth_ticks(self) -> int:
        return self.soil.growth_ticks if isinstance(self.soil, Planted) else 0

    @property
    def growth_ticks_required(self) -> int:
        if isinstance(self.soil, Planted):
            return self.soil.growth_ticks_required
        return 0

    @property
    def last_watered_at(self) -> datetime | None:
        if isinstance(self.soil, Grass):
            return None
        return self.soil.last_watered_at

    def reset(self) -> None:
        """Return the tile to untouched grass."""
        self.soil = Grass()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the client's tile shape."""
        data: dict[str, Any] = {
            "type": self.surface.value,
            "watered": self.watered,
            "planted": self.planted,
            "growthStage": self.growth_stage,
            "growthTime": self.growth_ticks,
            "maxGrowthTime": self.growth_ticks_required,
        }
        if self.last_watered_at is not None:
            data["lastWatered"] = self.last_watered_at.isoformat()
        return data
