"""Tool rules — what each tool does to a tile.

Every function here is stateless: it reads or mutates only the tile it
is handed.  The tile life cycle is::

    Grass --hoe--> Tilled --water--> Tilled(watered) --plant--> Planted(1)
    Planted(1..max) --ticks--> Planted(max) --harvest--> Grass

Growth between stages is driven by ``advance_growth`` (time), never by a
tool.  Tunables default to the reference values and are normally passed
in from ``FarmConfig``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from microfarm.errors import ValidationError
from microfarm.world.tile import Grass, Planted, Tilled

if TYPE_CHECKING:
    from collections.abc import Mapping

    from microfarm.world.tile import Tile

MAX_GROWTH_STAGE = 3
PLANT_GROWTH_TICKS = 300
BASE_HARVEST_VALUE = 10
HARVEST_VALUE_PER_STAGE = 5


class Tool(Enum):
    """Player actions against one tile."""

    HOE = "hoe"
    WATER = "water"
    PLANT = "plant"
    HARVEST = "harvest"


ENERGY_COSTS: dict[Tool, int] = {
    Tool.HOE: 5,
    Tool.WATER: 3,
    Tool.PLANT: 2,
    Tool.HARVEST: 3,
}

_ALIASES = {"till": Tool.HOE}


@dataclass(frozen=True)
class TileMutationResult:
    """Outcome of ``apply``.

    Attributes:
        applied: Whether the tile changed.
        harvest_value: Money earned; non-zero only for a harvest.
    """

    applied: bool
    harvest_value: int = 0


def parse_tool(value: str | Tool) -> Tool:
    """Resolve a wire name such as ``"hoe"`` to a Tool.

    Raises:
        ValidationError: If the name is not a known tool.
    """
    if isinstance(value, Tool):
        return value
    name = str(value).strip().lower()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return Tool(name)
    except ValueError:
        valid = ", ".join(t.value for t in Tool)
        raise ValidationError(
            f"Unknown tool: {value!r}",
            [f"tool must be one of: {valid}"],
        ) from None


def energy_cost(tool: Tool, costs: Mapping[Tool, int] | None = None) -> int:
    """Energy spent by a successful use of ``tool``."""
    return (costs or ENERGY_COSTS)[tool]


def harvest_value(
    growth_stage: int,
    *,
    base: int = BASE_HARVEST_VALUE,
    per_stage: int = HARVEST_VALUE_PER_STAGE,
) -> int:
    """Money earned for a crop harvested at ``growth_stage``."""
    return base + growth_stage * per_stage


def can_apply(
    tile: Tile,
    tool: Tool,
    *,
    max_growth_stage: int = MAX_GROWTH_STAGE,
) -> bool:
    """Return True if ``tool`` would change ``tile``.

    Seed stock is not a tile property; the caller checks it before
    planting.
    """
    soil = tile.soil
    if tool is Tool.HOE:
        return isinstance(soil, Grass)
    if tool is Tool.WATER:
        return isinstance(soil, Tilled) and not soil.watered
    if tool is Tool.PLANT:
        return isinstance(soil, Tilled) and soil.watered
    if tool is Tool.HARVEST:
        return isinstance(soil, Planted) and soil.growth_stage >= max_growth_stage
    return False


def apply(
    tile: Tile,
    tool: Tool,
    *,
    now: datetime | None = None,
    max_growth_stage: int = MAX_GROWTH_STAGE,
    growth_ticks: int = PLANT_GROWTH_TICKS,
    base_harvest_value: int = BASE_HARVEST_VALUE,
    harvest_value_per_stage: int = HARVEST_VALUE_PER_STAGE,
) -> TileMutationResult:
    """Use ``tool`` on ``tile``, mutating it in place.

    A tool that does not apply leaves the tile untouched and reports
    ``applied=False``; that is a rejected action, not an error.

    Args:
        tile: The tile to act on.
        tool: The tool being used.
        now: Timestamp recorded when watering.  Defaults to UTC now.
        max_growth_stage: Stage at which a crop can be harvested.
        growth_ticks: Ticks per growth stage for a new planting.
        base_harvest_value: Harvest value before the per-stage bonus.
        harvest_value_per_stage: Bonus per growth stage.

    Returns:
        The mutation result.
    """
    if not can_apply(tile, tool, max_growth_stage=max_growth_stage):
        return TileMutationResult(applied=False)

    soil = tile.soil
    if tool is Tool.HOE:
        tile.soil = Tilled()
    elif tool is Tool.WATER:
        tile.soil = Tilled(
            watered=True,
            last_watered_at=now or datetime.now(timezone.utc),
        )
    elif tool is Tool.PLANT:
        tile.soil = Planted(
            growth_stage=1,
            growth_ticks=0,
            growth_ticks_required=growth_ticks,
            watered=soil.watered,
            last_watered_at=soil.last_watered_at,
        )
    else:
        value = harvest_value(
            soil.growth_stage,
            base=base_harvest_value,
            per_stage=harvest_value_per_stage,
        )
        tile.reset()
        return TileMutationResult(applied=True, harvest_value=value)

    return TileMutationResult(applied=True)


def advance_growth(tile: Tile, *, max_growth_stage: int = MAX_GROWTH_STAGE) -> bool:
    """Advance a planted tile by one growth tick.

    Tiles that are unplanted or already fully grown are left alone.

    Returns:
        True if the tick moved the crop up a growth stage.
    """
    soil = tile.soil
    if not isinstance(soil, Planted) or soil.growth_stage >= max_growth_stage:
        return False

    ticks = soil.growth_ticks + 1
    if ticks >= soil.growth_ticks_required:
        tile.soil = replace(soil, growth_stage=soil.growth_stage + 1, growth_ticks=0)
        return True
    tile.soil = replace(soil, growth_ticks=ticks)
    return False
