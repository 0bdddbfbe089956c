"""GameSession — one player's farm, resources and camera.

The session turns a tool request into a tile mutation.  Every check
(bounds, energy, tile state, seeds) runs before anything is changed, so a
rejected request leaves the session exactly as it was.

A session is not thread-safe.  Callers that share one across threads
must serialise every mutating call, growth ticks included; the
FarmService does this with a lock per session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from microfarm.errors import InsufficientEnergy, InvalidCoordinates, ToolNotApplicable
from microfarm.simulation.config import FarmConfig
from microfarm.world import rules
from microfarm.world.farm import FarmGrid
from microfarm.world.rules import Tool

if TYPE_CHECKING:
    from datetime import datetime

    from microfarm.player.avatar import Player


@dataclass
class Resources:
    """What the player spends and earns.

    Attributes:
        energy: Remaining energy, between 0 and ``max_energy``.
        max_energy: Energy ceiling.
        money: Coins earned, never negative.
        seeds: Seeds in stock, never negative.
        day: In-game day, starting at 1.
        current_tool: Last tool selected or successfully used.
    """

    energy: int = 100
    max_energy: int = 100
    money: int = 100
    seeds: int = 5
    day: int = 1
    current_tool: Tool = Tool.HOE

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "money": self.money,
            "energy": self.energy,
            "maxEnergy": self.max_energy,
            "seeds": self.seeds,
            "currentTool": self.current_tool.value,
        }


@dataclass
class Camera:
    """Screen-space offset added to every tile position, in pixels."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class ToolUseResult:
    """Outcome of a successful ``GameSession.use_tool``.

    Attributes:
        applied: Whether the tile changed.
        energy_cost: Energy the tool costs.
        harvest_value: Money earned by a harvest, else 0.
    """

    applied: bool
    energy_cost: int
    harvest_value: int = 0


@dataclass
class GameSession:
    """Aggregate game state for one player.

    Attributes:
        player: The player record.
        config: Game rules and tunables.
        farm: The player's farm grid.
        resources: Energy, money, seeds, day and tool.
        camera: View offset used by the isometric projection.
    """

    player: Player
    config: FarmConfig = field(default_factory=FarmConfig)
    farm: FarmGrid = field(init=False)
    resources: Resources = field(init=False)
    camera: Camera = field(default_factory=Camera)

    def __post_init__(self) -> None:
        """Build the farm and starting resources from config."""
        cfg = self.config
        self.farm = FarmGrid(width=cfg.farm_width, height=cfg.farm_height)
        self.resources = Resources(
            energy=min(cfg.initial_energy, cfg.max_energy),
            max_energy=cfg.max_energy,
            money=cfg.initial_money,
            seeds=cfg.initial_seeds,
        )

    def use_tool(
        self,
        tool: Tool,
        tile_x: int,
        tile_y: int,
        *,
        now: datetime | None = None,
    ) -> ToolUseResult:
        """Use ``tool`` on the tile at ``(tile_x, tile_y)``.

        Args:
            tool: The tool to use.
            tile_x: Column index.
            tile_y: Row index.
            now: Timestamp recorded when watering.

        Returns:
            The applied result.

        Raises:
            InvalidCoordinates: If the tile is off the farm.
            InsufficientEnergy: If the player cannot afford the tool.
            ToolNotApplicable: If the tile (or seed stock) does not allow it.
        """
        cfg = self.config
        if not self.farm.in_bounds(tile_x, tile_y):
            raise InvalidCoordinates(tile_x, tile_y, self.farm.width, self.farm.height)

        cost = rules.energy_cost(tool, cfg.energy_costs)
        if self.resources.energy < cost:
            raise InsufficientEnergy(cost, self.resources.energy)

        tile = self.farm.tile_at(tile_x, tile_y)
        out_of_seeds = tool is Tool.PLANT and self.resources.seeds <= 0
        if out_of_seeds or not rules.can_apply(
            tile,
            tool,
            max_growth_stage=cfg.growth_stages,
        ):
            msg = f"Cannot use {tool.value} on a {tile.surface.value} tile"
            if out_of_seeds:
                msg = "No seeds left to plant"
            raise ToolNotApplicable(msg)

        result = rules.apply(
            tile,
            tool,
            now=now,
            max_growth_stage=cfg.growth_stages,
            growth_ticks=cfg.growth_ticks,
            base_harvest_value=cfg.base_harvest_value,
            harvest_value_per_stage=cfg.harvest_value_per_stage,
        )

        res = self.resources
        res.energy -= cost
        res.current_tool = tool
        res.money += result.harvest_value
        if tool is Tool.PLANT:
            res.seeds -= 1

        return ToolUseResult(
            applied=result.applied,
            energy_cost=cost,
            harvest_value=result.harvest_value,
        )

    def advance_crops(self, ticks: int = 1) -> int:
        """Run ``ticks`` growth ticks over the whole farm.

        There is no internal timer; whoever owns the session decides when
        crops grow.

        Returns:
            Total number of stage-ups.
        """
        stage_ups = 0
        for _ in range(ticks):
            stage_ups += self.farm.advance_all_growth(
                max_growth_stage=self.config.growth_stages,
            )
        return stage_ups

    def update_camera(self, x: float | None = None, y: float | None = None) -> None:
        """Merge the given offsets into the camera.

        Any value is accepted; panning off the farm just shows no tiles.
        """
        if x is not None:
            self.camera.x = x
        if y is not None:
            self.camera.y = y

    def select_tool(self, tool: Tool) -> None:
        """Make ``tool`` current without using it."""
        self.resources.current_tool = tool

    def to_dict(self) -> dict[str, Any]:
        """Serialise the full state in the client's shape."""
        return {
            "player": self.player.to_dict(),
            "game": self.resources.to_dict(),
            "farm": self.farm.to_dict(),
            "camera": {"x": self.camera.x, "y": self.camera.y},
        }
