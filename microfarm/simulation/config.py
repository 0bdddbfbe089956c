"""Config — load farm parameters from YAML files.

Farm size, starting resources, tool costs, growth timing and server
settings live in YAML and are parsed into a typed dataclass here.  Keys
missing from the file keep their defaults, which are the reference game
values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from microfarm.world.rules import ENERGY_COSTS, Tool, parse_tool


def _default_energy_costs() -> dict[Tool, int]:
    return dict(ENERGY_COSTS)


@dataclass
class FarmConfig:
    """Top-level game configuration.

    Attributes:
        farm_width: Number of tile columns per farm.
        farm_height: Number of tile rows per farm.
        tile_width: Horizontal span of one isometric diamond in pixels.
        tile_height: Vertical span of one isometric diamond in pixels.
        initial_money: Money a new player starts with.
        initial_energy: Energy a new player starts with.
        max_energy: Energy ceiling.
        initial_seeds: Seeds a new player starts with.
        growth_stages: Stage at which a crop becomes harvestable.
        growth_ticks: Ticks a crop needs to advance one stage.
        base_harvest_value: Harvest value before the per-stage bonus.
        harvest_value_per_stage: Money added per growth stage on harvest.
        energy_costs: Energy spent per successful tool use.
        session_idle_seconds: Sessions idle longer than this are evicted.
            Zero disables eviction.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
    """

    farm_width: int = 20
    farm_height: int = 15
    tile_width: int = 32
    tile_height: int = 16

    # Starting resources
    initial_money: int = 100
    initial_energy: int = 100
    max_energy: int = 100
    initial_seeds: int = 5

    # Crop growth and value
    growth_stages: int = 3
    growth_ticks: int = 300
    base_harvest_value: int = 10
    harvest_value_per_stage: int = 5

    energy_costs: dict[Tool, int] = field(default_factory=_default_energy_costs)

    session_idle_seconds: float = 0.0
    host: str = "127.0.0.1"
    port: int = 3001

    @classmethod
    def from_yaml(cls, path: str | Path) -> FarmConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated FarmConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValidationError: If ``energy_costs`` names an unknown tool.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        energy_costs = _default_energy_costs()
        for name, cost in (data.get("energy_costs") or {}).items():
            energy_costs[parse_tool(name)] = int(cost)

        return cls(
            farm_width=data.get("farm_width", cls.farm_width),
            farm_height=data.get("farm_height", cls.farm_height),
            tile_width=data.get("tile_width", cls.tile_width),
            tile_height=data.get("tile_height", cls.tile_height),
            initial_money=data.get("initial_money", cls.initial_money),
            initial_energy=data.get("initial_energy", cls.initial_energy),
            max_energy=data.get("max_energy", cls.max_energy),
            initial_seeds=data.get("initial_seeds", cls.initial_seeds),
            growth_stages=data.get("growth_stages", cls.growth_stages),
            growth_ticks=data.get("growth_ticks", cls.growth_ticks),
            base_harvest_value=data.get(
                "base_harvest_value",
                cls.base_harvest_value,
            ),
            harvest_value_per_stage=data.get(
                "harvest_value_per_stage",
                cls.harvest_value_per_stage,
            ),
            energy_costs=energy_costs,
            session_idle_seconds=data.get(
                "session_idle_seconds",
                cls.session_idle_seconds,
            ),
            host=data.get("host", cls.host),
            port=data.get("port", cls.port),
        )
