"""Farm grid — the fixed-size container of tiles for one session.

The FarmGrid owns its tiles for their whole life: they are created as
grass when the grid is built, changed by the tool rules, and advanced by
the growth pass.  Tiles never interact with each other, so the growth
pass visits them in any order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from microfarm.world.rules import MAX_GROWTH_STAGE, advance_growth
from microfarm.world.tile import Planted, Tile


@dataclass
class FarmGrid:
    """A rectangular grid of farm tiles.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        tiles: 2D list of Tile objects indexed as ``tiles[y][x]``.
    """

    width: int = 20
    height: int = 15
    tiles: list[list[Tile]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Fill the grid with grass."""
        if self.width <= 0 or self.height <= 0:
            msg = f"farm must be at least 1x1, got {self.width}x{self.height}"
            raise ValueError(msg)
        self.tiles = [
            [Tile(x=x, y=y) for x in range(self.width)] for y in range(self.height)
        ]

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` names a tile on this farm."""
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Tile:
        """Return the tile at grid coordinates ``(x, y)``.

        Args:
            x: Column index.
            y: Row index.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return self.tiles[y][x]

    def advance_all_growth(self, *, max_growth_stage: int = MAX_GROWTH_STAGE) -> int:
        """Advance every tile by one growth tick.

        Returns:
            How many crops moved up a stage.
        """
        stage_ups = 0
        for row in self.tiles:
            for tile in row:
                if advance_growth(tile, max_growth_stage=max_growth_stage):
                    stage_ups += 1
        return stage_ups

    def growth_stages(self) -> NDArray[np.int64]:
        """Snapshot of growth stages as a ``(height, width)`` array."""
        return np.array(
            [[tile.growth_stage for tile in row] for row in self.tiles],
            dtype=np.int64,
        )

    def ready_count(self, max_growth_stage: int = MAX_GROWTH_STAGE) -> int:
        """Number of crops that can be harvested now."""
        stages = self.growth_stages()
        return int(np.count_nonzero(stages >= max_growth_stage))

    def planted_count(self) -> int:
        return sum(isinstance(tile.soil, Planted) for row in self.tiles for tile in row)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the client's farm shape."""
        return {
            "tiles": [[tile.to_dict() for tile in row] for row in self.tiles],
            "width": self.width,
            "height": self.height,
        }
