"""Isometric projection between farm tiles and screen pixels.

Tiles are drawn as 2:1 diamonds.  ``tile_to_screen`` gives the anchor
point of a tile on screen and ``screen_to_tile`` is its inverse, used for
hit-testing clicks.

Camera convention: the camera offset is a screen-space displacement that
is *added* to every tile position.  Positive ``offset_x`` moves the farm
right on screen, positive ``offset_y`` moves it down.  Both directions of
the transform take the offset with the same sign, so a caller passes the
session camera through unchanged.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

TILE_WIDTH = 32
TILE_HEIGHT = 16


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero.

    The built-in ``round`` rounds ties to even, which would make a click
    on an exact diamond edge resolve differently depending on parity.
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def tile_to_screen(
    tile_x: float,
    tile_y: float,
    origin_x: float,
    origin_y: float,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
    *,
    tile_width: float = TILE_WIDTH,
    tile_height: float = TILE_HEIGHT,
) -> tuple[float, float]:
    """Return the screen anchor of tile ``(tile_x, tile_y)``.

    Out-of-range and fractional tile coordinates are accepted; callers
    cull off-screen results themselves.  NumPy arrays work element-wise.

    Args:
        tile_x: Column index.
        tile_y: Row index.
        origin_x: Screen x of tile (0, 0) with no camera offset.
        origin_y: Screen y of tile (0, 0) with no camera offset.
        offset_x: Camera x displacement in pixels.
        offset_y: Camera y displacement in pixels.
        tile_width: Horizontal span of one diamond.
        tile_height: Vertical span of one diamond.

    Returns:
        ``(screen_x, screen_y)``.
    """
    screen_x = origin_x + (tile_x - tile_y) * tile_width / 2 + offset_x
    screen_y = origin_y + (tile_x + tile_y) * tile_height / 2 + offset_y
    return screen_x, screen_y


def screen_to_tile(
    screen_x: float,
    screen_y: float,
    origin_x: float,
    origin_y: float,
    offset_x: float,
    offset_y: float,
    grid_width: int,
    grid_height: int,
    *,
    tile_width: float = TILE_WIDTH,
    tile_height: float = TILE_HEIGHT,
) -> tuple[int, int] | None:
    """Return the tile under a screen point, or None if it is off the grid.

    Args:
        screen_x: Pixel x of the point.
        screen_y: Pixel y of the point.
        origin_x: Screen x of tile (0, 0) with no camera offset.
        origin_y: Screen y of tile (0, 0) with no camera offset.
        offset_x: Camera x displacement in pixels.
        offset_y: Camera y displacement in pixels.
        grid_width: Number of tile columns.
        grid_height: Number of tile rows.
        tile_width: Horizontal span of one diamond.
        tile_height: Vertical span of one diamond.

    Returns:
        ``(tile_x, tile_y)`` inside ``[0, grid_width) x [0, grid_height)``,
        otherwise None.
    """
    adj_x = (screen_x - origin_x - offset_x) / (tile_width / 2)
    adj_y = (screen_y - origin_y - offset_y) / (tile_height / 2)

    tile_x = round_half_away((adj_x + adj_y) / 2)
    tile_y = round_half_away((adj_y - adj_x) / 2)

    if 0 <= tile_x < grid_width and 0 <= tile_y < grid_height:
        return tile_x, tile_y
    return None


def grid_screen_positions(
    width: int,
    height: int,
    origin_x: float,
    origin_y: float,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
    *,
    tile_width: float = TILE_WIDTH,
    tile_height: float = TILE_HEIGHT,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Project every tile of a ``width x height`` grid at once.

    Returns:
        Two ``(height, width)`` arrays holding screen x and screen y,
        indexed ``[y, x]`` like the farm grid.
    """
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    return tile_to_screen(
        xs,
        ys,
        origin_x,
        origin_y,
        offset_x,
        offset_y,
        tile_width=tile_width,
        tile_height=tile_height,
    )


def diamond_points(
    x: float,
    y: float,
    *,
    tile_width: float = TILE_WIDTH,
    tile_height: float = TILE_HEIGHT,
) -> list[tuple[float, float]]:
    """Polygon vertices of the diamond anchored at ``(x, y)``.

    The anchor is the diamond centre.  Order: top, right, bottom, left.
    """
    half_w = tile_width / 2
    half_h = tile_height / 2
    return [
        (x, y - half_h),
        (x + half_w, y),
        (x, y + half_h),
        (x - half_w, y),
    ]
