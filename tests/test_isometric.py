"""Tests for microfarm.world.isometric."""

import numpy as np
import pytest

from microfarm.world.isometric import (
    diamond_points,
    grid_screen_positions,
    round_half_away,
    screen_to_tile,
    tile_to_screen,
)

ORIGIN = (400.0, 100.0)


class TestRounding:
    """Tests for the half-away-from-zero rounding helper."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0.5, 1),
            (1.5, 2),
            (2.5, 3),
            (-0.5, -1),
            (-2.5, -3),
            (0.49, 0),
            (-0.49, 0),
            (3.0, 3),
        ],
    )
    def test_ties_go_away_from_zero(self, value: float, expected: int) -> None:
        assert round_half_away(value) == expected


class TestTileToScreen:
    """Tests for the forward projection."""

    def test_origin_tile(self) -> None:
        assert tile_to_screen(0, 0, *ORIGIN) == (400.0, 100.0)

    def test_axes(self) -> None:
        # +x goes down-right, +y goes down-left
        assert tile_to_screen(1, 0, *ORIGIN) == (416.0, 108.0)
        assert tile_to_screen(0, 1, *ORIGIN) == (384.0, 108.0)

    def test_offset_is_added(self) -> None:
        assert tile_to_screen(0, 0, *ORIGIN, 30, -20) == (430.0, 80.0)

    def test_accepts_off_grid_tiles(self) -> None:
        assert tile_to_screen(-3, 50, *ORIGIN) == (400 - 53 * 16, 100 + 47 * 8)

    def test_custom_tile_size(self) -> None:
        sx, sy = tile_to_screen(1, 0, 0, 0, tile_width=64, tile_height=32)
        assert (sx, sy) == (32, 16)


class TestScreenToTile:
    """Tests for the inverse projection and hit-testing."""

    @pytest.mark.parametrize("offset", [(0.0, 0.0), (37.0, -12.5), (-300.0, 250.0)])
    def test_round_trip_every_tile(self, offset: tuple[float, float]) -> None:
        for y in range(15):
            for x in range(20):
                sx, sy = tile_to_screen(x, y, *ORIGIN, *offset)
                assert screen_to_tile(sx, sy, *ORIGIN, *offset, 20, 15) == (x, y)

    def test_points_inside_diamond_hit_its_tile(self) -> None:
        cx, cy = tile_to_screen(3, 2, *ORIGIN)
        for dx, dy in [(0, -7.9), (15.8, 0), (0, 7.9), (-15.8, 0), (5, 3)]:
            assert screen_to_tile(cx + dx, cy + dy, *ORIGIN, 0, 0, 20, 15) == (3, 2)

    def test_out_of_bounds_is_none(self) -> None:
        for x, y in [(-1, 0), (0, -1), (20, 0), (0, 15)]:
            sx, sy = tile_to_screen(x, y, *ORIGIN)
            assert screen_to_tile(sx, sy, *ORIGIN, 0, 0, 20, 15) is None

    def test_far_away_click_is_none(self) -> None:
        assert screen_to_tile(-5000, -5000, *ORIGIN, 0, 0, 20, 15) is None

    def test_camera_uses_same_sign_as_forward(self) -> None:
        # Tile (0, 0) drawn with a 32px camera shift sits at (432, 100)
        assert screen_to_tile(432, 100, *ORIGIN, 32, 0, 20, 15) == (0, 0)
        # Ignoring the camera would resolve to (1, -1), which is off the grid
        assert screen_to_tile(432, 100, *ORIGIN, 0, 0, 20, 15) is None

    def test_edge_between_tiles_rounds_away_from_zero(self) -> None:
        # Exact midpoint between (0, 0) and (1, 0)
        assert screen_to_tile(408, 104, *ORIGIN, 0, 0, 20, 15) == (1, 0)
        # Exact midpoint between (0, 0) and (0, 1)
        assert screen_to_tile(392, 104, *ORIGIN, 0, 0, 20, 15) == (0, 1)


class TestRenderingHelpers:
    """Tests for the vectorised projection and diamond outline."""

    def test_grid_positions_match_scalar(self) -> None:
        xs, ys = grid_screen_positions(20, 15, *ORIGIN, 5, 7)
        assert xs.shape == (15, 20)
        assert ys.shape == (15, 20)
        for x, y in [(0, 0), (19, 0), (0, 14), (7, 9)]:
            assert (xs[y, x], ys[y, x]) == tile_to_screen(x, y, *ORIGIN, 5, 7)

    def test_grid_positions_are_arrays(self) -> None:
        xs, _ = grid_screen_positions(3, 2, 0, 0)
        assert isinstance(xs, np.ndarray)

    def test_diamond_points(self) -> None:
        assert diamond_points(100, 50) == [
            (100, 42.0),
            (116.0, 50),
            (100, 58.0),
            (84.0, 50),
        ]
