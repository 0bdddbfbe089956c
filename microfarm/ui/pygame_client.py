"""Pygame isometric client for a single MicroFarm session.

Draws the farm as isometric diamonds, turns mouse clicks into tool uses
and arrow keys into camera pans.  Crops grow only while the client runs:
real time is accumulated into growth ticks and pushed through
``FarmService.advance_crops``.  Drawing and hit-testing both use the
session camera with the same sign.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from microfarm.simulation.service import FarmService
    from microfarm.simulation.session import GameSession
    from microfarm.world.tile import Tile

from microfarm.errors import FarmError
from microfarm.world.isometric import (
    diamond_points,
    grid_screen_positions,
    screen_to_tile,
)
from microfarm.world.rules import Tool
from microfarm.world.tile import SurfaceState

# Colour palette
_BG = (30, 40, 30)
_OUTLINE = (47, 79, 47)
_HOVER = (255, 255, 255)
_TEXT = (220, 220, 220)
_SURFACE_COLOURS: dict[SurfaceState, tuple[int, int, int]] = {
    SurfaceState.GRASS: (144, 238, 144),
    SurfaceState.TILLED: (139, 69, 19),
    SurfaceState.PLANTED: (34, 139, 34),
}
_WATERED = (65, 105, 225)
_CROP_COLOURS = [(34, 139, 34), (50, 205, 50), (255, 215, 0)]

_TOOL_KEYS: dict[int, Tool] = {
    pygame.K_1: Tool.HOE,
    pygame.K_2: Tool.WATER,
    pygame.K_3: Tool.PLANT,
    pygame.K_4: Tool.HARVEST,
}

_CAMERA_STEP = 16


class PygameRenderer:
    """Renders and controls one GameSession in a Pygame window.

    Attributes:
        service: The service owning the session.
        session_id: Which session to play.
        ticks_per_second: Crop growth ticks per real-time second.
        screen: The Pygame display surface.
    """

    _PANEL_WIDTH: ClassVar[int] = 220

    def __init__(
        self,
        service: FarmService,
        session_id: str,
        width: int = 900,
        height: int = 600,
        ticks_per_second: float = 60.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            service: Service holding the session.
            session_id: Session to render.
            width: Width of the farm view in pixels.
            height: Window height in pixels.
            ticks_per_second: Growth ticks per real-time second.
        """
        self.service = service
        self.session_id = session_id
        self.ticks_per_second = ticks_per_second
        self._tick_accumulator = 0.0

        self._view_w = width
        self._view_h = height
        self.origin_x = width / 2
        self.origin_y = height / 4
        self.message = ""

        pygame.init()
        self.screen = pygame.display.set_mode((width + self._PANEL_WIDTH, height))
        pygame.display.set_caption("MicroFarm")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    @property
    def session(self) -> GameSession:
        return self.service.get_session(self.session_id)

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, grow crops, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if not self.paused:
                self._tick_accumulator += self.ticks_per_second * dt
                ticks = int(self._tick_accumulator)
                self._tick_accumulator -= ticks
                if ticks:
                    self.service.advance_crops(self.session_id, ticks)
            self._draw()

        pygame.quit()

    def tile_at_mouse(self, pos: tuple[int, int]) -> tuple[int, int] | None:
        """Hit-test a window position against the farm."""
        session = self.session
        cfg = session.config
        return screen_to_tile(
            pos[0],
            pos[1],
            self.origin_x,
            self.origin_y,
            session.camera.x,
            session.camera.y,
            session.farm.width,
            session.farm.height,
            tile_width=cfg.tile_width,
            tile_height=cfg.tile_height,
        )

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._click(event.pos)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key in _TOOL_KEYS:
                    self.service.select_tool(self.session_id, _TOOL_KEYS[event.key])
                else:
                    self._pan(event.key)

    def _click(self, pos: tuple[int, int]) -> None:
        """Use the current tool on the clicked tile."""
        if pos[0] >= self._view_w:
            return
        coords = self.tile_at_mouse(pos)
        if coords is None:
            return
        tool = self.session.resources.current_tool
        try:
            result, _ = self.service.use_tool(self.session_id, tool, *coords)
        except FarmError as exc:
            self.message = str(exc)
            return
        if result.harvest_value:
            self.message = f"Harvested! +${result.harvest_value}"
        else:
            self.message = f"{tool.value} at {coords}"

    def _pan(self, key: int) -> None:
        """Move the camera; the farm scrolls opposite to the pressed arrow."""
        camera = self.session.camera
        x, y = camera.x, camera.y
        if key == pygame.K_UP:
            y += _CAMERA_STEP
        elif key == pygame.K_DOWN:
            y -= _CAMERA_STEP
        elif key == pygame.K_LEFT:
            x += _CAMERA_STEP
        elif key == pygame.K_RIGHT:
            x -= _CAMERA_STEP
        else:
            return
        self.service.update_camera(self.session_id, x=x, y=y)

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_farm()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_farm(self) -> None:
        """Draw every on-screen tile, back to front."""
        session = self.session
        cfg = session.config
        farm = session.farm
        xs, ys = grid_screen_positions(
            farm.width,
            farm.height,
            self.origin_x,
            self.origin_y,
            session.camera.x,
            session.camera.y,
            tile_width=cfg.tile_width,
            tile_height=cfg.tile_height,
        )
        margin = cfg.tile_width
        visible = (
            (xs > -margin)
            & (xs < self._view_w + margin)
            & (ys > -margin)
            & (ys < self._view_h + margin)
        )
        hover = self.tile_at_mouse(pygame.mouse.get_pos())

        for y, x in zip(*np.nonzero(visible), strict=True):
            sx, sy = float(xs[y, x]), float(ys[y, x])
            self._draw_tile(sx, sy, farm.tiles[y][x], cfg.tile_width, cfg.tile_height)
            if hover == (x, y):
                points = diamond_points(
                    sx,
                    sy,
                    tile_width=cfg.tile_width,
                    tile_height=cfg.tile_height,
                )
                pygame.draw.polygon(self.screen, _HOVER, points, 2)

    def _draw_tile(self, sx: float, sy: float, tile: Tile, tw: int, th: int) -> None:
        """Draw one diamond and its crop."""
        colour = _SURFACE_COLOURS[tile.surface]
        if tile.surface is SurfaceState.TILLED and tile.watered:
            colour = _WATERED
        points = diamond_points(sx, sy, tile_width=tw, tile_height=th)
        pygame.draw.polygon(self.screen, colour, points)
        pygame.draw.polygon(self.screen, _OUTLINE, points, 1)

        stage = tile.growth_stage
        if stage > 0:
            crop = _CROP_COLOURS[min(stage - 1, len(_CROP_COLOURS) - 1)]
            centre = (int(sx), int(sy - th / 4))
            pygame.draw.circle(self.screen, crop, centre, 3 + stage * 2)

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        session = self.session
        res = session.resources
        panel_x = self._view_w + 10
        y = 10

        lines = [
            f"{session.player.avatar.name}",
            f"Day: {res.day}",
            f"Energy: {res.energy}/{res.max_energy}",
            f"Money: ${res.money}",
            f"Seeds: {res.seeds}",
            f"Tool: {res.current_tool.value}",
            f"Ready: {session.farm.ready_count(session.config.growth_stages)}",
            f"{'PAUSED' if self.paused else 'GROWING'}",
            "",
            self.message,
            "",
            "--- Controls ---",
            "1-4: hoe/water/plant/harvest",
            "Click: use tool",
            "Arrows: move camera",
            "SPACE: pause growth",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
