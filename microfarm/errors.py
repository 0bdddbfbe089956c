"""Errors raised by the farm core.

A rejected tool use is an ordinary outcome for the player, but the
service reports each kind separately so the transport can tell them
apart.  ``IndexError`` from ``FarmGrid.tile_at`` is not part of this
family: indexing outside the grid is a programming mistake.
"""

from __future__ import annotations

from collections.abc import Iterable


class FarmError(Exception):
    """Base class for caller-visible farm errors."""


class ValidationError(FarmError):
    """Input failed validation.

    Attributes:
        reasons: One human-readable message per problem found.
    """

    def __init__(self, message: str, reasons: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.reasons = list(reasons)


class SessionNotFound(FarmError):
    """No session is stored under the requested id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Player not found: {session_id}")
        self.session_id = session_id


class InvalidCoordinates(FarmError):
    """Tile coordinates fall outside the farm."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"({x}, {y}) out of bounds for {width}x{height}")
        self.x = x
        self.y = y


class InsufficientEnergy(FarmError):
    """The player cannot afford the tool's energy cost."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"Not enough energy: need {required}, have {available}")
        self.required = required
        self.available = available


class ToolNotApplicable(FarmError):
    """The tile is not in a state the tool can act on."""
