"""FarmService — the session-level API the transports call.

Looks sessions up by id, validates raw input, and serialises all
mutations of one session behind its own lock.  Different sessions share
nothing and can be served in parallel.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any

from microfarm.errors import FarmError, SessionNotFound
from microfarm.player.avatar import Player, parse_avatar
from microfarm.simulation.config import FarmConfig
from microfarm.simulation.session import GameSession, ToolUseResult
from microfarm.simulation.store import InMemorySessionStore, SessionStore
from microfarm.world.rules import Tool, parse_tool

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FarmService:
    """Create, look up and mutate game sessions.

    Attributes:
        config: Configuration applied to new sessions.
        store: Where sessions live.
    """

    def __init__(
        self,
        config: FarmConfig | None = None,
        store: SessionStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config or FarmConfig()
        self.store: SessionStore = (
            store if store is not None else InMemorySessionStore()
        )
        self._clock = clock
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
            return lock

    @contextmanager
    def _session(self, session_id: str) -> Iterator[GameSession]:
        """Hold the session's lock and yield it, touching its player.

        Locks exist only for stored sessions; an unknown id is rejected
        before one is made.
        """
        if self.store.get(session_id) is None:
            raise SessionNotFound(session_id)
        with self._lock_for(session_id):
            session = self.store.get(session_id)
            if session is None:
                # Discarded while we waited for the lock.
                with self._locks_guard:
                    self._locks.pop(session_id, None)
                raise SessionNotFound(session_id)
            session.player.touch(self._clock())
            yield session

    def create_session(self, cosmetics: Mapping[str, Any]) -> tuple[str, GameSession]:
        """Validate cosmetics and start a fresh session.

        Raises:
            ValidationError: If the cosmetics are malformed.
        """
        avatar = parse_avatar(cosmetics)
        session_id = str(uuid.uuid4())
        now = self._clock()
        player = Player(id=session_id, avatar=avatar, created_at=now, last_active=now)
        session = GameSession(player=player, config=self.config)
        self.store.put(session_id, session)
        logger.info("Created session %s for %s", session_id, avatar.name)
        return session_id, session

    def get_session(self, session_id: str) -> GameSession:
        """Return the live session, raising SessionNotFound if unknown.

        The object is shared; callers on other threads should read it
        through ``snapshot`` instead.
        """
        with self._session(session_id) as session:
            return session

    def snapshot(self, session_id: str) -> dict[str, Any]:
        """Serialise the session's state while holding its lock."""
        with self._session(session_id) as session:
            return session.to_dict()

    def use_tool(
        self,
        session_id: str,
        tool: str | Tool,
        tile_x: int,
        tile_y: int,
    ) -> tuple[ToolUseResult, dict[str, Any]]:
        """Use a tool on one tile of a session's farm.

        Returns:
            The result and the state right after the tool was used.

        Raises:
            SessionNotFound: Unknown session id.
            ValidationError: Unknown tool name.
            InvalidCoordinates: Tile off the farm.
            InsufficientEnergy: Not enough energy for the tool.
            ToolNotApplicable: Tile state or seed stock forbids the tool.
        """
        with self._session(session_id) as session:
            parsed = parse_tool(tool)
            try:
                result = session.use_tool(parsed, tile_x, tile_y, now=self._clock())
            except FarmError as exc:
                logger.debug(
                    "Session %s: %s rejected: %s",
                    session_id,
                    parsed.value,
                    exc,
                )
                raise
            return result, session.to_dict()

    def update_state(
        self,
        session_id: str,
        *,
        tool: str | Tool | None = None,
        camera_x: float | None = None,
        camera_y: float | None = None,
    ) -> dict[str, Any]:
        """Select a tool and move the camera in one step.

        Nothing changes if the tool name is invalid.

        Raises:
            SessionNotFound: Unknown session id.
            ValidationError: Unknown tool name.
        """
        with self._session(session_id) as session:
            if tool is not None:
                session.select_tool(parse_tool(tool))
            session.update_camera(x=camera_x, y=camera_y)
            return session.to_dict()

    def update_camera(
        self,
        session_id: str,
        x: float | None = None,
        y: float | None = None,
    ) -> dict[str, Any]:
        return self.update_state(session_id, camera_x=x, camera_y=y)

    def select_tool(self, session_id: str, tool: str | Tool) -> dict[str, Any]:
        return self.update_state(session_id, tool=tool)

    def advance_crops(self, session_id: str, ticks: int = 1) -> dict[str, Any]:
        """Run growth ticks on one session's farm and return its state."""
        with self._session(session_id) as session:
            session.advance_crops(ticks)
            return session.to_dict()

    def discard(self, session_id: str) -> bool:
        """Forget a session.  Returns False if it did not exist."""
        removed = self.store.delete(session_id)
        with self._locks_guard:
            self._locks.pop(session_id, None)
        if removed:
            logger.info("Discarded session %s", session_id)
        return removed

    def evict_idle(self, now: datetime | None = None) -> list[str]:
        """Discard sessions idle longer than ``config.session_idle_seconds``.

        Returns:
            Ids of the discarded sessions.
        """
        limit = self.config.session_idle_seconds
        if limit <= 0:
            return []
        cutoff = (now or self._clock()) - timedelta(seconds=limit)
        evicted: list[str] = []
        for session_id in list(self.store.ids()):
            session = self.store.get(session_id)
            if session is not None and session.player.last_active < cutoff:
                self.discard(session_id)
                evicted.append(session_id)
        if evicted:
            logger.info("Evicted %d idle session(s)", len(evicted))
        return evicted
