"""Session storage.

The core never keeps sessions in module globals; a store is handed to the
FarmService.  The in-memory store is the only implementation: sessions
die with the process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

    from microfarm.simulation.session import GameSession


class SessionStore(Protocol):
    """Get/put/delete access to sessions by id."""

    def get(self, session_id: str) -> GameSession | None: ...

    def put(self, session_id: str, session: GameSession) -> None: ...

    def delete(self, session_id: str) -> bool: ...

    def ids(self) -> Iterator[str]: ...


class InMemorySessionStore:
    """Dict-backed SessionStore."""

    def __init__(self) -> None:
        self._sessions: dict[str, GameSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def put(self, session_id: str, session: GameSession) -> None:
        self._sessions[session_id] = session

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def ids(self) -> Iterator[str]:
        return iter(list(self._sessions))
