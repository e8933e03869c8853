"""Registry of per-session collision detectors for interactive views."""

from __future__ import annotations

from collections import OrderedDict
from uuid import UUID, uuid4

from loguru import logger

from core.collision.detector import CollisionDetector
from core.exceptions import SessionNotFoundError


class CollisionSessionRegistry:
    """Hands out one exclusively owned ``CollisionDetector`` per session.

    At most ``max_sessions`` detectors are kept; opening one past the limit
    evicts the least recently used session.
    """

    def __init__(self, *, min_dimension: float, max_sessions: int = 256) -> None:
        self.min_dimension = min_dimension
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[UUID, CollisionDetector] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self) -> UUID:
        session_id = uuid4()
        self._sessions[session_id] = CollisionDetector(min_dimension=self.min_dimension)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted idle collision session {session_id}", session_id=str(evicted))
        logger.info("Opened collision session {session_id}", session_id=str(session_id))
        return session_id

    def get(self, session_id: UUID) -> CollisionDetector:
        detector = self._sessions.get(session_id)
        if detector is None:
            raise SessionNotFoundError("Collision session not found", {"session_id": str(session_id)})
        self._sessions.move_to_end(session_id)
        return detector

    def close(self, session_id: UUID) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError("Collision session not found", {"session_id": str(session_id)})
        logger.info("Closed collision session {session_id}", session_id=str(session_id))


__all__ = ["CollisionSessionRegistry"]
