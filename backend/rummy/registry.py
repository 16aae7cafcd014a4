import logging
import random
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from rummy.exceptions import RoomFull, RoomNotFound
from rummy.models import GameSession

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Live game sessions keyed by room id.

    Every session read or write from outside goes through this object. Each
    room has its own re-entrant lock; ``_guard`` only protects the two dicts.
    """

    def __init__(self, rng=random) -> None:
        self._rng = rng
        self._sessions: Dict[str, GameSession] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def init_app(self, app) -> None:
        self.clear()
        app.extensions['rooms'] = self

    def _lock_for(self, room_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = self._locks[room_id] = threading.RLock()
            return lock

    @contextmanager
    def locked(self, room_id: str) -> Iterator[Optional[GameSession]]:
        """Hold the room's lock and yield its session (None if there is none)."""
        while True:
            lock = self._lock_for(room_id)
            with lock:
                with self._guard:
                    current = self._locks.get(room_id)
                # the room was destroyed while we waited; retry on its fresh lock
                if current is not lock:
                    continue
                try:
                    yield self._sessions.get(room_id)
                finally:
                    with self._guard:
                        if room_id not in self._sessions and self._locks.get(room_id) is lock:
                            del self._locks[room_id]
                return

    def get(self, room_id: str) -> Optional[GameSession]:
        with self._guard:
            return self._sessions.get(room_id)

    def create_room(self, room_id: str, creator_id: str, display_name: Optional[str] = None) -> GameSession:
        with self.locked(room_id) as existing:
            if existing is not None:
                # TODO: decide whether an occupied room id should be rejected instead
                logger.warning(f"[room-replaced] room={room_id} players={[p.id for p in existing.players]}")
            session = GameSession(room_id, rng=self._rng)
            session.add_player(creator_id, display_name)
            with self._guard:
                self._sessions[room_id] = session
            logger.info(f"[room-open] room={room_id} host={creator_id} pool={len(session.pool)}")
            return session

    def join_room(self, room_id: str, player_id: str, display_name: Optional[str] = None) -> GameSession:
        with self.locked(room_id) as session:
            if session is None:
                raise RoomNotFound()
            if session.player(player_id) is not None:
                return session
            if session.is_full:
                raise RoomFull()
            session.add_player(player_id, display_name)
            logger.info(f"[room-join] room={room_id} player={player_id} state={session.state}")
            return session

    def destroy(self, room_id: str) -> None:
        with self._guard:
            removed = self._sessions.pop(room_id, None)
            self._locks.pop(room_id, None)
        if removed is not None:
            logger.info(f"[room-closed] room={room_id}")

    def room_of(self, player_id: str) -> Optional[str]:
        with self._guard:
            for room_id, session in self._sessions.items():
                if session.player(player_id) is not None:
                    return room_id
        return None

    def room_ids(self) -> List[str]:
        with self._guard:
            return list(self._sessions)

    def clear(self) -> None:
        with self._guard:
            self._sessions.clear()
            self._locks.clear()

    def __len__(self) -> int:
        with self._guard:
            return len(self._sessions)
