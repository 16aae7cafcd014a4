"""Room entry and exit. Callers hold the room's lock around these calls."""
import logging
from typing import List, Optional

from rummy.messages import Outbound, ServerEvent
from rummy.models import GameSession
from rummy.registry import RoomRegistry
from .projection import roster, snapshot_for, state_updates

logger = logging.getLogger(__name__)


def open_room(rooms: RoomRegistry, room_id: str, player_id: str, name: Optional[str] = None) -> List[Outbound]:
    session = rooms.create_room(room_id, player_id, name)
    return [Outbound(ServerEvent.ROOM_CREATED, snapshot_for(session, player_id), to=player_id)]


def enter_room(rooms: RoomRegistry, room_id: str, player_id: str, name: Optional[str] = None) -> List[Outbound]:
    """Seat the second player; raises RoomNotFound or RoomFull.

    A player already seated in the room only gets their snapshot again.
    """
    seated = rooms.get(room_id)
    if seated is not None and seated.player(player_id) is not None:
        return [Outbound(ServerEvent.ROOM_JOINED, snapshot_for(seated, player_id), to=player_id)]
    session = rooms.join_room(room_id, player_id, name)
    return [
        Outbound(ServerEvent.ROOM_JOINED, snapshot_for(session, player_id), to=player_id),
        Outbound(
            ServerEvent.PLAYER_JOINED,
            {'players': roster(session), 'gameState': session.state},
            to=room_id,
        ),
        *state_updates(session),
    ]


def leave(rooms: RoomRegistry, session: Optional[GameSession], player_id: str) -> List[Outbound]:
    """Handle a dropped connection.

    The host leaving, or the last player leaving, closes the room. A guest
    leaving only frees the seat; the turn pointer is left as it was.
    """
    player = session.player(player_id) if session else None
    if player is None:
        return []
    outbound = [Outbound(ServerEvent.PLAYER_LEFT, {'playerId': player_id}, to=session.room_id)]
    if player.is_host or len(session.players) == 1:
        rooms.destroy(session.room_id)
    else:
        session.remove_player(player_id)
        logger.info(f"[seat-freed] room={session.room_id} player={player_id} turn={session.current_turn}")
    return outbound
