import logging
import time
from typing import List, Optional

from rummy.exceptions import GameNotInPlay, NotYourTurn
from rummy.messages import Outbound, ServerEvent
from rummy.models import PLAYING, GameSession
from .projection import state_updates

logger = logging.getLogger(__name__)


def require_turn(session: Optional[GameSession], player_id: str) -> None:
    """Reject unless the game is running and it is ``player_id``'s turn."""
    if session is None or session.state != PLAYING:
        raise GameNotInPlay()
    if session.current_turn != player_id:
        raise NotYourTurn()


def pass_turn(session: GameSession, player_id: str) -> None:
    # with the opponent gone there is nobody to hand over to
    other = session.other_player(player_id)
    if other is not None:
        session.current_turn = other.id
    session.turn_start_time = time.time()


def end_turn(session: Optional[GameSession], player_id: str) -> List[Outbound]:
    require_turn(session, player_id)
    pass_turn(session, player_id)
    logger.debug(f"[turn] room={session.room_id} {player_id} -> {session.current_turn}")
    return [
        Outbound(ServerEvent.TURN_ENDED, {'newTurn': session.current_turn}, to=session.room_id),
        *state_updates(session),
    ]
