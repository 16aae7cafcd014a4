"""Moving tiles between zones: rack, table rows and the pool (draw only)."""
import logging
from typing import List, Optional

from rummy.exceptions import EmptyPool
from rummy.messages import Outbound, ServerEvent
from rummy.models import MAX_ROWS, GameSession
from .projection import state_updates
from .rules import is_valid_row
from .turns import pass_turn, require_turn

logger = logging.getLogger(__name__)

RACK = 'rack'
TABLE = 'table'


def move_tile(
    session: Optional[GameSession],
    player_id: str,
    tile_id: str,
    from_zone: str,
    to_zone: str,
    row_index: Optional[int] = None,
) -> List[Outbound]:
    """Move one tile for the player whose turn it is.

    A tile that is not where the request says it is makes the whole call a
    no-op: nothing changes and nothing is sent.
    """
    require_turn(session, player_id)
    player = session.player(player_id)
    if player is None:
        return []

    event = {
        'tileId': tile_id,
        'fromZone': from_zone,
        'toZone': to_zone,
        'rowIndex': row_index,
        'playerId': player_id,
    }

    if from_zone == RACK and to_zone == TABLE:
        if tile_id not in player.rack:
            return []
        player.rack.remove(tile_id)
        session.ensure_row(row_index).append(tile_id)
    elif from_zone == TABLE and to_zone == RACK:
        source = session.take_from_table(tile_id)
        if source is None:
            return []
        player.rack.append(tile_id)
        event['rowIndex'] = source
    elif from_zone == TABLE and to_zone == TABLE:
        source = session.take_from_table(tile_id)
        if source is None:
            return []
        session.ensure_row(row_index).append(tile_id)
        event['sourceRowIndex'] = source
    else:
        return []

    tile = session.tiles.get(tile_id)
    event['tile'] = tile.to_dict() if tile else None
    logger.debug(f"[move] room={session.room_id} tile={tile_id} {from_zone}->{to_zone} row={event['rowIndex']}")
    return [Outbound(ServerEvent.TILE_MOVED, event, to=session.room_id), *state_updates(session)]


def draw_tile(session: Optional[GameSession], player_id: str) -> List[Outbound]:
    """Take the top pool tile; drawing always ends the turn."""
    require_turn(session, player_id)
    if not session.pool:
        raise EmptyPool()
    player = session.player(player_id)
    if player is None:
        return []
    player.rack.append(session.pool.pop())
    pass_turn(session, player_id)
    return [
        Outbound(
            ServerEvent.TILE_DRAWN,
            {'playerId': player_id, 'poolCount': len(session.pool)},
            to=session.room_id,
        ),
        *state_updates(session),
    ]


def add_row(session: Optional[GameSession]) -> List[Outbound]:
    # open to anyone in the room, turn or not
    if session is None or len(session.table) >= MAX_ROWS:
        return []
    session.table.append([])
    return [Outbound(ServerEvent.ROW_ADDED, {'rowCount': len(session.table)}, to=session.room_id)]


def validate_table(session: Optional[GameSession], player_id: str) -> List[Outbound]:
    if session is None:
        return []
    rows = [
        {'rowIndex': index, 'isValid': is_valid_row([session.tiles[tid] for tid in row])}
        for index, row in enumerate(session.table)
    ]
    result = {'isValid': all(r['isValid'] for r in rows), 'rows': rows}
    return [Outbound(ServerEvent.TABLE_VALIDATED, result, to=player_id)]
