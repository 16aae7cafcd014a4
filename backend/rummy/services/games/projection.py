from typing import List

from rummy.messages import Outbound, ServerEvent
from rummy.models import GameSession


def roster(session: GameSession) -> List[dict]:
    return [p.to_dict() for p in session.players]


def snapshot_for(session: GameSession, player_id: str) -> dict:
    """Build the view one player is allowed to see.

    The requester's own rack is sent in full. The opponent is reduced to a
    tile count, the pool to its size. The table is public and sent resolved.
    """
    player = session.player(player_id)
    other = session.other_player(player_id)
    players = []
    for entry in roster(session):
        entry['isYou'] = entry['id'] == player_id
        players.append(entry)
    return {
        'roomId': session.room_id,
        'players': players,
        'yourTiles': session.tiles.resolve(player.rack) if player else [],
        'table': [session.tiles.resolve(row) for row in session.table],
        'poolCount': len(session.pool),
        'currentTurn': session.current_turn,
        'gameState': session.state,
        'isYourTurn': session.current_turn == player_id,
        'otherPlayerTileCount': len(other.rack) if other else 0,
    }


def state_updates(session: GameSession) -> List[Outbound]:
    """One gameStateUpdate per seated player, addressed to that player only."""
    return [
        Outbound(ServerEvent.GAME_STATE_UPDATE, snapshot_for(session, p.id), to=p.id)
        for p in session.players
    ]
