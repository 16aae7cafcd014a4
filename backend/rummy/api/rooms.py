from flask import Blueprint, jsonify

from rummy import rooms

rooms_api = Blueprint('rooms_api', __name__)


@rooms_api.route('/<string:room_id>', methods=['GET'])
def get_room(room_id):
    """Public view of a room: everything but the racks."""
    with rooms.locked(room_id) as session:
        if session is None:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify({
            'roomId': session.room_id,
            'gameState': session.state,
            'players': [p.to_dict() for p in session.players],
            'currentTurn': session.current_turn,
            'poolCount': len(session.pool),
            'table': [session.tiles.resolve(row) for row in session.table],
        })
