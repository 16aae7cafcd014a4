from typing import Callable, List, Optional

from flask import current_app, request
from flask_socketio import emit, join_room
from pydantic import ValidationError

from rummy import rooms, socketio
from rummy.exceptions import GameError
from rummy.messages import ClientEvent, Outbound, RoomMessage, ServerEvent, parse_message
from rummy.models import GameSession
from rummy.services.games import lobby, transfers, turns


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _dispatch(outbound: List[Outbound]) -> None:
    namespace = current_app.config.get('SOCKETIO_NAMESPACE', '/')
    for message in outbound:
        socketio.emit(message.event.value, message.payload, to=message.to, namespace=namespace)


def _reject(exc: GameError) -> None:
    current_app.logger.info(f"[rejected] sid={_get_sid()} reason={exc}")
    emit(ServerEvent.ERROR.value, {'message': str(exc)})


def _parse(event: ClientEvent, data) -> Optional[RoomMessage]:
    try:
        return parse_message(event, data)
    except ValidationError as exc:
        reasons = '; '.join(err['msg'] for err in exc.errors())
        current_app.logger.warning(f"[invalid] sid={_get_sid()} event={event.value} {reasons}")
        emit(ServerEvent.ERROR.value, {'message': f'Invalid message: {reasons}'})
        return None


def _in_room(event: ClientEvent, data, action: Callable[[Optional[GameSession], str, RoomMessage], List[Outbound]]) -> None:
    """Run one room-scoped action with the room locked until its emits are out."""
    message = _parse(event, data)
    if message is None:
        return
    with rooms.locked(message.room_id) as session:
        try:
            outbound = action(session, _get_sid(), message)
        except GameError as exc:
            _reject(exc)
            return
        _dispatch(outbound)


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    room_id = rooms.room_of(sid)
    if room_id is None:
        return
    with rooms.locked(room_id) as session:
        _dispatch(lobby.leave(rooms, session, sid))


def handle_create_room(data=None):
    message = _parse(ClientEvent.CREATE_ROOM, data)
    if message is None:
        return
    sid = _get_sid()
    with rooms.locked(message.room_id):
        outbound = lobby.open_room(rooms, message.room_id, sid, message.player_name)
        join_room(message.room_id)
        _dispatch(outbound)
    current_app.logger.info(f"[room-created] room={message.room_id} sid={sid}")


def handle_join_room(data=None):
    message = _parse(ClientEvent.JOIN_ROOM, data)
    if message is None:
        return
    sid = _get_sid()
    with rooms.locked(message.room_id):
        try:
            outbound = lobby.enter_room(rooms, message.room_id, sid, message.player_name)
        except GameError as exc:
            _reject(exc)
            return
        join_room(message.room_id)
        _dispatch(outbound)
    current_app.logger.info(f"[room-joined] room={message.room_id} sid={sid}")


def handle_move_tile(data=None):
    _in_room(ClientEvent.MOVE_TILE, data, lambda session, sid, m: transfers.move_tile(
        session, sid, m.tile_id, m.from_zone, m.to_zone, m.row_index))


def handle_draw_tile(data=None):
    _in_room(ClientEvent.DRAW_TILE, data, lambda session, sid, m: transfers.draw_tile(session, sid))


def handle_end_turn(data=None):
    _in_room(ClientEvent.END_TURN, data, lambda session, sid, m: turns.end_turn(session, sid))


def handle_add_row(data=None):
    _in_room(ClientEvent.ADD_ROW, data, lambda session, sid, m: transfers.add_row(session))


def handle_validate_table(data=None):
    _in_room(ClientEvent.VALIDATE_TABLE, data, lambda session, sid, m: transfers.validate_table(session, sid))


_HANDLERS = {
    ClientEvent.CREATE_ROOM: handle_create_room,
    ClientEvent.JOIN_ROOM: handle_join_room,
    ClientEvent.MOVE_TILE: handle_move_tile,
    ClientEvent.DRAW_TILE: handle_draw_tile,
    ClientEvent.END_TURN: handle_end_turn,
    ClientEvent.ADD_ROW: handle_add_row,
    ClientEvent.VALIDATE_TABLE: handle_validate_table,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for event, handler in _HANDLERS.items():
        socketio.on_event(event.value, handler, namespace=namespace)
