"""Socket.IO wire format: inbound payload models and outbound event names.

Event names and payload keys are camelCase because that is what the browser
client speaks; Python-side attribute names stay snake_case via aliases.
"""
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rummy.models import MAX_ROWS

MOVES = {('rack', 'table'), ('table', 'rack'), ('table', 'table')}


class ClientEvent(StrEnum):
    CREATE_ROOM = 'createRoom'
    JOIN_ROOM = 'joinRoom'
    MOVE_TILE = 'moveTile'
    DRAW_TILE = 'drawTile'
    END_TURN = 'endTurn'
    ADD_ROW = 'addRow'
    VALIDATE_TABLE = 'validateTable'


class ServerEvent(StrEnum):
    ROOM_CREATED = 'roomCreated'
    ROOM_JOINED = 'roomJoined'
    ERROR = 'error'
    PLAYER_JOINED = 'playerJoined'
    PLAYER_LEFT = 'playerLeft'
    TILE_MOVED = 'tileMoved'
    TILE_DRAWN = 'tileDrawn'
    TURN_ENDED = 'turnEnded'
    ROW_ADDED = 'rowAdded'
    TABLE_VALIDATED = 'tableValidated'
    GAME_STATE_UPDATE = 'gameStateUpdate'


@dataclass(frozen=True)
class Outbound:
    """One emit: ``to`` is either a connection sid or a room id."""

    event: ServerEvent
    payload: Dict[str, Any]
    to: str


class _Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class RoomMessage(_Message):
    room_id: str = Field(alias='roomId', min_length=1, max_length=64)


class CreateRoomMessage(RoomMessage):
    player_name: Optional[str] = Field(default=None, alias='playerName', max_length=50)


class JoinRoomMessage(RoomMessage):
    player_name: Optional[str] = Field(default=None, alias='playerName', max_length=50)


class MoveTileMessage(RoomMessage):
    tile_id: str = Field(alias='tileId', min_length=1)
    from_zone: Literal['rack', 'table'] = Field(alias='fromZone')
    to_zone: Literal['rack', 'table'] = Field(alias='toZone')
    row_index: Optional[int] = Field(default=None, alias='rowIndex', ge=0, lt=MAX_ROWS)

    @model_validator(mode='after')
    def _supported_move(self):
        if (self.from_zone, self.to_zone) not in MOVES:
            raise ValueError(f'cannot move a tile from {self.from_zone} to {self.to_zone}')
        if self.to_zone == 'table' and self.row_index is None:
            raise ValueError('rowIndex is required when moving to the table')
        return self


INBOUND = {
    ClientEvent.CREATE_ROOM: CreateRoomMessage,
    ClientEvent.JOIN_ROOM: JoinRoomMessage,
    ClientEvent.MOVE_TILE: MoveTileMessage,
    ClientEvent.DRAW_TILE: RoomMessage,
    ClientEvent.END_TURN: RoomMessage,
    ClientEvent.ADD_ROW: RoomMessage,
    ClientEvent.VALIDATE_TABLE: RoomMessage,
}


def parse_message(event: ClientEvent, data: Any) -> RoomMessage:
    """Validate a raw payload for ``event``; raises pydantic.ValidationError."""
    return INBOUND[event].model_validate(data if data is not None else {})
