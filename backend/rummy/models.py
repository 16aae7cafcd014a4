import random
import time
from dataclasses import dataclass, field
from typing import List, Optional

from rummy.tiles import TileRegistry, build_deck, shuffle

MAX_PLAYERS = 2
MAX_ROWS = 200
INITIAL_DEAL = 14

WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'  # never entered; there is no win detection


@dataclass
class Player:
    id: str
    name: str
    is_host: bool = False
    rack: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'tileCount': len(self.rack),
            'isHost': self.is_host,
        }


class GameSession:
    """Full state of one room. Mutated only while holding the room's lock."""

    def __init__(self, room_id: str, rng=random):
        deck = shuffle(build_deck(), rng)
        self.room_id = room_id
        self.tiles = TileRegistry(deck)
        self.pool: List[str] = [t.id for t in deck]
        self.players: List[Player] = []
        self.table: List[List[str]] = []
        self.retired: List[str] = []
        self.current_turn: Optional[str] = None
        self.state = WAITING
        self.turn_start_time = time.time()

    def player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def other_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id != player_id), None)

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    def add_player(self, player_id: str, name: Optional[str] = None) -> Player:
        player = Player(
            id=player_id,
            name=name or f"Player {len(self.players) + 1}",
            is_host=not self.players,
        )
        self.players.append(player)
        if player.is_host:
            self.current_turn = player_id
        self.deal(player_id, INITIAL_DEAL)
        if len(self.players) == MAX_PLAYERS:
            self.state = PLAYING
            self.current_turn = self.players[0].id
            self.turn_start_time = time.time()
        return player

    def remove_player(self, player_id: str) -> None:
        """Drop a player from the roster; their rack is set aside, out of play."""
        player = self.player(player_id)
        if player is None:
            return
        self.retired.extend(player.rack)
        player.rack = []
        self.players.remove(player)

    def deal(self, player_id: str, count: int) -> int:
        """Move up to ``count`` tiles from the pool onto a rack.

        Stops quietly when the pool runs out; returns how many were dealt.
        """
        player = self.player(player_id)
        if player is None:
            return 0
        dealt = 0
        while dealt < count and self.pool:
            player.rack.append(self.pool.pop())
            dealt += 1
        return dealt

    def ensure_row(self, row_index: int) -> List[str]:
        while len(self.table) <= row_index:
            self.table.append([])
        return self.table[row_index]

    def take_from_table(self, tile_id: str) -> Optional[int]:
        """Remove a tile from the first row holding it; returns that row's index."""
        for index, row in enumerate(self.table):
            if tile_id in row:
                row.remove(tile_id)
                return index
        return None

    def all_tile_ids(self) -> List[str]:
        ids = list(self.pool)
        ids.extend(self.retired)
        for p in self.players:
            ids.extend(p.rack)
        for row in self.table:
            ids.extend(row)
        return ids
