"""Tile set, deck construction and the per-session tile registry."""
import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

COLORS = ('red', 'blue', 'black', 'orange')
NUMBERS = range(1, 14)
COPIES = 2
JOKERS = 2
DECK_SIZE = len(COLORS) * len(NUMBERS) * COPIES + JOKERS  # 106


@dataclass(frozen=True)
class Tile:
    id: str
    color: Optional[str]
    number: Optional[int]
    is_joker: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'color': self.color,
            'number': self.number,
            'isJoker': self.is_joker,
        }


def build_deck() -> List[Tile]:
    """Build the 106 tiles in a fixed order, ids t1..t106."""
    tiles = []
    next_id = 1
    for _copy in range(COPIES):
        for color in COLORS:
            for number in NUMBERS:
                tiles.append(Tile(id=f"t{next_id}", color=color, number=number))
                next_id += 1
    for _ in range(JOKERS):
        tiles.append(Tile(id=f"t{next_id}", color=None, number=None, is_joker=True))
        next_id += 1
    return tiles


def shuffle(items: list, rng=random) -> list:
    """Fisher-Yates in place, last index down to 1. Not suitable against cheating clients."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


class TileRegistry:
    """Read-only id -> Tile lookup shared by everything in one session."""

    def __init__(self, tiles):
        self._tiles: Dict[str, Tile] = {t.id: t for t in tiles}
        if len(self._tiles) != len(tiles):
            raise ValueError('duplicate tile ids')

    def get(self, tile_id: str) -> Optional[Tile]:
        return self._tiles.get(tile_id)

    def __getitem__(self, tile_id: str) -> Tile:
        return self._tiles[tile_id]

    def __contains__(self, tile_id) -> bool:
        return tile_id in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tiles)

    def resolve(self, tile_ids) -> List[dict]:
        return [self._tiles[tid].to_dict() for tid in tile_ids if tid in self._tiles]
