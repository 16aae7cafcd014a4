import copy
import random

import pytest

from rummy.exceptions import EmptyPool, GameNotInPlay, NotYourTurn
from rummy.messages import ServerEvent
from rummy.models import MAX_ROWS
from rummy.services.games import transfers, turns


def _assert_conserved(session):
    assert sorted(session.all_tile_ids()) == sorted(session.tiles)


def _snapshot(session):
    return (
        copy.deepcopy([p.rack for p in session.players]),
        copy.deepcopy(session.table),
        list(session.pool),
        session.current_turn,
    )


def test_rack_to_table_and_back_round_trip(session):
    host = session.player('host')
    rack_before = sorted(host.rack)
    tile_id = host.rack[0]

    outbound = transfers.move_tile(session, 'host', tile_id, 'rack', 'table', 0)
    assert session.table == [[tile_id]]
    assert tile_id not in host.rack
    moved = outbound[0]
    assert moved.event == ServerEvent.TILE_MOVED
    assert moved.to == 'R1'
    assert moved.payload['tile']['id'] == tile_id
    assert moved.payload['playerId'] == 'host'
    # one move event plus one snapshot per player
    assert [m.event for m in outbound[1:]] == [ServerEvent.GAME_STATE_UPDATE] * 2

    outbound = transfers.move_tile(session, 'host', tile_id, 'table', 'rack')
    assert outbound[0].payload['rowIndex'] == 0
    assert sorted(host.rack) == rack_before
    assert session.table == [[]]
    _assert_conserved(session)


def test_move_to_far_row_creates_rows(session):
    tile_id = session.player('host').rack[0]
    transfers.move_tile(session, 'host', tile_id, 'rack', 'table', 3)
    assert session.table == [[], [], [], [tile_id]]


def test_table_to_table_reports_both_rows(session):
    host = session.player('host')
    first, second = host.rack[0], host.rack[1]
    transfers.move_tile(session, 'host', first, 'rack', 'table', 0)
    transfers.move_tile(session, 'host', second, 'rack', 'table', 1)

    outbound = transfers.move_tile(session, 'host', first, 'table', 'table', 1)
    assert outbound[0].payload['sourceRowIndex'] == 0
    assert outbound[0].payload['rowIndex'] == 1
    # emptied rows stay
    assert session.table == [[], [second, first]]
    _assert_conserved(session)


def test_out_of_turn_move_is_rejected_without_changes(session):
    before = _snapshot(session)
    tile_id = session.player('guest').rack[0]
    with pytest.raises(NotYourTurn):
        transfers.move_tile(session, 'guest', tile_id, 'rack', 'table', 0)
    assert _snapshot(session) == before


def test_move_before_game_starts(registry):
    waiting = registry.create_room('W', 'host')
    with pytest.raises(GameNotInPlay):
        transfers.move_tile(waiting, 'host', waiting.player('host').rack[0], 'rack', 'table', 0)
    with pytest.raises(GameNotInPlay):
        transfers.move_tile(None, 'host', 't1', 'rack', 'table', 0)


def test_missing_tile_is_a_silent_noop(session):
    before = _snapshot(session)
    guest_tile = session.player('guest').rack[0]
    assert transfers.move_tile(session, 'host', guest_tile, 'rack', 'table', 0) == []
    assert transfers.move_tile(session, 'host', guest_tile, 'table', 'rack') == []
    assert transfers.move_tile(session, 'host', guest_tile, 'table', 'table', 2) == []
    assert transfers.move_tile(session, 'host', guest_tile, 'rack', 'rack') == []
    assert _snapshot(session) == before


def test_draw_moves_one_tile_and_ends_turn(session):
    top = session.pool[-1]
    outbound = transfers.draw_tile(session, 'host')
    assert top in session.player('host').rack
    assert len(session.pool) == 77
    assert session.current_turn == 'guest'
    assert outbound[0].event == ServerEvent.TILE_DRAWN
    assert outbound[0].payload == {'playerId': 'host', 'poolCount': 77}
    _assert_conserved(session)


def test_draw_from_empty_pool(session):
    session.player('guest').rack.extend(session.pool)
    session.pool.clear()
    host_rack = list(session.player('host').rack)
    with pytest.raises(EmptyPool):
        transfers.draw_tile(session, 'host')
    assert session.player('host').rack == host_rack
    assert session.current_turn == 'host'


def test_end_turn_hands_over(session):
    outbound = turns.end_turn(session, 'host')
    assert session.current_turn == 'guest'
    assert outbound[0].payload == {'newTurn': 'guest'}
    with pytest.raises(NotYourTurn):
        turns.end_turn(session, 'host')
    turns.end_turn(session, 'guest')
    assert session.current_turn == 'host'


def test_add_row_ignores_turn(session):
    outbound = transfers.add_row(session)
    assert session.table == [[]]
    assert outbound[0].payload == {'rowCount': 1}
    assert outbound[0].to == 'R1'
    assert transfers.add_row(None) == []


def test_validate_table_reports_every_row_valid(session):
    transfers.move_tile(session, 'host', session.player('host').rack[0], 'rack', 'table', 1)
    outbound = transfers.validate_table(session, 'guest')
    assert len(outbound) == 1
    assert outbound[0].to == 'guest'
    assert outbound[0].payload == {
        'isValid': True,
        'rows': [{'rowIndex': 0, 'isValid': True}, {'rowIndex': 1, 'isValid': True}],
    }
    assert transfers.validate_table(None, 'guest') == []


def test_random_play_conserves_tiles(session):
    rng = random.Random(99)
    for _ in range(300):
        actor = session.current_turn
        player = session.player(actor)
        choice = rng.random()
        if choice < 0.4 and player.rack:
            transfers.move_tile(session, actor, rng.choice(player.rack), 'rack', 'table', rng.randrange(5))
        elif choice < 0.6 and any(session.table):
            tile_id = rng.choice([t for row in session.table for t in row])
            transfers.move_tile(session, actor, tile_id, 'table', rng.choice(['rack', 'table']), rng.randrange(5))
        elif choice < 0.8 and session.pool:
            transfers.draw_tile(session, actor)
        else:
            turns.end_turn(session, actor)
        _assert_conserved(session)


def test_add_row_stops_at_row_limit(session):
    session.table = [[] for _ in range(MAX_ROWS - 1)]
    assert transfers.add_row(session)[0].payload == {'rowCount': MAX_ROWS}
    assert transfers.add_row(session) == []
    assert len(session.table) == MAX_ROWS
    # the last row is still a valid target
    tile_id = session.player('host').rack[0]
    transfers.move_tile(session, 'host', tile_id, 'rack', 'table', MAX_ROWS - 1)
    assert session.table[-1] == [tile_id]
