import uuid

import pytest

from banker.errors import RoomFull, RoomNotFound
from banker.models import AVATARS, PLAYER_COLORS, PENDING, REQUEST, Player, Transaction
from banker.services import PendingRequestLedger, RoomRegistry, SessionDirectory
from banker.services.allocator import allocate
from banker.services.identifiers import ROOM_CODE_ALPHABET, new_entity_id, new_room_code


def test_room_code_uses_unambiguous_alphabet():
    for _ in range(200):
        code = new_room_code()
        assert len(code) == 6
        assert set(code) <= set(ROOM_CODE_ALPHABET)
    for confusable in '01OI':
        assert confusable not in ROOM_CODE_ALPHABET


def test_room_code_skips_taken_codes(monkeypatch):
    draws = iter(['AAAAAA', 'AAAAAA', 'BBBBBB'])
    monkeypatch.setattr('banker.services.identifiers.random.choices', lambda alphabet, k: list(next(draws)))
    assert new_room_code(taken={'AAAAAA'}) == 'BBBBBB'


def test_entity_ids_are_unique_uuids():
    ids = {new_entity_id() for _ in range(500)}
    assert len(ids) == 500
    uuid.UUID(next(iter(ids)))


def _players(count):
    return [
        Player(id=str(i), name=f'P{i}', avatar=AVATARS[i % len(AVATARS)], color=PLAYER_COLORS[i % len(PLAYER_COLORS)])
        for i in range(count)
    ]


def test_allocate_prefers_first_unused():
    players = _players(3)
    assert allocate(players) == (AVATARS[3], PLAYER_COLORS[3])


def test_allocate_skips_holes_in_order():
    players = _players(4)
    players.pop(1)
    assert allocate(players) == (AVATARS[1], PLAYER_COLORS[1])


def test_allocate_color_falls_back_to_random_when_palette_exhausted(monkeypatch):
    monkeypatch.setattr('banker.services.allocator.random.choice', lambda palette: palette[-1])
    players = _players(8)
    avatar, color = allocate(players)
    # 16 avatars still have free slots, the 8 colours do not
    assert avatar == AVATARS[8]
    assert color == PLAYER_COLORS[-1]


def test_allocate_both_palettes_exhausted():
    players = _players(16)
    avatar, color = allocate(players)
    assert avatar in AVATARS
    assert color in PLAYER_COLORS


def test_registry_create_seeds_host_with_first_palette_entry():
    registry = RoomRegistry()
    room, player = registry.create('Game night', 'Alice', 1500)
    assert room.host_id == player.id
    assert room.players == [player]
    assert player.balance == 1500
    assert (player.avatar, player.color) == (AVATARS[0], PLAYER_COLORS[0])
    assert registry.get(room.id) is room
    assert len(registry) == 1


def test_registry_join_is_case_insensitive():
    registry = RoomRegistry()
    room, _ = registry.create('Game night', 'Alice', 1500)
    same_room, bob = registry.join(f'  {room.id.lower()} ', 'Bob')
    assert same_room is room
    assert bob.balance == 1500
    assert bob.avatar == AVATARS[1]
    assert [p.name for p in room.players] == ['Alice', 'Bob']


def test_registry_join_unknown_room():
    registry = RoomRegistry()
    with pytest.raises(RoomNotFound):
        registry.join('ZZZZZZ', 'Bob')


def test_registry_join_full_room_leaves_membership_unchanged():
    registry = RoomRegistry(max_players=8)
    room, _ = registry.create('Full house', 'P0', 100)
    for i in range(1, 8):
        registry.join(room.id, f'P{i}')
    before = [p.id for p in room.players]
    with pytest.raises(RoomFull) as excinfo:
        registry.join(room.id, 'P8')
    assert 'max 8 players' in excinfo.value.message
    assert [p.id for p in room.players] == before


def test_registry_leave_reassigns_host_to_earliest_remaining():
    registry = RoomRegistry()
    room, alice = registry.create('Table', 'Alice', 10)
    _, bob = registry.join(room.id, 'Bob')
    _, cara = registry.join(room.id, 'Cara')
    assert registry.leave(room.id, alice.id) is alice
    assert room.host_id == bob.id
    assert registry.leave(room.id, cara.id) is cara
    assert room.host_id == bob.id


def test_registry_leave_last_player_deletes_room():
    registry = RoomRegistry()
    room, alice = registry.create('Solo', 'Alice', 10)
    registry.leave(room.id, alice.id)
    assert registry.get(room.id) is None
    assert len(registry) == 0
    # repeated leave is a no-op
    assert registry.leave(room.id, alice.id) is None


def test_sessions_resolve_live_objects():
    registry = RoomRegistry()
    sessions = SessionDirectory(registry)
    room, alice = registry.create('Table', 'Alice', 10)
    sessions.bind('sid-a', room.id, alice.id)
    assert sessions.resolve('sid-a') == (room, alice)

    alice.balance = 99
    assert sessions.resolve('sid-a')[1].balance == 99


def test_sessions_resolve_none_when_player_gone():
    registry = RoomRegistry()
    sessions = SessionDirectory(registry)
    room, alice = registry.create('Table', 'Alice', 10)
    _, bob = registry.join(room.id, 'Bob')
    sessions.bind('sid-b', room.id, bob.id)
    registry.leave(room.id, bob.id)
    assert sessions.resolve('sid-b') is None
    assert sessions.resolve('never-bound') is None


def test_sessions_bind_overwrites_and_unbind_is_idempotent():
    registry = RoomRegistry()
    sessions = SessionDirectory(registry)
    first, alice = registry.create('One', 'Alice', 10)
    second, alice2 = registry.create('Two', 'Alice', 10)
    sessions.bind('sid', first.id, alice.id)
    sessions.bind('sid', second.id, alice2.id)
    assert sessions.resolve('sid') == (second, alice2)
    sessions.unbind('sid')
    sessions.unbind('sid')
    assert sessions.binding('sid') is None
    assert len(sessions) == 0


def test_ledger_lookup_and_filters():
    ledger = PendingRequestLedger()
    tx = Transaction(id='t1', type=REQUEST, from_id='payer', to_id='asker', amount=5, room_id='ROOM01')
    other = Transaction(id='t2', type=REQUEST, from_id='x', to_id='y', amount=5, room_id='ROOM02')
    ledger.put(tx)
    ledger.put(other)
    assert ledger.get('t1') is tx
    assert tx.status == PENDING
    assert ledger.involving('asker') == [tx]
    assert ledger.involving('payer') == [tx]
    assert ledger.for_room('ROOM02') == [other]
    assert ledger.remove('t1') is tx
    assert ledger.remove('t1') is None
    assert ledger.get('t1') is None
    assert len(ledger) == 1


def test_transaction_resolves_exactly_once():
    tx = Transaction(id='t1', type=REQUEST, from_id='a', to_id='b', amount=5, room_id='R')
    tx.resolve('accepted')
    with pytest.raises(ValueError):
        tx.resolve('rejected')
    assert tx.status == 'accepted'
