import re

from impostor import models
from impostor.models import Room
from impostor.services.games.registry import RoomRegistry


def test_create_room_has_single_host_in_lobby():
    registry = RoomRegistry()
    room = registry.create_room('sid-1', 'Ada')
    assert re.fullmatch(r'[A-Z0-9]{4}', room.code)
    assert room.phase.value == 'LOBBY'
    assert room.player_list() == [{'id': 'sid-1', 'name': 'Ada', 'isHost': True}]
    assert registry.get_room(room.code) is room


def test_codes_are_unique_among_live_rooms(monkeypatch):
    sequence = iter(['AAAA', 'AAAA', 'AAAA', 'BBBB'])
    monkeypatch.setattr(models.random, 'choices', lambda population, k: list(next(sequence)))
    registry = RoomRegistry()
    first = registry.create_room('sid-1', 'Ada')
    second = registry.create_room('sid-2', 'Bo')
    assert first.code == 'AAAA'
    assert second.code == 'BBBB'


def test_lookup_normalizes_code():
    registry = RoomRegistry()
    room = registry.create_room('sid-1', 'Ada')
    assert registry.get_room(f'  {room.code.lower()} ') is room
    assert registry.get_room(None) is None
    assert registry.get_room('ZZZZZ') is None


def test_remove_room_cancels_timer_and_is_idempotent():
    registry = RoomRegistry()
    room = registry.create_room('sid-1', 'Ada')
    room.arm_timer()
    assert registry.remove_room(room.code) is room
    assert room.closed
    assert not room.timer_running
    assert registry.get_room(room.code) is None
    assert registry.remove_room(room.code) is None
    assert registry.count() == 0


def test_host_leaving_promotes_next_in_join_order():
    room = Room(code='ABCD')
    for sid, name in (('a', 'Ada'), ('b', 'Bo'), ('c', 'Cy')):
        room.add_player(sid, name)

    removed, promoted = room.remove_player('a')
    assert removed.name == 'Ada'
    assert promoted.name == 'Bo'
    assert [p.name for p in room.players if p.is_host] == ['Bo']

    removed, promoted = room.remove_player('c')
    assert removed.name == 'Cy'
    assert promoted is None
    assert [p.name for p in room.players if p.is_host] == ['Bo']


def test_remove_unknown_player_is_a_no_op():
    room = Room(code='ABCD')
    room.add_player('a', 'Ada')
    assert room.remove_player('zzz') == (None, None)
    assert len(room.players) == 1
