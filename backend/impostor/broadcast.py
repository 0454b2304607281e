from flask import current_app

from impostor import socketio


def _namespace() -> str:
    return current_app.config.get('SOCKETIO_NAMESPACE', '/')


def to_room(room, event: str, payload=None) -> None:
    """Emit to every connection joined to the room's channel."""
    socketio.emit(event, payload if payload is not None else {}, to=room.channel, namespace=_namespace())


def to_connection(sid: str, event: str, payload=None) -> None:
    socketio.emit(event, payload if payload is not None else {}, to=sid, namespace=_namespace())


def player_update(room) -> None:
    to_room(room, 'PLAYER_UPDATE', {'players': room.player_list()})


def phase_change(room) -> None:
    to_room(room, 'PHASE_CHANGE', {'phase': room.phase.value})


def game_ended(room, result) -> None:
    to_room(room, 'GAME_ENDED', result)
