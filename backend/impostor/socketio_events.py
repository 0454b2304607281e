import threading
from typing import Dict, Optional

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from impostor import broadcast, socketio
from impostor.errors import GameError, NotFoundError, PreconditionError, ValidationError
from impostor.models import Phase, Role, Room, Team
from impostor.services.games import engine
from impostor.services.games.registry import RoomRegistry
from impostor.services.games.scheduler import TimerService
from impostor.services.games.words import WordBank


class SessionGateway:
    """Socket.IO front door: one handler per inbound event.

    Keeps a reverse index of connection id to room code so a disconnect
    finds its room without scanning. Handlers validate first and raise a
    ``GameError`` before touching the room; room mutations and the emits
    that describe them happen under the room lock.
    """

    def __init__(self, app, registry: RoomRegistry, words: WordBank, timers: TimerService):
        self.app = app
        self.registry = registry
        self.words = words
        self.timers = timers
        self._sid_to_room: Dict[str, Optional[str]] = {}
        self._index_lock = threading.Lock()

    # ---- reverse index ----

    def room_code_for(self, sid: str) -> Optional[str]:
        with self._index_lock:
            return self._sid_to_room.get(sid)

    def _claim(self, sid: str) -> None:
        # A pending claim is stored as None until the room code is known.
        with self._index_lock:
            if sid in self._sid_to_room:
                raise PreconditionError('You are already in a room.')
            self._sid_to_room[sid] = None

    def _release(self, sid: str) -> None:
        with self._index_lock:
            if sid in self._sid_to_room and self._sid_to_room[sid] is None:
                del self._sid_to_room[sid]

    def _remember(self, sid: str, code: str) -> bool:
        """Fill in a pending claim. False if the connection went away meanwhile."""
        with self._index_lock:
            if sid not in self._sid_to_room:
                return False
            self._sid_to_room[sid] = code
            return True

    def _forget(self, sid: str) -> Optional[str]:
        with self._index_lock:
            return self._sid_to_room.pop(sid, None)

    # ---- helpers ----

    def _clean_name(self, data) -> str:
        name = str((data or {}).get('playerName') or '').strip()
        if not name:
            raise ValidationError('Player name is required.')
        max_len = int(self.app.config.get('MAX_NAME_LENGTH', 64))
        if len(name) > max_len:
            raise ValidationError(f'Player name must be at most {max_len} characters.')
        return name

    def _require_room(self, data) -> Room:
        room = self.registry.get_room((data or {}).get('roomCode'))
        if room is None:
            raise NotFoundError('Invalid room code.')
        return room

    def _impostor_count(self, data, player_count: int) -> int:
        count = (data or {}).get('numImpostori', 1)
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValidationError('Number of impostors must be a whole number.')
        if count < 1 or count >= player_count:
            raise ValidationError(f'Number of impostors must be between 1 and {player_count - 1}.')
        return count

    # ---- handlers ----

    def on_connect(self, auth=None):
        current_app.logger.info(f"[conn] sid={request.sid}")

    def on_create_room(self, data):
        sid = request.sid
        name = self._clean_name(data)
        self._claim(sid)
        try:
            room = self.registry.create_room(sid, name, int(self.app.config.get('GAME_DURATION_SEC', 300)))
        except Exception:
            self._release(sid)
            raise

        with room.lock:
            if not self._remember(sid, room.code):
                # Disconnected while the room was being made.
                self.registry.remove_room(room.code)
                current_app.logger.info(f"[room-delete] room={room.code} reason=creator-gone")
                return
            join_room(room.channel)
            current_app.logger.info(f"[room-create] room={room.code} host={name}")
            emit('ROOM_CREATED', {
                'roomCode': room.code,
                'playerId': sid,
                'players': room.player_list(),
            })

    def on_join_room(self, data):
        sid = request.sid
        self._claim(sid)
        try:
            self._join(sid, data)
        except Exception:
            self._release(sid)
            raise

    def _join(self, sid: str, data) -> None:
        room = self._require_room(data)
        with room.lock:
            if room.closed:
                raise NotFoundError('Invalid room code.')
            if room.phase != Phase.LOBBY:
                raise PreconditionError('The game has already started.')
            if len(room.players) >= int(self.app.config.get('MAX_PLAYERS', 10)):
                raise PreconditionError('Room is full.')
            name = self._clean_name(data)

            if not self._remember(sid, room.code):
                return
            join_room(room.channel)
            room.add_player(sid, name)
            current_app.logger.info(f"[room-join] room={room.code} player={name} count={len(room.players)}")

            emit('JOINED_ROOM', {
                'roomCode': room.code,
                'playerId': sid,
                'players': room.player_list(),
            })
            broadcast.player_update(room)

    def on_start_game(self, data):
        sid = request.sid
        room = self._require_room(data)
        min_players = int(self.app.config.get('MIN_PLAYERS', 3))
        with room.lock:
            if room.closed:
                raise NotFoundError('Invalid room code.')
            player = room.get_player(sid)
            if player is None or not player.is_host:
                raise PreconditionError('Only the host can start the game.')
            if room.phase not in (Phase.LOBBY, Phase.ENDED):
                raise PreconditionError('The game is already in progress.')
            if len(room.players) < min_players:
                raise PreconditionError(f'At least {min_players} players are required.')
            impostors = self._impostor_count(data, len(room.players))

            room.impostor_count = impostors
            engine.assign_roles(room, self.words, int(self.app.config.get('GAME_DURATION_SEC', 300)))
            current_app.logger.info(
                f"[game-start] room={room.code} round={room.round} players={len(room.players)} impostors={impostors}"
            )
            current_app.logger.debug(f"[game-start] room={room.code} word={room.secret_word}")

            broadcast.phase_change(room)
            placeholder = self.app.config.get('IMPOSTOR_PLACEHOLDER', 'CRITICO')
            players = room.player_list()
            for p in room.players:
                broadcast.to_connection(p.id, 'GAME_START', {
                    'word': room.secret_word if p.role == Role.CITIZEN else placeholder,
                    'role': p.role.value,
                    'players': players,
                })
            self.timers.schedule_discussion(room)

    def on_request_vote(self, data):
        room = self.registry.get_room((data or {}).get('roomCode'))
        if room is None:
            return
        with room.lock:
            if room.closed or room.phase != Phase.DISCUSSION:
                return
            result = engine.end_game(room, Team.CITIZENS, int(self.app.config.get('GAME_DURATION_SEC', 300)))
            current_app.logger.info(f"[game-end] room={room.code} winner={Team.CITIZENS.value} reason=vote")
            broadcast.game_ended(room, result)

    def on_leave_room(self, data=None):
        sid = request.sid
        room = self._depart(sid)
        if room is None:
            return
        leave_room(room.channel)
        emit('LEFT_ROOM', {'roomCode': room.code})

    def on_disconnect(self, reason=None):
        self._depart(request.sid)

    def _depart(self, sid: str) -> Optional[Room]:
        code = self._forget(sid)
        if not code:
            return None
        room = self.registry.get_room(code)
        if room is None:
            return None
        with room.lock:
            player, promoted = room.remove_player(sid)
            if player is None:
                return None
            current_app.logger.info(f"[disc] room={room.code} player={player.name}")

            if not room.players:
                self.registry.remove_room(room.code)
                current_app.logger.info(f"[room-delete] room={room.code}")
                return room

            broadcast.player_update(room)
            if promoted is not None:
                current_app.logger.info(f"[host-promote] room={room.code} player={promoted.name}")
                # Only lobby hosts are told; mid-game the flag still moves
                if room.phase == Phase.LOBBY:
                    broadcast.to_connection(promoted.id, 'HOST_PROMOTED', {'roomCode': room.code})
        return room

    def on_error(self, exc):
        if isinstance(exc, GameError):
            current_app.logger.info(f"[reject] sid={request.sid} {type(exc).__name__}: {exc.message}")
            emit('ERROR', {'message': exc.message})
            return
        current_app.logger.error(f"[error] sid={request.sid} unhandled {type(exc).__name__}", exc_info=exc)
        emit('ERROR', {'message': 'Internal server error.'})


def register_socketio_handlers(app, registry: RoomRegistry) -> SessionGateway:
    """Register Socket.IO event handlers for the configured namespace."""
    namespace = app.config.get('SOCKETIO_NAMESPACE', '/')
    gateway = SessionGateway(app, registry, WordBank.from_config(app.config), TimerService(app))

    socketio.on_event('connect', gateway.on_connect, namespace=namespace)
    socketio.on_event('disconnect', gateway.on_disconnect, namespace=namespace)
    socketio.on_event('CREATE_ROOM', gateway.on_create_room, namespace=namespace)
    socketio.on_event('JOIN_ROOM', gateway.on_join_room, namespace=namespace)
    socketio.on_event('START_GAME', gateway.on_start_game, namespace=namespace)
    socketio.on_event('REQUEST_VOTE', gateway.on_request_vote, namespace=namespace)
    socketio.on_event('LEAVE_ROOM', gateway.on_leave_room, namespace=namespace)
    socketio.on_error(namespace)(gateway.on_error)
    return gateway
