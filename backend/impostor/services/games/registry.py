import threading
from typing import Dict, Optional

from impostor.models import Room, generate_room_code


class RoomRegistry:
    """Process-wide map of room code to Room.

    Bound to the app like the other extensions. The registry lock only guards
    the mapping; room state is guarded by each room's own lock, and callers
    holding a room lock may call into the registry but never the other way
    round.
    """

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()
        self.code_length = 4

    def init_app(self, app) -> None:
        self.code_length = int(app.config.get('ROOM_CODE_LENGTH', 4))
        with self._lock:
            stale = list(self._rooms.values())
            self._rooms.clear()
        for room in stale:
            with room.lock:
                room.closed = True
                room.cancel_timer()

    @staticmethod
    def normalize(code) -> str:
        return str(code or '').strip().upper()

    def create_room(self, host_id: str, host_name: str, duration: Optional[int] = None) -> Room:
        with self._lock:
            code = generate_room_code(self._rooms.__contains__, self.code_length)
            room = Room(code=code)
            if duration is not None:
                room.remaining_seconds = duration
            room.add_player(host_id, host_name)
            self._rooms[code] = room
        return room

    def get_room(self, code) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(self.normalize(code))

    def remove_room(self, code) -> Optional[Room]:
        with self._lock:
            room = self._rooms.pop(self.normalize(code), None)
        if room is None:
            return None
        with room.lock:
            room.closed = True
            room.cancel_timer()
        return room

    def count(self) -> int:
        with self._lock:
            return len(self._rooms)
