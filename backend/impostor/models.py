import random
import string
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

DEFAULT_GAME_DURATION_SEC = 300


class Phase(str, Enum):
    LOBBY = 'LOBBY'
    REVEAL = 'REVEAL'
    DISCUSSION = 'DISCUSSION'
    ENDED = 'ENDED'


class Role(str, Enum):
    CITIZEN = 'Citizen'
    IMPOSTOR = 'Impostor'


class Team(str, Enum):
    CITIZENS = 'Citizens'
    IMPOSTORS = 'Impostors'


def generate_room_code(exists: Callable[[str], bool], length: int = 4) -> str:
    """Generate a short room code not accepted by ``exists``."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not exists(code):
            return code


@dataclass
class Player:
    id: str
    name: str
    is_host: bool = False
    role: Optional[Role] = None

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'isHost': self.is_host,
        }


@dataclass(eq=False)
class Room:
    code: str
    players: List[Player] = field(default_factory=list)
    phase: Phase = Phase.LOBBY
    secret_word: str = ''
    impostor_count: int = 0
    remaining_seconds: int = DEFAULT_GAME_DURATION_SEC
    round: int = 0
    timer_token: Optional[object] = field(default=None, repr=False)
    closed: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def channel(self) -> str:
        """Socket.IO room that every member connection is joined to."""
        return f"room:{self.code}"

    @property
    def host(self) -> Optional[Player]:
        return next((p for p in self.players if p.is_host), None)

    @property
    def timer_running(self) -> bool:
        return self.timer_token is not None

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def add_player(self, player_id: str, name: str) -> Player:
        player = Player(id=player_id, name=name, is_host=not self.players)
        self.players.append(player)
        return player

    def remove_player(self, player_id: str) -> Tuple[Optional[Player], Optional[Player]]:
        """Remove a player and hand the host role to the next one in join order.

        Returns ``(removed, promoted)``; ``promoted`` is None unless the host left
        and someone remains.
        """
        for index, player in enumerate(self.players):
            if player.id == player_id:
                break
        else:
            return None, None
        del self.players[index]
        promoted = None
        if player.is_host and self.players:
            promoted = self.players[0]
            promoted.is_host = True
        return player, promoted

    def arm_timer(self) -> object:
        self.timer_token = object()
        return self.timer_token

    def cancel_timer(self) -> None:
        self.timer_token = None

    def player_list(self) -> List[Dict]:
        return [p.to_dict() for p in self.players]

    def final_roles(self) -> List[Dict]:
        return [
            {'name': p.name, 'role': p.role.value if p.role else None}
            for p in self.players
        ]

    def to_dict(self) -> Dict:
        # Public view only: no secret word, no roles
        return {
            'roomCode': self.code,
            'phase': self.phase.value,
            'players': self.player_list(),
            'impostorCount': self.impostor_count,
            'timeRemaining': self.remaining_seconds,
        }
