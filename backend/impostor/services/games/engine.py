import random
from typing import Dict, List, Optional

from impostor.models import DEFAULT_GAME_DURATION_SEC, Phase, Role, Room, Team
from .words import WordBank


def shuffle_roles(roles: List[Role], rng=None) -> List[Role]:
    """Fisher-Yates shuffle in place: walk down from the last index, swapping
    each slot with a uniformly chosen slot at or below it."""
    rng = rng or random
    for i in range(len(roles) - 1, 0, -1):
        j = rng.randint(0, i)
        roles[i], roles[j] = roles[j], roles[i]
    return roles


def assign_roles(room: Room, words: WordBank, duration: int = DEFAULT_GAME_DURATION_SEC,
                 rng: Optional[random.Random] = None) -> None:
    """Pick the secret word and deal one role per player.

    ``room.impostor_count`` must already be set and be below the player count.
    Moves the room into REVEAL and opens a new round.
    """
    room.secret_word = words.pick(rng).upper()

    count = len(room.players)
    roles = [Role.IMPOSTOR] * room.impostor_count + [Role.CITIZEN] * (count - room.impostor_count)
    shuffle_roles(roles, rng)
    for player, role in zip(room.players, roles):
        player.role = role

    room.phase = Phase.REVEAL
    room.remaining_seconds = duration
    room.round += 1


def start_discussion(room: Room) -> None:
    room.phase = Phase.DISCUSSION


def end_game(room: Room, winning_team: Team, duration: int = DEFAULT_GAME_DURATION_SEC) -> Dict:
    """Close the round and return the ``GAME_ENDED`` payload.

    The room keeps its players and can start another round straight away.
    """
    room.cancel_timer()
    room.phase = Phase.ENDED
    result = {
        'winningTeam': winning_team.value,
        'finalRoles': room.final_roles(),
    }

    room.secret_word = ''
    room.impostor_count = 0
    room.remaining_seconds = duration
    for player in room.players:
        player.role = None
    return result
