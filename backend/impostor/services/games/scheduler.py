from impostor import broadcast, socketio
from impostor.models import Phase, Room, Team
from . import engine


class TimerService:
    """Per-room countdown and the reveal-to-discussion delay.

    Both run as Socket.IO background tasks. A task only touches its room while
    holding the room lock, and only if what it was scheduled for is still
    current: the countdown checks its token, the reveal delay checks the round.
    Anything else means the room moved on, so the task exits quietly.
    """

    def __init__(self, app):
        self.app = app

    @property
    def _duration(self) -> int:
        return int(self.app.config.get('GAME_DURATION_SEC', 300))

    def start(self, room: Room) -> object:
        with room.lock:
            # Never two countdowns for one room
            room.cancel_timer()
            token = room.arm_timer()
            self.app.logger.info(
                f"[timer-set] room={room.code} round={room.round} remaining={room.remaining_seconds}s"
            )
        socketio.start_background_task(self._run, room, token)
        return token

    def cancel(self, room: Room) -> None:
        with room.lock:
            room.cancel_timer()

    def tick(self, room: Room, token: object) -> bool:
        """Advance the countdown by one second. Returns False once it should stop."""
        with room.lock:
            if room.closed or room.timer_token is not token or room.phase != Phase.DISCUSSION:
                self.app.logger.info(f"[timer-abort] room={room.code} stale tick")
                return False

            room.remaining_seconds -= 1
            broadcast.to_room(room, 'SYNC_TIMER', {'timeRemaining': room.remaining_seconds})
            if room.remaining_seconds > 0:
                return True

            room.cancel_timer()
            result = engine.end_game(room, Team.IMPOSTORS, self._duration)
            self.app.logger.info(f"[game-end] room={room.code} winner={Team.IMPOSTORS.value} reason=timeout")
            broadcast.game_ended(room, result)
            return False

    def _run(self, room: Room, token: object) -> None:
        interval = float(self.app.config.get('TICK_INTERVAL_SEC', 1))
        with self.app.app_context():
            while True:
                socketio.sleep(interval)
                if not self.tick(room, token):
                    return

    def schedule_discussion(self, room: Room) -> None:
        """Open the discussion once the reveal delay for the current round elapses."""
        delay = float(self.app.config.get('REVEAL_DURATION_SEC', 15))
        socketio.start_background_task(self._reveal_worker, room, room.round, delay)

    def _reveal_worker(self, room: Room, expected_round: int, delay: float) -> None:
        socketio.sleep(delay)
        with self.app.app_context():
            self.begin_discussion(room, expected_round)

    def begin_discussion(self, room: Room, expected_round: int) -> bool:
        with room.lock:
            if room.closed or room.round != expected_round or room.phase != Phase.REVEAL:
                self.app.logger.info(
                    f"[timer-abort] room={room.code} expected_round={expected_round} "
                    f"actual_round={room.round} phase={room.phase.value}"
                )
                return False
            engine.start_discussion(room)
            broadcast.phase_change(room)
            self.app.logger.info(f"[discussion] room={room.code} round={room.round}")
            self.start(room)
        return True
