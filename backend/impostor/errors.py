class GameError(Exception):
    """Base class for request-local failures reported back to one connection.

    These never mutate room state and never reach other players; the Socket.IO
    error handler turns them into an ``ERROR`` reply.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    """A required field is missing or malformed."""


class NotFoundError(GameError):
    """The room code does not match a live room."""


class PreconditionError(GameError):
    """The request is valid but not allowed in the room's current state."""
