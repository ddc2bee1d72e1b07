class GameError(Exception):
    """Base class for every recoverable, per-intent game error."""


class InvalidMove(GameError):
    pass


class NotYourTurn(GameError):
    pass


class RoomFull(GameError):
    pass


class RoomNotInProgress(GameError):
    pass


class UnauthorizedSymbol(GameError):
    pass


class InvalidIntent(GameError):
    """Inbound payload failed validation before reaching room logic."""
