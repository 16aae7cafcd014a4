class GameError(Exception):
    """Rejected action. The message is sent to the acting client as-is."""

    message = 'Action rejected'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class RoomNotFound(GameError):
    message = 'Room not found'


class RoomFull(GameError):
    message = 'Room is full'


class GameNotInPlay(GameError):
    message = 'Game not in play'


class NotYourTurn(GameError):
    message = 'Not your turn'


class EmptyPool(GameError):
    message = 'No tiles left in pool'
