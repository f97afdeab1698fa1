from __future__ import annotations


class GameError(RuntimeError):
    """Base class for every rejection raised by the rules engine.

    A rejection never leaves partial writes behind; the caller may resubmit.
    """

    kind = "GameError"


class NotFound(GameError):
    kind = "NotFound"

    def __init__(self, game_id: int) -> None:
        super().__init__(f"Game {game_id} not found")
        self.game_id = game_id


class InvalidState(GameError):
    kind = "InvalidState"


class NotYourTurn(GameError):
    kind = "NotYourTurn"

    def __init__(self) -> None:
        super().__init__("Not your turn")


class PositionTaken(GameError):
    kind = "PositionTaken"

    def __init__(self, position: int) -> None:
        super().__init__(f"Position {position} already taken")
        self.position = position


class InvalidPosition(GameError):
    kind = "InvalidPosition"

    def __init__(self, position: int) -> None:
        super().__init__(
            f"Position must be an integer between 1 and 9 (inclusive). Your choice was {position}"
        )
        self.position = position


class Unauthorized(GameError):
    kind = "Unauthorized"


class InvalidAddress(GameError):
    kind = "InvalidAddress"
