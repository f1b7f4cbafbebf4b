from app.game.errors import GameValidationError, InvalidStateError, NotFoundError


class MultiplayerGameNotFoundError(NotFoundError):
    code = "E_MULTIPLAYER_GAME_NOT_FOUND"
    message = "Multiplayer game not found"


class PlayerNotInGameError(NotFoundError):
    code = "E_PLAYER_NOT_IN_GAME"
    message = "Player not found in this game"


class ChestGameNotFoundError(NotFoundError):
    code = "E_CHEST_GAME_NOT_FOUND"
    message = "Bonus game not found"


class GameNotJoinableError(InvalidStateError):
    code = "E_GAME_NOT_JOINABLE"
    message = "Game is no longer accepting players"


class GameFullError(InvalidStateError):
    code = "E_GAME_FULL"
    message = "Game is full"


class NotEnoughPlayersError(InvalidStateError):
    code = "E_NOT_ENOUGH_PLAYERS"
    message = "At least two players are required"


class GameNotInProgressError(InvalidStateError):
    code = "E_GAME_NOT_IN_PROGRESS"
    message = "Game is not in progress"


class TurnNotCompleteError(InvalidStateError):
    code = "E_TURN_NOT_COMPLETE"
    message = "Not all players have answered this turn"


class GameNotCompletedError(InvalidStateError):
    code = "E_GAME_NOT_COMPLETED"
    message = "Game is not completed yet"


class ChestAlreadyTakenError(InvalidStateError):
    code = "E_CHEST_ALREADY_TAKEN"
    message = "This chest was already selected by another player"


class PlayerAlreadySelectedError(InvalidStateError):
    code = "E_PLAYER_ALREADY_SELECTED"
    message = "You have already selected a chest"


class InvalidChestIndexError(GameValidationError):
    code = "E_INVALID_CHEST_INDEX"
    message = "Invalid chest index"


class ChestGameClosedError(InvalidStateError):
    code = "E_CHEST_GAME_CLOSED"
    message = "The bonus game is already finished"
