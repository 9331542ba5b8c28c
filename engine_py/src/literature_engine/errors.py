# engine_py/src/literature_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
ROOM_FULL = "ROOM_FULL"
NOT_OWNER = "NOT_OWNER"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
UNEVEN_TEAMS = "UNEVEN_TEAMS"
NOT_IN_GAME = "NOT_IN_GAME"
ALREADY_SEATED = "ALREADY_SEATED"
GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
CANNOT_ASK_TEAMMATE = "CANNOT_ASK_TEAMMATE"
TARGET_EMPTY = "TARGET_EMPTY"
MUST_HOLD_BASE = "MUST_HOLD_BASE"
ALREADY_HAVE_CARD = "ALREADY_HAVE_CARD"
INVALID_DECLARATION_SHAPE = "INVALID_DECLARATION_SHAPE"
SET_ALREADY_COMPLETED = "SET_ALREADY_COMPLETED"
CANNOT_PASS_WITH_CARDS = "CANNOT_PASS_WITH_CARDS"
MUST_PASS_TO_TEAMMATE = "MUST_PASS_TO_TEAMMATE"
CANNOT_PASS_TO_EMPTY_TEAMMATE = "CANNOT_PASS_TO_EMPTY_TEAMMATE"
INVALID_EVENT = "INVALID_EVENT"
INTERNAL_ERROR = "INTERNAL_ERROR"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
