"""
Precondition checks for every gameplay action.
"""

from typing import List, Optional, Tuple

from . import errors
from .constants import SET_SIZE, STATUS_GAME_OVER, STATUS_IN_GAME, STATUS_LOBBY
from .models import Card, GameState, Player
from .rules import RuleConfig
from .sets import cards_of_set, classify_set, set_is_complete


class ValidationResult:
    """Result of an action validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        set_name: Optional[str] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.set_name = set_name

    @classmethod
    def success(cls, set_name: Optional[str] = None) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, set_name=set_name)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise errors.GameError(self.error_code, self.error_message)


def _check_active(state: GameState, actor: Optional[Player]) -> Optional[ValidationResult]:
    if state.status != STATUS_IN_GAME:
        return ValidationResult.error(
            errors.GAME_NOT_ACTIVE,
            f"Game is not in progress (current: {state.status})"
        )
    if actor is None:
        return ValidationResult.error(errors.NOT_IN_GAME, "You are not in this game")
    return None


def validate_start(
    state: GameState,
    requester: Optional[Player],
    rules: RuleConfig
) -> ValidationResult:
    """
    Validate a start request.

    Only the owner may start, and only from the lobby or after a finished game.
    Player-count limits are opt-in through the rule config.
    """
    if requester is None or not requester.is_owner:
        return ValidationResult.error(errors.NOT_OWNER, "You are not the owner of this game")

    if state.status not in (STATUS_LOBBY, STATUS_GAME_OVER):
        return ValidationResult.error(errors.GAME_ALREADY_STARTED, "Game already started")

    player_count = len(state.players)
    if player_count < rules.min_players:
        return ValidationResult.error(
            errors.NOT_ENOUGH_PLAYERS,
            f"Need at least {rules.min_players} players"
        )
    if rules.require_even_teams and player_count % 2 != 0:
        return ValidationResult.error(
            errors.UNEVEN_TEAMS,
            "Need an even number of players for balanced teams"
        )
    return ValidationResult.success()


def validate_ask(
    state: GameState,
    asker: Optional[Player],
    target: Optional[Player],
    card: Card
) -> ValidationResult:
    """
    Validate an ask. Checks run in a fixed order and the first failure wins.
    """
    failure = _check_active(state, asker)
    if failure:
        return failure

    if state.current_player() is not asker:
        return ValidationResult.error(errors.NOT_YOUR_TURN, "It's not your turn")

    if target is None:
        return ValidationResult.error(errors.TARGET_NOT_FOUND, "Target player not found")

    if target.team == asker.team:
        return ValidationResult.error(errors.CANNOT_ASK_TEAMMATE, "Cannot ask teammate")

    if not target.hand:
        return ValidationResult.error(errors.TARGET_EMPTY, "Target has no cards")

    requested_set = classify_set(card)
    if not any(classify_set(c) == requested_set for c in asker.hand):
        return ValidationResult.error(
            errors.MUST_HOLD_BASE,
            f'You must have a card from the "{requested_set}" set to ask'
        )

    if asker.holds(card):
        return ValidationResult.error(errors.ALREADY_HAVE_CARD, "You already have this card")

    return ValidationResult.success(set_name=requested_set)


def validate_declaration(
    state: GameState,
    declarer: Optional[Player],
    declaration: List[Tuple[Card, str]]
) -> ValidationResult:
    """
    Validate the shape of a declaration.

    The set is implied by the first card; the declaration must then name each
    of that set's six cards exactly once.
    """
    failure = _check_active(state, declarer)
    if failure:
        return failure

    if not declaration:
        return ValidationResult.error(
            errors.INVALID_DECLARATION_SHAPE, "Declaration cannot be empty"
        )

    set_name = classify_set(declaration[0][0])
    expected = cards_of_set(set_name)

    if len(declaration) != len(expected):
        return ValidationResult.error(
            errors.INVALID_DECLARATION_SHAPE,
            f'Set "{set_name}" requires {SET_SIZE} cards'
        )

    declared_cards = [card for card, _ in declaration]
    if len(set(declared_cards)) != len(declared_cards):
        return ValidationResult.error(
            errors.INVALID_DECLARATION_SHAPE, "Declaration names a card more than once"
        )

    if set(declared_cards) != set(expected):
        return ValidationResult.error(
            errors.INVALID_DECLARATION_SHAPE, "Declaration is missing cards from the set"
        )

    if set_is_complete(state, set_name):
        return ValidationResult.error(
            errors.SET_ALREADY_COMPLETED, f'"{set_name}" has already been declared'
        )

    return ValidationResult.success(set_name=set_name)


def validate_pass(
    state: GameState,
    passer: Optional[Player],
    target: Optional[Player]
) -> ValidationResult:
    """Validate handing the turn to a teammate."""
    failure = _check_active(state, passer)
    if failure:
        return failure

    if state.current_player() is not passer:
        return ValidationResult.error(errors.NOT_YOUR_TURN, "It's not your turn")

    if passer.hand:
        return ValidationResult.error(errors.CANNOT_PASS_WITH_CARDS, "You still have cards")

    if target is None:
        return ValidationResult.error(errors.TARGET_NOT_FOUND, "Target player not found")

    if target.team != passer.team:
        return ValidationResult.error(errors.MUST_PASS_TO_TEAMMATE, "Must pass to a teammate")

    if not target.hand:
        return ValidationResult.error(
            errors.CANNOT_PASS_TO_EMPTY_TEAMMATE, "Cannot pass to teammate with no cards"
        )

    return ValidationResult.success()
