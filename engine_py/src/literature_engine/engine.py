"""Turn and declaration state machine for Literature"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import (
    ALL_SETS, DISCARDED, DRAW, STATUS_GAME_OVER, STATUS_IN_GAME, TEAM_A,
    TEAM_B, TURN_NORMAL, TURN_PASSING, opposing_team,
)
from .models import Card, CompletedSet, GameState, LastAsk, Player, TeamState
from .rules import RuleConfig, default_rules
from .sets import cards_of_set, classify_set
from .shuffle import assign_teams, build_deck, deal_round_robin, shuffle_deck
from .validate import validate_ask, validate_declaration, validate_pass, validate_start

logger = logging.getLogger(__name__)


@dataclass
class AskOutcome:
    asker: Player
    target: Player
    card: Card
    success: bool


@dataclass
class DeclareOutcome:
    declarer: Player
    set_name: str
    correct: bool
    completed_by: str  # A|B|Discarded
    game_over: bool


def start_game(
    state: GameState,
    requester_id: str,
    rules: RuleConfig = default_rules,
    seed: Optional[int] = None,
    connection_id: Optional[str] = None
) -> GameState:
    """
    Assign teams, deal a fresh deck and hand the first turn to a random seat.

    Args:
        state: Room to start (lobby or finished game)
        requester_id: Stable id of the player asking to start
        rules: Player-count rules
        seed: Optional seed for a reproducible deal and first turn
        connection_id: Connection the request came from; must be seated as the requester

    Returns:
        The same state, now IN_GAME
    """
    requester = state.find_by_player_id(requester_id)
    if connection_id is not None and state.find_by_connection(connection_id) is not requester:
        # The claimed id must be the seat this connection occupies
        requester = None
    validate_start(state, requester, rules).raise_if_invalid()

    # A rematch starts from a clean scoreboard
    state.teams = {TEAM_A: TeamState(), TEAM_B: TeamState()}
    state.completed_sets = []
    state.last_ask = None
    state.winner = None
    state.log = []

    assign_teams(state.players)
    deal_round_robin(shuffle_deck(build_deck(), seed), state.players)

    state.status = STATUS_IN_GAME
    turn_rng = random.Random(seed) if seed is not None else random
    state.turn_index = turn_rng.randrange(len(state.players))
    state.turn_state = TURN_NORMAL
    settle_turn(state)

    starter = state.current_player()
    state.log.append(f"Game started! {starter.name} goes first")
    logger.info(f"Game started in room {state.room_id} with {len(state.players)} players")
    return state


def ask_card(
    state: GameState,
    asker_connection_id: str,
    target_id: str,
    card: Card
) -> AskOutcome:
    """Ask an opponent for a card; a hit keeps the turn, a miss hands it to the target."""
    asker = state.find_by_connection(asker_connection_id)
    target = state.find_by_player_id(target_id)
    validate_ask(state, asker, target, card).raise_if_invalid()

    success = target.holds(card)
    state.last_ask = LastAsk(
        asker_name=asker.name,
        target_name=target.name,
        card=card,
        success=success
    )

    if success:
        target.hand.remove(card)
        asker.hand.append(card)
        state.log.append(f"{asker.name} took {card} from {target.name}")
    else:
        state.turn_index = state.seat_of(target)
        state.turn_state = TURN_NORMAL
        state.log.append(f"{asker.name} asked {target.name} for {card} and missed")

    logger.info(f"Room {state.room_id}: {asker.name} asked {target.name} for {card} ({'hit' if success else 'miss'})")
    return AskOutcome(asker=asker, target=target, card=card, success=success)


def declare_set(
    state: GameState,
    declarer_connection_id: str,
    declaration: List[Tuple[Card, str]]
) -> DeclareOutcome:
    """
    Adjudicate a declaration of (card, claimed holder id) pairs.

    Whatever the verdict, the set leaves play. A correct declaration scores for
    the declarer's team; a wrong one scores for the opponents if any of them
    held a card of the set, otherwise the set is discarded. A wrong declaration
    also moves the turn one seat on.
    """
    declarer = state.find_by_connection(declarer_connection_id)
    result = validate_declaration(state, declarer, declaration)
    result.raise_if_invalid()
    set_name = result.set_name

    correct = True
    for card, claimed_id in declaration:
        holder = state.find_by_player_id(claimed_id)
        if holder is None or not holder.holds(card):
            correct = False
            break

    opponents = opposing_team(declarer.team)
    set_cards = set(cards_of_set(set_name))
    opponent_held_card = not correct and any(
        card in set_cards
        for player in state.players if player.team == opponents
        for card in player.hand
    )

    # Declaring always retires the set, right or wrong
    for player in state.players:
        player.hand = [c for c in player.hand if classify_set(c) != set_name]

    if correct:
        completed_by = declarer.team
        state.log.append(f"{declarer.name} declared {set_name} correctly!")
    elif opponent_held_card:
        completed_by = opponents
        state.log.append(f"{declarer.name} declared {set_name} incorrectly. Opponent gets point.")
    else:
        completed_by = DISCARDED
        state.log.append(f"{declarer.name} declared {set_name} incorrectly. No point awarded.")

    if completed_by != DISCARDED:
        state.teams[completed_by].score += 1
        state.teams[completed_by].declared_sets.append(set_name)
    state.completed_sets.append(CompletedSet(set_name=set_name, completed_by=completed_by))

    if not correct:
        state.turn_index = (state.turn_index + 1) % len(state.players)

    game_over = len(state.completed_sets) == len(ALL_SETS)
    if game_over:
        _finish_game(state)
    else:
        settle_turn(state)

    logger.info(f"Room {state.room_id}: {declarer.name} declared {set_name} -> {completed_by}")
    return DeclareOutcome(
        declarer=declarer,
        set_name=set_name,
        correct=correct,
        completed_by=completed_by,
        game_over=game_over
    )


def pass_turn(state: GameState, passer_connection_id: str, target_id: str) -> GameState:
    """Hand the turn to a teammate who still holds cards."""
    passer = state.find_by_connection(passer_connection_id)
    target = state.find_by_player_id(target_id)
    validate_pass(state, passer, target).raise_if_invalid()

    state.turn_index = state.seat_of(target)
    state.turn_state = TURN_NORMAL
    state.log.append(f"{passer.name} passed turn to {target.name}")
    return state


def settle_turn(state: GameState) -> None:
    """
    Make sure the turn holder can act.

    A holder with cards plays normally. An empty-handed holder must pass when a
    teammate still has cards; when the whole team is empty the turn moves on
    to the next seat that holds cards.
    """
    current = state.current_player()
    if current is None:
        return

    if current.hand:
        state.turn_state = TURN_NORMAL
        return

    if any(p.hand for p in state.players if p.team == current.team):
        state.turn_state = TURN_PASSING
        return

    player_count = len(state.players)
    for step in range(1, player_count):
        seat = (state.turn_index + step) % player_count
        candidate = state.players[seat]
        if candidate.hand:
            state.turn_index = seat
            state.turn_state = TURN_NORMAL
            state.log.append(f"{current.name}'s team is out of cards; turn moves to {candidate.name}")
            return


def remove_player(state: GameState, player: Player) -> None:
    """
    Take a player out of their seat.

    Mid-game the leaver's cards go to the remaining teammates (or everyone, if
    none are left) so no card leaves play, and the turn pointer is kept on a
    seated player.
    """
    seat = state.seat_of(player)
    state.players.pop(seat)
    if not state.players:
        return

    if player.is_owner:
        state.players[0].is_owner = True

    if seat < state.turn_index:
        state.turn_index -= 1
    state.turn_index %= len(state.players)

    if state.status == STATUS_IN_GAME:
        if player.hand:
            recipients = [p for p in state.players if p.team == player.team] or state.players
            for i, card in enumerate(player.hand):
                recipients[i % len(recipients)].hand.append(card)
            player.hand = []
            state.log.append(f"{player.name} left; their cards went to {', '.join(p.name for p in recipients)}")
        else:
            state.log.append(f"{player.name} left the game")
        settle_turn(state)


def _finish_game(state: GameState) -> None:
    score_a = state.teams[TEAM_A].score
    score_b = state.teams[TEAM_B].score
    if score_a > score_b:
        state.winner = TEAM_A
    elif score_b > score_a:
        state.winner = TEAM_B
    else:
        state.winner = DRAW
    state.status = STATUS_GAME_OVER
    state.log.append(f"Game over! Final score A {score_a} - B {score_b}")
    logger.info(f"Room {state.room_id} finished: winner {state.winner}")
