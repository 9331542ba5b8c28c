"""
Shared fixtures: a seated four-player room dealt from an unshuffled deck.
"""

import pytest

from literature_engine.constants import STATUS_IN_GAME
from literature_engine.models import Card, GameState, Player
from literature_engine.shuffle import assign_teams, build_deck, deal_round_robin

NAMES = ["Alice", "Bob", "Charlie", "Dana"]


def seat(state: GameState, names=NAMES) -> GameState:
    for i, name in enumerate(names):
        state.players.append(Player(
            connection_id=f"c{i}",
            player_id=f"p{i}",
            name=name,
            is_owner=(i == 0)
        ))
    return state


@pytest.fixture
def lobby_factory():
    return lambda room_id="123456": seat(GameState(room_id=room_id))


@pytest.fixture
def lobby(lobby_factory):
    """Four players waiting in the lobby; Alice owns the room."""
    return lobby_factory()


@pytest.fixture
def room(lobby):
    """Four players mid-game: teams A (seats 0, 2) and B (seats 1, 3), Alice to play."""
    assign_teams(lobby.players)
    deal_round_robin(build_deck(), lobby.players)
    lobby.status = STATUS_IN_GAME
    lobby.turn_index = 0
    return lobby


@pytest.fixture
def place():
    """Move cards into a seat, taking them from whoever holds them now."""
    def _place(state: GameState, seat_index: int, *cards: Card):
        for card in cards:
            for player in state.players:
                if card in player.hand:
                    player.hand.remove(card)
            state.players[seat_index].hand.append(card)
    return _place
