"""
Card shuffling and dealing utilities.
"""

import random
from typing import Dict, List, Optional

from .constants import JOKER_RANKS, JOKER_SUIT, STANDARD_RANKS, SUITS, TEAM_A, TEAM_B
from .models import Card, Player


def build_deck() -> List[Card]:
    """Create the canonical 54-card deck."""
    deck = []

    # Standard 52 cards
    for suit in SUITS:
        for rank in STANDARD_RANKS:
            deck.append(Card(suit, rank))

    deck.extend(Card(JOKER_SUIT, rank) for rank in JOKER_RANKS)

    return deck


def shuffle_deck(deck: List[Card], seed: Optional[int] = None) -> List[Card]:
    """
    Shuffle a deck deterministically if seed is provided.

    Args:
        deck: List of cards to shuffle
        seed: Optional seed for deterministic shuffling

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()

    if seed is not None:
        # Use deterministic shuffling with seed
        rng = random.Random(seed)
        rng.shuffle(deck_copy)
    else:
        # Use system random
        random.shuffle(deck_copy)

    return deck_copy


def deal_round_robin(deck: List[Card], players: List[Player]) -> Dict[str, List[Card]]:
    """
    Deal every card of the deck round-robin style.

    Card i goes to players[i % N], so hand sizes differ by at most one.
    Existing hands are replaced.

    Args:
        deck: Shuffled deck of cards
        players: Seated players, in seat order

    Returns:
        Dictionary mapping stable player id to their dealt cards
    """
    if not players:
        return {}

    hands: Dict[str, List[Card]] = {player.player_id: [] for player in players}

    for i, card in enumerate(deck):
        hands[players[i % len(players)].player_id].append(card)

    for player in players:
        player.hand = hands[player.player_id]

    return hands


def assign_teams(players: List[Player]) -> None:
    """Alternate seats between the two teams: even seats A, odd seats B."""
    for seat, player in enumerate(players):
        player.team = TEAM_A if seat % 2 == 0 else TEAM_B
