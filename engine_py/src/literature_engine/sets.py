"""
Classification of cards into the nine declarable sets.
"""

from typing import List

from .constants import (
    ALL_SETS, HIGH_RANKS, JOKER_RANKS, JOKER_SUIT, LOW_RANKS, SEVEN_RANK,
    SEVENS, SUITS,
)
from .models import Card, GameState


def classify_set(card: Card) -> str:
    """
    Return the name of the set a card belongs to.

    Args:
        card: A canonical card

    Returns:
        One of the nine names in ALL_SETS

    Raises:
        ValueError: If the card is not part of the 54-card deck
    """
    if card.suit == JOKER_SUIT:
        if card.rank in JOKER_RANKS:
            return SEVENS
        raise ValueError(f"Unknown joker: {card.rank}")
    if card.suit not in SUITS:
        raise ValueError(f"Unknown suit: {card.suit}")
    if card.rank == SEVEN_RANK:
        return SEVENS
    if card.rank in LOW_RANKS:
        return f"Low {card.suit}"
    if card.rank in HIGH_RANKS:
        return f"High {card.suit}"
    raise ValueError(f"Unknown rank {card.rank} for {card.suit}")


def cards_of_set(set_name: str) -> List[Card]:
    """Return the six cards of a set, in a stable order."""
    if set_name == SEVENS:
        cards = [Card(suit, SEVEN_RANK) for suit in SUITS]
        cards.extend(Card(JOKER_SUIT, rank) for rank in JOKER_RANKS)
        return cards

    if set_name not in ALL_SETS:
        raise ValueError(f"Unknown set: {set_name}")

    band, suit = set_name.split(' ')
    ranks = LOW_RANKS if band == 'Low' else HIGH_RANKS
    return [Card(suit, rank) for rank in ranks]


def set_is_complete(state: GameState, set_name: str) -> bool:
    return any(entry.set_name == set_name for entry in state.completed_sets)
