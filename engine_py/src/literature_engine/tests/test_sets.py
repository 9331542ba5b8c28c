"""
Tests for the deck, the set partition and dealing.
"""

import pytest

from literature_engine.constants import ALL_SETS, DECK_SIZE, SEVENS
from literature_engine.models import Card, Player
from literature_engine.sets import cards_of_set, classify_set
from literature_engine.shuffle import assign_teams, build_deck, deal_round_robin, shuffle_deck


def test_deck_creation():
    """Test the deck holds 54 distinct cards."""
    deck = build_deck()
    assert len(deck) == DECK_SIZE
    assert len(set(deck)) == DECK_SIZE
    assert Card("Joker", "Red") in deck
    assert Card("Joker", "Black") in deck
    assert sum(1 for c in deck if c.suit != "Joker") == 52


def test_every_card_classifies_into_its_set():
    for card in build_deck():
        set_name = classify_set(card)
        assert set_name in ALL_SETS
        assert card in cards_of_set(set_name)


def test_sets_partition_the_deck():
    seen = []
    for set_name in ALL_SETS:
        cards = cards_of_set(set_name)
        assert len(cards) == 6
        assert all(classify_set(c) == set_name for c in cards)
        seen.extend(cards)
    assert len(seen) == DECK_SIZE
    assert set(seen) == set(build_deck())


def test_set_boundaries():
    assert classify_set(Card("Spades", "A")) == "Low Spades"
    assert classify_set(Card("Hearts", "6")) == "Low Hearts"
    assert classify_set(Card("Clubs", "8")) == "High Clubs"
    assert classify_set(Card("Diamonds", "K")) == "High Diamonds"
    assert classify_set(Card("Diamonds", "7")) == SEVENS
    assert classify_set(Card("Joker", "Black")) == SEVENS


def test_malformed_cards_are_rejected():
    with pytest.raises(ValueError):
        classify_set(Card("Stars", "2"))
    with pytest.raises(ValueError):
        classify_set(Card("Spades", "1"))
    with pytest.raises(ValueError):
        cards_of_set("Middle Spades")


def test_joker_aliases_are_normalised():
    assert Card.parse("Joker", "Big") == Card("Joker", "Red")
    assert Card.parse("Joker", "Small") == Card("Joker", "Black")
    with pytest.raises(ValueError):
        Card.parse("Joker", "Green")


def test_shuffle_returns_permutation_without_mutating_input():
    deck = build_deck()
    original = list(deck)
    shuffled = shuffle_deck(deck, seed=7)
    assert deck == original
    assert sorted(shuffled, key=str) == sorted(original, key=str)
    assert shuffle_deck(deck, seed=7) == shuffled


@pytest.mark.parametrize("player_count", [1, 4, 5, 6, 7, 8])
def test_round_robin_deal_is_fair(player_count):
    players = [Player(connection_id=f"c{i}", player_id=f"p{i}", name=f"P{i}") for i in range(player_count)]
    hands = deal_round_robin(shuffle_deck(build_deck(), seed=1), players)

    sizes = [len(p.hand) for p in players]
    assert sum(sizes) == DECK_SIZE
    assert max(sizes) - min(sizes) <= 1
    dealt = [card for hand in hands.values() for card in hand]
    assert set(dealt) == set(build_deck())


def test_teams_alternate_by_seat():
    players = [Player(connection_id=f"c{i}", player_id=f"p{i}", name=f"P{i}") for i in range(6)]
    assign_teams(players)
    assert [p.team for p in players] == ["A", "B", "A", "B", "A", "B"]
