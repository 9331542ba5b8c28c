"""
Tests for room creation, joining, reconnection, leaving and idle reaping.
"""

import pytest

from literature_engine import errors
from literature_engine.constants import DECK_SIZE, STATUS_LOBBY
from literature_engine.engine import start_game
from literature_engine.errors import GameError
from literature_engine.registry import RoomRegistry
from literature_engine.rules import create_rules


class ScriptedRng:
    """Stands in for random.Random, returning room codes from a script."""

    def __init__(self, values):
        self.values = iter(values)

    def randint(self, low, high):
        return next(self.values)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def registry():
    return RoomRegistry()


def fill_room(registry, count=4):
    state = registry.create_room("Alice", "p0", "c0")
    for i, name in enumerate(["Bob", "Charlie", "Dana", "Eve", "Frank"][:count - 1], start=1):
        registry.join_room(state.room_id, name, f"p{i}", f"c{i}")
    return state


def test_create_room(registry):
    """Test room creation."""
    state = registry.create_room("Alice", "p0", "c0")

    assert len(state.room_id) == 6 and state.room_id.isdigit()
    assert state.status == STATUS_LOBBY
    assert len(state.players) == 1
    owner = state.players[0]
    assert owner.is_owner and owner.name == "Alice" and owner.team is None
    assert registry.get_room(state.room_id) is state


def test_room_code_collision_is_regenerated():
    registry = RoomRegistry(rng=ScriptedRng([111111, 111111, 222222]))
    first = registry.create_room("Alice", "p0", "c0")
    second = registry.create_room("Bob", "p1", "c1")
    assert first.room_id == "111111"
    assert second.room_id == "222222"


def test_join_room(registry):
    """Test player joining room."""
    state = registry.create_room("Alice", "p0", "c0")
    outcome = registry.join_room(state.room_id, "Bob", "p1", "c1")

    assert not outcome.reconnected
    assert [p.name for p in state.players] == ["Alice", "Bob"]
    bob = state.players[1]
    assert not bob.is_owner and bob.hand == [] and bob.team is None


def test_join_unknown_room(registry):
    with pytest.raises(GameError) as exc_info:
        registry.join_room("000000", "Bob", "p1", "c1")
    assert exc_info.value.code == errors.ROOM_NOT_FOUND


def test_new_player_cannot_join_started_game(registry):
    state = fill_room(registry)
    start_game(state, "p0")
    with pytest.raises(GameError) as exc_info:
        registry.join_room(state.room_id, "Eve", "p9", "c9")
    assert exc_info.value.code == errors.GAME_ALREADY_STARTED


def test_room_full():
    """Test room capacity limit."""
    registry = RoomRegistry(create_rules(max_players=2))
    state = fill_room(registry, count=2)
    with pytest.raises(GameError) as exc_info:
        registry.join_room(state.room_id, "Charlie", "p2", "c2")
    assert exc_info.value.code == errors.ROOM_FULL


def test_reconnect_mid_game_keeps_hand(registry):
    state = fill_room(registry)
    start_game(state, "p0", seed=5)
    bob = state.players[1]
    hand_before = list(bob.hand)
    turn_before = state.turn_index

    outcome = registry.join_room(state.room_id, "Bob", "p1", "c1-new")

    assert outcome.reconnected
    assert outcome.player is bob
    assert bob.connection_id == "c1-new"
    assert bob.hand == hand_before
    assert state.turn_index == turn_before
    assert len(state.players) == 4
    assert state.cards_in_play() == DECK_SIZE


def test_latest_reconnect_wins(registry):
    state = fill_room(registry, count=2)
    registry.join_room(state.room_id, "Bob", "p1", "tab-1")
    registry.join_room(state.room_id, "Bob", "p1", "tab-2")
    assert state.players[1].connection_id == "tab-2"
    assert registry.find_by_connection("tab-1") is None


def test_find_by_connection(registry):
    state = fill_room(registry, count=2)
    found_state, player = registry.find_by_connection("c1")
    assert found_state is state and player.name == "Bob"


def test_owner_leaving_hands_over_ownership(registry):
    state = fill_room(registry, count=3)
    outcome = registry.leave_room(state.room_id, "c0")

    assert not outcome.room_deleted
    assert [p.name for p in state.players] == ["Bob", "Charlie"]
    assert state.owner() is state.players[0]


def test_last_player_leaving_deletes_room(registry):
    state = registry.create_room("Alice", "p0", "c0")
    outcome = registry.leave_room(state.room_id, "c0")

    assert outcome.room_deleted
    assert state.room_id not in registry.rooms


def test_leave_requires_seat(registry):
    state = registry.create_room("Alice", "p0", "c0")
    with pytest.raises(GameError) as exc_info:
        registry.leave_room(state.room_id, "stranger")
    assert exc_info.value.code == errors.NOT_IN_GAME


def test_leaving_mid_game_keeps_every_card_in_play(registry):
    state = fill_room(registry)
    start_game(state, "p0", seed=3)
    state.turn_index = 3
    bob_cards = list(state.players[1].hand)

    registry.leave_room(state.room_id, "c1")

    assert len(state.players) == 3
    assert state.cards_in_play() == DECK_SIZE
    dana = state.find_by_player_id("p3")
    assert all(card in dana.hand for card in bob_cards)
    assert state.current_player() is dana


def test_turn_holder_leaving_passes_turn_to_next_seat(registry):
    state = fill_room(registry)
    start_game(state, "p0", seed=3)
    state.turn_index = 1

    registry.leave_room(state.room_id, "c1")

    assert state.current_player().name == "Charlie"


def test_reap_idle_rooms():
    clock = FakeClock()
    registry = RoomRegistry(create_rules(room_timeout=60), clock=clock)
    stale = registry.create_room("Alice", "p0", "c0")
    clock.now += 30
    fresh = registry.create_room("Bob", "p1", "c1")
    clock.now += 40

    assert registry.reap_idle() == [stale.room_id]
    assert fresh.room_id in registry.rooms

    registry.touch(fresh.room_id)
    clock.now += 59
    assert registry.reap_idle() == []


def test_seated_connection_cannot_claim_another_seat(registry):
    state = fill_room(registry, count=2)

    with pytest.raises(GameError) as exc_info:
        registry.join_room(state.room_id, "Bob", "p0", "c1")
    assert exc_info.value.code == errors.ALREADY_SEATED

    assert [p.connection_id for p in state.players] == ["c0", "c1"]
    assert registry.find_by_connection("c1")[1].name == "Bob"


def test_seated_connection_cannot_sit_in_second_room(registry):
    first = fill_room(registry, count=2)
    second = registry.create_room("Charlie", "p2", "c2")

    with pytest.raises(GameError) as exc_info:
        registry.join_room(second.room_id, "Bob", "p1", "c1")
    assert exc_info.value.code == errors.ALREADY_SEATED

    with pytest.raises(GameError) as exc_info:
        registry.create_room("Bob", "p1", "c1")
    assert exc_info.value.code == errors.ALREADY_SEATED

    assert len(second.players) == 1
    assert set(registry.rooms) == {first.room_id, second.room_id}


def test_rejoin_on_same_connection_is_idempotent(registry):
    state = fill_room(registry, count=2)
    outcome = registry.join_room(state.room_id, "Bob", "p1", "c1")
    assert outcome.reconnected
    assert len(state.players) == 2


def test_connection_is_free_again_after_leaving(registry):
    first = fill_room(registry, count=2)
    registry.leave_room(first.room_id, "c1")

    second = registry.create_room("Bob", "p1", "c1")
    assert registry.find_by_connection("c1") == (second, second.players[0])
