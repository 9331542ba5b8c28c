"""
Tests that outbound snapshots never leak another player's hand.
"""

from literature_engine.engine import ask_card
from literature_engine.models import Card
from literature_engine.serialization import personal_snapshot, public_roster


def test_roster_has_counts_not_hands(room):
    roster = public_roster(room)
    assert [entry["cardCount"] for entry in roster] == [14, 14, 13, 13]
    assert all("hand" not in entry for entry in roster)
    assert roster[0]["playerId"] == "p0" and roster[0]["id"] == "c0"


def test_snapshot_only_contains_viewer_hand(room):
    for viewer in room.players:
        snapshot = personal_snapshot(room, viewer.player_id)

        assert snapshot["hand"] == [card.to_dict() for card in viewer.hand]
        assert snapshot["myTeam"] == viewer.team
        for entry in snapshot["players"]:
            assert set(entry) == {"id", "playerId", "name", "team", "isOwner", "cardCount"}

        others = [card.to_dict() for p in room.players if p is not viewer for card in p.hand]
        assert not any(card in snapshot["hand"] for card in others)


def test_snapshot_reports_public_state(room):
    ask_card(room, "c0", "p1", Card("Spades", "3"))
    snapshot = personal_snapshot(room, "p2", log_limit=1)

    assert snapshot["lastAsk"] == {
        "askerName": "Alice",
        "targetName": "Bob",
        "card": {"suit": "Spades", "rank": "3"},
        "success": True
    }
    assert snapshot["scores"] == {"A": 0, "B": 0}
    assert snapshot["turnIndex"] == 0
    assert snapshot["turnState"] == "NORMAL"
    assert snapshot["status"] == "IN_GAME"
    assert snapshot["winner"] is None
    assert len(snapshot["log"]) == 1


def test_unknown_viewer_gets_no_hand(room):
    snapshot = personal_snapshot(room, "spectator")
    assert snapshot["hand"] == []
    assert snapshot["myTeam"] is None
