"""
State serialization and sanitization utilities.

Every outbound payload is built here. Only the viewer's own hand is ever
serialized; everyone else is reduced to a card count.
"""

from typing import Any, Dict, List, Optional

from .constants import TEAM_A, TEAM_B
from .models import GameState, Player


def public_player(player: Player) -> Dict[str, Any]:
    """Serialize a player without their hand."""
    return {
        "id": player.connection_id,
        "playerId": player.player_id,
        "name": player.name,
        "team": player.team,
        "isOwner": player.is_owner,
        "cardCount": len(player.hand)
    }


def public_roster(state: GameState) -> List[Dict[str, Any]]:
    return [public_player(player) for player in state.players]


def personal_snapshot(
    state: GameState,
    viewer_id: str,
    log_limit: int = 20
) -> Dict[str, Any]:
    """
    Sanitize room state for one player.

    Args:
        state: Room state to sanitize
        viewer_id: Stable id of the player receiving the snapshot
        log_limit: Number of most recent log lines to include

    Returns:
        Snapshot dictionary safe for JSON transmission to that player
    """
    viewer: Optional[Player] = state.find_by_player_id(viewer_id)

    last_ask = None
    if state.last_ask:
        last_ask = {
            "askerName": state.last_ask.asker_name,
            "targetName": state.last_ask.target_name,
            "card": state.last_ask.card.to_dict(),
            "success": state.last_ask.success
        }

    return {
        "roomId": state.room_id,
        "status": state.status,
        "hand": [card.to_dict() for card in viewer.hand] if viewer else [],
        "myTeam": viewer.team if viewer else None,
        "turnIndex": state.turn_index,
        "turnState": state.turn_state,
        "players": public_roster(state),
        "lastAsk": last_ask,
        "scores": {
            TEAM_A: state.teams[TEAM_A].score,
            TEAM_B: state.teams[TEAM_B].score
        },
        "completedSets": [
            {"setName": entry.set_name, "completedBy": entry.completed_by}
            for entry in state.completed_sets
        ],
        "winner": state.winner,
        "log": state.log[-log_limit:] if log_limit else []
    }
