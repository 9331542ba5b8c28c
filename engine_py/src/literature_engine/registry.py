"""In-memory room registry with reconnection by stable player id"""

import logging
import random
import threading
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from . import errors
from .constants import ROOM_CODE_MAX, ROOM_CODE_MIN, STATUS_LOBBY
from .engine import remove_player
from .models import GameState, Player
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)


@dataclass
class JoinOutcome:
    state: GameState
    player: Player
    reconnected: bool


@dataclass
class LeaveOutcome:
    state: GameState
    player: Player
    room_deleted: bool


class RoomRegistry:
    """Owns every GameState, keyed by room code."""

    def __init__(
        self,
        rules: RuleConfig = default_rules,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None
    ):
        self.rules = rules
        self.rooms: Dict[str, GameState] = {}
        self.room_locks = defaultdict(threading.Lock)
        self._clock = clock
        self._rng = rng or random.Random()

    def room_lock(self, room_id: str) -> threading.Lock:
        return self.room_locks[room_id]

    def _generate_room_id(self) -> str:
        while True:
            room_id = str(self._rng.randint(ROOM_CODE_MIN, ROOM_CODE_MAX))
            if room_id not in self.rooms:
                return room_id

    def create_room(self, owner_name: str, owner_id: str, connection_id: str) -> GameState:
        self._check_unseated(connection_id)
        room_id = self._generate_room_id()
        owner = Player(
            connection_id=connection_id,
            player_id=owner_id,
            name=owner_name,
            is_owner=True
        )
        state = GameState(room_id=room_id, players=[owner], last_activity=self._clock())
        self.rooms[room_id] = state
        logger.info(f"Game created: {room_id} by {owner_name}")
        return state

    def get_room(self, room_id: str) -> GameState:
        state = self.rooms.get(room_id)
        if state is None:
            errors.raise_error(errors.ROOM_NOT_FOUND, "Room not found")
        return state

    def join_room(self, room_id: str, name: str, player_id: str, connection_id: str) -> JoinOutcome:
        """
        Join a room, or reattach to an existing seat.

        A known stable id always reattaches (the newest connection wins), even
        mid-game. New players can only join a room still in the lobby. A
        connection already seated elsewhere is refused with ALREADY_SEATED.
        """
        state = self.get_room(room_id)
        self._check_unseated(connection_id, state, player_id)

        existing = state.find_by_player_id(player_id)
        if existing is not None:
            previous = existing.connection_id
            existing.connection_id = connection_id
            logger.info(f"{existing.name} reconnected to {room_id} ({previous} -> {connection_id})")
            return JoinOutcome(state=state, player=existing, reconnected=True)

        if state.status != STATUS_LOBBY:
            errors.raise_error(errors.GAME_ALREADY_STARTED, "Game already started")

        if not self.rules.room_has_space(len(state.players)):
            errors.raise_error(errors.ROOM_FULL, "Room is full")

        player = Player(connection_id=connection_id, player_id=player_id, name=name)
        state.players.append(player)
        logger.info(f"{name} joined {room_id}")
        return JoinOutcome(state=state, player=player, reconnected=False)

    def leave_room(self, room_id: str, connection_id: str) -> LeaveOutcome:
        """Remove a player for good; an emptied room is deleted."""
        state = self.get_room(room_id)
        player = state.find_by_connection(connection_id)
        if player is None:
            errors.raise_error(errors.NOT_IN_GAME, "You are not in this room")

        remove_player(state, player)

        if not state.players:
            self.delete_room(room_id)
            logger.info(f"Room {room_id} deleted (no players left)")
            return LeaveOutcome(state=state, player=player, room_deleted=True)

        logger.info(f"{player.name} left room {room_id}")
        return LeaveOutcome(state=state, player=player, room_deleted=False)

    def _check_unseated(
        self,
        connection_id: str,
        state: Optional[GameState] = None,
        player_id: Optional[str] = None
    ) -> None:
        """A connection holds at most one seat; only that seat may be reclaimed through it."""
        seated = self.find_by_connection(connection_id)
        if seated is None:
            return
        seated_state, seated_player = seated
        if seated_state is state and seated_player.player_id == player_id:
            return
        errors.raise_error(
            errors.ALREADY_SEATED,
            f"Already seated as {seated_player.name} in room {seated_state.room_id}; leave it first"
        )

    def find_by_connection(self, connection_id: str) -> Optional[Tuple[GameState, Player]]:
        for state in self.rooms.values():
            player = state.find_by_connection(connection_id)
            if player is not None:
                return state, player
        return None

    def delete_room(self, room_id: str) -> None:
        self.rooms.pop(room_id, None)
        self.room_locks.pop(room_id, None)

    def touch(self, room_id: str) -> None:
        state = self.rooms.get(room_id)
        if state is not None:
            state.last_activity = self._clock()

    def reap_idle(self, now: Optional[float] = None) -> List[str]:
        """Delete rooms idle for longer than the configured timeout."""
        if now is None:
            now = self._clock()
        expired = [
            room_id for room_id, state in self.rooms.items()
            if now - state.last_activity > self.rules.room_timeout
        ]
        for room_id in expired:
            self.delete_room(room_id)
            logger.info(f"Room {room_id} reaped after {self.rules.room_timeout}s idle")
        return expired
