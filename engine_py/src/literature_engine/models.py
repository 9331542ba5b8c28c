"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import (
    JOKER_ALIASES, JOKER_RANKS, JOKER_SUIT, STANDARD_RANKS, STATUS_LOBBY,
    SUITS, TEAM_A, TEAM_B, TURN_NORMAL, format_card,
)


@dataclass(frozen=True)
class Card:
    suit: str
    rank: str

    @classmethod
    def parse(cls, suit: str, rank: str) -> 'Card':
        """Build a canonical card, raising ValueError for anything outside the 54-card deck."""
        if suit == JOKER_SUIT:
            rank = JOKER_ALIASES.get(rank, rank)
            if rank not in JOKER_RANKS:
                raise ValueError(f"Unknown joker: {rank}")
        elif suit in SUITS:
            if rank not in STANDARD_RANKS:
                raise ValueError(f"Unknown rank {rank} for {suit}")
        else:
            raise ValueError(f"Unknown suit: {suit}")
        return cls(suit=suit, rank=rank)

    def to_dict(self) -> Dict[str, str]:
        return {'suit': self.suit, 'rank': self.rank}

    def __str__(self) -> str:
        return format_card(self.suit, self.rank)


@dataclass
class Player:
    connection_id: str  # changes on every reconnect
    player_id: str  # stable identity supplied by the client
    name: str
    hand: List[Card] = field(default_factory=list)
    team: Optional[str] = None  # A|B once the game starts
    is_owner: bool = False

    def holds(self, card: Card) -> bool:
        return card in self.hand


@dataclass
class TeamState:
    score: int = 0
    declared_sets: List[str] = field(default_factory=list)


@dataclass
class CompletedSet:
    set_name: str
    completed_by: str  # A|B|Discarded


@dataclass
class LastAsk:
    asker_name: str
    target_name: str
    card: Card
    success: bool


@dataclass
class GameState:
    room_id: str
    status: str = STATUS_LOBBY  # LOBBY|IN_GAME|GAME_OVER
    players: List[Player] = field(default_factory=list)
    turn_index: int = 0
    turn_state: str = TURN_NORMAL  # NORMAL|PASSING_TURN
    teams: Dict[str, TeamState] = field(
        default_factory=lambda: {TEAM_A: TeamState(), TEAM_B: TeamState()}
    )
    completed_sets: List[CompletedSet] = field(default_factory=list)
    last_ask: Optional[LastAsk] = None
    winner: Optional[str] = None  # A|B|DRAW
    log: List[str] = field(default_factory=list)
    last_activity: float = 0.0

    def find_by_connection(self, connection_id: str) -> Optional[Player]:
        for player in self.players:
            if player.connection_id == connection_id:
                return player
        return None

    def find_by_player_id(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def seat_of(self, player: Player) -> int:
        return self.players.index(player)

    def current_player(self) -> Optional[Player]:
        if 0 <= self.turn_index < len(self.players):
            return self.players[self.turn_index]
        return None

    def owner(self) -> Optional[Player]:
        for player in self.players:
            if player.is_owner:
                return player
        return None

    def cards_in_play(self) -> int:
        return sum(len(p.hand) for p in self.players)
