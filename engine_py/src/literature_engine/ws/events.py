"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from ..models import Card


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_GAME = "create_game"
    JOIN_GAME = "join_game"
    START_GAME = "start_game"
    ASK_CARD = "ask_card"
    DECLARE_SET = "declare_set"
    PASS_TURN = "pass_turn"
    LEAVE_ROOM = "leave_room"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    GAME_CREATED = "game_created"
    JOINED_GAME = "joined_game"
    PLAYER_UPDATE = "player_update"
    GAME_STARTED = "game_started"
    GAME_STARTED_PERSONAL = "game_started_personal"
    GAME_UPDATE = "game_update"
    PLAYER_DISCONNECTED = "player_disconnected"
    ERROR = "error"


class WireModel(BaseModel):
    """Snake case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CardPayload(WireModel):
    """A card as sent by clients; normalised to the canonical deck on parse."""
    suit: str
    rank: str

    @model_validator(mode="after")
    def check_canonical(self):
        card = Card.parse(self.suit, self.rank)
        self.rank = card.rank
        return self

    def to_card(self) -> Card:
        return Card(self.suit, self.rank)


class DeclarationEntry(WireModel):
    card: CardPayload
    player_id: str = Field(..., min_length=1)


# Inbound event models
class BaseEvent(WireModel):
    """Base event model."""
    type: EventType


class CreateGameEvent(BaseEvent):
    """Create room event."""
    type: EventType = EventType.CREATE_GAME
    player_name: str = Field(..., min_length=1, max_length=30)
    player_id: str = Field(..., min_length=1, max_length=64)


class JoinGameEvent(BaseEvent):
    """Join (or rejoin) room event."""
    type: EventType = EventType.JOIN_GAME
    room_code: str = Field(..., min_length=1, max_length=10)
    player_name: str = Field(..., min_length=1, max_length=30)
    player_id: str = Field(..., min_length=1, max_length=64)


class StartGameEvent(BaseEvent):
    """Start game event."""
    type: EventType = EventType.START_GAME
    room_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)


class AskCardEvent(BaseEvent):
    """Ask an opponent for a card."""
    type: EventType = EventType.ASK_CARD
    room_id: str = Field(..., min_length=1)
    target_id: str = Field(..., min_length=1)
    card: CardPayload


class DeclareSetEvent(BaseEvent):
    """Declare the holders of every card in a set."""
    type: EventType = EventType.DECLARE_SET
    room_id: str = Field(..., min_length=1)
    declaration: List[DeclarationEntry]


class PassTurnEvent(BaseEvent):
    """Pass turn to a teammate."""
    type: EventType = EventType.PASS_TURN
    room_id: str = Field(..., min_length=1)
    target_id: str = Field(..., min_length=1)


class LeaveRoomEvent(BaseEvent):
    """Leave room event."""
    type: EventType = EventType.LEAVE_ROOM
    room_id: str = Field(..., min_length=1)


# Union type for all inbound events
InboundEvent = Union[
    CreateGameEvent,
    JoinGameEvent,
    StartGameEvent,
    AskCardEvent,
    DeclareSetEvent,
    PassTurnEvent,
    LeaveRoomEvent
]


# Outbound event models
class OutboundEvent(WireModel):
    timestamp: float = Field(default_factory=time.time)


class GameCreatedEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.GAME_CREATED
    room_id: str
    player_name: str


class JoinedGameEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.JOINED_GAME
    room_id: str
    player_name: str


class PlayerUpdateEvent(OutboundEvent):
    """Lobby roster; hands are never included."""
    type: OutboundEventType = OutboundEventType.PLAYER_UPDATE
    players: List[Dict[str, Any]]


class GameStartedEvent(OutboundEvent):
    """Public start notice, same for every player."""
    type: OutboundEventType = OutboundEventType.GAME_STARTED
    turn_index: int
    players: List[Dict[str, Any]]


class SnapshotEvent(OutboundEvent):
    """Personal view of a room: own hand plus public state."""
    room_id: str
    status: str
    hand: List[Dict[str, str]]
    my_team: Optional[str] = None
    turn_index: int
    turn_state: str
    players: List[Dict[str, Any]]
    last_ask: Optional[Dict[str, Any]] = None
    scores: Dict[str, int]
    completed_sets: List[Dict[str, str]]
    winner: Optional[str] = None
    log: List[str] = Field(default_factory=list)


class GameStartedPersonalEvent(SnapshotEvent):
    type: OutboundEventType = OutboundEventType.GAME_STARTED_PERSONAL


class GameUpdateEvent(SnapshotEvent):
    type: OutboundEventType = OutboundEventType.GAME_UPDATE


class PlayerDisconnectedEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.PLAYER_DISCONNECTED
    player_id: str
    player_name: str


class ErrorEvent(OutboundEvent):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: str
    message: str


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_map = {
        EventType.CREATE_GAME: CreateGameEvent,
        EventType.JOIN_GAME: JoinGameEvent,
        EventType.START_GAME: StartGameEvent,
        EventType.ASK_CARD: AskCardEvent,
        EventType.DECLARE_SET: DeclareSetEvent,
        EventType.PASS_TURN: PassTurnEvent,
        EventType.LEAVE_ROOM: LeaveRoomEvent,
    }

    event_class = event_map.get(event_type)
    if not event_class:
        raise ValueError(f"No handler for event type: {event_type}")

    try:
        return event_class.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e.errors(include_url=False)}")


def create_error_event(code: str, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message)


def create_player_update_event(players: List[Dict[str, Any]]) -> PlayerUpdateEvent:
    return PlayerUpdateEvent(players=players)


def create_snapshot_event(snapshot: Dict[str, Any], started: bool = False) -> SnapshotEvent:
    """Wrap a personal snapshot as game_started_personal or game_update."""
    event_class = GameStartedPersonalEvent if started else GameUpdateEvent
    return event_class.model_validate(snapshot)
