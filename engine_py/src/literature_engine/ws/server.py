"""
FastAPI WebSocket server for the Literature game.
"""

import asyncio
import logging
import os
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Set, Tuple

import orjson
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .. import engine
from ..constants import STATUS_IN_GAME, STATUS_LOBBY
from ..errors import INTERNAL_ERROR, INVALID_EVENT, GameError
from ..models import GameState
from ..registry import RoomRegistry
from ..rules import RuleConfig, default_rules
from ..serialization import personal_snapshot, public_roster
from .events import (
    AskCardEvent, CreateGameEvent, DeclareSetEvent, GameCreatedEvent,
    GameStartedEvent, JoinedGameEvent, JoinGameEvent, LeaveRoomEvent,
    OutboundEvent, PassTurnEvent, PlayerDisconnectedEvent, StartGameEvent,
    create_error_event, create_player_update_event, create_snapshot_event,
    parse_inbound_event,
)

logger = logging.getLogger(__name__)

# (connection_id, event) pairs built under the room lock and sent afterwards
Outbox = List[Tuple[str, OutboundEvent]]


class ConnectionManager:
    """Manages WebSocket connections and room subscriptions."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.room_connections: Dict[str, Set[str]] = defaultdict(set)
        self.connection_rooms: Dict[str, str] = {}

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = str(uuid.uuid4())
        self.active_connections[connection_id] = websocket
        logger.info(f"Connection {connection_id} opened")
        return connection_id

    def disconnect(self, connection_id: str) -> Optional[str]:
        """Forget a connection; returns the room it was subscribed to."""
        self.active_connections.pop(connection_id, None)
        room_id = self.connection_rooms.pop(connection_id, None)
        if room_id:
            self._unsubscribe(connection_id, room_id)
        logger.info(f"Connection {connection_id} closed")
        return room_id

    def add_to_room(self, connection_id: str, room_id: str):
        previous = self.connection_rooms.get(connection_id)
        if previous and previous != room_id:
            self._unsubscribe(connection_id, previous)
        self.room_connections[room_id].add(connection_id)
        self.connection_rooms[connection_id] = room_id

    def remove_from_room(self, connection_id: str, room_id: str):
        if self.connection_rooms.get(connection_id) == room_id:
            del self.connection_rooms[connection_id]
        self._unsubscribe(connection_id, room_id)

    def drop_room(self, room_id: str):
        for connection_id in self.room_connections.pop(room_id, set()):
            self.connection_rooms.pop(connection_id, None)

    def room_members(self, room_id: str) -> List[str]:
        return list(self.room_connections.get(room_id, ()))

    def _unsubscribe(self, connection_id: str, room_id: str):
        members = self.room_connections.get(room_id)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self.room_connections[room_id]

    async def send(self, connection_id: str, event: OutboundEvent) -> bool:
        """Send one event. Returns False only when a live socket failed."""
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return True
        try:
            await websocket.send_text(event.model_dump_json(by_alias=True))
        except Exception as e:
            logger.error(f"Error sending to {connection_id}: {e}")
            return False
        return True


class GameWebSocketManager:
    """Dispatches inbound commands to the registry and engine."""

    def __init__(
        self,
        registry: RoomRegistry,
        connections: Optional[ConnectionManager] = None,
        seed: Optional[int] = None
    ):
        self.registry = registry
        self.seed = seed  # fixes every deal when set
        self.rules: RuleConfig = registry.rules
        self.connections = connections or ConnectionManager()

    async def handle_websocket(self, websocket: WebSocket):
        connection_id = await self.connections.connect(websocket)
        try:
            while True:
                raw_data = await websocket.receive_text()

                try:
                    event = parse_inbound_event(orjson.loads(raw_data))
                except ValueError as e:
                    # orjson.JSONDecodeError is a ValueError too
                    await self.connections.send(connection_id, create_error_event(INVALID_EVENT, str(e)))
                    continue

                try:
                    outbox = self.handle_event(connection_id, event)
                except GameError as e:
                    logger.info(f"Rejected {event.type.value} from {connection_id}: {e}")
                    outbox = [(connection_id, create_error_event(e.code, e.message))]
                except Exception:
                    logger.exception(f"Error handling {event.type.value} from {connection_id}")
                    outbox = [(connection_id, create_error_event(INTERNAL_ERROR, "Internal server error"))]

                await self.deliver(outbox)

        except WebSocketDisconnect:
            logger.info(f"WebSocket {connection_id} disconnected")
        finally:
            await self.handle_disconnect(connection_id)

    def handle_event(self, connection_id: str, event) -> Outbox:
        """Apply an inbound event and return the messages it produces."""
        if isinstance(event, CreateGameEvent):
            return self.handle_create(connection_id, event)
        elif isinstance(event, JoinGameEvent):
            return self.handle_join(connection_id, event)
        elif isinstance(event, StartGameEvent):
            return self.handle_start(connection_id, event)
        elif isinstance(event, AskCardEvent):
            return self.handle_ask(connection_id, event)
        elif isinstance(event, DeclareSetEvent):
            return self.handle_declare(connection_id, event)
        elif isinstance(event, PassTurnEvent):
            return self.handle_pass(connection_id, event)
        elif isinstance(event, LeaveRoomEvent):
            return self.handle_leave(connection_id, event)
        else:
            raise ValueError(f"Unhandled event type: {type(event)}")

    async def deliver(self, outbox: Outbox):
        failed = []
        for connection_id, event in outbox:
            if not await self.connections.send(connection_id, event):
                failed.append(connection_id)
        # A socket that died mid-send is treated like any other disconnect
        for connection_id in dict.fromkeys(failed):
            await self.handle_disconnect(connection_id)

    def handle_create(self, connection_id: str, event: CreateGameEvent) -> Outbox:
        state = self.registry.create_room(event.player_name, event.player_id, connection_id)
        with self.registry.room_lock(state.room_id):
            self.connections.add_to_room(connection_id, state.room_id)
            outbox: Outbox = [(connection_id, GameCreatedEvent(room_id=state.room_id, player_name=event.player_name))]
            outbox.extend(self._roster_update(state))
        return outbox

    def handle_join(self, connection_id: str, event: JoinGameEvent) -> Outbox:
        room_id = event.room_code
        self.registry.get_room(room_id)
        with self.registry.room_lock(room_id):
            outcome = self.registry.join_room(room_id, event.player_name, event.player_id, connection_id)
            self.connections.add_to_room(connection_id, room_id)
            self.registry.touch(room_id)
            state = outcome.state

            if outcome.reconnected and state.status != STATUS_LOBBY:
                logger.info(f"{outcome.player.name} rejoined in-progress game {room_id}")
                snapshot = personal_snapshot(state, outcome.player.player_id, self.rules.log_limit)
                return [(connection_id, create_snapshot_event(snapshot, started=True))]

            outbox = self._roster_update(state)
            outbox.append((connection_id, JoinedGameEvent(room_id=room_id, player_name=event.player_name)))
            return outbox

    def handle_start(self, connection_id: str, event: StartGameEvent) -> Outbox:
        state = self.registry.get_room(event.room_id)
        with self.registry.room_lock(event.room_id):
            engine.start_game(state, event.player_id, self.rules, seed=self.seed, connection_id=connection_id)
            self.connections.add_to_room(connection_id, event.room_id)
            self.registry.touch(event.room_id)

            public = GameStartedEvent(turn_index=state.turn_index, players=public_roster(state))
            outbox: Outbox = [(member, public) for member in self.connections.room_members(event.room_id)]
            outbox.extend(self._state_update(state, started=True))
            return outbox

    def handle_ask(self, connection_id: str, event: AskCardEvent) -> Outbox:
        state = self.registry.get_room(event.room_id)
        with self.registry.room_lock(event.room_id):
            engine.ask_card(state, connection_id, event.target_id, event.card.to_card())
            self.registry.touch(event.room_id)
            return self._state_update(state)

    def handle_declare(self, connection_id: str, event: DeclareSetEvent) -> Outbox:
        state = self.registry.get_room(event.room_id)
        declaration = [(entry.card.to_card(), entry.player_id) for entry in event.declaration]
        with self.registry.room_lock(event.room_id):
            engine.declare_set(state, connection_id, declaration)
            self.registry.touch(event.room_id)
            return self._state_update(state)

    def handle_pass(self, connection_id: str, event: PassTurnEvent) -> Outbox:
        state = self.registry.get_room(event.room_id)
        with self.registry.room_lock(event.room_id):
            engine.pass_turn(state, connection_id, event.target_id)
            self.registry.touch(event.room_id)
            return self._state_update(state)

    def handle_leave(self, connection_id: str, event: LeaveRoomEvent) -> Outbox:
        state = self.registry.get_room(event.room_id)
        with self.registry.room_lock(event.room_id):
            outcome = self.registry.leave_room(event.room_id, connection_id)
            self.connections.remove_from_room(connection_id, event.room_id)
            if outcome.room_deleted:
                self.connections.drop_room(event.room_id)
                return []

            self.registry.touch(event.room_id)
            outbox = self._roster_update(state)
            if state.status == STATUS_IN_GAME:
                outbox.extend(self._state_update(state))
            return outbox

    async def handle_disconnect(self, connection_id: str):
        """Notify the room; the seat, hand and turn are kept for a rejoin."""
        if connection_id not in self.connections.active_connections:
            return
        self.connections.disconnect(connection_id)
        found = self.registry.find_by_connection(connection_id)
        if not found:
            return

        state, player = found
        status = 'lobby' if state.status == STATUS_LOBBY else 'game'
        logger.info(f"{player.name} disconnected from {status} in room {state.room_id}")
        notice = PlayerDisconnectedEvent(player_id=player.player_id, player_name=player.name)
        await self.deliver([(member, notice) for member in self.connections.room_members(state.room_id)])

    def reap_idle_rooms(self) -> List[str]:
        reaped = self.registry.reap_idle()
        for room_id in reaped:
            self.connections.drop_room(room_id)
        return reaped

    def _roster_update(self, state: GameState) -> Outbox:
        event = create_player_update_event(public_roster(state))
        return [(member, event) for member in self.connections.room_members(state.room_id)]

    def _state_update(self, state: GameState, started: bool = False) -> Outbox:
        """One personal snapshot per seated player, each carrying only that player's hand."""
        return [
            (
                player.connection_id,
                create_snapshot_event(
                    personal_snapshot(state, player.player_id, self.rules.log_limit),
                    started=started
                )
            )
            for player in state.players
        ]


async def reap_idle_rooms_forever(game_manager: GameWebSocketManager, interval: int):
    while True:
        await asyncio.sleep(interval)
        reaped = game_manager.reap_idle_rooms()
        if reaped:
            logger.info(f"Reaped {len(reaped)} idle rooms")


def create_app(
    registry: Optional[RoomRegistry] = None,
    rules: Optional[RuleConfig] = None,
    seed: Optional[int] = None
) -> FastAPI:
    """Build the FastAPI app around an explicitly owned room registry."""
    if registry is None:
        registry = RoomRegistry(rules or default_rules)
    game_manager = GameWebSocketManager(registry, seed=seed)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        reaper = asyncio.create_task(reap_idle_rooms_forever(game_manager, registry.rules.reap_interval))
        try:
            yield
        finally:
            reaper.cancel()

    app = FastAPI(title="Literature Game Engine", version="1.0.0", lifespan=lifespan)
    app.state.game_manager = game_manager

    allowed_origins = os.environ.get("ALLOWED_ORIGINS")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins.split(",") if allowed_origins else ["http://localhost:5173", "http://localhost:5174"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "rooms": len(registry.rooms),
            "connections": len(game_manager.connections.active_connections)
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Main WebSocket endpoint."""
        await game_manager.handle_websocket(websocket)

    return app
