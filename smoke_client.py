#!/usr/bin/env python3
"""
Live smoke test: two players create, join and start a game against a running server.
"""

import asyncio
import json
import sys
import uuid

import websockets


async def recv_until(websocket, event_type):
    """Read messages until one of the given type arrives."""
    while True:
        message = json.loads(await websocket.recv())
        print(f"  <- {message['type']}")
        if message["type"] == "error":
            raise RuntimeError(message["message"])
        if message["type"] == event_type:
            return message


async def smoke(uri: str) -> bool:
    print(f"Connecting to {uri}...")
    try:
        async with websockets.connect(uri) as owner, websockets.connect(uri) as guest:
            owner_id = str(uuid.uuid4())
            await owner.send(json.dumps({
                "type": "create_game",
                "playerName": "Owner",
                "playerId": owner_id
            }))
            created = await recv_until(owner, "game_created")
            room_id = created["roomId"]
            print(f"Created room {room_id}")

            await guest.send(json.dumps({
                "type": "join_game",
                "roomCode": room_id,
                "playerName": "Guest",
                "playerId": str(uuid.uuid4())
            }))
            await recv_until(guest, "joined_game")
            print("Guest joined")

            await owner.send(json.dumps({"type": "start_game", "roomId": room_id, "playerId": owner_id}))
            for websocket, name in ((owner, "Owner"), (guest, "Guest")):
                snapshot = await recv_until(websocket, "game_started_personal")
                print(f"{name} holds {len(snapshot['hand'])} cards, team {snapshot['myTeam']}")

            print("Smoke test completed successfully!")
            return True

    except Exception as e:
        print(f"Smoke test failed: {e}")
        return False


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "ws://localhost:3000/ws"
    sys.exit(0 if asyncio.run(smoke(target)) else 1)
