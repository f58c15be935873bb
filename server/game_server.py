"""
Authoritative game server for Coin Race.
Manages connections, the fixed-rate tick loop and state broadcast.
"""

import asyncio
import time
from typing import Dict

import websockets
from websockets.asyncio.server import ServerConnection

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shared.constants import SERVER_HOST, SERVER_PORT, SERVER_TICK_RATE
from shared.protocol import (
    Message, MessageType, ProtocolError, parse_player_input,
    create_new_player_response_message, create_game_state_message
)
from server.game_world import GameWorld


class GameServer:
    """
    Main game server class.
    Relays client events into the world and broadcasts its state every tick.
    """

    def __init__(self, world: GameWorld, host: str = SERVER_HOST,
                 port: int = SERVER_PORT, tick_rate: int = SERVER_TICK_RATE):
        self.world = world
        self.host = host
        self.port = port
        self.tick_rate = tick_rate
        self.clients: Dict[str, ServerConnection] = {}  # connection id -> websocket

    async def send_to_client(self, websocket: ServerConnection, message: Message):
        """Send a message to one client. Closed sockets are cleaned up by their handler."""
        try:
            await websocket.send(message.to_json())
        except websockets.exceptions.ConnectionClosed:
            pass

    def broadcast(self, message: Message):
        """Send a message to every connected client without waiting on any of them.
        A client that stops reading can't hold up the tick loop."""
        websockets.broadcast(list(self.clients.values()), message.to_json())

    async def _process_message(self, websocket: ServerConnection, player_id: str,
                               raw_message):
        """Validate one raw client message and hand it to the world."""
        try:
            message = Message.from_json(raw_message)
        except ProtocolError as e:
            print(f"[SERVER] Invalid message from {player_id}: {e}")
            return

        if message.type == MessageType.NEW_PLAYER:
            await self.handle_join(websocket, player_id)

        elif message.type == MessageType.PLAYER_INPUT:
            direction = parse_player_input(message.data)
            if direction is None:
                print(f"[SERVER] player-input invalid data from {player_id}, fields: {list(message.data)[:5]}")
                return
            self.world.set_input(player_id, *direction)

        else:
            print(f"[SERVER] Unexpected {message.type.value} from {player_id}, dropped")

    async def handle_join(self, websocket: ServerConnection, player_id: str):
        """Register a join and tell the client who it is."""
        self.world.enqueue_join(player_id)
        print(f"[SERVER] Player {player_id} joining. Players in world: {self.world.player_count}")

        bounds = self.world.bounds
        await self.send_to_client(
            websocket,
            create_new_player_response_message(bounds.width, bounds.height, player_id)
        )

    def handle_disconnect(self, player_id: str):
        """Handle a player disconnecting."""
        self.clients.pop(player_id, None)
        self.world.enqueue_leave(player_id)
        print(f"[SERVER] Player {player_id} disconnected. Connections left: {len(self.clients)}")

    async def step(self):
        """One tick: advance the world, then broadcast the result."""
        pickup = self.world.tick()

        if pickup is not None:
            print(f"[SERVER] Player {pickup.player_id} collected coin {pickup.collectible_id} "
                  f"(+{pickup.value})! Score: {pickup.new_score}")

        self.broadcast(create_game_state_message(self.world.snapshot()))

    async def game_loop(self):
        """Main game loop - ticks at a fixed rate, forever."""
        tick_interval = 1.0 / self.tick_rate

        while True:
            started = time.monotonic()

            await self.step()

            # Sleep for whatever is left of this tick
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0, tick_interval - elapsed))

    async def handle_connection(self, websocket: ServerConnection):
        """Handle a new WebSocket connection. Its id doubles as the player id."""
        player_id = str(websocket.id)
        self.clients[player_id] = websocket
        print(f"[SERVER] New connection {player_id} from {websocket.remote_address}")

        try:
            async for raw_message in websocket:
                await self._process_message(websocket, player_id, raw_message)
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            self.handle_disconnect(player_id)

    async def start(self):
        """Start the game server and run until cancelled."""
        print(f"[SERVER] Starting on ws://{self.host}:{self.port}")

        loop_task = asyncio.create_task(self.game_loop())
        try:
            async with websockets.serve(self.handle_connection, self.host, self.port):
                print("[SERVER] Listening for connections...")
                await asyncio.Future()  # Run forever
        finally:
            loop_task.cancel()


async def main():
    """Entry point for the server."""
    world = GameWorld()
    server = GameServer(world)
    await server.start()


def run():
    print("=" * 50)
    print("  COIN RACE - Authoritative Game Server")
    print("=" * 50)
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("[SERVER] Shutting down")


if __name__ == "__main__":
    run()
