"""
WebSocket network client for Coin Race.
Runs the connection on its own thread and event loop so the pygame
loop never blocks on the network.
"""

import asyncio
import threading
from typing import Optional, List
from queue import Queue, Empty

import websockets

from shared.constants import SERVER_HOST, SERVER_PORT
from shared.protocol import (
    Message, ProtocolError,
    create_new_player_message, create_player_input_message
)


class NetworkClient:
    """
    Handles WebSocket communication with the game server.
    Messages cross between threads through the two queues.
    """

    def __init__(self, host: str = SERVER_HOST, port: int = SERVER_PORT):
        self.uri = f"ws://{host}:{port}"
        self.websocket = None
        self.connected = False

        # Message queues for thread-safe communication
        self.incoming_messages: Queue = Queue()
        self.outgoing_messages: Queue = Queue()

        # Threading
        self.network_thread: Optional[threading.Thread] = None
        self.running = False

    def connect(self):
        """Start the connection in a background thread."""
        self.running = True
        self.network_thread = threading.Thread(
            target=self._run_network_loop,
            daemon=True
        )
        self.network_thread.start()

    def _run_network_loop(self):
        """Run the asyncio event loop for networking."""
        try:
            asyncio.run(self._connect_and_run())
        except Exception as e:
            print(f"[NETWORK] Error in network loop: {e}")

    async def _connect_and_run(self):
        """Connect to server, ask to join, then pump messages both ways."""
        print(f"[NETWORK] Connecting to {self.uri}...")

        try:
            async with websockets.connect(self.uri) as websocket:
                self.websocket = websocket
                self.connected = True
                print("[NETWORK] Connected!")

                await websocket.send(create_new_player_message().to_json())
                print("[NETWORK] Sent new-player")

                await asyncio.gather(
                    self._receive_loop(),
                    self._send_loop()
                )
        except websockets.exceptions.ConnectionClosed as e:
            print(f"[NETWORK] Connection closed: {e}")
        except OSError as e:
            print(f"[NETWORK] Connection error: {e}")
        finally:
            self.connected = False

    async def _receive_loop(self):
        """Parse server messages and hand them to the game thread."""
        try:
            async for raw_message in self.websocket:
                try:
                    self.incoming_messages.put(Message.from_json(raw_message))
                except ProtocolError as e:
                    print(f"[NETWORK] Error parsing message: {e}")
        except websockets.exceptions.ConnectionClosed:
            print("[NETWORK] Connection closed by server")
        finally:
            self.connected = False

    async def _send_loop(self):
        """Forward outgoing messages queued by the game thread."""
        while self.running and self.connected:
            try:
                message = self.outgoing_messages.get_nowait()
            except Empty:
                await asyncio.sleep(0.005)
                continue

            try:
                await self.websocket.send(message.to_json())
            except websockets.exceptions.ConnectionClosed:
                self.connected = False
                return

        # Leaving the loop on shutdown closes the socket, which the
        # server treats as a leave
        await self.websocket.close()

    def send_input(self, dx: float, dy: float):
        """Queue an input message to be sent to the server."""
        if not self.connected:
            return
        self.outgoing_messages.put(create_player_input_message(dx, dy))

    def get_messages(self) -> List[Message]:
        """Get all pending incoming messages (non-blocking)."""
        messages = []
        while True:
            try:
                messages.append(self.incoming_messages.get_nowait())
            except Empty:
                break
        return messages

    def disconnect(self):
        """Disconnect from the server."""
        self.running = False

        if self.network_thread and self.network_thread.is_alive():
            self.network_thread.join(timeout=1.0)
