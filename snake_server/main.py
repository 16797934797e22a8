"""Entry point for the asyncio based game server."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
from datetime import datetime, timezone
from http import HTTPStatus
import json
import logging
import os
import signal
import time
from typing import Dict, Hashable, Iterable, Optional, Sequence

import websockets
from websockets.asyncio.server import ServerConnection, serve
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from . import constants, protocol
from .session import OutboundEvent, SessionRegistry
from .world import TickSummary, World


class GameServer:
    """High level orchestration of the world simulation and websocket IO."""

    def __init__(
        self,
        host: str = constants.DEFAULT_HOST,
        port: int = constants.DEFAULT_PORT,
        tick_interval: float = constants.TICK_INTERVAL,
        world: Optional[World] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.tick_interval = tick_interval
        self.world = world or World()
        self.sessions = SessionRegistry(self.world)
        self.clients: Dict[Hashable, ServerConnection] = {}
        self.started_at = time.monotonic()
        self._stop_event: Optional[asyncio.Event] = None
        self._game_loop: Optional[asyncio.Task[None]] = None

    async def start(self) -> None:
        """Serve websocket clients and run the game loop until stopped."""

        self._stop_event = asyncio.Event()
        self._install_signal_handlers()
        async with serve(
            self._handle_client,
            self.host,
            self.port,
            process_request=self._process_request,
            ping_interval=constants.HEARTBEAT_INTERVAL,
            ping_timeout=constants.HEARTBEAT_INTERVAL,
        ):
            logging.info("Server listening on %s:%s", self.host, self.port)
            logging.info("Game loop running every %.0f ms", self.tick_interval * 1000)
            self._game_loop = asyncio.create_task(self._run_game_loop())
            await self._stop_event.wait()
            logging.info("Shutting down server")
            self._game_loop.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._game_loop
            await self._broadcast(protocol.encode_message("serverShutdown"))
        logging.info("Server closed")

    @property
    def stopping(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
            except NotImplementedError:  # pragma: no cover - Windows event loops
                logging.debug("Signal handlers are not supported on this platform")

    async def _run_game_loop(self) -> None:
        while True:
            await self.run_tick()
            await asyncio.sleep(self.tick_interval)

    async def run_tick(self) -> Optional[TickSummary]:
        """Advance the world once and broadcast the state if it changed."""

        try:
            summary = self.world.update()
        except Exception:
            logging.exception("Tick %s failed; skipping", self.world.tick)
            return None
        if summary.changed and self.clients:
            await self._broadcast(
                protocol.encode_message("gameState", {"gameState": self.world.snapshot()})
            )
        return summary

    async def _broadcast(self, message: str) -> None:
        disconnected = []
        for conn_id, ws in list(self.clients.items()):
            try:
                await ws.send(message)
            except websockets.ConnectionClosed:
                logging.info("Client %s closed before it could be sent to", conn_id)
                disconnected.append(conn_id)
            except Exception:
                logging.exception("Failed to send to client %s", conn_id)
                disconnected.append(conn_id)
        for conn_id in disconnected:
            ws = self.clients.pop(conn_id, None)
            if ws is not None:
                await ws.close()

    async def _deliver(self, websocket: ServerConnection, events: Iterable[OutboundEvent]) -> None:
        for event in events:
            message = protocol.encode_message(event.type, event.payload)
            if event.broadcast:
                await self._broadcast(message)
            else:
                await websocket.send(message)

    async def _handle_client(self, websocket: ServerConnection) -> None:
        conn_id = websocket.id
        self.clients[conn_id] = websocket
        logging.info("Client %s connected (%d total)", conn_id, len(self.clients))
        try:
            async for message in websocket:
                try:
                    command = protocol.parse_client_message(message)
                except ValueError as exc:
                    logging.warning("Ignoring message from %s: %s", conn_id, exc)
                    continue
                await self._deliver(websocket, self.sessions.dispatch(conn_id, command))
        except websockets.ConnectionClosed:
            logging.info("Client %s connection lost", conn_id)
        finally:
            self.clients.pop(conn_id, None)
            events = self.sessions.leave(conn_id)
            # Peers are closing too during shutdown; the count is moot.
            if not self.stopping:
                await self._deliver(websocket, events)
            logging.info("Client %s disconnected (%d remaining)", conn_id, len(self.clients))

    def health(self) -> dict:
        return {
            "status": "healthy",
            **self.world.stats(),
            "uptime": int(time.monotonic() - self.started_at),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def _process_request(self, connection: ServerConnection, request: Request) -> Optional[Response]:
        if request.path == "/health":
            health = self.health()
            logging.debug("Health check: %s", health)
            body = json.dumps(health, indent=2).encode()
            headers = Headers(
                [
                    ("Content-Type", "application/json"),
                    ("Content-Length", str(len(body))),
                    ("Connection", "close"),
                ]
            )
            return Response(HTTPStatus.OK, "OK", headers, body)
        if request.headers.get("Upgrade", "").lower() != "websocket":
            return connection.respond(HTTPStatus.NOT_FOUND, "Snake Game WebSocket Server")
        return None


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the multiplayer snake server")
    parser.add_argument("--host", default=constants.DEFAULT_HOST, help="Host interface to bind to")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", constants.DEFAULT_PORT)),
        help="Port to listen on (defaults to $PORT)",
    )
    parser.add_argument(
        "--tick-interval",
        type=float,
        default=constants.TICK_INTERVAL,
        help="Seconds between simulation ticks",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(message)s")
    server = GameServer(args.host, args.port, args.tick_interval)
    asyncio.run(server.start())


if __name__ == "__main__":
    main()
