"""Asynchronous TCP connection to the game server."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Optional

from . import constants
from .errors import ConnectionFailure

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class Connection:
    """Owns one TCP socket and exposes it without blocking the game loop.

    A receiver task queues raw chunks as they arrive; the game loop drains at
    most one of them per tick with :meth:`poll`. Writes go straight into the
    transport buffer. A lost connection is not re-established.
    """

    def __init__(
        self,
        host: str,
        port: int,
        read_size: int = constants.READ_BUFFER_SIZE,
        queue_size: int = constants.RECEIVE_QUEUE_SIZE,
    ) -> None:
        self.host = host
        self.port = port
        self.read_size = read_size
        self.state = ConnectionState.DISCONNECTED
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._incoming: asyncio.Queue[bytes] = asyncio.Queue(maxsize=queue_size)
        self._receiver_task: Optional[asyncio.Task[None]] = None
        self._closed = False

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def connect(self) -> None:
        if self._closed:
            raise ConnectionFailure("Connection already closed", ConnectionFailure.CLOSED)
        self.state = ConnectionState.CONNECTING
        try:
            self._reader, self._writer = await asyncio.open_connection(self.host, self.port)
        except OSError as exc:
            self.state = ConnectionState.DISCONNECTED
            logger.error("Could not connect to %s:%s: %s", self.host, self.port, exc)
            raise ConnectionFailure(f"Could not connect to {self.host}:{self.port}") from exc
        if self._closed:
            # Closed while the handshake was in flight.
            self._writer.close()
            raise ConnectionFailure("Connection closed during connect", ConnectionFailure.CLOSED)
        self.state = ConnectionState.CONNECTED
        self._receiver_task = asyncio.create_task(self._receiver_loop(self._reader))
        logger.info("Connected to %s:%s", self.host, self.port)

    async def _receiver_loop(self, reader: asyncio.StreamReader) -> None:
        try:
            while True:
                chunk = await reader.read(self.read_size)
                if not chunk:
                    logger.info("Server closed the connection")
                    break
                # Waits while the queue is full; the socket is not read meanwhile.
                await self._incoming.put(chunk)
        except OSError as exc:
            logger.error("Read from %s:%s failed: %s", self.host, self.port, exc)
        finally:
            if not self._closed:
                self.state = ConnectionState.DISCONNECTED

    @property
    def backlog(self) -> int:
        """Number of received chunks waiting for :meth:`poll`."""

        return self._incoming.qsize()

    def poll(self) -> Optional[bytes]:
        """Return the next received chunk, or ``None`` when nothing is waiting."""

        try:
            return self._incoming.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def send(self, data: bytes) -> None:
        """Queue ``data`` on the socket without waiting for it to drain.

        Raises :class:`ConnectionFailure` when the connection is not usable.
        """

        if not self.connected or self._writer is None:
            raise ConnectionFailure("Not connected", ConnectionFailure.CLOSED)
        if self._writer.is_closing():
            self.state = ConnectionState.DISCONNECTED
            raise ConnectionFailure("Connection is closing", ConnectionFailure.CLOSED)
        try:
            self._writer.write(data)
        except (OSError, RuntimeError) as exc:
            self.state = ConnectionState.DISCONNECTED
            logger.error("Write to %s:%s failed: %s", self.host, self.port, exc)
            raise ConnectionFailure("Write failed") from exc

    def close(self) -> None:
        """Tear the socket down. Safe to call any number of times."""

        if self._closed:
            return
        self._closed = True
        self.state = ConnectionState.CLOSED
        if self._receiver_task is not None:
            self._receiver_task.cancel()
        if self._writer is not None:
            try:
                self._writer.close()
            except RuntimeError:
                # Event loop already shut down; the transport went with it.
                pass
            logger.info("Disconnected from %s:%s", self.host, self.port)

    async def wait_closed(self) -> None:
        self.close()
        if self._receiver_task is not None:
            try:
                await self._receiver_task
            except asyncio.CancelledError:
                pass
        if self._writer is not None:
            try:
                await self._writer.wait_closed()
            except OSError:
                pass
