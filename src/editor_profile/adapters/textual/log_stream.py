"""TCP broadcast of playground log lines (tail it with ``nc``)."""

from __future__ import annotations

import asyncio
from collections import deque
from contextlib import suppress
from datetime import datetime
from typing import Deque, Optional, Set


class NetworkLogStreamer:
    """Replays recent lines to new clients, then streams new ones."""

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 8765,
        *,
        history: int = 200,
        queue_size: int = 1024,
    ) -> None:
        self.host = host
        self.port = port
        self.dropped = 0
        self._history: Deque[str] = deque(maxlen=history)
        self._queue_size = queue_size
        self._queue: Optional[asyncio.Queue[str]] = None
        self._server: Optional[asyncio.AbstractServer] = None
        self._pump_task: Optional[asyncio.Task[None]] = None
        self._clients: Set[asyncio.StreamWriter] = set()

    @property
    def running(self) -> bool:
        return self._server is not None

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def history(self) -> list[str]:
        return list(self._history)

    async def __aenter__(self) -> "NetworkLogStreamer":
        await self.start()
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.stop()

    async def start(self) -> None:
        if self._server is not None:
            return
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._server = await asyncio.start_server(self._serve, self.host, self.port)
        for sock in self._server.sockets or []:
            self.port = sock.getsockname()[1]
            break
        self._pump_task = asyncio.create_task(self._pump(self._queue))

    async def stop(self) -> None:
        task, self._pump_task = self._pump_task, None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        server, self._server = self._server, None
        if server is not None:
            server.close()
            await server.wait_closed()
        for writer in list(self._clients):
            await self._drop(writer)
        self._queue = None

    def log(self, line: str) -> None:
        """Record ``line``; it is broadcast once the server is running."""

        stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        entry = f"{stamp} | {line}\n"
        self._history.append(entry)
        if self._queue is None:
            return
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self.dropped += 1

    async def _pump(self, queue: "asyncio.Queue[str]") -> None:
        while True:
            entry = (await queue.get()).encode("utf-8")
            for writer in list(self._clients):
                try:
                    writer.write(entry)
                    await writer.drain()
                except (ConnectionError, OSError):
                    await self._drop(writer)

    async def _serve(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._clients.add(writer)
        try:
            writer.write("".join(self._history).encode("utf-8"))
            await writer.drain()
            while await reader.read(1024):
                pass
        finally:
            await self._drop(writer)

    async def _drop(self, writer: asyncio.StreamWriter) -> None:
        self._clients.discard(writer)
        writer.close()
        with suppress(ConnectionError, OSError):
            await writer.wait_closed()


__all__ = ["NetworkLogStreamer"]
