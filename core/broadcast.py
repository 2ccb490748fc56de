"""
Broadcast port: fan-out of "state" / "preview" / "reveal" events.

Frames sent to observers are JSON objects:

    {"event": "preview", "data": {...}}

Delivery is fire-and-forget. Each observer owns a bounded queue drained by
its own sender task, so `emit` only enqueues and returns; a slow or stalled
socket never holds up the scheduler. When an observer's queue is full the
oldest frame is dropped. Observers that are disconnected at emit time miss
the event; late joiners get the current snapshot through a "state" event
instead of a replay.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from fastapi import WebSocket

logger = logging.getLogger(__name__)

EVENT_STATE = "state"
EVENT_PREVIEW = "preview"
EVENT_REVEAL = "reveal"

DEFAULT_QUEUE_SIZE = 32


class BroadcastPort(ABC):
    """Output side of the scheduler. Implementations must not raise on delivery failures."""

    @abstractmethod
    async def emit(self, event: str, payload: Dict[str, Any]) -> None:
        ...


class _Observer:
    """Per-connection state: a bounded frame queue and the task that drains it."""
    __slots__ = ("ws", "queue", "sender_task")

    def __init__(self, ws: WebSocket, queue_size: int) -> None:
        self.ws = ws
        self.queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue(maxsize=queue_size)
        self.sender_task: Optional[asyncio.Task] = None

    def enqueue(self, frame: Dict[str, Any]) -> None:
        if self.queue.full():
            try:
                self.queue.get_nowait()  # drop oldest
            except asyncio.QueueEmpty:
                pass
        self.queue.put_nowait(frame)

    async def stop(self) -> None:
        if self.sender_task and not self.sender_task.done():
            self.sender_task.cancel()
            try:
                await self.sender_task
            except asyncio.CancelledError:
                pass


class WebSocketBroadcaster(BroadcastPort):
    """
    Observer registry over FastAPI WebSockets.

    A socket whose send fails is dropped from the registry; the failure is
    logged and never reaches the caller.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._observers: Dict[WebSocket, _Observer] = {}

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        observer = _Observer(websocket, self._queue_size)
        observer.sender_task = asyncio.create_task(self._sender_loop(observer), name="ws-observer-sender")
        self._observers[websocket] = observer
        logger.info(f"Observer connected ({self.observer_count} total)")

    async def disconnect(self, websocket: WebSocket) -> None:
        observer = self._observers.pop(websocket, None)
        if observer is not None:
            await observer.stop()
            logger.info(f"Observer disconnected ({self.observer_count} total)")

    async def close(self) -> None:
        for websocket in list(self._observers):
            await self.disconnect(websocket)

    async def send_to(self, websocket: WebSocket, event: str, payload: Dict[str, Any]) -> None:
        """Queue a frame for a single observer (e.g. the "state" snapshot on connect)."""
        observer = self._observers.get(websocket)
        if observer is not None:
            observer.enqueue({"event": event, "data": payload})

    async def emit(self, event: str, payload: Dict[str, Any]) -> None:
        if not self._observers:
            logger.debug(f"No observers for {event}")
            return

        frame = {"event": event, "data": payload}
        for observer in list(self._observers.values()):
            observer.enqueue(frame)

    async def _sender_loop(self, observer: _Observer) -> None:
        try:
            while True:
                frame = await observer.queue.get()
                await observer.ws.send_json(frame)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Dropping observer after failed send: {e}")
            if self._observers.get(observer.ws) is observer:
                del self._observers[observer.ws]
