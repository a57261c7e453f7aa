# docsync/sync/bus.py
"""
Notification surface for processing results and engine errors.

Consumers either register callbacks (subscribe / on_error) or open a channel
and pull messages from a queue. The engine never depends on who is listening.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Union

from docsync.logging.logger import get_logger
from docsync.logging.tags import SYNC

from .models import ProcessingResult

logger = get_logger(__name__)

ResultCallback = Callable[[ProcessingResult], None]
ErrorCallback = Callable[[Exception], None]


@dataclass(frozen=True)
class BusMessage:
    """What a channel delivers: topic is "result" or "error"."""

    topic: str
    payload: Union[ProcessingResult, Exception]


class EventBus:
    """
    Fan-out of ProcessingResult and error events.

    A misbehaving subscriber is logged and never breaks delivery to the
    others or the processing that emitted the event.
    """

    RESULT = "result"
    ERROR = "error"

    def __init__(self) -> None:
        self._result_callbacks: List[ResultCallback] = []
        self._error_callbacks: List[ErrorCallback] = []
        self._channels: List["queue.Queue[BusMessage]"] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: ResultCallback) -> Callable[[], None]:
        """Register a result callback. Returns a function that unsubscribes."""
        with self._lock:
            self._result_callbacks.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._result_callbacks:
                    self._result_callbacks.remove(callback)

        return unsubscribe

    def on_error(self, callback: ErrorCallback) -> Callable[[], None]:
        """Register an error callback. Returns a function that unsubscribes."""
        with self._lock:
            self._error_callbacks.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._error_callbacks:
                    self._error_callbacks.remove(callback)

        return unsubscribe

    def channel(self, maxsize: int = 0) -> "queue.Queue[BusMessage]":
        """Open a queue receiving every result and error from now on."""
        q: "queue.Queue[BusMessage]" = queue.Queue(maxsize=maxsize)
        with self._lock:
            self._channels.append(q)
        return q

    def close_channel(self, q: "queue.Queue[BusMessage]") -> None:
        with self._lock:
            if q in self._channels:
                self._channels.remove(q)

    def publish_result(self, result: ProcessingResult) -> None:
        with self._lock:
            callbacks = list(self._result_callbacks)
            channels = list(self._channels)
        for callback in callbacks:
            try:
                callback(result)
            except Exception as e:
                logger.warning(f"{SYNC} Result subscriber failed: {e}")
        self._fan_out(channels, BusMessage(self.RESULT, result))

    def publish_error(self, error: Exception) -> None:
        with self._lock:
            callbacks = list(self._error_callbacks)
            channels = list(self._channels)
        for callback in callbacks:
            try:
                callback(error)
            except Exception as e:
                logger.warning(f"{SYNC} Error subscriber failed: {e}")
        self._fan_out(channels, BusMessage(self.ERROR, error))

    @staticmethod
    def _fan_out(channels: List["queue.Queue[BusMessage]"], message: BusMessage) -> None:
        for q in channels:
            try:
                q.put_nowait(message)
            except queue.Full:
                logger.warning(f"{SYNC} Channel full, dropping {message.topic} message")


__all__ = ["BusMessage", "EventBus", "ResultCallback", "ErrorCallback"]
