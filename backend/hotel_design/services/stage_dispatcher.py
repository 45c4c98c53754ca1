"""
Message passing between pipeline stages.

A stage never calls the next one directly; it dispatches a PipelineEvent
and whichever handler is registered for that event type runs it. The
sender does not wait for, or learn about, the handler's outcome.

- InlineDispatcher runs the handler before dispatch() returns.
- QueueDispatcher puts the event on an asyncio.Queue drained by a single
  background worker, in arrival order.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict, Optional

from hotel_design.core.events import EventType, PipelineEvent

logger = logging.getLogger(__name__)

Handler = Callable[[PipelineEvent], Awaitable[None]]


class StageDispatcher(ABC):
    """Routes pipeline events to the stage registered for their type."""

    def __init__(self):
        self._handlers: Dict[EventType, Handler] = {}

    def register(self, event_type: EventType, handler: Handler) -> None:
        self._handlers[event_type] = handler

    @abstractmethod
    async def dispatch(self, event: PipelineEvent) -> None:
        """Hand the event to the next stage."""
        pass

    async def _run(self, event: PipelineEvent) -> None:
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.warning("No handler registered for %s event %s", event.type.value, event.id)
            return

        try:
            await handler(event)
        except Exception:
            # The sender has already been acknowledged; the project keeps its
            # last persisted status until the stage is triggered again.
            logger.exception(
                "Stage for %s failed (project=%s, event=%s)",
                event.type.value, event.project_id, event.id,
            )


class InlineDispatcher(StageDispatcher):
    """Runs the next stage within the current invocation."""

    async def dispatch(self, event):
        logger.debug("Dispatching %s inline for project %s", event.type.value, event.project_id)
        await self._run(event)


class QueueDispatcher(StageDispatcher):
    """
    Runs stages from a FIFO queue on a background worker task.

    The queue is created by start() so it belongs to the loop the worker
    runs on. stop() lets the stage in progress finish, then drops whatever
    is still queued.
    """

    def __init__(self, maxsize: int = 0):
        super().__init__()
        self._maxsize = maxsize
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._current: Optional[asyncio.Task] = None
        self._stopping = False

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def dispatch(self, event):
        if self._queue is None or self._stopping:
            logger.warning(
                "Pipeline worker not accepting events; dropped %s for project %s",
                event.type.value, event.project_id,
            )
            return

        logger.debug("Queueing %s for project %s", event.type.value, event.project_id)
        await self._queue.put(event)

    async def start(self):
        if self.is_running:
            return

        self._queue = asyncio.Queue(maxsize=self._maxsize)
        self._stopping = False
        self._worker = asyncio.create_task(self._work())
        logger.info("Pipeline worker started")

    async def stop(self) -> int:
        """Stop the worker once the running stage completes; returns the number of events dropped."""
        if not self.is_running:
            return 0

        self._stopping = True
        if self._current is not None:
            await asyncio.wait({self._current})

        abandoned = self._queue.qsize()
        if abandoned:
            logger.warning("Abandoning %d queued pipeline events", abandoned)

        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass

        self._worker = None
        self._queue = None
        logger.info("Pipeline worker stopped")
        return abandoned

    async def join(self):
        """Wait until every queued event, including follow-ups, has run."""
        if self._queue is not None:
            await self._queue.join()

    async def _work(self):
        while not self._stopping:
            event = await self._queue.get()
            try:
                if self._stopping:
                    break
                self._current = asyncio.create_task(self._run(event))
                await self._current
            finally:
                self._current = None
                self._queue.task_done()
