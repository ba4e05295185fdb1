"""
Fire-and-forget task execution on the asyncio event loop.

Refreshes and mutations are spawned as independent tasks: nothing awaits them,
nothing cancels them, and each one writes its own result into the store when it
finishes. TaskRunner keeps references to in-flight tasks (so they are not
garbage collected mid-flight) and offers a run-to-completion mode that awaits
every task, including tasks spawned by other tasks while draining.
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional, Set

logger = logging.getLogger(__name__)


class TaskRunner:
    """Explicit executor for background store updates."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None,
                 on_error: Optional[Callable[[str], None]] = None):
        self._loop = loop
        self._tasks: Set[asyncio.Task] = set()
        self.on_error = on_error

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> Optional[asyncio.Task]:
        """
        Schedule ``coro`` on the bound loop, or on the running loop when unbound.

        With neither available the coroutine is closed unrun, the problem is
        logged and passed to ``on_error``, and None is returned.
        """
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                coro.close()
                message = f"Cannot run {name or 'task'}: no running event loop"
                logger.error(message)
                if self.on_error:
                    self.on_error(message)
                return None
        task = loop.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # Tasks report their own failures to the store; anything reaching here is a bug
            logger.error(f"Background task {task.get_name()} failed: {exc}", exc_info=exc)

    async def drain(self) -> None:
        """Wait until no task is in flight, following tasks spawned while waiting."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def run_to_completion(self, action: Callable[[], Any]) -> None:
        """
        Run ``action`` on a fresh event loop and block until every task it spawned
        (directly or indirectly) has finished.

        Used by tests and the headless entry point.
        """
        if self._loop is not None:
            raise RuntimeError("run_to_completion needs a runner that is not bound to a loop")

        async def _run() -> None:
            action()
            await self.drain()

        asyncio.run(_run())
