"""
Refresh orchestration.

Each resource kind (containers, images, volumes) refreshes independently:

    Idle -> Fetching -> Success: replace the cached list, clear error_message
                     -> Failure: keep the cached list, set error_message

refresh_all() spawns the three refreshes without waiting for any of them, so
their completions land in any order; when several kinds fail together the last
failure to resolve is the error the UI shows.

Only the container refresh drives is_loading. Image and volume refreshes run
without a loading indicator.

Blocking docker-py calls are moved off the event loop with asyncio.to_thread;
all store writes happen back on the loop once the call resolves.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional
from .backend import DaemonClient, DaemonError
from .state import ResourceStore
from .tasks import TaskRunner

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE = "Docker service not available"


class RefreshOrchestrator:
    def __init__(self, store: ResourceStore, client: Optional[DaemonClient], runner: TaskRunner):
        self.store = store
        self.client = client
        self.runner = runner

    def refresh_all(self) -> None:
        self.refresh_containers()
        self.refresh_images()
        self.refresh_volumes()

    def refresh_containers(self) -> Optional[asyncio.Task]:
        if not self.client:
            self.store.set_error(SERVICE_UNAVAILABLE)
            return None
        return self.runner.spawn(self._refresh_containers(), name="refresh-containers")

    def refresh_images(self) -> Optional[asyncio.Task]:
        if not self.client:
            self.store.set_error(SERVICE_UNAVAILABLE)
            return None
        return self.runner.spawn(
            self._refresh(self.client.list_images, self.store.set_images, "images"),
            name="refresh-images",
        )

    def refresh_volumes(self) -> Optional[asyncio.Task]:
        if not self.client:
            self.store.set_error(SERVICE_UNAVAILABLE)
            return None
        return self.runner.spawn(
            self._refresh(self.client.list_volumes, self.store.set_volumes, "volumes"),
            name="refresh-volumes",
        )

    async def _refresh_containers(self) -> None:
        self.store.set_loading(True)
        try:
            await self._refresh(self.client.list_containers, self.store.set_containers, "containers")
        finally:
            self.store.set_loading(False)

    async def _refresh(self, fetch: Callable[[], List[Any]], apply: Callable[[List[Any]], None], kind: str) -> None:
        try:
            records = await asyncio.to_thread(fetch)
        except DaemonError as e:
            self.store.set_error(f"Failed to list {kind}: {e}")
            return
        logger.debug(f"Fetched {len(records)} {kind}")
        apply(records)
        self.store.clear_error()
