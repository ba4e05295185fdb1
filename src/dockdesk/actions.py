"""
Container start/stop handling.

A successful mutation records a last_action message, clears the current error
and triggers a full container refresh; the store keeps showing the old state
until that refresh resolves. A failed mutation only sets error_message.

Requests are passed straight to the daemon: starting a running container or
stopping a stopped one is not short-circuited here, and whatever the daemon
answers is surfaced as-is.
"""

import asyncio
import logging
from typing import Optional
from .backend import DaemonClient, MutationError
from .model import ContainerRecord, RuntimeState
from .refresh import RefreshOrchestrator, SERVICE_UNAVAILABLE
from .state import ResourceStore
from .tasks import TaskRunner

logger = logging.getLogger(__name__)


class MutationController:
    def __init__(self, store: ResourceStore, client: Optional[DaemonClient],
                 runner: TaskRunner, refresher: RefreshOrchestrator):
        self.store = store
        self.client = client
        self.runner = runner
        self.refresher = refresher

    def set_container_state(self, container_id: str, target: RuntimeState) -> Optional[asyncio.Task]:
        if target is RuntimeState.RUNNING:
            return self.start_container(container_id)
        return self.stop_container(container_id)

    def toggle_container(self, container: ContainerRecord) -> Optional[asyncio.Task]:
        """Move a container to the opposite of its cached state."""
        return self.set_container_state(container.id, container.runtime_state.toggled())

    def start_container(self, container_id: str) -> Optional[asyncio.Task]:
        if not self.client:
            self.store.set_error(SERVICE_UNAVAILABLE)
            return None
        return self.runner.spawn(
            self._mutate(self.client.start_container, container_id, "start", "Started"),
            name=f"start-{container_id}",
        )

    def stop_container(self, container_id: str) -> Optional[asyncio.Task]:
        if not self.client:
            self.store.set_error(SERVICE_UNAVAILABLE)
            return None
        return self.runner.spawn(
            self._mutate(self.client.stop_container, container_id, "stop", "Stopped"),
            name=f"stop-{container_id}",
        )

    async def _mutate(self, call, container_id: str, verb: str, past: str) -> None:
        try:
            await asyncio.to_thread(call, container_id)
        except MutationError as e:
            self.store.set_error(f"Failed to {verb} container: {e}")
            return
        logger.info(f"{past} container {container_id}")
        self.store.record_action(f"{past} container {container_id}")
        self.store.clear_error()
        self.refresher.refresh_containers()

    def record_action(self, message: str) -> None:
        self.store.record_action(message)
