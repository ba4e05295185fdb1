"""
Session wiring and headless entry point for dockdesk.

This module assembles the pieces a UI works with:
  - DaemonClient (backend.py), or None when the daemon is unreachable
  - ResourceStore (state.py) that the UI reads and subscribes to
  - RefreshOrchestrator (refresh.py) and MutationController (actions.py)
  - TaskRunner (tasks.py) on which every refresh and mutation is spawned

Session is the store-to-UI boundary: besides the store itself it exposes
refresh_all, refresh_containers, refresh_images, refresh_volumes,
set_container_state and record_action. A missing daemon never raises; each of
those calls reports "Docker service not available" through the store instead.

main() runs one full refresh to completion and prints the inventory, which is
handy for checking connectivity without a UI.
"""

import sys
import asyncio
import logging
from typing import Optional

from . import configure_logging
from .actions import MutationController
from .backend import DaemonClient, DaemonConnectionError, resolve_daemon_host
from .config import config_manager
from .model import ContainerRecord, RuntimeState
from .refresh import RefreshOrchestrator
from .state import ResourceStore
from .stats import summarize, format_summary
from .tasks import TaskRunner

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, store: ResourceStore, client: Optional[DaemonClient],
                 runner: Optional[TaskRunner] = None):
        self.store = store
        self.client = client
        self.runner = runner or TaskRunner()
        if self.runner.on_error is None:
            # Work that cannot be scheduled surfaces like any other failure
            self.runner.on_error = store.set_error
        self.refresher = RefreshOrchestrator(store, client, self.runner)
        self.mutations = MutationController(store, client, self.runner, self.refresher)

    @property
    def connected(self) -> bool:
        return self.client is not None

    def refresh_all(self) -> None:
        self.refresher.refresh_all()

    def refresh_containers(self):
        return self.refresher.refresh_containers()

    def refresh_images(self):
        return self.refresher.refresh_images()

    def refresh_volumes(self):
        return self.refresher.refresh_volumes()

    def set_container_state(self, container_id: str, target: RuntimeState):
        return self.mutations.set_container_state(container_id, target)

    def toggle_container(self, container: ContainerRecord):
        return self.mutations.toggle_container(container)

    def record_action(self, message: str) -> None:
        self.mutations.record_action(message)

    def close(self) -> None:
        if self.client:
            self.client.close()


def create_session(host: Optional[str] = None, runner: Optional[TaskRunner] = None,
                   loop: Optional[asyncio.AbstractEventLoop] = None) -> Session:
    """
    Connect to the daemon (if possible) and build a session around a fresh store.

    Pass the UI's event loop as ``loop`` when entry points will be called from
    outside a coroutine (e.g. from a toolkit callback); tasks are then scheduled
    on that loop.
    """
    if runner is None and loop is not None:
        runner = TaskRunner(loop)
    daemon_host = resolve_daemon_host(host)
    try:
        client = DaemonClient.connect(daemon_host)
    except DaemonConnectionError as e:
        logger.error(f"Docker service not available: {e}")
        client = None
    return Session(ResourceStore(daemon_host=daemon_host), client, runner)


def print_inventory(session: Session) -> None:
    snapshot = session.store.get_snapshot()
    print(f"Docker host: {snapshot.daemon_host}")
    print()
    print(f"{'CONTAINER ID':12} {'NAME':20} {'STATE':8} {'PORTS':20} IMAGE")
    for c in snapshot.containers:
        print(f"{c.id:12} {c.name[:20]:20} {c.runtime_state.label:8} {c.port_mappings[:20]:20} {c.image}")
    print()
    print(f"{'REPOSITORY':30} {'TAG':15} {'SIZE':>8}")
    for i in snapshot.images:
        print(f"{i.repository[:30]:30} {i.tag[:15]:15} {i.size_label:>8}")
    print()
    print(f"{'VOLUME':30} {'DRIVER':10} MOUNTPOINT")
    for v in snapshot.volumes:
        print(f"{v.name[:30]:30} {v.driver[:10]:10} {v.mountpoint}")
    print()
    for line in format_summary(summarize(snapshot)):
        print(line)
    if snapshot.error_message:
        print(f"Error: {snapshot.error_message}", file=sys.stderr)


def main() -> int:
    configure_logging(
        level=config_manager.get_log_level(),
        file_path=config_manager.get_custom_log_path(),
        max_size_mb=config_manager.get_config().logging.max_size_mb,
        backup_count=config_manager.get_config().logging.backup_count,
    )
    logger.info("Main started")

    session = create_session(config_manager.get_daemon_host())
    try:
        if config_manager.should_refresh_on_start():
            session.runner.run_to_completion(session.refresh_all)
        print_inventory(session)
    finally:
        session.close()

    return 1 if session.store.error_message else 0
