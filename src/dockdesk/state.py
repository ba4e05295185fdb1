"""
Observable resource store.

This module holds the cached Docker inventory and the feedback fields the UI
renders. It is written to only by the refresh orchestrator (refresh.py) and the
mutation controller (actions.py); the UI reads snapshots and subscribes to
field changes.

Architecture:
  - ResourceStore: lock-protected fields plus a subscriber list
  - Every write bumps a version counter and notifies subscribers of that field
  - Subscribers are called outside the lock, in registration order

Fields:
  - daemon_host: endpoint the session connected to (fixed at construction)
  - containers / images / volumes: lists in daemon order
  - last_action: message of the most recent successful user action
  - error_message: the one current error, overwritten by the latest failure
  - is_loading: true while a container refresh is in flight

Consistency:
  - Each field write is atomic; writes are not transactional across fields.
    A reader may observe a new error next to an old list.
"""

import threading
import logging
from typing import Any, Callable, Iterable, List, Optional, Tuple
from .model import ContainerRecord, ImageRecord, VolumeRecord, StoreSnapshot

logger = logging.getLogger(__name__)

FIELDS = (
    "daemon_host",
    "containers",
    "images",
    "volumes",
    "last_action",
    "error_message",
    "is_loading",
)

Subscriber = Callable[[str, Any], None]


class ResourceStore:
    """Thread-safe observable store."""
    def __init__(self, daemon_host: str = ""):
        self._lock = threading.RLock()
        self._version = 0
        self._subscribers: List[Tuple[Subscriber, Optional[frozenset]]] = []
        self._daemon_host = daemon_host
        self._containers: List[ContainerRecord] = []
        self._images: List[ImageRecord] = []
        self._volumes: List[VolumeRecord] = []
        self._last_action: Optional[str] = None
        self._error_message: Optional[str] = None
        self._is_loading = False

    def get_version(self) -> int:
        with self._lock: return self._version

    def subscribe(self, callback: Subscriber, fields: Optional[Iterable[str]] = None) -> Callable[[], None]:
        """
        Register ``callback(field, value)`` for every write to ``fields`` (all fields
        when omitted). Returns a function that removes the subscription.
        """
        wanted = frozenset(fields) if fields is not None else None
        if wanted is not None:
            unknown = wanted.difference(FIELDS)
            if unknown:
                raise ValueError(f"Unknown store fields: {sorted(unknown)}")
        entry = (callback, wanted)
        with self._lock:
            self._subscribers.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)
        return unsubscribe

    def _write(self, name: str, value: Any) -> None:
        with self._lock:
            setattr(self, f"_{name}", value)
            self._version += 1
            targets = [cb for cb, wanted in self._subscribers if wanted is None or name in wanted]
        for callback in targets:
            try:
                callback(name, value)
            except Exception as e:
                logger.error(f"Store subscriber failed on {name}: {e}", exc_info=True)

    # Read access
    @property
    def daemon_host(self) -> str:
        with self._lock: return self._daemon_host

    @property
    def containers(self) -> List[ContainerRecord]:
        with self._lock: return list(self._containers)

    @property
    def images(self) -> List[ImageRecord]:
        with self._lock: return list(self._images)

    @property
    def volumes(self) -> List[VolumeRecord]:
        with self._lock: return list(self._volumes)

    @property
    def last_action(self) -> Optional[str]:
        with self._lock: return self._last_action

    @property
    def error_message(self) -> Optional[str]:
        with self._lock: return self._error_message

    @property
    def is_loading(self) -> bool:
        with self._lock: return self._is_loading

    def get_snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                daemon_host=self._daemon_host,
                containers=list(self._containers),
                images=list(self._images),
                volumes=list(self._volumes),
                last_action=self._last_action,
                error_message=self._error_message,
                is_loading=self._is_loading,
                version=self._version,
            )

    # Writes
    def set_containers(self, containers: List[ContainerRecord]) -> None:
        self._write("containers", list(containers))

    def set_images(self, images: List[ImageRecord]) -> None:
        self._write("images", list(images))

    def set_volumes(self, volumes: List[VolumeRecord]) -> None:
        self._write("volumes", list(volumes))

    def set_loading(self, loading: bool) -> None:
        self._write("is_loading", loading)

    def set_error(self, error_msg: str) -> None:
        logger.warning(f"Store error: {error_msg}")
        self._write("error_message", error_msg)

    def clear_error(self) -> None:
        self._write("error_message", None)

    def record_action(self, message: str) -> None:
        self._write("last_action", message)
