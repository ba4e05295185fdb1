"""
Data models for dockdesk resource state.

This module defines the normalized records the UI renders and the snapshot
returned by the resource store. Records are produced by the daemon client
(backend.py) and never mutated afterwards; a refresh replaces whole lists.

Data Classes:
  - ContainerRecord: container metadata (id, name, image, status, ports, state)
  - ImageRecord: image metadata (id, repository, tag, size)
  - VolumeRecord: volume metadata (name, driver, mount point)
  - StoreSnapshot: point-in-time copy of every store field

Key Fields:
  - Display strings are pre-formatted ("--" when a value is unavailable)
  - Lists keep the daemon's order, they are not re-sorted
"""

import enum
from dataclasses import dataclass, field
from typing import List, Optional


class RuntimeState(enum.Enum):
    RUNNING = "running"
    STOPPED = "stopped"

    @classmethod
    def from_daemon(cls, raw: Optional[str]) -> "RuntimeState":
        """Only an exact "running" counts as running; everything else, including a missing state, is stopped."""
        return cls.RUNNING if raw == "running" else cls.STOPPED

    @property
    def label(self) -> str:
        return "Running" if self is RuntimeState.RUNNING else "Stopped"

    @property
    def action_label(self) -> str:
        # Label of the button that leaves this state
        return "Stop" if self is RuntimeState.RUNNING else "Start"

    def toggled(self) -> "RuntimeState":
        return RuntimeState.STOPPED if self is RuntimeState.RUNNING else RuntimeState.RUNNING


@dataclass(frozen=True)
class ContainerRecord:
    id: str
    name: str
    image: str
    status_text: str
    port_mappings: str
    runtime_state: RuntimeState = RuntimeState.STOPPED

@dataclass(frozen=True)
class ImageRecord:
    id: str
    repository: str
    tag: str
    size_label: str
    size_bytes: int = 0

@dataclass(frozen=True)
class VolumeRecord:
    name: str
    driver: str
    mountpoint: str
    size_label: str = "--"  # Not reported by the list call

@dataclass
class StoreSnapshot:
    daemon_host: str = ""
    containers: List[ContainerRecord] = field(default_factory=list)
    images: List[ImageRecord] = field(default_factory=list)
    volumes: List[VolumeRecord] = field(default_factory=list)
    last_action: Optional[str] = None
    error_message: Optional[str] = None
    is_loading: bool = False
    version: int = 0
