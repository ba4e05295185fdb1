"""
Inventory statistics for dashboard cards.

Aggregates a store snapshot into the figures a dashboard shows: container
totals split by runtime state, image count and total size, volume count by
driver.
"""

from collections import defaultdict
from typing import Any, Dict, List
from .backend import format_size
from .model import ContainerRecord, ImageRecord, RuntimeState, StoreSnapshot, VolumeRecord


def summarize(snapshot: StoreSnapshot) -> Dict[str, Any]:
    """Collect dashboard statistics from every cached resource list."""
    return {
        'containers': _analyze_containers(snapshot.containers),
        'images': _analyze_images(snapshot.images),
        'volumes': _analyze_volumes(snapshot.volumes),
    }


def _analyze_containers(containers: List[ContainerRecord]) -> Dict[str, int]:
    running = sum(1 for c in containers if c.runtime_state is RuntimeState.RUNNING)
    return {
        'total': len(containers),
        'running': running,
        'stopped': len(containers) - running,
    }


def _analyze_images(images: List[ImageRecord]) -> Dict[str, Any]:
    total_size = sum(i.size_bytes for i in images)
    return {
        'total': len(images),
        'total_size': format_size(total_size),
        'repositories': len({i.repository for i in images}),
    }


def _analyze_volumes(volumes: List[VolumeRecord]) -> Dict[str, Any]:
    drivers: Dict[str, int] = defaultdict(int)
    for v in volumes:
        drivers[v.driver] += 1
    return {
        'total': len(volumes),
        'drivers': dict(drivers),
    }


def format_summary(summary: Dict[str, Any]) -> List[str]:
    """Render the summary as metric card lines (title: value)."""
    c = summary['containers']
    i = summary['images']
    v = summary['volumes']
    return [
        f"Containers: {c['total']} ({c['running']} running, {c['stopped']} stopped)",
        f"Images: {i['total']} ({i['total_size']})",
        f"Volumes: {v['total']}",
    ]
